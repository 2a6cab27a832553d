"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module is imported
- Shared builders for conferences, seat types and orders
- Short poll profiles so waits finish in milliseconds

Architecture:
- Unit tests (test/**/unit/): Mock the ports with AsyncMock
- Integration tests: Use the real adapters (in-memory bus and read models,
  FastAPI app, SQLite projections)
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the loguru sinks read the environment at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['READ_MODEL_BACKEND'] = 'memory'
    os.environ.setdefault('DRAFT_ORDER_WAIT_TIMEOUT_SECONDS', '0.2')
    os.environ.setdefault('DRAFT_ORDER_POLL_INTERVAL_SECONDS', '0.02')
    os.environ.setdefault('PRICED_ORDER_WAIT_TIMEOUT_SECONDS', '0.1')
    os.environ.setdefault('PRICED_ORDER_POLL_INTERVAL_SECONDS', '0.02')


_early_setup_test_environment()

from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from typing import Callable, Generator, Optional  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402
from uuid import UUID  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from uuid_utils.compat import uuid7  # noqa: E402

from src.platform.consistency.read_after_write_poller import PollProfile  # noqa: E402
from src.service.registration.app.service.order_state_reconciler import (  # noqa: E402
    OrderStateReconciler,
)
from src.service.registration.domain.entity.draft_order_entity import (  # noqa: E402
    DraftOrder,
    DraftOrderItem,
    DraftOrderState,
)
from src.service.registration.domain.entity.priced_order_entity import (  # noqa: E402
    PricedOrder,
    PricedOrderLine,
)
from src.service.registration.domain.entity.seat_type_entity import SeatType  # noqa: E402
from src.service.registration.domain.value_object.conference_alias import (  # noqa: E402
    ConferenceAlias,
)


FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def conference() -> ConferenceAlias:
    return ConferenceAlias(id=uuid7(), code='pycon-2025', name='PyCon 2025')


@pytest.fixture
def general_seat() -> SeatType:
    return SeatType(
        id=uuid7(),
        name='General',
        description='General admission',
        price=Decimal('199.00'),
        available_quantity=5,
    )


@pytest.fixture
def workshop_seat() -> SeatType:
    return SeatType(
        id=uuid7(),
        name='Workshop',
        description='Hands-on workshop day',
        price=Decimal('49.50'),
        available_quantity=30,
    )


@pytest.fixture
def draft_order_profile() -> PollProfile:
    return PollProfile(name='draft_order', max_wait=0.2, interval=0.02)


@pytest.fixture
def priced_order_profile() -> PollProfile:
    return PollProfile(name='priced_order', max_wait=0.1, interval=0.02)


@pytest.fixture
def in_the_future(now: datetime) -> datetime:
    return now + timedelta(minutes=15)


@pytest.fixture
def in_the_past(now: datetime) -> datetime:
    return now - timedelta(minutes=1)


# =============================================================================
# Ports (mocked) for use case unit tests
# =============================================================================


@pytest.fixture
def mock_order_query_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.find_draft_order = AsyncMock(return_value=None)
    repo.find_priced_order = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_conference_query_repo(
    conference: ConferenceAlias, general_seat: SeatType, workshop_seat: SeatType
) -> AsyncMock:
    repo = AsyncMock()
    repo.find_conference_alias = AsyncMock(return_value=conference)
    repo.get_published_seat_types = AsyncMock(return_value=[general_seat, workshop_seat])
    return repo


@pytest.fixture
def mock_command_dispatcher() -> AsyncMock:
    dispatcher = AsyncMock()
    dispatcher.send = AsyncMock()
    dispatcher.send_batch = AsyncMock()
    return dispatcher


@pytest.fixture
def reconciler(
    mock_order_query_repo: AsyncMock,
    draft_order_profile: PollProfile,
    priced_order_profile: PollProfile,
    now: datetime,
) -> OrderStateReconciler:
    return OrderStateReconciler(
        order_query_repo=mock_order_query_repo,
        draft_order_profile=draft_order_profile,
        priced_order_profile=priced_order_profile,
        clock=lambda: now,
    )


# =============================================================================
# Read model builders
# =============================================================================


@pytest.fixture
def make_draft_order(
    conference: ConferenceAlias, general_seat: SeatType, in_the_future: datetime
) -> Callable[..., DraftOrder]:
    def _make(
        *,
        order_id: Optional[UUID] = None,
        version: int = 1,
        state: DraftOrderState = DraftOrderState.RESERVATION_CONFIRMED,
        expires: Optional[datetime] = None,
        requested_seats: int = 2,
        reserved_seats: int = 2,
    ) -> DraftOrder:
        return DraftOrder(
            order_id=order_id or uuid7(),
            conference_id=conference.id,
            order_version=version,
            state=state,
            reservation_expiration_date=expires or in_the_future,
            lines=(
                DraftOrderItem(
                    seat_type=general_seat.id,
                    requested_seats=requested_seats,
                    reserved_seats=reserved_seats,
                ),
            ),
        )

    return _make


@pytest.fixture
def make_priced_order(
    general_seat: SeatType, in_the_future: datetime
) -> Callable[..., PricedOrder]:
    def _make(*, order_id: UUID, version: int = 1, quantity: int = 2) -> PricedOrder:
        line_total = general_seat.price * quantity
        return PricedOrder(
            order_id=order_id,
            order_version=version,
            total=line_total,
            lines=(
                PricedOrderLine(
                    description=general_seat.name,
                    quantity=quantity,
                    unit_price=general_seat.price,
                    line_total=line_total,
                ),
            ),
            reservation_expiration_date=in_the_future,
        )

    return _make


# =============================================================================
# HTTP client (integration tests)
# =============================================================================


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    from src.main import app

    # Lifespan wires the container on enter and resets its singletons on exit
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
