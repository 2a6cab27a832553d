"""
Integration tests for the SQL projection repositories

Uses a throwaway SQLite file through aiosqlite, so the mapping from
projection rows to entities runs against a real engine.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from uuid_utils.compat import uuid7

from src.platform.database.orm_db_setting import Database, create_db_and_tables
from src.service.registration.domain.entity.draft_order_entity import (
    DraftOrderItem,
    DraftOrderState,
)
from src.service.registration.domain.entity.priced_order_entity import PricedOrderLine
from src.service.registration.driven_adapter.model import (
    ConferenceSeatTypeViewModel,
    ConferenceViewModel,
    OrderItemViewModel,
    OrderViewModel,
    PricedOrderLineModel,
    PricedOrderModel,
)
from src.service.registration.driven_adapter.repo.conference_query_repo_impl import (
    ConferenceQueryRepoImpl,
)
from src.service.registration.driven_adapter.repo.order_query_repo_impl import (
    OrderQueryRepoImpl,
    as_utc,
)


@pytest_asyncio.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    database = Database(url=f'sqlite+aiosqlite:///{tmp_path / "projections.db"}')
    await create_db_and_tables(database)
    yield database
    await database.dispose()


@pytest.mark.integration
class TestOrderQueryRepoImpl:
    @pytest.mark.asyncio
    async def test_draft_order_is_mapped_with_lines(self, database: Database) -> None:
        # Arrange
        order_id, conference_id, seat_type = uuid7(), uuid7(), uuid7()
        expires = datetime(2025, 6, 1, 12, 15, tzinfo=timezone.utc)
        async with database.session() as session:
            session.add(
                OrderViewModel(
                    order_id=order_id,
                    conference_id=conference_id,
                    order_version=3,
                    state='PartiallyReserved',
                    reservation_expiration_date=expires,
                    lines=[
                        OrderItemViewModel(seat_type=seat_type, requested_seats=4, reserved_seats=1)
                    ],
                )
            )
            await session.commit()

        # Act
        order = await OrderQueryRepoImpl(session_factory=database.session).find_draft_order(
            order_id=order_id
        )

        # Assert
        assert order is not None
        assert order.conference_id == conference_id
        assert order.order_version == 3
        assert order.state == DraftOrderState.PARTIALLY_RESERVED
        assert order.reservation_expiration_date == expires
        assert order.reservation_expiration_date.tzinfo is not None
        assert order.lines == (
            DraftOrderItem(seat_type=seat_type, requested_seats=4, reserved_seats=1),
        )

    @pytest.mark.asyncio
    async def test_priced_order_keeps_line_order_and_amounts(self, database: Database) -> None:
        order_id = uuid7()
        async with database.session() as session:
            session.add(
                PricedOrderModel(
                    order_id=order_id,
                    order_version=2,
                    total=Decimal('447.50'),
                    lines=[
                        PricedOrderLineModel(
                            position=1,
                            description='Workshop',
                            quantity=1,
                            unit_price=Decimal('49.50'),
                            line_total=Decimal('49.50'),
                        ),
                        PricedOrderLineModel(
                            position=0,
                            description='General',
                            quantity=2,
                            unit_price=Decimal('199.00'),
                            line_total=Decimal('398.00'),
                        ),
                    ],
                )
            )
            await session.commit()

        order = await OrderQueryRepoImpl(session_factory=database.session).find_priced_order(
            order_id=order_id
        )

        assert order is not None
        assert order.total == Decimal('447.50')
        assert order.is_free_of_charge is False
        assert order.reservation_expiration_date is None
        assert [line.description for line in order.lines] == ['General', 'Workshop']
        assert order.lines[0] == PricedOrderLine(
            description='General',
            quantity=2,
            unit_price=Decimal('199.00'),
            line_total=Decimal('398.00'),
        )

    @pytest.mark.asyncio
    async def test_missing_orders_are_none(self, database: Database) -> None:
        repo = OrderQueryRepoImpl(session_factory=database.session)

        assert await repo.find_draft_order(order_id=uuid7()) is None
        assert await repo.find_priced_order(order_id=uuid7()) is None

    @pytest.mark.asyncio
    async def test_repo_without_session_factory_fails_loudly(self) -> None:
        with pytest.raises(RuntimeError, match='No session_factory available'):
            await OrderQueryRepoImpl().find_draft_order(order_id=uuid7())


@pytest.mark.integration
class TestConferenceQueryRepoImpl:
    @pytest.mark.asyncio
    async def test_only_published_conferences_are_found(self, database: Database) -> None:
        # Arrange
        published_id = uuid7()
        async with database.session() as session:
            session.add_all(
                [
                    ConferenceViewModel(
                        id=published_id, code='pycon-2025', name='PyCon 2025', is_published=True
                    ),
                    ConferenceViewModel(
                        id=uuid7(), code='draft-conf', name='Draft Conf', is_published=False
                    ),
                ]
            )
            await session.commit()
        repo = ConferenceQueryRepoImpl(session_factory=database.session)

        # Act
        conference = await repo.find_conference_alias(conference_code='pycon-2025')

        # Assert
        assert conference is not None
        assert conference.id == published_id
        assert conference.name == 'PyCon 2025'
        assert await repo.find_conference_alias(conference_code='draft-conf') is None
        assert await repo.find_conference_alias(conference_code='unknown') is None

    @pytest.mark.asyncio
    async def test_seat_types_follow_catalog_position(self, database: Database) -> None:
        conference_id = uuid7()
        async with database.session() as session:
            session.add(
                ConferenceViewModel(
                    id=conference_id, code='pycon-2025', name='PyCon 2025', is_published=True
                )
            )
            await session.flush()
            session.add_all(
                [
                    ConferenceSeatTypeViewModel(
                        id=uuid7(),
                        conference_id=conference_id,
                        position=1,
                        name='Workshop',
                        description='Hands-on workshop day',
                        price=Decimal('49.50'),
                        available_quantity=30,
                    ),
                    ConferenceSeatTypeViewModel(
                        id=uuid7(),
                        conference_id=conference_id,
                        position=0,
                        name='General',
                        description='General admission',
                        price=Decimal('199.00'),
                        available_quantity=5,
                    ),
                ]
            )
            await session.commit()

        seat_types = await ConferenceQueryRepoImpl(
            session_factory=database.session
        ).get_published_seat_types(conference_id=conference_id)

        assert [seat_type.name for seat_type in seat_types] == ['General', 'Workshop']
        assert seat_types[0].price == Decimal('199.00')
        assert seat_types[0].available_quantity == 5


@pytest.mark.unit
class TestAsUtc:
    def test_naive_datetime_is_read_as_utc(self) -> None:
        naive = datetime(2025, 6, 1, 12, 0)

        assert as_utc(naive) == datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    def test_aware_datetime_is_kept(self) -> None:
        aware = datetime(2025, 6, 1, 12, 0, tzinfo=timezone(timedelta(hours=8)))

        assert as_utc(aware) is aware
        assert as_utc(None) is None
