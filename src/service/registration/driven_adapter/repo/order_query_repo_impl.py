from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import AsyncContextManager, AsyncIterator, Callable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.registration.app.interface.i_order_query_repo import IOrderQueryRepo
from src.service.registration.domain.entity.draft_order_entity import (
    DraftOrder,
    DraftOrderItem,
    DraftOrderState,
)
from src.service.registration.domain.entity.priced_order_entity import (
    PricedOrder,
    PricedOrderLine,
)
from src.service.registration.driven_adapter.model.order_view_model import OrderViewModel
from src.service.registration.driven_adapter.model.priced_order_model import PricedOrderModel


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes even for timezone-aware columns."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


class OrderQueryRepoImpl(IOrderQueryRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session_factory is None:
            raise RuntimeError('No session_factory available')
        async with self.session_factory() as session:
            yield session

    @staticmethod
    def _to_draft_order(db_order: OrderViewModel) -> DraftOrder:
        return DraftOrder(
            order_id=db_order.order_id,
            conference_id=db_order.conference_id,
            order_version=db_order.order_version,
            state=DraftOrderState(db_order.state),
            reservation_expiration_date=as_utc(db_order.reservation_expiration_date),
            lines=tuple(
                DraftOrderItem(
                    seat_type=line.seat_type,
                    requested_seats=line.requested_seats,
                    reserved_seats=line.reserved_seats,
                )
                for line in db_order.lines
            ),
            registrant_email=db_order.registrant_email,
        )

    @staticmethod
    def _to_priced_order(db_order: PricedOrderModel) -> PricedOrder:
        return PricedOrder(
            order_id=db_order.order_id,
            order_version=db_order.order_version,
            total=db_order.total,
            lines=tuple(
                PricedOrderLine(
                    description=line.description,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                )
                for line in db_order.lines
            ),
            reservation_expiration_date=as_utc(db_order.reservation_expiration_date),
        )

    @Logger.io
    async def find_draft_order(self, *, order_id: UUID) -> Optional[DraftOrder]:
        async with self._get_session() as session:
            result = await session.execute(
                select(OrderViewModel).where(OrderViewModel.order_id == order_id)
            )
            db_order = result.scalar_one_or_none()
            return self._to_draft_order(db_order) if db_order else None

    @Logger.io
    async def find_priced_order(self, *, order_id: UUID) -> Optional[PricedOrder]:
        async with self._get_session() as session:
            result = await session.execute(
                select(PricedOrderModel).where(PricedOrderModel.order_id == order_id)
            )
            db_order = result.scalar_one_or_none()
            return self._to_priced_order(db_order) if db_order else None
