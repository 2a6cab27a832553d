"""
In-memory order read model

Dict-backed projection store for local runs and tests. The write side (or a
test) feeds it through upsert_*, readers see whatever was stored last.
Versions never move backwards: a stale upsert is ignored.
"""

from typing import Dict, Optional
from uuid import UUID

from src.platform.logging.loguru_io import Logger
from src.service.registration.app.interface.i_order_query_repo import IOrderQueryRepo
from src.service.registration.domain.entity.draft_order_entity import DraftOrder
from src.service.registration.domain.entity.priced_order_entity import PricedOrder


class InMemoryOrderReadModel(IOrderQueryRepo):
    def __init__(self) -> None:
        self._draft_orders: Dict[UUID, DraftOrder] = {}
        self._priced_orders: Dict[UUID, PricedOrder] = {}

    async def find_draft_order(self, *, order_id: UUID) -> Optional[DraftOrder]:
        return self._draft_orders.get(order_id)

    async def find_priced_order(self, *, order_id: UUID) -> Optional[PricedOrder]:
        return self._priced_orders.get(order_id)

    def upsert_draft_order(self, order: DraftOrder) -> bool:
        """Store the order unless a newer version is already visible. Returns True if stored."""
        current = self._draft_orders.get(order.order_id)
        if current is not None and current.order_version > order.order_version:
            Logger.base.warning(
                f'⚠️ [READ MODEL] Ignoring stale draft order {order.order_id} '
                f'v{order.order_version} (visible v{current.order_version})'
            )
            return False
        self._draft_orders[order.order_id] = order
        return True

    def upsert_priced_order(self, order: PricedOrder) -> bool:
        current = self._priced_orders.get(order.order_id)
        if current is not None and current.order_version > order.order_version:
            Logger.base.warning(
                f'⚠️ [READ MODEL] Ignoring stale priced order {order.order_id} '
                f'v{order.order_version} (visible v{current.order_version})'
            )
            return False
        self._priced_orders[order.order_id] = order
        return True

    def clear(self) -> None:
        self._draft_orders.clear()
        self._priced_orders.clear()
