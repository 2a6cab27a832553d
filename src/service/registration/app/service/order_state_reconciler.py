"""
Order State Reconciler

Shared by every registration step. Knows what "the read model has caught up
with my command" means for draft and priced orders, and how to classify a
draft order once it is visible.

The saga keeps no record of where an order is: each step re-derives its
decision from the projections and the version the caller carries along.
"""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Callable, Optional
from uuid import UUID

from src.platform.consistency.read_after_write_poller import PollProfile, poll_until
from src.platform.logging.loguru_io import Logger
from src.service.registration.app.interface.i_order_query_repo import IOrderQueryRepo
from src.service.registration.domain.entity.draft_order_entity import (
    DraftOrder,
    DraftOrderState,
)
from src.service.registration.domain.entity.priced_order_entity import PricedOrder


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DraftOrderCheck(StrEnum):
    READY = 'ready'
    PARTIALLY_RESERVED = 'partially_reserved'
    CONFIRMED = 'confirmed'
    EXPIRED = 'expired'


class OrderStateReconciler:
    def __init__(
        self,
        *,
        order_query_repo: IOrderQueryRepo,
        draft_order_profile: PollProfile,
        priced_order_profile: PollProfile,
        clock: Clock = utc_now,
    ) -> None:
        self.order_query_repo = order_query_repo
        self.draft_order_profile = draft_order_profile
        self.priced_order_profile = priced_order_profile
        self.clock = clock

    @Logger.io
    async def wait_until_seats_are_confirmed(
        self, *, order_id: UUID, last_order_version: int
    ) -> Optional[DraftOrder]:
        """
        Wait for a draft order newer than `last_order_version` whose reservation
        has been processed.

        Returns:
            The draft order, or None if it did not show up in time
        """
        return await poll_until(
            lookup=lambda: self.order_query_repo.find_draft_order(order_id=order_id),
            accept=lambda order: (
                not order.is_reservation_pending() and order.is_newer_than(last_order_version)
            ),
            profile=self.draft_order_profile,
        )

    @Logger.io
    async def wait_until_order_is_priced(
        self, *, order_id: UUID, last_order_version: int
    ) -> Optional[PricedOrder]:
        return await poll_until(
            lookup=lambda: self.order_query_repo.find_priced_order(order_id=order_id),
            accept=lambda order: order.is_newer_than(last_order_version),
            profile=self.priced_order_profile,
        )

    def classify(self, order: DraftOrder) -> DraftOrderCheck:
        # Confirmation wins over expiry; expiry wins over everything else
        if order.state == DraftOrderState.CONFIRMED:
            return DraftOrderCheck.CONFIRMED
        if order.is_expired(self.clock()):
            return DraftOrderCheck.EXPIRED
        if order.state == DraftOrderState.PARTIALLY_RESERVED:
            return DraftOrderCheck.PARTIALLY_RESERVED
        return DraftOrderCheck.READY
