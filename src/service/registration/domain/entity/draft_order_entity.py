from datetime import datetime
from enum import StrEnum
from typing import Optional
from uuid import UUID

import attrs


class DraftOrderState(StrEnum):
    """States produced by the write side for an order under reservation."""

    PENDING_RESERVATION = 'PendingReservation'
    PARTIALLY_RESERVED = 'PartiallyReserved'
    RESERVATION_CONFIRMED = 'ReservationConfirmed'
    CONFIRMED = 'Confirmed'


@attrs.define(frozen=True)
class DraftOrderItem:
    seat_type: UUID
    requested_seats: int
    reserved_seats: int = 0

    @property
    def is_partially_fulfilled(self) -> bool:
        return self.requested_seats > self.reserved_seats


@attrs.define(frozen=True)
class DraftOrder:
    """
    Projection of an order while seats are being reserved.

    order_version only ever grows; a larger value means the projection has
    observed a newer write for this order.
    """

    order_id: UUID
    conference_id: UUID
    order_version: int
    state: DraftOrderState
    reservation_expiration_date: Optional[datetime] = None
    lines: tuple[DraftOrderItem, ...] = ()
    registrant_email: Optional[str] = None

    def is_reservation_pending(self) -> bool:
        return self.state == DraftOrderState.PENDING_RESERVATION

    def is_newer_than(self, order_version: int) -> bool:
        return self.order_version > order_version

    def is_expired(self, now: datetime) -> bool:
        return (
            self.reservation_expiration_date is not None
            and self.reservation_expiration_date < now
        )

    def reserved_seats_for(self, seat_type: UUID) -> int:
        return sum(line.reserved_seats for line in self.lines if line.seat_type == seat_type)
