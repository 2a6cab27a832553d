"""
Registration Commands

Immutable intents handed to the command bus. Each command carries its own id
so that redelivery (at-least-once) can be recognised downstream, and knows
how to validate the data a registrant typed in.
"""

from decimal import Decimal
import re
from typing import Optional, Union
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7


MAX_SEATS_PER_LINE = 20
_EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


@attrs.define(frozen=True)
class SeatQuantity:
    seat_type: UUID
    quantity: int


@attrs.define(frozen=True)
class RegisterToConference:
    """Reserve (or change the reservation of) seats for an order."""

    order_id: UUID
    seats: tuple[SeatQuantity, ...] = attrs.field(converter=tuple, factory=tuple)
    conference_id: Optional[UUID] = None
    id: UUID = attrs.field(factory=uuid7)

    def validate(self, *, max_quantity: int = MAX_SEATS_PER_LINE) -> list[str]:
        errors: list[str] = []
        seen: set[UUID] = set()
        for seat in self.seats:
            if seat.seat_type in seen:
                errors.append(f'Seat type {seat.seat_type} is listed more than once')
            seen.add(seat.seat_type)
            if seat.quantity < 0:
                errors.append(f'Quantity for seat type {seat.seat_type} cannot be negative')
            elif seat.quantity > max_quantity:
                errors.append(
                    f'Quantity for seat type {seat.seat_type} cannot exceed {max_quantity}'
                )
        if not any(seat.quantity > 0 for seat in self.seats):
            errors.append('Select at least one seat')
        return errors


@attrs.define(frozen=True)
class AssignRegistrantDetails:
    order_id: UUID
    first_name: str = ''
    last_name: str = ''
    email: str = ''
    id: UUID = attrs.field(factory=uuid7)

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.first_name.strip():
            errors.append('First name is required')
        if not self.last_name.strip():
            errors.append('Last name is required')
        if not self.email.strip():
            errors.append('Email is required')
        elif not _EMAIL_PATTERN.match(self.email.strip()):
            errors.append('Email is not valid')
        return errors


@attrs.define(frozen=True)
class ConfirmOrder:
    order_id: UUID
    id: UUID = attrs.field(factory=uuid7)


@attrs.define(frozen=True)
class InitiateThirdPartyProcessorPayment:
    payment_id: UUID
    conference_id: UUID
    payment_source_id: UUID
    description: str
    total_amount: Decimal
    id: UUID = attrs.field(factory=uuid7)


Command = Union[
    RegisterToConference,
    AssignRegistrantDetails,
    ConfirmOrder,
    InitiateThirdPartyProcessorPayment,
]
