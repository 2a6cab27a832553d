"""
Command envelope codec

Commands cross the bus as JSON envelopes:
    {"type": "ConfirmOrder", "id": "...", "body": {...}}

Money travels as a decimal string and identifiers as canonical UUID strings,
so amounts and ids decode to exactly what was sent.
"""

from decimal import Decimal
from typing import Any, Callable, Optional
from uuid import UUID

import attrs
import orjson

from src.service.registration.domain.command.registration_command import (
    AssignRegistrantDetails,
    Command,
    ConfirmOrder,
    InitiateThirdPartyProcessorPayment,
    RegisterToConference,
    SeatQuantity,
)


def _default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f'Cannot encode {type(value).__name__}')


def _optional_uuid(value: Optional[str]) -> Optional[UUID]:
    return UUID(value) if value is not None else None


def _decode_register_to_conference(body: dict[str, Any]) -> RegisterToConference:
    return RegisterToConference(
        id=UUID(body['id']),
        order_id=UUID(body['order_id']),
        conference_id=_optional_uuid(body.get('conference_id')),
        seats=tuple(
            SeatQuantity(seat_type=UUID(seat['seat_type']), quantity=int(seat['quantity']))
            for seat in body['seats']
        ),
    )


def _decode_assign_registrant_details(body: dict[str, Any]) -> AssignRegistrantDetails:
    return AssignRegistrantDetails(
        id=UUID(body['id']),
        order_id=UUID(body['order_id']),
        first_name=body['first_name'],
        last_name=body['last_name'],
        email=body['email'],
    )


def _decode_confirm_order(body: dict[str, Any]) -> ConfirmOrder:
    return ConfirmOrder(id=UUID(body['id']), order_id=UUID(body['order_id']))


def _decode_initiate_payment(body: dict[str, Any]) -> InitiateThirdPartyProcessorPayment:
    return InitiateThirdPartyProcessorPayment(
        id=UUID(body['id']),
        payment_id=UUID(body['payment_id']),
        conference_id=UUID(body['conference_id']),
        payment_source_id=UUID(body['payment_source_id']),
        description=body['description'],
        total_amount=Decimal(body['total_amount']),
    )


_DECODERS: dict[str, Callable[[dict[str, Any]], Command]] = {
    RegisterToConference.__name__: _decode_register_to_conference,
    AssignRegistrantDetails.__name__: _decode_assign_registrant_details,
    ConfirmOrder.__name__: _decode_confirm_order,
    InitiateThirdPartyProcessorPayment.__name__: _decode_initiate_payment,
}


class CommandCodec:
    @staticmethod
    def encode(command: Command) -> bytes:
        type_name = type(command).__name__
        if type_name not in _DECODERS:
            raise ValueError(f'Unknown command type: {type_name}')
        return orjson.dumps(
            {
                'type': type_name,
                'id': command.id,
                'body': attrs.asdict(command),
            },
            default=_default,
        )

    @staticmethod
    def decode(raw_data: bytes) -> Command:
        try:
            envelope = orjson.loads(raw_data)
            decoder = _DECODERS[envelope['type']]
            return decoder(envelope['body'])
        except (orjson.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise ValueError(f'Failed to decode command: {e}') from e
