"""
Unit tests for CommandCodec

Tests the envelope format:
- type name, command id and body at the top level
- Decimal amounts and UUIDs travel as strings and decode exactly
"""

from decimal import Decimal

import orjson
import pytest
from uuid_utils.compat import uuid7

from src.service.registration.domain.command.registration_command import (
    AssignRegistrantDetails,
    ConfirmOrder,
    InitiateThirdPartyProcessorPayment,
    RegisterToConference,
    SeatQuantity,
)
from src.service.registration.driven_adapter.message_queue.command_codec import CommandCodec


@pytest.mark.unit
class TestEncode:
    def test_envelope_carries_type_id_and_body(self) -> None:
        command = ConfirmOrder(order_id=uuid7())

        envelope = orjson.loads(CommandCodec.encode(command))

        assert envelope == {
            'type': 'ConfirmOrder',
            'id': str(command.id),
            'body': {'order_id': str(command.order_id), 'id': str(command.id)},
        }

    def test_money_is_encoded_as_string(self) -> None:
        command = InitiateThirdPartyProcessorPayment(
            payment_id=uuid7(),
            conference_id=uuid7(),
            payment_source_id=uuid7(),
            description='Registration for PyCon 2025',
            total_amount=Decimal('398.10'),
        )

        envelope = orjson.loads(CommandCodec.encode(command))

        assert envelope['body']['total_amount'] == '398.10'

    def test_nested_seat_quantities_are_encoded(self) -> None:
        seat_type = uuid7()
        command = RegisterToConference(
            order_id=uuid7(), seats=[SeatQuantity(seat_type=seat_type, quantity=2)]
        )

        envelope = orjson.loads(CommandCodec.encode(command))

        assert envelope['body']['seats'] == [{'seat_type': str(seat_type), 'quantity': 2}]
        assert envelope['body']['conference_id'] is None


@pytest.mark.unit
class TestDecode:
    def test_payment_amount_decodes_exactly(self) -> None:
        command = InitiateThirdPartyProcessorPayment(
            payment_id=uuid7(),
            conference_id=uuid7(),
            payment_source_id=uuid7(),
            description='Registration for PyCon 2025',
            total_amount=Decimal('0.10'),
        )

        decoded = CommandCodec.decode(CommandCodec.encode(command))

        assert decoded == command
        assert isinstance(decoded, InitiateThirdPartyProcessorPayment)
        assert decoded.total_amount == Decimal('0.10')

    def test_registrant_details_keep_their_id(self) -> None:
        command = AssignRegistrantDetails(
            order_id=uuid7(), first_name='Ada', last_name='Lovelace', email='ada@example.com'
        )

        assert CommandCodec.decode(CommandCodec.encode(command)) == command

    def test_reservation_with_conference_decodes(self) -> None:
        command = RegisterToConference(
            order_id=uuid7(),
            conference_id=uuid7(),
            seats=[SeatQuantity(seat_type=uuid7(), quantity=3)],
        )

        assert CommandCodec.decode(CommandCodec.encode(command)) == command

    @pytest.mark.parametrize(
        'raw_data',
        [
            b'not json',
            b'{"type": "CancelOrder", "id": "x", "body": {}}',
            b'{"type": "ConfirmOrder", "id": "x", "body": {"order_id": "not-a-uuid"}}',
            b'{"body": {}}',
        ],
    )
    def test_bad_envelope_raises_value_error(self, raw_data: bytes) -> None:
        with pytest.raises(ValueError, match='Failed to decode command'):
            CommandCodec.decode(raw_data)
