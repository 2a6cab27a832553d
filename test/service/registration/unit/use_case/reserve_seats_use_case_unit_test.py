"""
Unit tests for ReserveSeatsUseCase

Tests the seat reservation submit:
1. Valid selection -> one RegisterToConference sent, redirect to the
   registrant step with the caller's version unchanged
2. Invalid selection -> editor redisplayed with errors, nothing sent
"""

from typing import Callable
from unittest.mock import AsyncMock

import pytest
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import CommandDispatchError
from src.service.registration.app.command.reserve_seats_use_case import ReserveSeatsUseCase
from src.service.registration.app.dto.registration_outcome import OutcomeKind
from src.service.registration.app.query.start_registration_use_case import (
    StartRegistrationUseCase,
)
from src.service.registration.app.service.order_state_reconciler import OrderStateReconciler
from src.service.registration.domain.command.registration_command import (
    RegisterToConference,
    SeatQuantity,
)
from src.service.registration.domain.entity.draft_order_entity import DraftOrder
from src.service.registration.domain.entity.seat_type_entity import SeatType
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias


@pytest.fixture
def reserve_seats_use_case(
    reconciler: OrderStateReconciler,
    mock_command_dispatcher: AsyncMock,
    mock_order_query_repo: AsyncMock,
    mock_conference_query_repo: AsyncMock,
) -> ReserveSeatsUseCase:
    return ReserveSeatsUseCase(
        command_dispatcher=mock_command_dispatcher,
        conference_query_repo=mock_conference_query_repo,
        start_registration_use_case=StartRegistrationUseCase(
            reconciler=reconciler,
            order_query_repo=mock_order_query_repo,
            conference_query_repo=mock_conference_query_repo,
        ),
    )


@pytest.mark.unit
class TestReserveSeats:
    @pytest.mark.asyncio
    async def test_valid_selection_sends_command_and_redirects(
        self,
        reserve_seats_use_case: ReserveSeatsUseCase,
        mock_command_dispatcher: AsyncMock,
        conference: ConferenceAlias,
        general_seat: SeatType,
    ) -> None:
        # Arrange
        order_id = uuid7()
        command = RegisterToConference(
            order_id=order_id, seats=[SeatQuantity(seat_type=general_seat.id, quantity=2)]
        )

        # Act
        outcome = await reserve_seats_use_case.reserve_seats(
            conference=conference, command=command, order_version=0
        )

        # Assert - one command, stamped with the conference
        mock_command_dispatcher.send.assert_awaited_once()
        sent = mock_command_dispatcher.send.await_args.args[0]
        assert isinstance(sent, RegisterToConference)
        assert sent.order_id == order_id
        assert sent.conference_id == conference.id
        assert sent.seats == command.seats
        assert sent.id == command.id

        # Assert - redirect keeps the caller's version
        assert outcome.kind == OutcomeKind.REDIRECT_TO_REGISTRANT_DETAILS
        assert outcome.order_version == 0
        assert outcome.is_redirect is True
        assert outcome.redirect_url == (
            f'/api/{conference.code}/registration/{order_id}/registrant?order_version=0'
        )

    @pytest.mark.asyncio
    async def test_change_of_existing_reservation_keeps_version(
        self,
        reserve_seats_use_case: ReserveSeatsUseCase,
        mock_command_dispatcher: AsyncMock,
        mock_order_query_repo: AsyncMock,
        conference: ConferenceAlias,
        workshop_seat: SeatType,
    ) -> None:
        command = RegisterToConference(
            order_id=uuid7(), seats=[SeatQuantity(seat_type=workshop_seat.id, quantity=1)]
        )

        outcome = await reserve_seats_use_case.reserve_seats(
            conference=conference, command=command, order_version=5
        )

        assert outcome.order_version == 5
        assert outcome.redirect_url is not None
        assert outcome.redirect_url.endswith('?order_version=5')
        mock_order_query_repo.find_draft_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_selection_redisplays_editor(
        self,
        reserve_seats_use_case: ReserveSeatsUseCase,
        mock_command_dispatcher: AsyncMock,
        conference: ConferenceAlias,
    ) -> None:
        # Arrange
        order_id = uuid7()
        command = RegisterToConference(order_id=order_id)

        # Act
        outcome = await reserve_seats_use_case.reserve_seats(
            conference=conference, command=command, order_version=0
        )

        # Assert
        mock_command_dispatcher.send.assert_not_awaited()
        assert outcome.kind == OutcomeKind.RESERVATION_EDITOR
        assert outcome.order_id == order_id
        assert outcome.order_version == 0
        assert outcome.errors == ['Select at least one seat']
        assert outcome.order_view is not None

    @pytest.mark.asyncio
    async def test_seat_type_not_on_sale_is_rejected(
        self,
        reserve_seats_use_case: ReserveSeatsUseCase,
        mock_command_dispatcher: AsyncMock,
        conference: ConferenceAlias,
    ) -> None:
        unknown_seat_type = uuid7()
        command = RegisterToConference(
            order_id=uuid7(), seats=[SeatQuantity(seat_type=unknown_seat_type, quantity=1)]
        )

        outcome = await reserve_seats_use_case.reserve_seats(
            conference=conference, command=command, order_version=0
        )

        mock_command_dispatcher.send.assert_not_awaited()
        assert outcome.errors == [
            f'Seat type {unknown_seat_type} is not on sale for {conference.code}'
        ]

    @pytest.mark.asyncio
    async def test_too_many_seats_redisplays_existing_order(
        self,
        reserve_seats_use_case: ReserveSeatsUseCase,
        mock_command_dispatcher: AsyncMock,
        mock_order_query_repo: AsyncMock,
        make_draft_order: Callable[..., DraftOrder],
        conference: ConferenceAlias,
        general_seat: SeatType,
    ) -> None:
        # Arrange
        order = make_draft_order(version=3)
        mock_order_query_repo.find_draft_order.return_value = order
        command = RegisterToConference(
            order_id=order.order_id,
            seats=[SeatQuantity(seat_type=general_seat.id, quantity=21)],
        )

        # Act
        outcome = await reserve_seats_use_case.reserve_seats(
            conference=conference, command=command, order_version=3
        )

        # Assert
        mock_command_dispatcher.send.assert_not_awaited()
        assert outcome.kind == OutcomeKind.RESERVATION_EDITOR
        assert outcome.order_version == 3
        assert outcome.draft_order == order
        assert len(outcome.errors) == 1

    @pytest.mark.asyncio
    async def test_bus_refusal_propagates(
        self,
        reserve_seats_use_case: ReserveSeatsUseCase,
        mock_command_dispatcher: AsyncMock,
        conference: ConferenceAlias,
        general_seat: SeatType,
    ) -> None:
        mock_command_dispatcher.send.side_effect = CommandDispatchError('bus closed')
        command = RegisterToConference(
            order_id=uuid7(), seats=[SeatQuantity(seat_type=general_seat.id, quantity=1)]
        )

        with pytest.raises(CommandDispatchError):
            await reserve_seats_use_case.reserve_seats(
                conference=conference, command=command, order_version=0
            )
