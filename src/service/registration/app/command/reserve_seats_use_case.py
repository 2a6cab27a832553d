from typing import Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.registration_metrics import metrics
from src.service.registration.app.dto.registration_outcome import (
    OutcomeKind,
    RegistrationOutcome,
)
from src.service.registration.app.interface.i_command_dispatcher import ICommandDispatcher
from src.service.registration.app.interface.i_conference_query_repo import IConferenceQueryRepo
from src.service.registration.app.query.start_registration_use_case import (
    StartRegistrationUseCase,
)
from src.service.registration.app.service.registration_urls import RegistrationUrls
from src.service.registration.domain.command.registration_command import RegisterToConference
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias


class ReserveSeatsUseCase:
    """
    Submit a seat reservation (first registration step)

    Flow:
    1. Validate the requested seats against the command rules and the catalog
       - invalid -> redisplay the editor with the caller's version, nothing sent
    2. Send RegisterToConference
    3. Redirect to the registrant step with the caller's version unchanged;
       that step waits for the reservation itself
    """

    def __init__(
        self,
        *,
        command_dispatcher: ICommandDispatcher,
        conference_query_repo: IConferenceQueryRepo,
        start_registration_use_case: StartRegistrationUseCase,
    ) -> None:
        self.command_dispatcher = command_dispatcher
        self.conference_query_repo = conference_query_repo
        self.start_registration_use_case = start_registration_use_case
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        command_dispatcher: ICommandDispatcher = Depends(Provide[Container.command_dispatcher]),
        conference_query_repo: IConferenceQueryRepo = Depends(
            Provide[Container.conference_query_repo]
        ),
        start_registration_use_case: StartRegistrationUseCase = Depends(
            StartRegistrationUseCase.depends
        ),
    ) -> Self:
        return cls(
            command_dispatcher=command_dispatcher,
            conference_query_repo=conference_query_repo,
            start_registration_use_case=start_registration_use_case,
        )

    @Logger.io
    async def reserve_seats(
        self,
        *,
        conference: ConferenceAlias,
        command: RegisterToConference,
        order_version: int,
    ) -> RegistrationOutcome:
        with self.tracer.start_as_current_span(
            'use_case.reserve_seats',
            attributes={'conference.code': conference.code, 'order.id': str(command.order_id)},
        ):
            errors = await self._validate(conference=conference, command=command)
            if errors:
                Logger.base.info(
                    f'📝 [SAGA] Rejected reservation for order {command.order_id}: {errors}'
                )
                metrics.record_outcome(step='reserve_seats', outcome='invalid')
                return await self.start_registration_use_case.show_registration_editor(
                    conference=conference,
                    order_id=command.order_id,
                    order_version=order_version,
                    errors=errors,
                )

            command = attrs.evolve(command, conference_id=conference.id)
            await self.command_dispatcher.send(command)
            metrics.record_command(command_type=type(command).__name__)
            Logger.base.info(
                f'🚀 [SAGA] Sent RegisterToConference for order {command.order_id} '
                f'({sum(seat.quantity for seat in command.seats)} seats)'
            )

            metrics.record_outcome(
                step='reserve_seats', outcome=OutcomeKind.REDIRECT_TO_REGISTRANT_DETAILS
            )
            return RegistrationOutcome(
                kind=OutcomeKind.REDIRECT_TO_REGISTRANT_DETAILS,
                conference_code=conference.code,
                order_id=command.order_id,
                order_version=order_version,
                redirect_url=RegistrationUrls(conference.code).registrant_details(
                    order_id=command.order_id, order_version=order_version
                ),
            )

    async def _validate(
        self, *, conference: ConferenceAlias, command: RegisterToConference
    ) -> list[str]:
        errors = command.validate(
            max_quantity=self.start_registration_use_case.max_selection_quantity
        )
        seat_types = await self.conference_query_repo.get_published_seat_types(
            conference_id=conference.id
        )
        published = {seat_type.id for seat_type in seat_types}
        errors.extend(
            f'Seat type {seat.seat_type} is not on sale for {conference.code}'
            for seat in command.seats
            if seat.seat_type not in published
        )
        return errors
