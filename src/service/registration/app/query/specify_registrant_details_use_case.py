from typing import Optional, Self
from uuid import UUID

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
from src.service.registration.app.query.start_registration_use_case import (
    StartRegistrationUseCase,
)
from src.service.registration.app.service.order_state_reconciler import (
    DraftOrderCheck,
    OrderStateReconciler,
)
from src.service.registration.app.service.registration_urls import RegistrationUrls
from src.service.registration.domain.command.registration_command import (
    AssignRegistrantDetails,
)
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias


class SpecifyRegistrantDetailsUseCase:
    """
    Registrant and payment form (second registration step)

    Flow:
    1. Wait for a processed reservation newer than the caller's version
       - not visible in time -> "reservation unknown"
       - partially reserved -> back to seat selection with the current version
       - confirmed -> completed page
       - expired -> expired page
    2. Wait (short window) for the priced order newer than the caller's version
       - not visible in time -> "reservation unknown"
    3. Render the form bound to the priced order
    """

    def __init__(self, *, reconciler: OrderStateReconciler) -> None:
        self.reconciler = reconciler
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        reconciler: OrderStateReconciler = Depends(Provide[Container.order_state_reconciler]),
    ) -> Self:
        return cls(reconciler=reconciler)

    @Logger.io
    async def specify_registrant_details(
        self,
        *,
        conference: ConferenceAlias,
        order_id: UUID,
        order_version: int,
        registrant: Optional[AssignRegistrantDetails] = None,
    ) -> RegistrationOutcome:
        with self.tracer.start_as_current_span(
            'use_case.specify_registrant_details',
            attributes={
                'conference.code': conference.code,
                'order.id': str(order_id),
                'order.version': order_version,
            },
        ):
            outcome = await self._specify_registrant_details(
                conference=conference,
                order_id=order_id,
                order_version=order_version,
                registrant=registrant,
            )
            metrics.record_outcome(step='specify_registrant_details', outcome=outcome.kind)
            return outcome

    async def _specify_registrant_details(
        self,
        *,
        conference: ConferenceAlias,
        order_id: UUID,
        order_version: int,
        registrant: Optional[AssignRegistrantDetails],
    ) -> RegistrationOutcome:
        unknown = RegistrationOutcome(
            kind=OutcomeKind.RESERVATION_UNKNOWN,
            conference_code=conference.code,
            order_id=order_id,
            order_version=order_version,
        )

        order = await self.reconciler.wait_until_seats_are_confirmed(
            order_id=order_id, last_order_version=order_version
        )
        if order is None:
            return unknown

        check = self.reconciler.classify(order)
        if check == DraftOrderCheck.PARTIALLY_RESERVED:
            Logger.base.info(
                f'🪑 [SAGA] Order {order_id} only partially reserved, back to seat selection'
            )
            return RegistrationOutcome(
                kind=OutcomeKind.REDIRECT_TO_SEAT_RESERVATION,
                conference_code=conference.code,
                order_id=order_id,
                order_version=order.order_version,
                redirect_url=RegistrationUrls(conference.code).start_registration(
                    order_id=order_id, order_version=order.order_version
                ),
            )
        if check == DraftOrderCheck.CONFIRMED:
            return RegistrationOutcome(
                kind=OutcomeKind.COMPLETED_ORDER,
                conference_code=conference.code,
                order_id=order_id,
                order_version=order.order_version,
                draft_order=order,
            )
        if check == DraftOrderCheck.EXPIRED:
            return StartRegistrationUseCase.expired(conference=conference, order=order)

        priced_order = await self.reconciler.wait_until_order_is_priced(
            order_id=order_id, last_order_version=order_version
        )
        if priced_order is None:
            return unknown

        return RegistrationOutcome(
            kind=OutcomeKind.REGISTRANT_EDITOR,
            conference_code=conference.code,
            order_id=order_id,
            order_version=order_version,
            draft_order=order,
            priced_order=priced_order,
            expiration_date=order.reservation_expiration_date,
            registrant=registrant or AssignRegistrantDetails(order_id=order_id),
        )
