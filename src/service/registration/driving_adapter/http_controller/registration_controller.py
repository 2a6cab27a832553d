"""
Registration HTTP controller

Mounted under /api/{conference_code}/registration. Every step answers 200
with the outcome document; redirects are outcomes carrying redirect_url,
the client decides how to follow them.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.registration.app.command.complete_registration_use_case import (
    CompleteRegistrationUseCase,
)
from src.service.registration.app.command.reserve_seats_use_case import ReserveSeatsUseCase
from src.service.registration.app.query.get_conference_use_case import GetConferenceUseCase
from src.service.registration.app.query.show_order_use_case import ShowOrderUseCase
from src.service.registration.app.query.specify_registrant_details_use_case import (
    SpecifyRegistrantDetailsUseCase,
)
from src.service.registration.app.query.start_registration_use_case import (
    StartRegistrationUseCase,
)
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias
from src.service.registration.driving_adapter.http_controller.schema.registration_schema import (
    RegistrantDetailsRequest,
    RegistrationOutcomeResponse,
    SeatReservationRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


async def get_conference(
    conference_code: str,
    use_case: GetConferenceUseCase = Depends(GetConferenceUseCase.depends),
) -> ConferenceAlias:
    return await use_case.get_conference(conference_code=conference_code)


@router.get('')
@Logger.io
async def start_registration(
    order_id: Optional[UUID] = None,
    conference: ConferenceAlias = Depends(get_conference),
    use_case: StartRegistrationUseCase = Depends(StartRegistrationUseCase.depends),
) -> RegistrationOutcomeResponse:
    outcome = await use_case.start_registration(conference=conference, order_id=order_id)
    return RegistrationOutcomeResponse.from_outcome(outcome)


@router.post('')
@Logger.io
async def reserve_seats(
    request: SeatReservationRequest,
    conference: ConferenceAlias = Depends(get_conference),
    use_case: ReserveSeatsUseCase = Depends(ReserveSeatsUseCase.depends),
) -> RegistrationOutcomeResponse:
    with tracer.start_as_current_span('controller.reserve_seats') as span:
        span.set_attribute('order.id', str(request.order_id))
        span.set_attribute('order.version', request.order_version)

        outcome = await use_case.reserve_seats(
            conference=conference,
            command=request.to_command(),
            order_version=request.order_version,
        )
        return RegistrationOutcomeResponse.from_outcome(outcome)


@router.get('/{order_id}/registrant')
@Logger.io
async def specify_registrant_details(
    order_id: UUID,
    order_version: int = 0,
    conference: ConferenceAlias = Depends(get_conference),
    use_case: SpecifyRegistrantDetailsUseCase = Depends(SpecifyRegistrantDetailsUseCase.depends),
) -> RegistrationOutcomeResponse:
    outcome = await use_case.specify_registrant_details(
        conference=conference, order_id=order_id, order_version=order_version
    )
    return RegistrationOutcomeResponse.from_outcome(outcome)


@router.post('/{order_id}/registrant')
@Logger.io
async def complete_registration(
    order_id: UUID,
    request: RegistrantDetailsRequest,
    conference: ConferenceAlias = Depends(get_conference),
    use_case: CompleteRegistrationUseCase = Depends(CompleteRegistrationUseCase.depends),
) -> RegistrationOutcomeResponse:
    with tracer.start_as_current_span('controller.complete_registration') as span:
        span.set_attribute('order.id', str(order_id))
        span.set_attribute('payment.type', request.payment_type or '')

        outcome = await use_case.complete_registration(
            conference=conference,
            command=request.to_command(order_id=order_id),
            payment_type=request.payment_type,
            order_version=request.order_version,
        )
        return RegistrationOutcomeResponse.from_outcome(outcome)


@router.get('/{order_id}/expired')
@Logger.io
async def show_expired_order(
    order_id: UUID,
    conference: ConferenceAlias = Depends(get_conference),
    use_case: ShowOrderUseCase = Depends(ShowOrderUseCase.depends),
) -> RegistrationOutcomeResponse:
    outcome = await use_case.show_expired_order(conference=conference, order_id=order_id)
    return RegistrationOutcomeResponse.from_outcome(outcome)


@router.get('/{order_id}/thank-you')
@Logger.io
async def thank_you(
    order_id: UUID,
    conference: ConferenceAlias = Depends(get_conference),
    use_case: ShowOrderUseCase = Depends(ShowOrderUseCase.depends),
) -> RegistrationOutcomeResponse:
    outcome = await use_case.thank_you(conference=conference, order_id=order_id)
    return RegistrationOutcomeResponse.from_outcome(outcome)
