from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils.compat import uuid7

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.registration_metrics import metrics
from src.service.registration.app.dto.order_view import OrderView
from src.service.registration.app.dto.registration_outcome import (
    OutcomeKind,
    RegistrationOutcome,
)
from src.service.registration.app.interface.i_conference_query_repo import IConferenceQueryRepo
from src.service.registration.app.interface.i_order_query_repo import IOrderQueryRepo
from src.service.registration.app.service.order_state_reconciler import (
    DraftOrderCheck,
    OrderStateReconciler,
)
from src.service.registration.app.service.order_view_assembler import assemble_order_view
from src.service.registration.app.service.registration_urls import RegistrationUrls
from src.service.registration.domain.command.registration_command import MAX_SEATS_PER_LINE
from src.service.registration.domain.entity.draft_order_entity import DraftOrder
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias


class StartRegistrationUseCase:
    """
    Seat reservation editor (first registration step)

    Flow:
    1. New registrant: hand out a fresh order id and an empty editor
    2. Returning registrant: wait until the reservation is visible, then
       - confirmed order -> completed page
       - expired reservation -> expired page
       - otherwise -> editor bound to the order and its version
    3. Read model never caught up -> "reservation unknown", caller retries
    """

    def __init__(
        self,
        *,
        reconciler: OrderStateReconciler,
        order_query_repo: IOrderQueryRepo,
        conference_query_repo: IConferenceQueryRepo,
        max_selection_quantity: int = MAX_SEATS_PER_LINE,
    ) -> None:
        self.reconciler = reconciler
        self.order_query_repo = order_query_repo
        self.conference_query_repo = conference_query_repo
        self.max_selection_quantity = max_selection_quantity
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        reconciler: OrderStateReconciler = Depends(Provide[Container.order_state_reconciler]),
        order_query_repo: IOrderQueryRepo = Depends(Provide[Container.order_query_repo]),
        conference_query_repo: IConferenceQueryRepo = Depends(
            Provide[Container.conference_query_repo]
        ),
        max_selection_quantity: int = Depends(Provide[Container.max_selection_quantity]),
    ) -> Self:
        return cls(
            reconciler=reconciler,
            order_query_repo=order_query_repo,
            conference_query_repo=conference_query_repo,
            max_selection_quantity=max_selection_quantity,
        )

    @Logger.io
    async def start_registration(
        self, *, conference: ConferenceAlias, order_id: Optional[UUID] = None
    ) -> RegistrationOutcome:
        with self.tracer.start_as_current_span(
            'use_case.start_registration',
            attributes={'conference.code': conference.code, 'order.id': str(order_id or '')},
        ):
            outcome = await self._start_registration(conference=conference, order_id=order_id)
            metrics.record_outcome(step='start_registration', outcome=outcome.kind)
            return outcome

    async def _start_registration(
        self, *, conference: ConferenceAlias, order_id: Optional[UUID]
    ) -> RegistrationOutcome:
        if order_id is None:
            new_order_id = uuid7()
            Logger.base.info(f'🆕 [SAGA] New registration {new_order_id} for {conference.code}')
            return RegistrationOutcome(
                kind=OutcomeKind.RESERVATION_EDITOR,
                conference_code=conference.code,
                order_id=new_order_id,
                order_version=0,
                order_view=await self.build_order_view(conference=conference),
            )

        # Any processed reservation will do: the caller has not seen this order yet
        order = await self.reconciler.wait_until_seats_are_confirmed(
            order_id=order_id, last_order_version=0
        )
        if order is None:
            return RegistrationOutcome(
                kind=OutcomeKind.RESERVATION_UNKNOWN,
                conference_code=conference.code,
                order_id=order_id,
                order_version=0,
            )

        check = self.reconciler.classify(order)
        if check == DraftOrderCheck.CONFIRMED:
            return RegistrationOutcome(
                kind=OutcomeKind.COMPLETED_ORDER,
                conference_code=conference.code,
                order_id=order_id,
                order_version=order.order_version,
                draft_order=order,
            )
        if check == DraftOrderCheck.EXPIRED:
            return self.expired(conference=conference, order=order)

        # Partially reserved orders land here too: the editor flags the short lines
        return await self.editor_for(conference=conference, order=order)

    @Logger.io
    async def show_registration_editor(
        self,
        *,
        conference: ConferenceAlias,
        order_id: UUID,
        order_version: int,
        errors: Optional[list[str]] = None,
    ) -> RegistrationOutcome:
        """
        Redisplay the editor after a rejected submission, without waiting.

        Keeps the caller's version unless the order is already visible.
        """
        existing_order = (
            await self.order_query_repo.find_draft_order(order_id=order_id)
            if order_version != 0
            else None
        )
        if existing_order is None:
            outcome = RegistrationOutcome(
                kind=OutcomeKind.RESERVATION_EDITOR,
                conference_code=conference.code,
                order_id=order_id,
                order_version=order_version,
                order_view=await self.build_order_view(conference=conference),
            )
        else:
            outcome = await self.editor_for(conference=conference, order=existing_order)
        outcome.errors = list(errors or [])
        return outcome

    async def editor_for(
        self, *, conference: ConferenceAlias, order: DraftOrder
    ) -> RegistrationOutcome:
        return RegistrationOutcome(
            kind=OutcomeKind.RESERVATION_EDITOR,
            conference_code=conference.code,
            order_id=order.order_id,
            order_version=order.order_version,
            order_view=await self.build_order_view(conference=conference, order=order),
            draft_order=order,
            expiration_date=order.reservation_expiration_date,
        )

    @staticmethod
    def expired(*, conference: ConferenceAlias, order: DraftOrder) -> RegistrationOutcome:
        Logger.base.info(
            f'⌛ [SAGA] Reservation for order {order.order_id} expired at '
            f'{order.reservation_expiration_date}'
        )
        return RegistrationOutcome(
            kind=OutcomeKind.EXPIRED_ORDER,
            conference_code=conference.code,
            order_id=order.order_id,
            order_version=order.order_version,
            expiration_date=order.reservation_expiration_date,
            redirect_url=RegistrationUrls(conference.code).expired_order(order_id=order.order_id),
        )

    async def build_order_view(
        self, *, conference: ConferenceAlias, order: Optional[DraftOrder] = None
    ) -> OrderView:
        seat_types = await self.conference_query_repo.get_published_seat_types(
            conference_id=conference.id
        )
        return assemble_order_view(
            conference=conference,
            seat_types=seat_types,
            order=order,
            max_selection_quantity=self.max_selection_quantity,
        )
