from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils.compat import uuid7

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError, UnsupportedPaymentTypeError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.registration_metrics import metrics
from src.service.registration.app.dto.registration_outcome import (
    OutcomeKind,
    RegistrationOutcome,
)
from src.service.registration.app.interface.i_command_dispatcher import ICommandDispatcher
from src.service.registration.app.interface.i_order_query_repo import IOrderQueryRepo
from src.service.registration.app.query.specify_registrant_details_use_case import (
    SpecifyRegistrantDetailsUseCase,
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
    Command,
    ConfirmOrder,
    InitiateThirdPartyProcessorPayment,
)
from src.service.registration.domain.entity.priced_order_entity import PricedOrder
from src.service.registration.domain.payment_branch import PaymentBranch, resolve_payment_branch
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias


class CompleteRegistrationUseCase:
    """
    Submit registrant details and payment choice (second registration step)

    Flow:
    1. Invalid form -> redisplay the registrant step exactly as its GET does
    2. Re-read the draft order (must exist) and classify it again:
       confirmed -> completed page, expired -> expired page
    3. Re-read the priced order (just displayed, so no wait)
    4. Branch on price and payment type:
       - free -> [AssignRegistrantDetails, ConfirmOrder], thank-you page
       - third party -> [AssignRegistrantDetails, InitiateThirdPartyProcessorPayment],
         hand off to the payment page with accept/reject callbacks
       - invoice or unknown token -> rejected, nothing sent
    """

    def __init__(
        self,
        *,
        command_dispatcher: ICommandDispatcher,
        order_query_repo: IOrderQueryRepo,
        reconciler: OrderStateReconciler,
        specify_registrant_details_use_case: SpecifyRegistrantDetailsUseCase,
    ) -> None:
        self.command_dispatcher = command_dispatcher
        self.order_query_repo = order_query_repo
        self.reconciler = reconciler
        self.specify_registrant_details_use_case = specify_registrant_details_use_case
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        command_dispatcher: ICommandDispatcher = Depends(Provide[Container.command_dispatcher]),
        order_query_repo: IOrderQueryRepo = Depends(Provide[Container.order_query_repo]),
        reconciler: OrderStateReconciler = Depends(Provide[Container.order_state_reconciler]),
        specify_registrant_details_use_case: SpecifyRegistrantDetailsUseCase = Depends(
            SpecifyRegistrantDetailsUseCase.depends
        ),
    ) -> Self:
        return cls(
            command_dispatcher=command_dispatcher,
            order_query_repo=order_query_repo,
            reconciler=reconciler,
            specify_registrant_details_use_case=specify_registrant_details_use_case,
        )

    @Logger.io
    async def complete_registration(
        self,
        *,
        conference: ConferenceAlias,
        command: AssignRegistrantDetails,
        payment_type: Optional[str],
        order_version: int,
    ) -> RegistrationOutcome:
        with self.tracer.start_as_current_span(
            'use_case.complete_registration',
            attributes={
                'conference.code': conference.code,
                'order.id': str(command.order_id),
                'payment.type': payment_type or '',
            },
        ):
            outcome = await self._complete_registration(
                conference=conference,
                command=command,
                payment_type=payment_type,
                order_version=order_version,
            )
            metrics.record_outcome(step='complete_registration', outcome=outcome.kind)
            return outcome

    async def _complete_registration(
        self,
        *,
        conference: ConferenceAlias,
        command: AssignRegistrantDetails,
        payment_type: Optional[str],
        order_version: int,
    ) -> RegistrationOutcome:
        order_id = command.order_id

        if errors := command.validate():
            outcome = await self.specify_registrant_details_use_case.specify_registrant_details(
                conference=conference,
                order_id=order_id,
                order_version=order_version,
                registrant=command,
            )
            outcome.errors = errors
            return outcome

        order = await self.order_query_repo.find_draft_order(order_id=order_id)
        if order is None:
            raise NotFoundError(f'Order {order_id} not found')

        check = self.reconciler.classify(order)
        if check == DraftOrderCheck.CONFIRMED:
            Logger.base.info(f'✅ [SAGA] Order {order_id} already confirmed, nothing to send')
            return RegistrationOutcome(
                kind=OutcomeKind.COMPLETED_ORDER,
                conference_code=conference.code,
                order_id=order_id,
                order_version=order.order_version,
                draft_order=order,
            )
        if check == DraftOrderCheck.EXPIRED:
            return StartRegistrationUseCase.expired(conference=conference, order=order)

        priced_order = await self.order_query_repo.find_priced_order(order_id=order_id)
        if priced_order is None:
            raise NotFoundError(f'Priced order {order_id} not found')

        branch = resolve_payment_branch(
            is_free_of_charge=priced_order.is_free_of_charge, payment_type=payment_type
        )
        if branch == PaymentBranch.NO_PAYMENT:
            return await self._complete_without_payment(conference=conference, command=command)
        if branch == PaymentBranch.THIRD_PARTY_PROCESSOR:
            return await self._complete_with_third_party_processor_payment(
                conference=conference,
                command=command,
                priced_order=priced_order,
                order_version=order_version,
            )

        # Invoicing has no workflow behind it yet, it is rejected like any unknown token
        raise UnsupportedPaymentTypeError(payment_type)

    async def _complete_without_payment(
        self, *, conference: ConferenceAlias, command: AssignRegistrantDetails
    ) -> RegistrationOutcome:
        order_id = command.order_id
        await self._send_batch([command, ConfirmOrder(order_id=order_id)])
        Logger.base.info(f'🎟️ [SAGA] Free order {order_id} sent for confirmation')

        return RegistrationOutcome(
            kind=OutcomeKind.THANK_YOU,
            conference_code=conference.code,
            order_id=order_id,
            redirect_url=RegistrationUrls(conference.code).thank_you(order_id=order_id),
        )

    async def _complete_with_third_party_processor_payment(
        self,
        *,
        conference: ConferenceAlias,
        command: AssignRegistrantDetails,
        priced_order: PricedOrder,
        order_version: int,
    ) -> RegistrationOutcome:
        payment_command = InitiateThirdPartyProcessorPayment(
            payment_id=uuid7(),
            conference_id=conference.id,
            payment_source_id=priced_order.order_id,
            description=f'Registration for {conference.name}',
            total_amount=priced_order.total,
        )
        await self._send_batch([command, payment_command])
        Logger.base.info(
            f'💳 [SAGA] Payment {payment_command.payment_id} initiated for order '
            f'{priced_order.order_id} ({priced_order.total})'
        )

        urls = RegistrationUrls(conference.code)
        payment_accepted_url = urls.thank_you(order_id=priced_order.order_id)
        payment_rejected_url = urls.registrant_details(
            order_id=priced_order.order_id, order_version=order_version
        )
        return RegistrationOutcome(
            kind=OutcomeKind.PAYMENT_HANDOFF,
            conference_code=conference.code,
            order_id=priced_order.order_id,
            order_version=order_version,
            priced_order=priced_order,
            payment_id=payment_command.payment_id,
            payment_accepted_url=payment_accepted_url,
            payment_rejected_url=payment_rejected_url,
            redirect_url=urls.third_party_payment(
                payment_id=payment_command.payment_id,
                payment_accepted_url=payment_accepted_url,
                payment_rejected_url=payment_rejected_url,
            ),
        )

    async def _send_batch(self, commands: list[Command]) -> None:
        await self.command_dispatcher.send_batch(commands)
        for command in commands:
            metrics.record_command(command_type=type(command).__name__)
