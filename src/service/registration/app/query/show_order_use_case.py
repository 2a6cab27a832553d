from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.registration.app.dto.registration_outcome import (
    OutcomeKind,
    RegistrationOutcome,
)
from src.service.registration.app.interface.i_order_query_repo import IOrderQueryRepo
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias


class ShowOrderUseCase:
    """Landing pages the registration flow redirects to."""

    def __init__(self, *, order_query_repo: IOrderQueryRepo) -> None:
        self.order_query_repo = order_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        order_query_repo: IOrderQueryRepo = Depends(Provide[Container.order_query_repo]),
    ) -> Self:
        return cls(order_query_repo=order_query_repo)

    @Logger.io
    async def thank_you(self, *, conference: ConferenceAlias, order_id: UUID) -> RegistrationOutcome:
        # Read once: the registrant lands here right after submitting, the
        # projection may still show the order before confirmation
        order = await self.order_query_repo.find_draft_order(order_id=order_id)
        if order is None:
            raise NotFoundError(f'Order {order_id} not found')
        return RegistrationOutcome(
            kind=OutcomeKind.THANK_YOU,
            conference_code=conference.code,
            order_id=order_id,
            order_version=order.order_version,
            draft_order=order,
        )

    @Logger.io
    async def show_expired_order(
        self, *, conference: ConferenceAlias, order_id: UUID
    ) -> RegistrationOutcome:
        return RegistrationOutcome(
            kind=OutcomeKind.EXPIRED_ORDER,
            conference_code=conference.code,
            order_id=order_id,
        )
