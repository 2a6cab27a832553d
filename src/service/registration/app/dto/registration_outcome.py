"""
Registration outcomes

Every saga step answers with one of these. Editors carry the data to render,
redirects carry the URL the caller should go to next.
"""

from datetime import datetime
from enum import StrEnum
from typing import Optional
from uuid import UUID

import attrs

from src.service.registration.app.dto.order_view import OrderView
from src.service.registration.domain.command.registration_command import (
    AssignRegistrantDetails,
)
from src.service.registration.domain.entity.draft_order_entity import DraftOrder
from src.service.registration.domain.entity.priced_order_entity import PricedOrder


class OutcomeKind(StrEnum):
    RESERVATION_EDITOR = 'reservation_editor'
    REGISTRANT_EDITOR = 'registrant_editor'
    REDIRECT_TO_REGISTRANT_DETAILS = 'redirect_to_registrant_details'
    REDIRECT_TO_SEAT_RESERVATION = 'redirect_to_seat_reservation'
    COMPLETED_ORDER = 'completed_order'
    EXPIRED_ORDER = 'expired_order'
    RESERVATION_UNKNOWN = 'reservation_unknown'
    PAYMENT_HANDOFF = 'payment_handoff'
    THANK_YOU = 'thank_you'


REDIRECT_KINDS = frozenset(
    {
        OutcomeKind.REDIRECT_TO_REGISTRANT_DETAILS,
        OutcomeKind.REDIRECT_TO_SEAT_RESERVATION,
        OutcomeKind.PAYMENT_HANDOFF,
    }
)


@attrs.define
class RegistrationOutcome:
    kind: OutcomeKind
    conference_code: str
    order_id: Optional[UUID] = None
    order_version: Optional[int] = None
    order_view: Optional[OrderView] = None
    draft_order: Optional[DraftOrder] = None
    priced_order: Optional[PricedOrder] = None
    expiration_date: Optional[datetime] = None
    registrant: Optional[AssignRegistrantDetails] = None
    payment_id: Optional[UUID] = None
    payment_accepted_url: Optional[str] = None
    payment_rejected_url: Optional[str] = None
    redirect_url: Optional[str] = None
    errors: list[str] = attrs.field(factory=list)

    @property
    def is_redirect(self) -> bool:
        return self.kind in REDIRECT_KINDS or (
            self.kind in (OutcomeKind.THANK_YOU, OutcomeKind.EXPIRED_ORDER)
            and self.redirect_url is not None
        )
