from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.service.registration.app.dto.order_view import OrderView
from src.service.registration.app.dto.registration_outcome import RegistrationOutcome
from src.service.registration.domain.command.registration_command import (
    AssignRegistrantDetails,
    RegisterToConference,
    SeatQuantity,
)
from src.service.registration.domain.entity.draft_order_entity import DraftOrder
from src.service.registration.domain.entity.priced_order_entity import PricedOrder


# ============================ Requests ============================


class SeatQuantityRequest(BaseModel):
    seat_type: UUID
    quantity: int = 0


class SeatReservationRequest(BaseModel):
    order_id: UUID
    order_version: int = 0
    seats: List[SeatQuantityRequest] = []

    class Config:
        json_schema_extra = {
            'example': {
                'order_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'order_version': 0,
                'seats': [{'seat_type': '01936d8f-6a10-7b2e-8c1d-abcdefabcdef', 'quantity': 2}],
            }
        }

    def to_command(self) -> RegisterToConference:
        return RegisterToConference(
            order_id=self.order_id,
            seats=tuple(
                SeatQuantity(seat_type=seat.seat_type, quantity=seat.quantity)
                for seat in self.seats
            ),
        )


class RegistrantDetailsRequest(BaseModel):
    order_version: int
    first_name: str = ''
    last_name: str = ''
    email: str = ''
    payment_type: Optional[str] = None  # 'thirdParty' or 'invoice'

    class Config:
        json_schema_extra = {
            'example': {
                'order_version': 3,
                'first_name': 'Ada',
                'last_name': 'Lovelace',
                'email': 'ada@example.com',
                'payment_type': 'thirdParty',
            }
        }

    def to_command(self, *, order_id: UUID) -> AssignRegistrantDetails:
        return AssignRegistrantDetails(
            order_id=order_id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
        )


# ============================ Responses ============================


class SeatTypeResponse(BaseModel):
    id: UUID
    name: str
    description: str
    price: Decimal


class OrderItemViewResponse(BaseModel):
    seat_type: SeatTypeResponse
    requested_seats: int
    reserved_seats: int
    available_quantity_for_order: int
    max_selection_quantity: int
    partially_fulfilled: bool


class OrderViewResponse(BaseModel):
    conference_id: UUID
    conference_code: str
    conference_name: str
    order_id: Optional[UUID] = None
    items: List[OrderItemViewResponse] = []

    @classmethod
    def from_view(cls, view: OrderView) -> 'OrderViewResponse':
        return cls(
            conference_id=view.conference_id,
            conference_code=view.conference_code,
            conference_name=view.conference_name,
            order_id=view.order_id,
            items=[
                OrderItemViewResponse(
                    seat_type=SeatTypeResponse(
                        id=item.seat_type.id,
                        name=item.seat_type.name,
                        description=item.seat_type.description,
                        price=item.seat_type.price,
                    ),
                    requested_seats=item.order_item.requested_seats,
                    reserved_seats=item.order_item.reserved_seats,
                    available_quantity_for_order=item.available_quantity_for_order,
                    max_selection_quantity=item.max_selection_quantity,
                    partially_fulfilled=item.partially_fulfilled,
                )
                for item in view.items
            ],
        )


class DraftOrderResponse(BaseModel):
    order_id: UUID
    order_version: int
    state: str
    reservation_expiration_date: Optional[datetime] = None

    @classmethod
    def from_entity(cls, order: DraftOrder) -> 'DraftOrderResponse':
        return cls(
            order_id=order.order_id,
            order_version=order.order_version,
            state=order.state.value,
            reservation_expiration_date=order.reservation_expiration_date,
        )


class PricedOrderLineResponse(BaseModel):
    description: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class PricedOrderResponse(BaseModel):
    order_id: UUID
    order_version: int
    total: Decimal
    is_free_of_charge: bool
    lines: List[PricedOrderLineResponse] = []

    @classmethod
    def from_entity(cls, order: PricedOrder) -> 'PricedOrderResponse':
        return cls(
            order_id=order.order_id,
            order_version=order.order_version,
            total=order.total,
            is_free_of_charge=order.is_free_of_charge,
            lines=[
                PricedOrderLineResponse(
                    description=line.description,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                )
                for line in order.lines
            ],
        )


class RegistrantResponse(BaseModel):
    first_name: str
    last_name: str
    email: str


class RegistrationOutcomeResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'kind': 'redirect_to_registrant_details',
                'conference_code': 'pycon-2025',
                'order_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'order_version': 0,
                'is_redirect': True,
                'redirect_url': '/api/pycon-2025/registration/'
                '01936d8f-5e73-7c4e-a9c5-123456789abc/registrant?order_version=0',
                'errors': [],
            }
        },
    }

    kind: str
    conference_code: str
    order_id: Optional[UUID] = None
    order_version: Optional[int] = None
    is_redirect: bool = False
    redirect_url: Optional[str] = None
    expiration_date: Optional[datetime] = None
    order_view: Optional[OrderViewResponse] = None
    draft_order: Optional[DraftOrderResponse] = None
    priced_order: Optional[PricedOrderResponse] = None
    registrant: Optional[RegistrantResponse] = None
    payment_id: Optional[UUID] = None
    payment_accepted_url: Optional[str] = None
    payment_rejected_url: Optional[str] = None
    errors: List[str] = []

    @classmethod
    def from_outcome(cls, outcome: RegistrationOutcome) -> 'RegistrationOutcomeResponse':
        return cls(
            kind=outcome.kind.value,
            conference_code=outcome.conference_code,
            order_id=outcome.order_id,
            order_version=outcome.order_version,
            is_redirect=outcome.is_redirect,
            redirect_url=outcome.redirect_url,
            expiration_date=outcome.expiration_date,
            order_view=OrderViewResponse.from_view(outcome.order_view)
            if outcome.order_view
            else None,
            draft_order=DraftOrderResponse.from_entity(outcome.draft_order)
            if outcome.draft_order
            else None,
            priced_order=PricedOrderResponse.from_entity(outcome.priced_order)
            if outcome.priced_order
            else None,
            registrant=RegistrantResponse(
                first_name=outcome.registrant.first_name,
                last_name=outcome.registrant.last_name,
                email=outcome.registrant.email,
            )
            if outcome.registrant
            else None,
            payment_id=outcome.payment_id,
            payment_accepted_url=outcome.payment_accepted_url,
            payment_rejected_url=outcome.payment_rejected_url,
            errors=list(outcome.errors),
        )
