"""Display model of the seat reservation editor."""

from typing import Optional
from uuid import UUID

import attrs

from src.service.registration.domain.entity.draft_order_entity import DraftOrderItem
from src.service.registration.domain.entity.seat_type_entity import SeatType


@attrs.define
class OrderItemView:
    seat_type: SeatType
    order_item: DraftOrderItem
    available_quantity_for_order: int
    max_selection_quantity: int
    partially_fulfilled: bool = False


@attrs.define
class OrderView:
    conference_id: UUID
    conference_code: str
    conference_name: str
    items: list[OrderItemView] = attrs.field(factory=list)
    order_id: Optional[UUID] = None
