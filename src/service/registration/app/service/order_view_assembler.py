from typing import Optional, Sequence

from src.platform.logging.loguru_io import Logger
from src.service.registration.app.dto.order_view import OrderItemView, OrderView
from src.service.registration.domain.command.registration_command import MAX_SEATS_PER_LINE
from src.service.registration.domain.entity.draft_order_entity import DraftOrder, DraftOrderItem
from src.service.registration.domain.entity.seat_type_entity import SeatType
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias


def assemble_order_view(
    *,
    conference: ConferenceAlias,
    seat_types: Sequence[SeatType],
    order: Optional[DraftOrder] = None,
    max_selection_quantity: int = MAX_SEATS_PER_LINE,
) -> OrderView:
    """
    Merge the seat catalog with an order's lines into the reservation editor.

    Seats already reserved by this order are claimed by it, not gone, so they
    are added back to what the registrant may select for that seat type.
    """
    items = {
        seat_type.id: OrderItemView(
            seat_type=seat_type,
            order_item=DraftOrderItem(seat_type=seat_type.id, requested_seats=0),
            available_quantity_for_order=max(seat_type.available_quantity, 0),
            max_selection_quantity=max(
                min(seat_type.available_quantity, max_selection_quantity), 0
            ),
        )
        for seat_type in seat_types
    }

    if order is not None:
        for line in order.lines:
            item = items.get(line.seat_type)
            if item is None:
                Logger.base.warning(
                    f'⚠️ [VIEW] Order {order.order_id} has seat type {line.seat_type} '
                    f'missing from the catalog of {conference.code}'
                )
                continue
            item.order_item = line
            item.available_quantity_for_order += line.reserved_seats
            item.max_selection_quantity = max(
                min(item.available_quantity_for_order, max_selection_quantity), 0
            )
            item.partially_fulfilled = line.is_partially_fulfilled

    return OrderView(
        conference_id=conference.id,
        conference_code=conference.code,
        conference_name=conference.name,
        items=list(items.values()),
        order_id=order.order_id if order is not None else None,
    )
