from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs


@attrs.define(frozen=True)
class PricedOrderLine:
    description: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@attrs.define(frozen=True)
class PricedOrder:
    """
    Projection of an order once its seats have been priced.

    Versioned independently from DraftOrder; absent until pricing has run.
    """

    order_id: UUID
    order_version: int
    total: Decimal
    lines: tuple[PricedOrderLine, ...] = ()
    reservation_expiration_date: Optional[datetime] = None

    @property
    def is_free_of_charge(self) -> bool:
        return self.total == Decimal('0')

    def is_newer_than(self, order_version: int) -> bool:
        return self.order_version > order_version
