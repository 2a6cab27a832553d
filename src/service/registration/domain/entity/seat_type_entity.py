from decimal import Decimal
from uuid import UUID

import attrs


@attrs.define(frozen=True)
class SeatType:
    """Seat type published in a conference catalog."""

    id: UUID
    name: str
    description: str
    price: Decimal
    # May go negative when the catalog projection lags behind oversold inventory
    available_quantity: int
