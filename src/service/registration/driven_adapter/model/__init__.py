"""
Projection Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.registration.driven_adapter.model.conference_view_model import (
    ConferenceSeatTypeViewModel,
    ConferenceViewModel,
)
from src.service.registration.driven_adapter.model.order_view_model import (
    OrderItemViewModel,
    OrderViewModel,
)
from src.service.registration.driven_adapter.model.priced_order_model import (
    PricedOrderLineModel,
    PricedOrderModel,
)

__all__ = [
    'ConferenceSeatTypeViewModel',
    'ConferenceViewModel',
    'OrderItemViewModel',
    'OrderViewModel',
    'PricedOrderLineModel',
    'PricedOrderModel',
]
