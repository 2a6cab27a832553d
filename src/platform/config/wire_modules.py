"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.registration.app.command import (
    complete_registration_use_case,
    reserve_seats_use_case,
)
from src.service.registration.app.query import (
    get_conference_use_case,
    show_order_use_case,
    specify_registrant_details_use_case,
    start_registration_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    start_registration_use_case,
    reserve_seats_use_case,
    specify_registrant_details_use_case,
    complete_registration_use_case,
    get_conference_use_case,
    show_order_use_case,
]
