"""Application layer interfaces (Ports)"""

from src.service.registration.app.interface.i_command_dispatcher import ICommandDispatcher
from src.service.registration.app.interface.i_conference_query_repo import IConferenceQueryRepo
from src.service.registration.app.interface.i_order_query_repo import IOrderQueryRepo

__all__ = [
    'ICommandDispatcher',
    'IConferenceQueryRepo',
    'IOrderQueryRepo',
]
