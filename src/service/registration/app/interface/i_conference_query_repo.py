from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.registration.domain.entity.seat_type_entity import SeatType
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias


class IConferenceQueryRepo(ABC):
    """Read model access for published conferences and their seat catalog."""

    @abstractmethod
    async def find_conference_alias(self, *, conference_code: str) -> Optional[ConferenceAlias]:
        """Return the published conference with this code, or None"""
        pass

    @abstractmethod
    async def get_published_seat_types(self, *, conference_id: UUID) -> List[SeatType]:
        """Return the seat types on sale, in catalog display order"""
        pass
