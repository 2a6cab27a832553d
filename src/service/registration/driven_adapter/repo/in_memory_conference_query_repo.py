from typing import Dict, List, Optional, Sequence
from uuid import UUID

from src.service.registration.app.interface.i_conference_query_repo import IConferenceQueryRepo
from src.service.registration.domain.entity.seat_type_entity import SeatType
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias


class InMemoryConferenceReadModel(IConferenceQueryRepo):
    """Published conferences and their seat catalogs, kept in insertion order."""

    def __init__(self) -> None:
        self._conferences: Dict[str, ConferenceAlias] = {}
        self._seat_types: Dict[UUID, List[SeatType]] = {}

    async def find_conference_alias(self, *, conference_code: str) -> Optional[ConferenceAlias]:
        return self._conferences.get(conference_code)

    async def get_published_seat_types(self, *, conference_id: UUID) -> List[SeatType]:
        return list(self._seat_types.get(conference_id, []))

    def publish_conference(
        self, conference: ConferenceAlias, seat_types: Sequence[SeatType] = ()
    ) -> None:
        self._conferences[conference.code] = conference
        self._seat_types[conference.id] = list(seat_types)

    def upsert_seat_type(self, *, conference_id: UUID, seat_type: SeatType) -> None:
        seat_types = self._seat_types.setdefault(conference_id, [])
        for i, existing in enumerate(seat_types):
            if existing.id == seat_type.id:
                seat_types[i] = seat_type
                return
        seat_types.append(seat_type)

    def clear(self) -> None:
        self._conferences.clear()
        self._seat_types.clear()
