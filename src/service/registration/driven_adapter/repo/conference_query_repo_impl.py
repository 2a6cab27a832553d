from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.registration.app.interface.i_conference_query_repo import IConferenceQueryRepo
from src.service.registration.domain.entity.seat_type_entity import SeatType
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias
from src.service.registration.driven_adapter.model.conference_view_model import (
    ConferenceSeatTypeViewModel,
    ConferenceViewModel,
)


class ConferenceQueryRepoImpl(IConferenceQueryRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session_factory is None:
            raise RuntimeError('No session_factory available')
        async with self.session_factory() as session:
            yield session

    @Logger.io
    async def find_conference_alias(self, *, conference_code: str) -> Optional[ConferenceAlias]:
        async with self._get_session() as session:
            result = await session.execute(
                select(ConferenceViewModel).where(
                    ConferenceViewModel.code == conference_code,
                    ConferenceViewModel.is_published.is_(True),
                )
            )
            db_conference = result.scalar_one_or_none()
            if db_conference is None:
                return None
            return ConferenceAlias(
                id=db_conference.id, code=db_conference.code, name=db_conference.name
            )

    @Logger.io
    async def get_published_seat_types(self, *, conference_id: UUID) -> List[SeatType]:
        async with self._get_session() as session:
            result = await session.execute(
                select(ConferenceSeatTypeViewModel)
                .where(ConferenceSeatTypeViewModel.conference_id == conference_id)
                .order_by(ConferenceSeatTypeViewModel.position)
            )
            return [
                SeatType(
                    id=db_seat_type.id,
                    name=db_seat_type.name,
                    description=db_seat_type.description,
                    price=db_seat_type.price,
                    available_quantity=db_seat_type.available_quantity,
                )
                for db_seat_type in result.scalars().all()
            ]
