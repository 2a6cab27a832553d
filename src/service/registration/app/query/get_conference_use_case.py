from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.registration.app.interface.i_conference_query_repo import IConferenceQueryRepo
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias


class GetConferenceUseCase:
    def __init__(self, *, conference_query_repo: IConferenceQueryRepo) -> None:
        self.conference_query_repo = conference_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        conference_query_repo: IConferenceQueryRepo = Depends(
            Provide[Container.conference_query_repo]
        ),
    ) -> Self:
        return cls(conference_query_repo=conference_query_repo)

    @Logger.io
    async def get_conference(self, *, conference_code: str) -> ConferenceAlias:
        conference = await self.conference_query_repo.find_conference_alias(
            conference_code=conference_code
        )
        if conference is None:
            raise NotFoundError(f'Conference {conference_code} not found')
        return conference
