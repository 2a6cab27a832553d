from typing import Callable

import attrs
import pytest
from uuid_utils.compat import uuid7

from src.service.registration.domain.entity.draft_order_entity import DraftOrder
from src.service.registration.domain.entity.priced_order_entity import PricedOrder
from src.service.registration.domain.entity.seat_type_entity import SeatType
from src.service.registration.domain.value_object.conference_alias import ConferenceAlias
from src.service.registration.driven_adapter.repo.in_memory_conference_query_repo import (
    InMemoryConferenceReadModel,
)
from src.service.registration.driven_adapter.repo.in_memory_order_query_repo import (
    InMemoryOrderReadModel,
)


@pytest.mark.unit
class TestInMemoryOrderReadModel:
    @pytest.mark.asyncio
    async def test_unknown_order_is_none(self) -> None:
        read_model = InMemoryOrderReadModel()

        assert await read_model.find_draft_order(order_id=uuid7()) is None
        assert await read_model.find_priced_order(order_id=uuid7()) is None

    @pytest.mark.asyncio
    async def test_newer_version_replaces_older(
        self, make_draft_order: Callable[..., DraftOrder]
    ) -> None:
        read_model = InMemoryOrderReadModel()
        order = make_draft_order(version=1)

        assert read_model.upsert_draft_order(order) is True
        assert read_model.upsert_draft_order(attrs.evolve(order, order_version=2)) is True

        stored = await read_model.find_draft_order(order_id=order.order_id)
        assert stored is not None
        assert stored.order_version == 2

    @pytest.mark.asyncio
    async def test_version_never_moves_backwards(
        self,
        make_draft_order: Callable[..., DraftOrder],
        make_priced_order: Callable[..., PricedOrder],
    ) -> None:
        # Arrange
        read_model = InMemoryOrderReadModel()
        order = make_draft_order(version=3)
        priced_order = make_priced_order(order_id=order.order_id, version=3)
        read_model.upsert_draft_order(order)
        read_model.upsert_priced_order(priced_order)

        # Act
        stale_draft_stored = read_model.upsert_draft_order(attrs.evolve(order, order_version=2))
        stale_priced_stored = read_model.upsert_priced_order(
            attrs.evolve(priced_order, order_version=1)
        )

        # Assert
        assert stale_draft_stored is False
        assert stale_priced_stored is False
        assert await read_model.find_draft_order(order_id=order.order_id) == order
        assert await read_model.find_priced_order(order_id=order.order_id) == priced_order


@pytest.mark.unit
class TestInMemoryConferenceReadModel:
    @pytest.mark.asyncio
    async def test_published_conference_and_catalog(
        self, conference: ConferenceAlias, general_seat: SeatType, workshop_seat: SeatType
    ) -> None:
        read_model = InMemoryConferenceReadModel()
        read_model.publish_conference(conference, [general_seat, workshop_seat])

        assert await read_model.find_conference_alias(conference_code=conference.code) == conference
        assert await read_model.get_published_seat_types(conference_id=conference.id) == [
            general_seat,
            workshop_seat,
        ]
        assert await read_model.find_conference_alias(conference_code='unknown') is None
        assert await read_model.get_published_seat_types(conference_id=uuid7()) == []

    @pytest.mark.asyncio
    async def test_upsert_seat_type_keeps_catalog_order(
        self, conference: ConferenceAlias, general_seat: SeatType, workshop_seat: SeatType
    ) -> None:
        read_model = InMemoryConferenceReadModel()
        read_model.publish_conference(conference, [general_seat, workshop_seat])

        sold_out = attrs.evolve(general_seat, available_quantity=0)
        read_model.upsert_seat_type(conference_id=conference.id, seat_type=sold_out)

        assert await read_model.get_published_seat_types(conference_id=conference.id) == [
            sold_out,
            workshop_seat,
        ]
