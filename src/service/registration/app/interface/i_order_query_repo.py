from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.registration.domain.entity.draft_order_entity import DraftOrder
from src.service.registration.domain.entity.priced_order_entity import PricedOrder


class IOrderQueryRepo(ABC):
    """Read model access for orders. Reads may lag behind sent commands."""

    @abstractmethod
    async def find_draft_order(self, *, order_id: UUID) -> Optional[DraftOrder]:
        pass

    @abstractmethod
    async def find_priced_order(self, *, order_id: UUID) -> Optional[PricedOrder]:
        pass
