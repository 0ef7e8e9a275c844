"""Order Item Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.order import OrderItem


class OrderItemRepository(ABC):
    """
    Repository interface for OrderItem persistence

    Items are written once when the order is created.
    """

    @abstractmethod
    async def create_many(self, items: List[OrderItem]) -> List[OrderItem]:
        """
        Persist line items of a new order

        Args:
            items: OrderItem entities to persist

        Returns:
            Created OrderItems
        """
        pass

    @abstractmethod
    async def get_by_order_id(self, order_id: str) -> List[OrderItem]:
        """Retrieve line items of one order in creation order"""
        pass

    @abstractmethod
    async def get_by_order_ids(self, order_ids: List[str]) -> List[OrderItem]:
        """Retrieve line items of several orders"""
        pass
