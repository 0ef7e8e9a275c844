"""Order Milestone Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.order import OrderMilestone


class OrderMilestoneRepository(ABC):
    """Repository interface for OrderMilestone persistence"""

    @abstractmethod
    async def create_many(self, milestones: List[OrderMilestone]) -> List[OrderMilestone]:
        """
        Persist milestones of a new order

        Args:
            milestones: OrderMilestone entities to persist

        Returns:
            Created milestones
        """
        pass

    @abstractmethod
    async def get_by_order_id(self, order_id: str) -> List[OrderMilestone]:
        """Retrieve milestones of one order ordered by position"""
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str, milestone_id: str) -> Optional[OrderMilestone]:
        """
        Retrieve one milestone of an order

        Returns:
            OrderMilestone if it exists and belongs to the order, None otherwise
        """
        pass

    @abstractmethod
    async def update_many(self, milestones: List[OrderMilestone]) -> List[OrderMilestone]:
        """Persist changes to existing milestones"""
        pass
