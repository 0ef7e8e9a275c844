"""Maintenance Plan Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.maintenance_plan import MaintenancePlan


class MaintenancePlanRepository(ABC):
    """Read-only access to the maintenance plan catalogue"""

    @abstractmethod
    async def get_by_id(self, plan_id: str) -> Optional[MaintenancePlan]:
        """
        Retrieve plan by ID

        Returns:
            MaintenancePlan if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_active(self) -> List[MaintenancePlan]:
        """Retrieve plans currently offered"""
        pass
