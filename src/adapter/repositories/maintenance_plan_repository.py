"""Catalogue-backed Maintenance Plan Repository

Plans are immutable reference data shipped with the code, so no session is
involved.
"""

from typing import Dict, List, Optional
from src.app.repositories.maintenance_plan_repository import MaintenancePlanRepository
from src.domain.maintenance_plan import MaintenancePlan, PLANS_BY_ID


class StaticMaintenancePlanRepository(MaintenancePlanRepository):
    def __init__(self, plans: Optional[Dict[str, MaintenancePlan]] = None):
        self.plans = plans if plans is not None else PLANS_BY_ID

    async def get_by_id(self, plan_id: str) -> Optional[MaintenancePlan]:
        return self.plans.get(plan_id)

    async def list_active(self) -> List[MaintenancePlan]:
        return [plan for plan in self.plans.values() if plan.is_active]
