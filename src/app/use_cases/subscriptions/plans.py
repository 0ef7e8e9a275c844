"""Maintenance plan catalogue use cases"""

from typing import List
from libs.result import Result, Return, Error
from src.app.repositories.maintenance_plan_repository import MaintenancePlanRepository
from src.domain.pricing import cycle_price
from src.domain.subscription import BillingCycle
from .dtos import MaintenancePlanDTO


def _to_dto(plan) -> MaintenancePlanDTO:
    return MaintenancePlanDTO.from_plan(plan, cycle_price(plan.price, BillingCycle.YEARLY))


class ListPlans:
    """Use Case: List the active maintenance plans"""

    def __init__(self, plan_repo: MaintenancePlanRepository):
        self.plan_repo = plan_repo

    async def execute(self) -> Result[List[MaintenancePlanDTO]]:
        try:
            plans = await self.plan_repo.list_active()
            return Return.ok([_to_dto(plan) for plan in plans])
        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_PLANS_FAILED",
                    message="Failed to list plans",
                    reason=str(e),
                )
            )


class GetPlan:
    """Use Case: Read one maintenance plan"""

    def __init__(self, plan_repo: MaintenancePlanRepository):
        self.plan_repo = plan_repo

    async def execute(self, plan_id: str) -> Result[MaintenancePlanDTO]:
        try:
            plan = await self.plan_repo.get_by_id(plan_id)
            if not plan:
                return Return.err(
                    Error(
                        code="PLAN_NOT_FOUND",
                        message="Plan not found",
                        reason=f"No maintenance plan {plan_id}",
                    )
                )
            return Return.ok(_to_dto(plan))
        except Exception as e:
            return Return.err(
                Error(
                    code="GET_PLAN_FAILED",
                    message="Failed to retrieve plan",
                    reason=str(e),
                )
            )
