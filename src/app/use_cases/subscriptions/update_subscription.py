"""UpdateSubscription Use Case

Plan, billing cycle and auto-renew changes.
"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.maintenance_plan_repository import MaintenancePlanRepository
from src.domain.base import utcnow
from src.domain.pricing import add_billing_cycle, cycle_price
from .dtos import UpdateSubscriptionCommandDTO, SubscriptionResponseDTO


class UpdateSubscription:
    """
    Use Case: Update subscription

    Business Rules:
    1. Plan change: plan_name and price follow the new plan (yearly rule applies)
    2. Cycle change: price recomputed and next_billing_date reset to now + one
       cycle (no proration)
    3. Coupons are not re-applied on repricing
    4. auto_renew set as given
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        plan_repo: MaintenancePlanRepository,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.plan_repo = plan_repo

    async def execute(self, command: UpdateSubscriptionCommandDTO) -> Result[SubscriptionResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(
                command.subscription_id, for_update=True
            )
            if not subscription:
                return Return.err(
                    Error(
                        code="SUBSCRIPTION_NOT_FOUND",
                        message="Subscription not found",
                        reason=f"No subscription with id {command.subscription_id}",
                    )
                )

            plan_changed = bool(command.plan_id) and command.plan_id != subscription.plan_id
            cycle_changed = (
                command.billing_cycle is not None
                and command.billing_cycle != subscription.billing_cycle
            )

            if plan_changed or cycle_changed:
                plan = await self.plan_repo.get_by_id(command.plan_id or subscription.plan_id)
                if not plan or (plan_changed and not plan.is_active):
                    return Return.err(
                        Error(
                            code="PLAN_NOT_FOUND",
                            message="Plan not found",
                            reason=f"No active maintenance plan {command.plan_id or subscription.plan_id}",
                        )
                    )

                billing_cycle = command.billing_cycle or subscription.billing_cycle
                subscription.plan_id = plan.id
                subscription.plan_name = plan.name
                subscription.price = cycle_price(plan.price, billing_cycle)

                if cycle_changed:
                    subscription.billing_cycle = billing_cycle
                    subscription.next_billing_date = add_billing_cycle(utcnow(), billing_cycle)

            if command.auto_renew is not None:
                subscription.auto_renew = command.auto_renew

            updated = await self.subscription_repo.update(subscription)
            await self.uow.commit()

            return Return.ok(SubscriptionResponseDTO.from_entity(updated))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_SUBSCRIPTION_FAILED",
                    message="Failed to update subscription",
                    reason=str(e),
                )
            )
