"""ResumeSubscription Use Case"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.base import utcnow
from src.domain.pricing import add_billing_cycle
from src.domain.state import (
    SUBSCRIPTION_TRANSITIONS,
    can_transition,
    describe_transition,
    log_transition,
)
from src.domain.subscription import SubscriptionStatus
from .dtos import SubscriptionResponseDTO


class ResumeSubscription:
    """
    Use Case: Resume a paused subscription

    next_billing_date restarts from now (one full cycle), it does not carry
    over the paused period.
    """

    def __init__(self, uow: UnitOfWork, subscription_repo: SubscriptionRepository):
        self.uow = uow
        self.subscription_repo = subscription_repo

    async def execute(self, subscription_id: str) -> Result[SubscriptionResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if not subscription:
                return Return.err(
                    Error(
                        code="SUBSCRIPTION_NOT_FOUND",
                        message="Subscription not found",
                        reason=f"No subscription with id {subscription_id}",
                    )
                )

            previous_status = subscription.status
            if previous_status != SubscriptionStatus.PAUSED or not can_transition(
                previous_status, SubscriptionStatus.ACTIVE, SUBSCRIPTION_TRANSITIONS
            ):
                return Return.err(
                    Error(
                        code="INVALID_STATUS_TRANSITION",
                        message=f"Cannot resume a {previous_status.value} subscription",
                        reason=describe_transition(
                            previous_status, SubscriptionStatus.ACTIVE, SUBSCRIPTION_TRANSITIONS
                        ),
                    )
                )

            subscription.status = SubscriptionStatus.ACTIVE
            subscription.paused_at = None
            subscription.next_billing_date = add_billing_cycle(utcnow(), subscription.billing_cycle)

            updated = await self.subscription_repo.update(subscription)
            await self.uow.commit()

            log_transition("subscription", subscription.id, previous_status, SubscriptionStatus.ACTIVE)

            return Return.ok(SubscriptionResponseDTO.from_entity(updated))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="RESUME_SUBSCRIPTION_FAILED",
                    message="Failed to resume subscription",
                    reason=str(e),
                )
            )
