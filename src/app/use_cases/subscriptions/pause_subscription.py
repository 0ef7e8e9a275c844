"""PauseSubscription Use Case"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.base import utcnow, to_utc_naive
from src.domain.state import (
    SUBSCRIPTION_TRANSITIONS,
    can_transition,
    describe_transition,
    log_transition,
)
from src.domain.subscription import SubscriptionStatus
from .dtos import PauseSubscriptionCommandDTO, SubscriptionResponseDTO


class PauseSubscription:
    """
    Use Case: Pause subscription

    Business Rules:
    1. Only active subscriptions can be paused
    2. paused_at is stamped
    3. resume_date, when given, becomes the next billing date
    """

    def __init__(self, uow: UnitOfWork, subscription_repo: SubscriptionRepository):
        self.uow = uow
        self.subscription_repo = subscription_repo

    async def execute(self, command: PauseSubscriptionCommandDTO) -> Result[SubscriptionResponseDTO]:
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

            previous_status = subscription.status
            if not can_transition(previous_status, SubscriptionStatus.PAUSED, SUBSCRIPTION_TRANSITIONS):
                return Return.err(
                    Error(
                        code="INVALID_STATUS_TRANSITION",
                        message=f"Cannot pause a {previous_status.value} subscription",
                        reason=describe_transition(
                            previous_status, SubscriptionStatus.PAUSED, SUBSCRIPTION_TRANSITIONS
                        ),
                    )
                )

            subscription.status = SubscriptionStatus.PAUSED
            subscription.paused_at = utcnow()
            if command.resume_date:
                subscription.next_billing_date = to_utc_naive(command.resume_date)

            updated = await self.subscription_repo.update(subscription)
            await self.uow.commit()

            log_transition("subscription", subscription.id, previous_status, SubscriptionStatus.PAUSED)

            return Return.ok(SubscriptionResponseDTO.from_entity(updated))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="PAUSE_SUBSCRIPTION_FAILED",
                    message="Failed to pause subscription",
                    reason=str(e),
                )
            )
