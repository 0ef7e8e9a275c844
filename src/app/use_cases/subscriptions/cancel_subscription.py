"""CancelSubscription Use Case

Cancels a subscription at period end or immediately and stops the recurring
payment at the provider.
"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.event_publisher import EventPublisher, DomainEvent, publish_safely
from src.app.services.payment_gateway import PaymentGateway
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.base import utcnow
from src.domain.state import (
    SUBSCRIPTION_TRANSITIONS,
    can_transition,
    describe_transition,
    log_transition,
)
from src.domain.subscription import SubscriptionStatus
from .dtos import CancelSubscriptionCommandDTO, SubscriptionResponseDTO


class CancelSubscription:
    """
    Use Case: Cancel subscription

    Business Rules:
    1. Only active or paused subscriptions can be cancelled
    2. cancel_at_period_end: end_date = next_billing_date, auto_renew = False
    3. Immediate: end_date = now
    4. The provider recurring payment is always cancelled; a provider failure
       aborts with CANCEL_RECURRING_PAYMENT_FAILED and nothing changes
    5. end_date is informational; nothing enforces it
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        payment_gateway: PaymentGateway,
        event_publisher: EventPublisher,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.payment_gateway = payment_gateway
        self.event_publisher = event_publisher

    async def execute(self, command: CancelSubscriptionCommandDTO) -> Result[SubscriptionResponseDTO]:
        """
        Execute subscription cancellation

        Args:
            command: CancelSubscriptionCommandDTO with subscription_id, reason and timing

        Returns:
            Result[SubscriptionResponseDTO]: Cancelled subscription or error
        """
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
            if not can_transition(previous_status, SubscriptionStatus.CANCELLED, SUBSCRIPTION_TRANSITIONS):
                return Return.err(
                    Error(
                        code="INVALID_STATUS_TRANSITION",
                        message=f"Cannot cancel a {previous_status.value} subscription",
                        reason=describe_transition(
                            previous_status, SubscriptionStatus.CANCELLED, SUBSCRIPTION_TRANSITIONS
                        ),
                    )
                )

            cancelled = await self.payment_gateway.cancel_recurring_payment(
                subscription.provider_subscription_id or subscription.id
            )
            if not cancelled.success:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="CANCEL_RECURRING_PAYMENT_FAILED",
                        message=cancelled.error or "Subscription cancellation failed",
                        reason=f"Provider could not cancel recurring payment of {subscription.id}",
                    )
                )

            now = utcnow()
            subscription.status = SubscriptionStatus.CANCELLED
            subscription.cancelled_at = now
            subscription.cancellation_reason = command.reason
            if command.cancel_at_period_end:
                subscription.end_date = subscription.next_billing_date
                subscription.auto_renew = False
            else:
                subscription.end_date = now

            updated = await self.subscription_repo.update(subscription)
            await self.uow.commit()

            log_transition(
                "subscription", subscription.id, previous_status, SubscriptionStatus.CANCELLED, command.reason
            )

            await publish_safely(
                self.event_publisher,
                DomainEvent(
                    name="subscription_cancelled",
                    aggregate_type="subscription",
                    aggregate_id=updated.id,
                    payload={
                        "plan_id": updated.plan_id,
                        "plan_name": updated.plan_name,
                        "reason": command.reason or "Not specified",
                        "value": str(updated.price),
                        "currency": updated.currency,
                    },
                ),
            )

            return Return.ok(SubscriptionResponseDTO.from_entity(updated))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CANCEL_SUBSCRIPTION_FAILED",
                    message="Failed to cancel subscription",
                    reason=str(e),
                )
            )
