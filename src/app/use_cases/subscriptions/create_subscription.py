"""CreateSubscription Use Case

Subscribes a customer to a maintenance plan.
"""

import logging
from datetime import timedelta
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.event_publisher import EventPublisher, DomainEvent, publish_safely
from src.app.services.payment_gateway import PaymentGateway, RecurringPaymentRequest
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.maintenance_plan_repository import MaintenancePlanRepository
from src.domain.base import utcnow, to_utc_naive
from src.domain.pricing import apply_coupon, cycle_price, next_billing_date
from src.domain.subscription import Subscription, SubscriptionStatus
from .dtos import CreateSubscriptionCommandDTO, SubscriptionResponseDTO

logger = logging.getLogger(__name__)


class CreateSubscription:
    """
    Use Case: Create subscription

    Business Rules:
    1. Plan must exist and be active (PLAN_NOT_FOUND)
    2. price = plan price (monthly) or plan price * 12 * 0.9 (yearly), then coupon
    3. trial_end_date = start_date + trial_days
    4. next_billing_date = one cycle after trial_end_date, else after start_date
    5. Without a trial the recurring payment is created first; a provider
       failure aborts with RECURRING_PAYMENT_FAILED and nothing is stored
    6. Status is active, with or without a trial
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        plan_repo: MaintenancePlanRepository,
        payment_gateway: PaymentGateway,
        event_publisher: EventPublisher,
        currency: str = "EUR",
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.plan_repo = plan_repo
        self.payment_gateway = payment_gateway
        self.event_publisher = event_publisher
        self.currency = currency

    async def execute(self, command: CreateSubscriptionCommandDTO) -> Result[SubscriptionResponseDTO]:
        """
        Execute subscription creation

        Args:
            command: CreateSubscriptionCommandDTO with customer, plan, cycle, trial and coupon

        Returns:
            Result[SubscriptionResponseDTO]: Created subscription or error
        """
        try:
            plan = await self.plan_repo.get_by_id(command.plan_id)
            if not plan or not plan.is_active:
                return Return.err(
                    Error(
                        code="PLAN_NOT_FOUND",
                        message="Plan not found",
                        reason=f"No active maintenance plan {command.plan_id}",
                    )
                )

            now = utcnow()
            start_date = to_utc_naive(command.start_date) if command.start_date else now
            trial_end_date = (
                start_date + timedelta(days=command.trial_days) if command.trial_days else None
            )
            price = apply_coupon(cycle_price(plan.price, command.billing_cycle), command.coupon_code)

            provider_subscription_id = None
            if trial_end_date is None:
                recurring = await self.payment_gateway.create_recurring_payment(
                    RecurringPaymentRequest(
                        customer_id=command.customer_id,
                        plan_id=plan.id,
                        payment_method_id=command.payment_method_id,
                        amount=price,
                        currency=self.currency,
                        billing_cycle=command.billing_cycle.value,
                        start_date=start_date,
                    )
                )
                if not recurring.success:
                    return Return.err(
                        Error(
                            code="RECURRING_PAYMENT_FAILED",
                            message=recurring.error or "Subscription creation failed",
                            reason=f"Provider rejected recurring payment for plan {plan.id}",
                        )
                    )
                provider_subscription_id = recurring.payment_id

            subscription = Subscription(
                customer_id=command.customer_id,
                plan_id=plan.id,
                plan_name=plan.name,
                status=SubscriptionStatus.ACTIVE,
                billing_cycle=command.billing_cycle,
                price=price,
                currency=self.currency,
                start_date=start_date,
                trial_end_date=trial_end_date,
                next_billing_date=next_billing_date(start_date, command.billing_cycle, trial_end_date),
                auto_renew=True,
                payment_method_id=command.payment_method_id,
                provider_subscription_id=provider_subscription_id,
                created_at=now,
                updated_at=now,
            )

            created = await self.subscription_repo.create(subscription)
            await self.uow.commit()

            logger.info(
                f"Subscription {created.id} created for customer {created.customer_id} "
                f"on {created.plan_id} ({created.billing_cycle.value}, {created.price} {created.currency})"
            )

            await publish_safely(
                self.event_publisher,
                DomainEvent(
                    name="subscription_created",
                    aggregate_type="subscription",
                    aggregate_id=created.id,
                    payload={
                        "plan_id": created.plan_id,
                        "plan_name": created.plan_name,
                        "billing_cycle": created.billing_cycle.value,
                        "value": str(created.price),
                        "currency": created.currency,
                        "trial": trial_end_date is not None,
                    },
                ),
            )

            return Return.ok(SubscriptionResponseDTO.from_entity(created))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_SUBSCRIPTION_FAILED",
                    message="Failed to create subscription",
                    reason=str(e),
                )
            )
