"""ProcessSubscriptionBilling Use Case

Charges the current billing period of a subscription.
Implements idempotency per billing period and pessimistic locking held
across the provider call.
"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.event_publisher import EventPublisher, DomainEvent, publish_safely
from src.app.services.payment_gateway import PaymentGateway, PaymentRequest
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.subscription_charge_repository import SubscriptionChargeRepository
from src.domain.base import utcnow
from src.domain.payment import PaymentStatus
from src.domain.pricing import add_billing_cycle
from src.domain.state import log_transition
from src.domain.subscription import Subscription, SubscriptionStatus
from src.domain.subscription_charge import SubscriptionCharge, billing_idempotency_key
from .dtos import BillingResultDTO, SubscriptionChargeDTO, SubscriptionResponseDTO


class ProcessSubscriptionBilling:
    """
    Use Case: Bill one subscription period

    Business Rules:
    1. Idempotency: one charge per subscription and billing period
       (billing:{subscription_id}:{YYYY-MM-DD}); a repeated call returns the
       recorded outcome without calling the provider. A subscription that is
       not due yet and already has a charge returns its latest charge with
       not_due set; that charge may belong to an earlier period, as its
       billing_period_start shows
    2. Only active subscriptions are billed (SUBSCRIPTION_NOT_ACTIVE), even
       when the period was already charged
    3. Success: next_billing_date advances one cycle from its current value
    4. Failure: status = expired, no retry (PAYMENT_FAILED)
    5. Every attempt is recorded as a SubscriptionCharge

    Flow:
    1. Get subscription with lock (SELECT FOR UPDATE)
    2. Validate status
    3. Check idempotency (return recorded outcome if found)
    4. Charge via gateway (lock held)
    5. Record charge, apply outcome, commit
    6. Publish (after commit)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        charge_repo: SubscriptionChargeRepository,
        payment_gateway: PaymentGateway,
        event_publisher: EventPublisher,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.charge_repo = charge_repo
        self.payment_gateway = payment_gateway
        self.event_publisher = event_publisher

    async def execute(self, subscription_id: str) -> Result[BillingResultDTO]:
        """
        Execute subscription billing

        Args:
            subscription_id: Subscription to bill

        Returns:
            Result[BillingResultDTO]: Charge outcome or error
        """
        try:
            # Step 1: Lock subscription
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if not subscription:
                return Return.err(
                    Error(
                        code="SUBSCRIPTION_NOT_FOUND",
                        message="Subscription not found",
                        reason=f"No subscription with id {subscription_id}",
                    )
                )

            # Step 2: Validate status
            if subscription.status != SubscriptionStatus.ACTIVE:
                return Return.err(
                    Error(
                        code="SUBSCRIPTION_NOT_ACTIVE",
                        message="Subscription not active",
                        reason=f"Subscription status is {subscription.status.value}",
                    )
                )

            # Step 3: Idempotency
            billing_period_start = subscription.next_billing_date
            idempotency_key = billing_idempotency_key(subscription.id, billing_period_start)
            existing_charge = await self.charge_repo.get_by_idempotency_key(idempotency_key)
            if existing_charge:
                return self._recorded_outcome(subscription, existing_charge)
            if billing_period_start > utcnow():
                history = await self.charge_repo.get_by_subscription_id(subscription.id)
                if history:
                    return self._recorded_outcome(subscription, history[0], not_due=True)

            # Step 4: Charge
            payment = await self.payment_gateway.process_payment(
                PaymentRequest(
                    reference=f"sub_{subscription.id}_{billing_period_start.strftime('%Y%m%d')}",
                    amount=subscription.price,
                    currency=subscription.currency,
                    payment_method_id=subscription.payment_method_id,
                    metadata={
                        "subscription_id": subscription.id,
                        "billing_cycle": subscription.billing_cycle.value,
                        "billing_period_start": billing_period_start.isoformat(),
                    },
                )
            )

            # Step 5: Record and apply outcome
            charge = await self.charge_repo.create(
                SubscriptionCharge(
                    subscription_id=subscription.id,
                    amount=subscription.price,
                    currency=subscription.currency,
                    billing_period_start=billing_period_start,
                    status=PaymentStatus.PAID if payment.success else PaymentStatus.FAILED,
                    payment_id=payment.payment_id,
                    error=None if payment.success else (payment.error or "Payment failed"),
                    idempotency_key=idempotency_key,
                )
            )

            if payment.success:
                subscription.next_billing_date = add_billing_cycle(
                    billing_period_start, subscription.billing_cycle
                )
            else:
                subscription.status = SubscriptionStatus.EXPIRED
                subscription.end_date = utcnow()

            updated = await self.subscription_repo.update(subscription)
            await self.uow.commit()

            # Step 6: Publish
            if payment.success:
                await publish_safely(
                    self.event_publisher,
                    DomainEvent(
                        name="subscription_renewed",
                        aggregate_type="subscription",
                        aggregate_id=updated.id,
                        payload={
                            "payment_id": charge.payment_id,
                            "value": str(charge.amount),
                            "currency": charge.currency,
                            "next_billing_date": updated.next_billing_date.isoformat(),
                        },
                    ),
                )
                return Return.ok(
                    BillingResultDTO(
                        subscription=SubscriptionResponseDTO.from_entity(updated),
                        charge=SubscriptionChargeDTO.from_entity(charge),
                    )
                )

            log_transition(
                "subscription", updated.id, SubscriptionStatus.ACTIVE, SubscriptionStatus.EXPIRED, charge.error
            )
            await publish_safely(
                self.event_publisher,
                DomainEvent(
                    name="subscription_expired",
                    aggregate_type="subscription",
                    aggregate_id=updated.id,
                    payload={"reason": charge.error, "value": str(charge.amount)},
                ),
            )
            return self._payment_failed(charge)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="PROCESS_SUBSCRIPTION_BILLING_FAILED",
                    message="Failed to process subscription billing",
                    reason=str(e),
                )
            )

    def _recorded_outcome(
        self, subscription: Subscription, charge: SubscriptionCharge, not_due: bool = False
    ) -> Result[BillingResultDTO]:
        if charge.status != PaymentStatus.PAID:
            return self._payment_failed(charge)
        return Return.ok(
            BillingResultDTO(
                subscription=SubscriptionResponseDTO.from_entity(subscription),
                charge=SubscriptionChargeDTO.from_entity(charge),
                duplicate=True,
                not_due=not_due,
            )
        )

    def _payment_failed(self, charge: SubscriptionCharge) -> Result[BillingResultDTO]:
        return Return.err(
            Error(
                code="PAYMENT_FAILED",
                message=charge.error or "Payment failed",
                reason=f"Billing period {charge.billing_period_start.date().isoformat()} "
                       f"of subscription {charge.subscription_id} was declined",
            )
        )
