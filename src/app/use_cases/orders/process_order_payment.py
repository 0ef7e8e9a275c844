"""ProcessOrderPayment Use Case

Charges an order through the payment provider gateway.
Implements pessimistic locking held across the provider call.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.event_publisher import EventPublisher, DomainEvent, publish_safely
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway, PaymentRequest, CustomerInfo
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_item_repository import OrderItemRepository
from src.app.repositories.order_milestone_repository import OrderMilestoneRepository
from src.domain.base import utcnow
from src.domain.milestones import apply_status_to_milestones
from src.domain.order import OrderStatus
from src.domain.payment import PaymentStatus
from src.domain.state import (
    ORDER_TRANSITIONS,
    PAYMENT_TRANSITIONS,
    can_transition,
    describe_transition,
    log_transition,
)
from .dtos import ProcessOrderPaymentCommandDTO, OrderResponseDTO

logger = logging.getLogger(__name__)

SETTLED_PAYMENT_STATUSES = {
    PaymentStatus.PAID,
    PaymentStatus.REFUNDED,
    PaymentStatus.PARTIALLY_REFUNDED,
}


class ProcessOrderPayment:
    """
    Use Case: Pay an order

    Business Rules:
    1. Settled orders (paid / refunded) and cancelled orders cannot be charged
    2. payment_status goes to processing before the provider call
    3. Success: payment_status = paid, payment_id stored, pending orders confirmed
    4. Failure: payment_status = failed, order status untouched, PAYMENT_FAILED
    5. No retry; failed payments can be charged again by calling this again
    6. Payment confirmation to the customer is best-effort

    Flow:
    1. Get order with lock (SELECT FOR UPDATE)
    2. Validate state
    3. Mark processing and call gateway (lock held)
    4. Apply outcome and commit
    5. Notify and publish (after commit)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        item_repo: OrderItemRepository,
        milestone_repo: OrderMilestoneRepository,
        payment_gateway: PaymentGateway,
        event_publisher: EventPublisher,
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.item_repo = item_repo
        self.milestone_repo = milestone_repo
        self.payment_gateway = payment_gateway
        self.event_publisher = event_publisher
        self.notification_service = notification_service

    async def execute(self, command: ProcessOrderPaymentCommandDTO) -> Result[OrderResponseDTO]:
        """
        Execute order payment

        Args:
            command: ProcessOrderPaymentCommandDTO with order_id and optional payment method

        Returns:
            Result[OrderResponseDTO]: Paid order, or error (PAYMENT_FAILED keeps the
            failed payment status committed)
        """
        try:
            # Step 1: Lock order
            order = await self.order_repo.get_by_id(command.order_id, for_update=True)
            if not order:
                return Return.err(
                    Error(
                        code="ORDER_NOT_FOUND",
                        message="Order not found",
                        reason=f"No order with id {command.order_id}",
                    )
                )

            # Step 2: Validate state
            if order.status == OrderStatus.CANCELLED:
                return Return.err(
                    Error(
                        code="ORDER_CANCELLED",
                        message=f"Order {order.order_number} is cancelled",
                        reason="Cancelled orders cannot be charged",
                    )
                )

            if order.payment_status in SETTLED_PAYMENT_STATUSES:
                return Return.err(
                    Error(
                        code="ORDER_ALREADY_PAID",
                        message=f"Order {order.order_number} has already been paid",
                        reason=f"Payment status is {order.payment_status.value}",
                    )
                )

            previous_payment_status = order.payment_status
            if not can_transition(previous_payment_status, PaymentStatus.PROCESSING, PAYMENT_TRANSITIONS):
                return Return.err(
                    Error(
                        code="INVALID_STATUS_TRANSITION",
                        message=f"Order {order.order_number} payment is already {previous_payment_status.value}",
                        reason=describe_transition(
                            previous_payment_status, PaymentStatus.PROCESSING, PAYMENT_TRANSITIONS
                        ),
                    )
                )

            # Step 3: Mark processing and charge
            if command.payment_method_id:
                order.payment_method_id = command.payment_method_id
            order.payment_status = PaymentStatus.PROCESSING
            order = await self.order_repo.update(order)

            payment = await self.payment_gateway.process_payment(
                PaymentRequest(
                    reference=order.id,
                    amount=order.total,
                    currency=order.currency,
                    payment_method_id=order.payment_method_id,
                    customer=CustomerInfo(
                        name=order.customer_name,
                        email=order.customer_email,
                        address=order.billing_address or {},
                    ),
                    metadata={"order_id": order.id, "order_number": order.order_number},
                )
            )

            # Step 4: Apply outcome
            if not payment.success:
                order.payment_status = PaymentStatus.FAILED
                await self.order_repo.update(order)
                await self.uow.commit()

                log_transition(
                    "order_payment", order.id, previous_payment_status, PaymentStatus.FAILED, payment.error
                )
                return Return.err(
                    Error(
                        code="PAYMENT_FAILED",
                        message=payment.error or "Payment failed",
                        reason=f"Provider declined payment for order {order.order_number}",
                    )
                )

            now = utcnow()
            order.payment_status = PaymentStatus.PAID
            order.payment_id = payment.payment_id

            milestones = await self.milestone_repo.get_by_order_id(order.id)
            previous_status = order.status
            if can_transition(previous_status, OrderStatus.CONFIRMED, ORDER_TRANSITIONS):
                order.status = OrderStatus.CONFIRMED
                changed = apply_status_to_milestones(milestones, OrderStatus.CONFIRMED, now)
                if changed:
                    await self.milestone_repo.update_many(changed)

            paid_order = await self.order_repo.update(order)
            await self.uow.commit()

            log_transition("order_payment", order.id, previous_payment_status, PaymentStatus.PAID)
            if paid_order.status != previous_status:
                log_transition("order", order.id, previous_status, paid_order.status, "payment received")

            # Step 5: Notify and publish
            await self._send_confirmation(paid_order)
            await publish_safely(
                self.event_publisher,
                DomainEvent(
                    name="order_paid",
                    aggregate_type="order",
                    aggregate_id=paid_order.id,
                    payload={
                        "order_number": paid_order.order_number,
                        "payment_id": paid_order.payment_id,
                        "value": str(paid_order.total),
                        "currency": paid_order.currency,
                    },
                ),
            )

            items = await self.item_repo.get_by_order_id(paid_order.id)
            return Return.ok(OrderResponseDTO.from_entities(paid_order, items, milestones))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="PROCESS_ORDER_PAYMENT_FAILED",
                    message="Failed to process order payment",
                    reason=str(e),
                )
            )

    async def _send_confirmation(self, order) -> None:
        if not self.notification_service:
            return
        try:
            if not await self.notification_service.send_payment_confirmation(order):
                logger.warning(f"Payment confirmation for order {order.order_number} was not delivered")
        except Exception as e:
            logger.error(f"Payment confirmation for order {order.order_number} failed: {e}")
