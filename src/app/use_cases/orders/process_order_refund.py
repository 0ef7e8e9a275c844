"""ProcessOrderRefund Use Case

Refunds all or part of a paid order and cancels it.
"""

from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.event_publisher import EventPublisher, DomainEvent, publish_safely
from src.app.services.payment_gateway import PaymentGateway, RefundRequest
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_item_repository import OrderItemRepository
from src.app.repositories.order_milestone_repository import OrderMilestoneRepository
from src.domain.order import OrderStatus
from src.domain.payment import PaymentStatus
from src.domain.pricing import to_money
from src.domain.state import log_transition
from .dtos import ProcessOrderRefundCommandDTO, OrderRefundResponseDTO, OrderResponseDTO

DEFAULT_REFUND_REASON = "Customer requested refund"


class ProcessOrderRefund:
    """
    Use Case: Refund an order

    Business Rules:
    1. Only orders with payment_status = paid can be refunded (ORDER_NOT_PAID)
    2. amount < total -> partially_refunded, otherwise refunded
    3. The order is cancelled whatever its fulfilment status
    4. Provider failure leaves the order untouched (REFUND_FAILED)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        item_repo: OrderItemRepository,
        milestone_repo: OrderMilestoneRepository,
        payment_gateway: PaymentGateway,
        event_publisher: EventPublisher,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.item_repo = item_repo
        self.milestone_repo = milestone_repo
        self.payment_gateway = payment_gateway
        self.event_publisher = event_publisher

    async def execute(self, command: ProcessOrderRefundCommandDTO) -> Result[OrderRefundResponseDTO]:
        """
        Execute order refund

        Args:
            command: ProcessOrderRefundCommandDTO with order_id, optional amount and reason

        Returns:
            Result[OrderRefundResponseDTO]: Refunded order with refund id or error
        """
        try:
            order = await self.order_repo.get_by_id(command.order_id, for_update=True)
            if not order:
                return Return.err(
                    Error(
                        code="ORDER_NOT_FOUND",
                        message="Order not found",
                        reason=f"No order with id {command.order_id}",
                    )
                )

            if order.payment_status != PaymentStatus.PAID:
                return Return.err(
                    Error(
                        code="ORDER_NOT_PAID",
                        message="Order payment not completed",
                        reason=f"Payment status is {order.payment_status.value}",
                    )
                )

            amount = to_money(command.amount) if command.amount is not None else None
            if amount is not None and amount > order.total:
                return Return.err(
                    Error(
                        code="INVALID_REFUND_AMOUNT",
                        message=f"Refund amount {amount} exceeds order total {order.total}",
                        reason="Refunds are limited to the amount charged",
                    )
                )

            refund = await self.payment_gateway.process_refund(
                RefundRequest(
                    payment_id=order.payment_id or order.id,
                    amount=amount,
                    reason=command.reason or DEFAULT_REFUND_REASON,
                )
            )

            if not refund.success:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="REFUND_FAILED",
                        message=refund.error or "Refund failed",
                        reason=f"Provider rejected refund for order {order.order_number}",
                    )
                )

            partial = amount is not None and amount < order.total
            previous_payment_status = order.payment_status
            previous_status = order.status

            order.payment_status = (
                PaymentStatus.PARTIALLY_REFUNDED if partial else PaymentStatus.REFUNDED
            )
            order.status = OrderStatus.CANCELLED
            refunded_order = await self.order_repo.update(order)
            await self.uow.commit()

            log_transition(
                "order_payment", order.id, previous_payment_status, refunded_order.payment_status,
                command.reason,
            )
            if previous_status != OrderStatus.CANCELLED:
                log_transition("order", order.id, previous_status, OrderStatus.CANCELLED, "refunded")

            refunded_amount = amount if amount is not None else order.total
            await publish_safely(
                self.event_publisher,
                DomainEvent(
                    name="order_refunded",
                    aggregate_type="order",
                    aggregate_id=refunded_order.id,
                    payload={
                        "order_number": refunded_order.order_number,
                        "refund_id": refund.refund_id,
                        "amount": str(refunded_amount),
                        "partial": partial,
                    },
                ),
            )

            items = await self.item_repo.get_by_order_id(refunded_order.id)
            milestones = await self.milestone_repo.get_by_order_id(refunded_order.id)
            return Return.ok(
                OrderRefundResponseDTO(
                    order=OrderResponseDTO.from_entities(refunded_order, items, milestones),
                    refund_id=refund.refund_id,
                    refunded_amount=Decimal(refunded_amount),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="PROCESS_ORDER_REFUND_FAILED",
                    message="Failed to process order refund",
                    reason=str(e),
                )
            )
