"""UpdateOrderStatus Use Case

Moves an order along its fulfilment lifecycle and applies the milestone and
delivery side effects of each status.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.event_publisher import EventPublisher, DomainEvent, publish_safely
from src.app.services.notification_service import NotificationService
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_item_repository import OrderItemRepository
from src.app.repositories.order_milestone_repository import OrderMilestoneRepository
from src.domain.base import utcnow
from src.domain.milestones import apply_status_to_milestones
from src.domain.order import OrderStatus
from src.domain.pricing import estimate_delivery
from src.domain.state import ORDER_TRANSITIONS, can_transition, describe_transition, log_transition
from .dtos import UpdateOrderStatusCommandDTO, OrderResponseDTO

logger = logging.getLogger(__name__)


class UpdateOrderStatus:
    """
    Use Case: Change order status

    Business Rules:
    1. Only transitions in ORDER_TRANSITIONS are accepted
    2. confirmed: estimated delivery recomputed, "Pedido Confirmado" completed
    3. in_progress: "Desarrollo Iniciado" completed
    4. completed: every remaining milestone completed, delivered_at set
    5. cancelled: no side effects
    6. Customer notification is optional and best-effort
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        item_repo: OrderItemRepository,
        milestone_repo: OrderMilestoneRepository,
        event_publisher: EventPublisher,
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.item_repo = item_repo
        self.milestone_repo = milestone_repo
        self.event_publisher = event_publisher
        self.notification_service = notification_service

    async def execute(self, command: UpdateOrderStatusCommandDTO) -> Result[OrderResponseDTO]:
        """
        Execute order status change

        Args:
            command: UpdateOrderStatusCommandDTO with order_id, status, notes and notify flag

        Returns:
            Result[OrderResponseDTO]: Updated order or error
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

            previous_status = order.status
            if not can_transition(previous_status, command.status, ORDER_TRANSITIONS):
                return Return.err(
                    Error(
                        code="INVALID_STATUS_TRANSITION",
                        message=f"Cannot change order status from {previous_status.value} to {command.status.value}",
                        reason=describe_transition(previous_status, command.status, ORDER_TRANSITIONS),
                    )
                )

            now = utcnow()
            items = await self.item_repo.get_by_order_id(order.id)
            milestones = await self.milestone_repo.get_by_order_id(order.id)

            order.status = command.status
            if command.status == OrderStatus.CONFIRMED:
                order.estimated_delivery = estimate_delivery(
                    (item.delivery_time for item in items), now
                )
            elif command.status == OrderStatus.COMPLETED:
                order.delivered_at = now

            changed = apply_status_to_milestones(milestones, command.status, now)
            if changed:
                await self.milestone_repo.update_many(changed)

            updated_order = await self.order_repo.update(order)
            await self.uow.commit()

            log_transition("order", order.id, previous_status, command.status, command.notes)

            if command.notify_customer and self.notification_service:
                await self._notify(updated_order, command)

            await publish_safely(
                self.event_publisher,
                DomainEvent(
                    name="order_status_updated",
                    aggregate_type="order",
                    aggregate_id=updated_order.id,
                    payload={
                        "order_number": updated_order.order_number,
                        "from_status": previous_status.value,
                        "status": command.status.value,
                        "value": str(updated_order.total),
                        "currency": updated_order.currency,
                    },
                ),
            )

            return Return.ok(OrderResponseDTO.from_entities(updated_order, items, milestones))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_ORDER_STATUS_FAILED",
                    message="Failed to update order status",
                    reason=str(e),
                )
            )

    async def _notify(self, order, command: UpdateOrderStatusCommandDTO) -> None:
        try:
            sent = await self.notification_service.send_order_status_update(
                order, command.status, command.notes
            )
            if not sent:
                logger.warning(f"Status notification for order {order.order_number} was not delivered")
        except Exception as e:
            logger.error(f"Status notification for order {order.order_number} failed: {e}")
