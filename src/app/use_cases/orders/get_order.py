"""GetOrder Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_item_repository import OrderItemRepository
from src.app.repositories.order_milestone_repository import OrderMilestoneRepository
from .dtos import OrderResponseDTO


class GetOrder:
    """Use Case: Read one order with its items and milestones"""

    def __init__(
        self,
        order_repo: OrderRepository,
        item_repo: OrderItemRepository,
        milestone_repo: OrderMilestoneRepository,
    ):
        self.order_repo = order_repo
        self.item_repo = item_repo
        self.milestone_repo = milestone_repo

    async def execute(self, order_id: str) -> Result[OrderResponseDTO]:
        try:
            order = await self.order_repo.get_by_id(order_id)
            if not order:
                return Return.err(
                    Error(
                        code="ORDER_NOT_FOUND",
                        message="Order not found",
                        reason=f"No order with id {order_id}",
                    )
                )

            items = await self.item_repo.get_by_order_id(order.id)
            milestones = await self.milestone_repo.get_by_order_id(order.id)
            return Return.ok(OrderResponseDTO.from_entities(order, items, milestones))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_ORDER_FAILED",
                    message="Failed to retrieve order",
                    reason=str(e),
                )
            )
