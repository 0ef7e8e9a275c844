"""AssignOrder Use Case"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.order_repository import OrderRepository
from .dtos import AssignOrderCommandDTO, OrderResponseDTO


class AssignOrder:
    """
    Use Case: Add a team member to an order

    Assigning someone already on the order changes nothing.
    """

    def __init__(self, uow: UnitOfWork, order_repo: OrderRepository):
        self.uow = uow
        self.order_repo = order_repo

    async def execute(self, command: AssignOrderCommandDTO) -> Result[OrderResponseDTO]:
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

            assignees = list(order.assigned_to or [])
            if command.assignee_id not in assignees:
                # Reassign the list so the JSON column is flagged dirty
                order.assigned_to = assignees + [command.assignee_id]
                order = await self.order_repo.update(order)
                await self.uow.commit()

            return Return.ok(OrderResponseDTO.from_entities(order))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="ASSIGN_ORDER_FAILED",
                    message="Failed to assign order",
                    reason=str(e),
                )
            )
