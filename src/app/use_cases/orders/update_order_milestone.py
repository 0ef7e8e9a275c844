"""UpdateOrderMilestone Use Case"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_milestone_repository import OrderMilestoneRepository
from src.domain.base import utcnow
from src.domain.order import MilestoneStatus
from .dtos import UpdateOrderMilestoneCommandDTO, OrderMilestoneDTO


class UpdateOrderMilestone:
    """
    Use Case: Set the status of one order milestone

    Business Rules:
    1. Order and milestone must exist (ORDER_NOT_FOUND / MILESTONE_NOT_FOUND)
    2. completed stamps completed_at; any other status clears it
    3. The owning order's updated_at is bumped
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        milestone_repo: OrderMilestoneRepository,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.milestone_repo = milestone_repo

    async def execute(self, command: UpdateOrderMilestoneCommandDTO) -> Result[OrderMilestoneDTO]:
        """
        Execute milestone update

        Args:
            command: UpdateOrderMilestoneCommandDTO with order_id, milestone_id and status

        Returns:
            Result[OrderMilestoneDTO]: Updated milestone or error
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

            milestone = await self.milestone_repo.get_by_id(order.id, command.milestone_id)
            if not milestone:
                return Return.err(
                    Error(
                        code="MILESTONE_NOT_FOUND",
                        message="Milestone not found",
                        reason=f"Order {order.order_number} has no milestone {command.milestone_id}",
                    )
                )

            if command.status == MilestoneStatus.COMPLETED:
                milestone.complete(utcnow())
            else:
                milestone.status = command.status
                milestone.completed_at = None

            await self.milestone_repo.update_many([milestone])
            await self.order_repo.update(order)
            await self.uow.commit()

            return Return.ok(OrderMilestoneDTO.from_entity(milestone))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_ORDER_MILESTONE_FAILED",
                    message="Failed to update milestone",
                    reason=str(e),
                )
            )
