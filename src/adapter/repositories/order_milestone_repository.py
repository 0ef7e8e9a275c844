"""SQLAlchemy Order Milestone Repository Implementation"""

from typing import List, Optional
from sqlmodel import select, col
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_milestone_repository import OrderMilestoneRepository
from src.domain.order import OrderMilestone


class SqlAlchemyOrderMilestoneRepository(OrderMilestoneRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_many(self, milestones: List[OrderMilestone]) -> List[OrderMilestone]:
        self.session.add_all(milestones)
        await self.session.flush()
        for milestone in milestones:
            await self.session.refresh(milestone)
        return milestones

    async def get_by_order_id(self, order_id: str) -> List[OrderMilestone]:
        stmt = (
            select(OrderMilestone)
            .where(OrderMilestone.order_id == order_id)
            .order_by(col(OrderMilestone.position))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, order_id: str, milestone_id: str) -> Optional[OrderMilestone]:
        stmt = (
            select(OrderMilestone)
            .where(OrderMilestone.id == milestone_id)
            .where(OrderMilestone.order_id == order_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_many(self, milestones: List[OrderMilestone]) -> List[OrderMilestone]:
        self.session.add_all(milestones)
        await self.session.flush()
        return milestones
