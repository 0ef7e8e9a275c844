"""SQLAlchemy Order Item Repository Implementation"""

from typing import List
from sqlmodel import select, col
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_item_repository import OrderItemRepository
from src.domain.order import OrderItem


class SqlAlchemyOrderItemRepository(OrderItemRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_many(self, items: List[OrderItem]) -> List[OrderItem]:
        self.session.add_all(items)
        await self.session.flush()
        for item in items:
            await self.session.refresh(item)
        return items

    async def get_by_order_id(self, order_id: str) -> List[OrderItem]:
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id == order_id)
            .order_by(col(OrderItem.created_at))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_order_ids(self, order_ids: List[str]) -> List[OrderItem]:
        if not order_ids:
            return []
        stmt = select(OrderItem).where(col(OrderItem.order_id).in_(order_ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
