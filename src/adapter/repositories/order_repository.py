"""SQLAlchemy Order Repository Implementation

Implements order persistence using SQLAlchemy async session, with
pessimistic locking for mutating use cases.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import Integer, cast, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, func, col
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_repository import (
    OrderRepository,
    OrderFilter,
    OrderNumberConflictError,
)
from src.domain.base import utcnow
from src.domain.order import Order, OrderItem

ORDER_NUMBER_PREFIX = "ORD-"
ORDER_NUMBER_START = 1000


class SqlAlchemyOrderRepository(OrderRepository):
    """
    SQLAlchemy implementation of OrderRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Filtered, paginated listing with free-text search over items
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, order: Order) -> Order:
        self.session.add(order)
        try:
            await self.session.flush()
        except IntegrityError as e:
            if "order_number" in str(e.orig):
                raise OrderNumberConflictError(order.order_number) from e
            raise
        await self.session.refresh(order)
        return order

    async def get_by_id(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        """
        Retrieve order by ID with optional row-level locking

        Args:
            order_id: Order ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Order if found, None otherwise
        """
        stmt = select(Order).where(Order.id == order_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, order: Order) -> Order:
        order.updated_at = utcnow()
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return order

    async def find(
        self, filters: OrderFilter, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Order], int]:
        conditions = self._build_conditions(filters)

        count_stmt = select(func.count()).select_from(Order).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(Order)
            .where(*conditions)
            .order_by(col(Order.created_at).desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def list_created_between(
        self, date_from: Optional[datetime] = None, date_to: Optional[datetime] = None
    ) -> List[Order]:
        stmt = select(Order).where(
            *self._build_conditions(OrderFilter(date_from=date_from, date_to=date_to))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def generate_order_number(self) -> str:
        """
        Generate the next order number

        Format: ORD-NNNNNN (e.g., ORD-001000). The maximum is taken over the
        numeric suffix, so ORD-1000000 follows ORD-999999.

        Returns:
            Unique order number string
        """
        suffix = cast(func.substr(Order.order_number, len(ORDER_NUMBER_PREFIX) + 1), Integer)
        stmt = select(func.max(suffix)).where(
            col(Order.order_number).like(f"{ORDER_NUMBER_PREFIX}%")
        )
        result = await self.session.execute(stmt)
        max_sequence = result.scalar_one_or_none()

        if max_sequence is not None:
            sequence = int(max_sequence) + 1
        else:
            sequence = ORDER_NUMBER_START

        return f"{ORDER_NUMBER_PREFIX}{sequence:06d}"

    def _build_conditions(self, filters: OrderFilter) -> list:
        conditions = []

        if filters.status:
            conditions.append(Order.status == filters.status)
        if filters.payment_status:
            conditions.append(Order.payment_status == filters.payment_status)
        if filters.customer_id:
            conditions.append(Order.customer_id == filters.customer_id)
        if filters.date_from:
            conditions.append(col(Order.created_at) >= filters.date_from)
        if filters.date_to:
            conditions.append(col(Order.created_at) <= filters.date_to)
        if filters.min_amount is not None:
            conditions.append(col(Order.total) >= filters.min_amount)
        if filters.max_amount is not None:
            conditions.append(col(Order.total) <= filters.max_amount)
        if filters.search:
            pattern = f"%{filters.search.lower()}%"
            matching_items = select(OrderItem.order_id).where(
                func.lower(OrderItem.product_name).like(pattern)
            )
            conditions.append(
                or_(
                    func.lower(Order.order_number).like(pattern),
                    func.lower(Order.customer_name).like(pattern),
                    func.lower(Order.customer_email).like(pattern),
                    col(Order.id).in_(matching_items),
                )
            )

        return conditions
