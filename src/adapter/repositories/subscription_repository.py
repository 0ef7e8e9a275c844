"""SQLAlchemy Subscription Repository Implementation

Implements subscription persistence using SQLAlchemy async session.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlmodel import select, func, col
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.subscription_repository import (
    SubscriptionRepository,
    SubscriptionFilter,
)
from src.domain.base import utcnow
from src.domain.subscription import Subscription, SubscriptionStatus


class SqlAlchemySubscriptionRepository(SubscriptionRepository):
    """
    SQLAlchemy implementation of SubscriptionRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, subscription: Subscription) -> Subscription:
        """
        Create a new subscription

        Args:
            subscription: Subscription entity to persist

        Returns:
            Created Subscription
        """
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def get_by_id(
        self, subscription_id: str, for_update: bool = False
    ) -> Optional[Subscription]:
        """
        Retrieve subscription by ID

        Args:
            subscription_id: Subscription ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Subscription if found, None otherwise
        """
        statement = select(Subscription).where(Subscription.id == subscription_id)

        if for_update:
            statement = statement.with_for_update()

        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def update(self, subscription: Subscription) -> Subscription:
        """
        Update an existing subscription

        Args:
            subscription: Subscription entity with updated values

        Returns:
            Updated Subscription
        """
        subscription.updated_at = utcnow()
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def find(
        self, filters: SubscriptionFilter, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Subscription], int]:
        conditions = self._build_conditions(filters)

        count_statement = select(func.count()).select_from(Subscription).where(*conditions)
        total = (await self.session.execute(count_statement)).scalar_one()

        statement = (
            select(Subscription)
            .where(*conditions)
            .order_by(col(Subscription.created_at).desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all()), total

    async def list_created_between(
        self, date_from: Optional[datetime] = None, date_to: Optional[datetime] = None
    ) -> List[Subscription]:
        statement = select(Subscription).where(
            *self._build_conditions(SubscriptionFilter(date_from=date_from, date_to=date_to))
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_due_for_billing(self, as_of: datetime) -> List[Subscription]:
        """
        Retrieve subscriptions whose next charge is due

        Returns:
            Active, auto-renewing subscriptions with next_billing_date <= as_of
        """
        statement = (
            select(Subscription)
            .where(Subscription.status == SubscriptionStatus.ACTIVE)
            .where(col(Subscription.auto_renew).is_(True))
            .where(col(Subscription.next_billing_date) <= as_of)
            .order_by(col(Subscription.next_billing_date))
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    def _build_conditions(self, filters: SubscriptionFilter) -> list:
        conditions = []

        if filters.status:
            conditions.append(Subscription.status == filters.status)
        if filters.customer_id:
            conditions.append(Subscription.customer_id == filters.customer_id)
        if filters.plan_id:
            conditions.append(Subscription.plan_id == filters.plan_id)
        if filters.billing_cycle:
            conditions.append(Subscription.billing_cycle == filters.billing_cycle)
        if filters.date_from:
            conditions.append(col(Subscription.created_at) >= filters.date_from)
        if filters.date_to:
            conditions.append(col(Subscription.created_at) <= filters.date_to)

        return conditions
