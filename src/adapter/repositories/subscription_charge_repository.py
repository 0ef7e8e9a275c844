"""SQLAlchemy Subscription Charge Repository Implementation"""

from typing import List, Optional
from sqlmodel import select, col
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.subscription_charge_repository import SubscriptionChargeRepository
from src.domain.subscription_charge import SubscriptionCharge


class SqlAlchemySubscriptionChargeRepository(SubscriptionChargeRepository):
    """
    SQLAlchemy implementation of SubscriptionChargeRepository

    The unique index on idempotency_key rejects a second charge for the same
    billing period even if two workers race past the lookup.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, charge: SubscriptionCharge) -> SubscriptionCharge:
        self.session.add(charge)
        await self.session.flush()
        await self.session.refresh(charge)
        return charge

    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[SubscriptionCharge]:
        stmt = select(SubscriptionCharge).where(
            SubscriptionCharge.idempotency_key == idempotency_key
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_subscription_id(self, subscription_id: str) -> List[SubscriptionCharge]:
        stmt = (
            select(SubscriptionCharge)
            .where(SubscriptionCharge.subscription_id == subscription_id)
            .order_by(col(SubscriptionCharge.created_at).desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
