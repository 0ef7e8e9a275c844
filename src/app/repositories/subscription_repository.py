"""Subscription Repository Interface

Defines the contract for subscription persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from pydantic import BaseModel
from src.domain.subscription import Subscription, SubscriptionStatus, BillingCycle


class SubscriptionFilter(BaseModel):
    """Criteria for listing subscriptions; every field is optional"""

    status: Optional[SubscriptionStatus] = None
    customer_id: Optional[str] = None
    plan_id: Optional[str] = None
    billing_cycle: Optional[BillingCycle] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class SubscriptionRepository(ABC):
    """
    Repository interface for Subscription persistence

    get_by_id(for_update=True) locks the row so that a billing run and a
    cancellation of the same subscription cannot interleave.
    """

    @abstractmethod
    async def create(self, subscription: Subscription) -> Subscription:
        """
        Create a new subscription

        Args:
            subscription: Subscription entity to persist

        Returns:
            Created Subscription
        """
        pass

    @abstractmethod
    async def get_by_id(
        self, subscription_id: str, for_update: bool = False
    ) -> Optional[Subscription]:
        """
        Retrieve subscription by ID

        Args:
            subscription_id: Subscription ID
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)

        Returns:
            Subscription if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, subscription: Subscription) -> Subscription:
        """
        Update an existing subscription

        Args:
            subscription: Subscription entity with updated values

        Returns:
            Updated Subscription
        """
        pass

    @abstractmethod
    async def find(
        self, filters: SubscriptionFilter, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Subscription], int]:
        """
        List subscriptions matching filters, newest first

        Returns:
            Tuple of (page of subscriptions, total matching count)
        """
        pass

    @abstractmethod
    async def list_created_between(
        self, date_from: Optional[datetime] = None, date_to: Optional[datetime] = None
    ) -> List[Subscription]:
        """Retrieve every subscription created within an optional date range"""
        pass

    @abstractmethod
    async def get_due_for_billing(self, as_of: datetime) -> List[Subscription]:
        """
        Retrieve active, auto-renewing subscriptions whose next billing date has passed

        Used by the subscription billing worker.

        Args:
            as_of: Cut-off timestamp

        Returns:
            List of due subscriptions
        """
        pass
