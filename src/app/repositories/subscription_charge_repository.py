"""Subscription Charge Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.subscription_charge import SubscriptionCharge


class SubscriptionChargeRepository(ABC):
    """
    Repository interface for SubscriptionCharge persistence

    Charges are append-only; idempotency_key is unique.
    """

    @abstractmethod
    async def create(self, charge: SubscriptionCharge) -> SubscriptionCharge:
        """
        Record a billing attempt

        Args:
            charge: SubscriptionCharge entity to persist

        Returns:
            Created SubscriptionCharge
        """
        pass

    @abstractmethod
    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[SubscriptionCharge]:
        """
        Retrieve charge by idempotency key

        Args:
            idempotency_key: billing:{subscription_id}:{YYYY-MM-DD}

        Returns:
            SubscriptionCharge if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_subscription_id(self, subscription_id: str) -> List[SubscriptionCharge]:
        """Retrieve charge history of a subscription, newest first"""
        pass
