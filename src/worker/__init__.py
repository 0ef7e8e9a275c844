"""Background workers for the order service"""
from .subscription_billing import SubscriptionBillingWorker

__all__ = ["SubscriptionBillingWorker"]
