from .base import BaseModel, generate_uuid, utcnow, to_utc_naive
from .payment import PaymentStatus, map_provider_status
from .order import Order, OrderItem, OrderMilestone, OrderStatus, MilestoneStatus
from .subscription import Subscription, SubscriptionStatus, BillingCycle
from .subscription_charge import SubscriptionCharge, billing_idempotency_key
from .maintenance_plan import MaintenancePlan, MAINTENANCE_PLANS, PLANS_BY_ID
from .milestones import build_milestones, apply_status_to_milestones

__all__ = [
    "BaseModel",
    "generate_uuid",
    "utcnow",
    "to_utc_naive",
    "PaymentStatus",
    "map_provider_status",
    "Order",
    "OrderItem",
    "OrderMilestone",
    "OrderStatus",
    "MilestoneStatus",
    "Subscription",
    "SubscriptionStatus",
    "BillingCycle",
    "SubscriptionCharge",
    "billing_idempotency_key",
    "MaintenancePlan",
    "MAINTENANCE_PLANS",
    "PLANS_BY_ID",
    "build_milestones",
    "apply_status_to_milestones",
]
