from .order_repository import OrderRepository, OrderFilter
from .order_item_repository import OrderItemRepository
from .order_milestone_repository import OrderMilestoneRepository
from .subscription_repository import SubscriptionRepository, SubscriptionFilter
from .subscription_charge_repository import SubscriptionChargeRepository
from .maintenance_plan_repository import MaintenancePlanRepository

__all__ = [
    "OrderRepository",
    "OrderFilter",
    "OrderItemRepository",
    "OrderMilestoneRepository",
    "SubscriptionRepository",
    "SubscriptionFilter",
    "SubscriptionChargeRepository",
    "MaintenancePlanRepository",
]
