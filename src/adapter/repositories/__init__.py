from .order_repository import SqlAlchemyOrderRepository
from .order_item_repository import SqlAlchemyOrderItemRepository
from .order_milestone_repository import SqlAlchemyOrderMilestoneRepository
from .subscription_repository import SqlAlchemySubscriptionRepository
from .subscription_charge_repository import SqlAlchemySubscriptionChargeRepository
from .maintenance_plan_repository import StaticMaintenancePlanRepository

__all__ = [
    "SqlAlchemyOrderRepository",
    "SqlAlchemyOrderItemRepository",
    "SqlAlchemyOrderMilestoneRepository",
    "SqlAlchemySubscriptionRepository",
    "SqlAlchemySubscriptionChargeRepository",
    "StaticMaintenancePlanRepository",
]
