"""Subscription domain use cases"""
from .create_subscription import CreateSubscription
from .update_subscription import UpdateSubscription
from .cancel_subscription import CancelSubscription
from .pause_subscription import PauseSubscription
from .resume_subscription import ResumeSubscription
from .process_subscription_billing import ProcessSubscriptionBilling
from .get_subscription import GetSubscription
from .list_subscriptions import ListSubscriptions
from .get_subscription_stats import GetSubscriptionStats
from .plans import ListPlans, GetPlan
from .dtos import (
    CreateSubscriptionCommandDTO,
    UpdateSubscriptionCommandDTO,
    CancelSubscriptionCommandDTO,
    PauseSubscriptionCommandDTO,
    ListSubscriptionsQueryDTO,
    SubscriptionStatsQueryDTO,
    SubscriptionResponseDTO,
    ListSubscriptionsResponseDTO,
    SubscriptionChargeDTO,
    BillingResultDTO,
    BillingRunResultDTO,
    PlanStatsDTO,
    SubscriptionStatsResponseDTO,
    MaintenancePlanDTO,
)

__all__ = [
    "CreateSubscription",
    "UpdateSubscription",
    "CancelSubscription",
    "PauseSubscription",
    "ResumeSubscription",
    "ProcessSubscriptionBilling",
    "GetSubscription",
    "ListSubscriptions",
    "GetSubscriptionStats",
    "ListPlans",
    "GetPlan",
    "CreateSubscriptionCommandDTO",
    "UpdateSubscriptionCommandDTO",
    "CancelSubscriptionCommandDTO",
    "PauseSubscriptionCommandDTO",
    "ListSubscriptionsQueryDTO",
    "SubscriptionStatsQueryDTO",
    "SubscriptionResponseDTO",
    "ListSubscriptionsResponseDTO",
    "SubscriptionChargeDTO",
    "BillingResultDTO",
    "BillingRunResultDTO",
    "PlanStatsDTO",
    "SubscriptionStatsResponseDTO",
    "MaintenancePlanDTO",
]
