"""Data Transfer Objects for Subscription Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from src.domain.maintenance_plan import MaintenancePlan
from src.domain.subscription import Subscription, SubscriptionStatus, BillingCycle
from src.domain.subscription_charge import SubscriptionCharge


class CreateSubscriptionCommandDTO(BaseModel):
    """
    Command DTO for subscribing a customer to a maintenance plan

    Used as input to CreateSubscription use case.
    """

    customer_id: str = Field(..., description="Customer identifier")
    plan_id: str = Field(..., description="Maintenance plan id (e.g., standard-maintenance)")
    payment_method_id: str = Field(..., description="Payment method charged each cycle")
    billing_cycle: BillingCycle = Field(default=BillingCycle.MONTHLY)
    start_date: Optional[datetime] = Field(
        default=None,
        description="Subscription start; defaults to now"
    )
    trial_days: Optional[int] = Field(
        default=None,
        ge=0,
        description="Free trial length in days; no recurring payment is created during a trial"
    )
    coupon_code: Optional[str] = Field(
        default=None,
        description="Coupon code; unknown coupons are ignored"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "cus_123",
                "plan_id": "standard-maintenance",
                "payment_method_id": "pm_card_visa",
                "billing_cycle": "monthly",
            }
        }


class UpdateSubscriptionCommandDTO(BaseModel):
    subscription_id: str
    plan_id: Optional[str] = None
    billing_cycle: Optional[BillingCycle] = None
    auto_renew: Optional[bool] = None


class CancelSubscriptionCommandDTO(BaseModel):
    subscription_id: str
    reason: Optional[str] = None
    cancel_at_period_end: bool = Field(
        default=True,
        description="Keep the subscription usable until the next billing date"
    )


class PauseSubscriptionCommandDTO(BaseModel):
    subscription_id: str
    resume_date: Optional[datetime] = Field(
        default=None,
        description="Overrides next_billing_date while paused"
    )


class ListSubscriptionsQueryDTO(BaseModel):
    status: Optional[SubscriptionStatus] = None
    customer_id: Optional[str] = None
    plan_id: Optional[str] = None
    billing_cycle: Optional[BillingCycle] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)


class SubscriptionStatsQueryDTO(BaseModel):
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class SubscriptionResponseDTO(BaseModel):
    """Response DTO for a single subscription"""

    subscription_id: str
    customer_id: str
    plan_id: str
    plan_name: str
    status: str
    billing_cycle: str
    price: Decimal
    currency: str
    start_date: datetime
    trial_end_date: Optional[datetime] = None
    next_billing_date: datetime
    auto_renew: bool
    payment_method_id: str
    provider_subscription_id: Optional[str] = None
    paused_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    end_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, subscription: Subscription) -> "SubscriptionResponseDTO":
        return cls(
            subscription_id=subscription.id,
            customer_id=subscription.customer_id,
            plan_id=subscription.plan_id,
            plan_name=subscription.plan_name,
            status=subscription.status.value,
            billing_cycle=subscription.billing_cycle.value,
            price=subscription.price,
            currency=subscription.currency,
            start_date=subscription.start_date,
            trial_end_date=subscription.trial_end_date,
            next_billing_date=subscription.next_billing_date,
            auto_renew=subscription.auto_renew,
            payment_method_id=subscription.payment_method_id,
            provider_subscription_id=subscription.provider_subscription_id,
            paused_at=subscription.paused_at,
            cancelled_at=subscription.cancelled_at,
            cancellation_reason=subscription.cancellation_reason,
            end_date=subscription.end_date,
            created_at=subscription.created_at,
            updated_at=subscription.updated_at,
        )


class ListSubscriptionsResponseDTO(BaseModel):
    subscriptions: List[SubscriptionResponseDTO]
    total: int
    page: int
    limit: int
    has_more: bool


class SubscriptionChargeDTO(BaseModel):
    charge_id: str
    subscription_id: str
    amount: Decimal
    currency: str
    billing_period_start: datetime
    status: str
    payment_id: Optional[str] = None
    error: Optional[str] = None
    idempotency_key: str
    created_at: datetime

    @classmethod
    def from_entity(cls, charge: SubscriptionCharge) -> "SubscriptionChargeDTO":
        return cls(
            charge_id=charge.id,
            subscription_id=charge.subscription_id,
            amount=charge.amount,
            currency=charge.currency,
            billing_period_start=charge.billing_period_start,
            status=charge.status.value,
            payment_id=charge.payment_id,
            error=charge.error,
            idempotency_key=charge.idempotency_key,
            created_at=charge.created_at,
        )


class BillingResultDTO(BaseModel):
    """
    Response DTO for one billing run of one subscription

    duplicate is True when the period had already been charged and the
    earlier outcome is returned unchanged. not_due is True when the
    subscription was not due yet and its latest charge is returned instead;
    that charge can cover an earlier period than next_billing_date.
    """

    subscription: SubscriptionResponseDTO
    charge: SubscriptionChargeDTO
    duplicate: bool = False
    not_due: bool = False


class BillingRunResultDTO(BaseModel):
    """Summary of one pass of the subscription billing worker"""

    total_due: int
    renewed: int
    failed: int
    skipped: int
    executed_at: datetime
    execution_time_ms: int


class PlanStatsDTO(BaseModel):
    plan_id: str
    plan_name: str
    count: int
    revenue: Decimal = Field(..., description="Monthly recurring revenue of active subscriptions")


class SubscriptionStatsResponseDTO(BaseModel):
    """
    Response DTO for subscription statistics

    Revenue figures are normalised to months (yearly price / 12).
    """

    total_subscriptions: int
    active_subscriptions: int
    monthly_recurring_revenue: Decimal
    annual_recurring_revenue: Decimal
    churn_rate: Decimal = Field(..., description="Cancelled in the last 30 days / total * 100")
    average_revenue_per_user: Decimal
    subscriptions_by_status: Dict[str, int]
    subscriptions_by_plan: List[PlanStatsDTO]
    recent_subscriptions: List[SubscriptionResponseDTO]


class MaintenancePlanDTO(BaseModel):
    id: str
    name: str
    description: str
    features: List[str]
    price: Decimal
    yearly_price: Decimal
    billing_cycle: str
    support_level: str
    response_time: str
    monthly_hours: int
    backup_frequency: str
    security_updates: bool
    performance_optimization: bool
    is_popular: bool

    @classmethod
    def from_plan(cls, plan: MaintenancePlan, yearly_price: Decimal) -> "MaintenancePlanDTO":
        return cls(
            id=plan.id,
            name=plan.name,
            description=plan.description,
            features=list(plan.features),
            price=plan.price,
            yearly_price=yearly_price,
            billing_cycle=plan.billing_cycle.value,
            support_level=plan.support_level,
            response_time=plan.response_time,
            monthly_hours=plan.monthly_hours,
            backup_frequency=plan.backup_frequency,
            security_updates=plan.security_updates,
            performance_optimization=plan.performance_optimization,
            is_popular=plan.is_popular,
        )
