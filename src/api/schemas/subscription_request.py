"""Request schemas for Subscriptions API"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from src.domain.subscription import BillingCycle


class CreateSubscriptionRequestSchema(BaseModel):
    """
    Request schema for subscribing to a maintenance plan

    Used for POST /subscriptions endpoint.
    """

    customer_id: str = Field(..., min_length=1)
    plan_id: str = Field(..., min_length=1)
    payment_method_id: str = Field(..., min_length=1)
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    start_date: Optional[datetime] = None
    trial_days: Optional[int] = Field(default=None, ge=0)
    coupon_code: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "cus_123",
                "plan_id": "premium-maintenance",
                "payment_method_id": "pm_card_visa",
                "billing_cycle": "yearly",
                "trial_days": 14,
            }
        }


class UpdateSubscriptionRequestSchema(BaseModel):
    plan_id: Optional[str] = None
    billing_cycle: Optional[BillingCycle] = None
    auto_renew: Optional[bool] = None


class CancelSubscriptionRequestSchema(BaseModel):
    reason: Optional[str] = None
    cancel_at_period_end: bool = True


class PauseSubscriptionRequestSchema(BaseModel):
    resume_date: Optional[datetime] = None
