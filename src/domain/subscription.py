"""Subscription Domain Entity

Recurring maintenance plan billing records.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid, utcnow


class SubscriptionStatus(str, Enum):
    """Subscription status types"""
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class BillingCycle(str, Enum):
    """Billing recurrence period"""
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Subscription(BaseModel, table=True):
    """
    Subscription - Customer subscription to a maintenance plan

    Domain Rules:
    - Status transitions: active <-> paused, active/paused -> cancelled,
      active -> expired (failed billing). cancelled and expired are terminal.
    - A trial is an active subscription with trial_end_date set
    - next_billing_date is always derived from the billing cycle
    - end_date on a cancelled subscription is informational; nothing enforces it
    """

    __tablename__ = "subscriptions"
    __table_args__ = (
        Index('ix_subscriptions_customer_id', 'customer_id'),
        Index('ix_subscriptions_status', 'status'),
        Index('ix_subscriptions_next_billing_date', 'next_billing_date'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        max_length=36,
        description="Opaque subscription identifier"
    )

    customer_id: str = Field(
        description="Customer identifier"
    )

    plan_id: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Maintenance plan reference"
    )

    plan_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Name of the subscribed plan"
    )

    status: SubscriptionStatus = Field(
        default=SubscriptionStatus.ACTIVE,
        description="Subscription status (active, paused, cancelled, expired)"
    )

    billing_cycle: BillingCycle = Field(
        description="Billing cycle (monthly, yearly)"
    )

    price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Price charged per billing cycle"
    )

    currency: str = Field(
        default="EUR",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217)"
    )

    start_date: datetime = Field(
        description="Subscription start"
    )

    trial_end_date: Optional[datetime] = Field(
        default=None,
        description="End of the free trial, if any"
    )

    next_billing_date: datetime = Field(
        description="Next scheduled charge"
    )

    auto_renew: bool = Field(
        default=True,
        description="Whether the subscription renews automatically"
    )

    payment_method_id: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Payment method charged on each cycle"
    )

    provider_subscription_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Recurring payment id at the payment provider"
    )

    paused_at: Optional[datetime] = None

    cancelled_at: Optional[datetime] = None

    cancellation_reason: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    end_date: Optional[datetime] = Field(
        default=None,
        description="Date the subscription stops being usable"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Subscription creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last update timestamp"
    )

    @property
    def monthly_amount(self) -> Decimal:
        """Price normalised to one month"""
        if self.billing_cycle == BillingCycle.YEARLY:
            return self.price / 12
        return self.price

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "0d7b6a1c-3f0e-4b8e-8f3a-6c2d9e1f0a4b",
                "customer_id": "cus_123",
                "plan_id": "standard-maintenance",
                "plan_name": "Mantenimiento Estándar",
                "status": "active",
                "billing_cycle": "monthly",
                "price": "99.00",
                "currency": "EUR",
                "start_date": "2024-01-15T00:00:00Z",
                "next_billing_date": "2024-02-15T00:00:00Z",
                "auto_renew": True,
            }
        }
