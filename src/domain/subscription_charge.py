"""Subscription Charge Domain Entity

Append-only record of every billing attempt against a subscription.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid, utcnow
from src.domain.payment import PaymentStatus


class SubscriptionCharge(BaseModel, table=True):
    """
    Subscription Charge - One billing attempt for one billing period

    Domain Rules:
    - idempotency_key is unique: billing:{subscription_id}:{YYYY-MM-DD}
    - A period is charged at most once; repeating the call returns this record
    - Immutable once written
    """

    __tablename__ = "subscription_charges"
    __table_args__ = (
        Index('ix_subscription_charges_subscription_id', 'subscription_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        max_length=36,
    )

    subscription_id: str = Field(
        foreign_key="subscriptions.id",
        description="Charged subscription"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
    )

    currency: str = Field(
        default="EUR",
        sa_column=Column(String(3), nullable=False),
    )

    billing_period_start: datetime = Field(
        description="next_billing_date value this charge settles"
    )

    status: PaymentStatus = Field(
        description="Outcome of the charge (paid or failed)"
    )

    payment_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    error: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    idempotency_key: str = Field(
        unique=True,
        index=True,
        description="Unique key per subscription and billing period"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
    )


def billing_idempotency_key(subscription_id: str, billing_date: datetime) -> str:
    return f"billing:{subscription_id}:{billing_date.strftime('%Y-%m-%d')}"
