"""Order Domain Entities

One-time purchase records with line items and delivery milestones.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import JSON, Integer, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid, utcnow
from src.domain.payment import PaymentStatus


class OrderStatus(str, Enum):
    """Order fulfilment status"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MilestoneStatus(str, Enum):
    """Milestone progress status"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Order(BaseModel, table=True):
    """
    Order - One-time purchase with payment and fulfilment tracking

    Domain Rules:
    - order_number is unique and strictly increasing (ORD-NNNNNN)
    - total = subtotal - discount_amount + tax_amount, never set on its own
    - status and payment_status are independent axes
    - payment_status becomes paid only after a successful provider charge
    - status becomes confirmed as a side effect of a successful charge
    """

    __tablename__ = "orders"
    __table_args__ = (
        Index('ix_orders_customer_id', 'customer_id'),
        Index('ix_orders_status', 'status'),
        Index('ix_orders_created_at', 'created_at'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        max_length=36,
        description="Opaque order identifier"
    )

    order_number: str = Field(
        sa_column=Column(String(20), nullable=False, unique=True),
        description="Human readable order number (e.g., ORD-001000)"
    )

    customer_id: str = Field(
        description="Customer identifier"
    )

    customer_name: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
        description="Customer full name taken from the billing address"
    )

    customer_email: str = Field(
        default="customer@example.com",
        sa_column=Column(String(255), nullable=False),
        description="Customer email taken from the billing address"
    )

    customer_phone: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Customer phone taken from the billing address"
    )

    subtotal: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Sum of line totals"
    )

    discount_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Discount applied to the subtotal"
    )

    discount_code: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Discount code supplied by the customer"
    )

    tax_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="VAT on the discounted subtotal"
    )

    total: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="subtotal - discount_amount + tax_amount"
    )

    currency: str = Field(
        default="EUR",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217)"
    )

    status: OrderStatus = Field(
        default=OrderStatus.PENDING,
        description="Fulfilment status"
    )

    payment_status: PaymentStatus = Field(
        default=PaymentStatus.PENDING,
        description="Payment status"
    )

    payment_method_id: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Payment method used to pay the order"
    )

    payment_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Provider transaction id of the successful charge"
    )

    billing_address: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
        description="Billing address"
    )

    shipping_address: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Shipping address"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Customer or staff notes"
    )

    assigned_to: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Team members working on the order"
    )

    estimated_delivery: Optional[datetime] = Field(
        default=None,
        description="Derived from the longest item lead time"
    )

    delivered_at: Optional[datetime] = Field(
        default=None,
        description="Set when the order is completed"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Order creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last update timestamp"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "5f0c2a3e-7d1b-4c55-9a0e-2b9f3c1d4e5f",
                "order_number": "ORD-001000",
                "customer_id": "cus_123",
                "subtotal": "250.00",
                "discount_amount": "50.00",
                "discount_code": "SAVE20",
                "tax_amount": "42.00",
                "total": "242.00",
                "currency": "EUR",
                "status": "pending",
                "payment_status": "pending",
            }
        }


class OrderItem(BaseModel, table=True):
    """
    Order Item - Line item within an order

    Domain Rules:
    - total_price = unit_price * quantity
    - delivery_time is free text; its leading integer is the lead time in days
    """

    __tablename__ = "order_items"
    __table_args__ = (
        Index('ix_order_items_order_id', 'order_id'),
        Index('ix_order_items_product_id', 'product_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        max_length=36,
    )

    order_id: str = Field(
        foreign_key="orders.id",
        description="Owning order"
    )

    product_id: str = Field(
        description="Product reference"
    )

    product_name: str = Field(
        default="",
        sa_column=Column(String(255), nullable=False, default=""),
    )

    delivery_time: str = Field(
        default="",
        sa_column=Column(String(100), nullable=False, default=""),
        description="Product lead time (e.g., '7-10 días')"
    )

    quantity: int = Field(
        sa_column=Column(Integer, nullable=False),
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
    )

    total_price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="unit_price * quantity"
    )

    customizations: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
    )

    status: OrderStatus = Field(
        default=OrderStatus.PENDING,
    )

    created_at: datetime = Field(
        default_factory=utcnow,
    )


class OrderMilestone(BaseModel, table=True):
    """
    Order Milestone - Dated deliverable checkpoint of an order

    Milestones are kept in the order given by position.
    """

    __tablename__ = "order_milestones"
    __table_args__ = (
        Index('ix_order_milestones_order_id', 'order_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        max_length=36,
    )

    order_id: str = Field(
        foreign_key="orders.id",
    )

    position: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
    )

    title: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    description: str = Field(
        default="",
        sa_column=Column(Text, nullable=False, default=""),
    )

    due_date: datetime

    status: MilestoneStatus = Field(
        default=MilestoneStatus.PENDING,
    )

    completed_at: Optional[datetime] = None

    deliverables: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    def complete(self, when: datetime) -> None:
        self.status = MilestoneStatus.COMPLETED
        self.completed_at = when
