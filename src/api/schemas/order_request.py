"""Request schemas for Orders API

Pydantic models for validating incoming HTTP requests.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.order import OrderStatus, MilestoneStatus


class OrderItemRequestSchema(BaseModel):
    product_id: str = Field(..., min_length=1)
    product_name: str = Field(default="")
    delivery_time: Optional[str] = None
    quantity: int = Field(..., gt=0, description="Units ordered (must be > 0)")
    unit_price: Decimal = Field(..., ge=0, description="Unit price (must be >= 0)")
    customizations: Optional[Dict[str, Any]] = None


class CreateOrderRequestSchema(BaseModel):
    """
    Request schema for creating an order

    Used for POST /orders endpoint.
    """

    customer_id: str = Field(..., min_length=1, description="Customer identifier")
    items: List[OrderItemRequestSchema] = Field(..., min_length=1)
    billing_address: Dict[str, Any] = Field(..., description="Billing address")
    shipping_address: Optional[Dict[str, Any]] = None
    payment_method_id: str = Field(..., min_length=1)
    discount_code: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("billing_address")
    @classmethod
    def validate_billing_address(cls, v):
        """Require at least an email or a name to address the customer"""
        if not any(v.get(key) for key in ("email", "first_name", "last_name")):
            raise ValueError("billing_address must include an email or a name")
        return v


class UpdateOrderStatusRequestSchema(BaseModel):
    status: OrderStatus
    notes: Optional[str] = None
    notify_customer: bool = False


class ProcessPaymentRequestSchema(BaseModel):
    payment_method_id: Optional[str] = Field(
        default=None,
        description="Overrides the payment method given at checkout"
    )


class RefundRequestSchema(BaseModel):
    amount: Optional[Decimal] = Field(
        default=None,
        gt=0,
        description="Amount to refund; omit to refund the full total"
    )
    reason: Optional[str] = None


class AssignOrderRequestSchema(BaseModel):
    assignee_id: str = Field(..., min_length=1)


class UpdateMilestoneRequestSchema(BaseModel):
    status: MilestoneStatus
