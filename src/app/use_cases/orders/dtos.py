"""Data Transfer Objects for Order Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from src.domain.order import (
    Order,
    OrderItem,
    OrderMilestone,
    OrderStatus,
    MilestoneStatus,
)
from src.domain.payment import PaymentStatus


class OrderItemInputDTO(BaseModel):
    """Line item as submitted at checkout"""

    product_id: str = Field(..., description="Product reference")
    product_name: str = Field(default="", description="Product name at time of purchase")
    delivery_time: Optional[str] = Field(
        default=None,
        description="Product lead time (e.g., '7-10 días'); 7 days when it has no digits"
    )
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    customizations: Optional[Dict[str, Any]] = None


class CreateOrderCommandDTO(BaseModel):
    """
    Command DTO for creating an order

    Used as input to CreateOrder use case.
    """

    customer_id: str = Field(..., description="Customer identifier")
    items: List[OrderItemInputDTO] = Field(..., min_length=1)
    billing_address: Dict[str, Any] = Field(
        ...,
        description="Billing address (first_name, last_name, email, phone, address1, city, ...)"
    )
    shipping_address: Optional[Dict[str, Any]] = None
    payment_method_id: str = Field(..., description="Payment method to charge")
    discount_code: Optional[str] = Field(
        default=None,
        description="Discount code; unknown codes give no discount"
    )
    notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "cus_123",
                "items": [
                    {"product_id": "web-basic", "product_name": "Web Básica",
                     "delivery_time": "7-10 días", "quantity": 2, "unit_price": "100.00"},
                    {"product_id": "seo-audit", "product_name": "Auditoría SEO",
                     "delivery_time": "3 días", "quantity": 1, "unit_price": "50.00"},
                ],
                "billing_address": {"first_name": "Ana", "last_name": "García",
                                    "email": "ana@example.com", "city": "Madrid", "country": "ES"},
                "payment_method_id": "pm_card_visa",
                "discount_code": "SAVE20",
            }
        }


class UpdateOrderStatusCommandDTO(BaseModel):
    order_id: str
    status: OrderStatus
    notes: Optional[str] = None
    notify_customer: bool = False


class ProcessOrderPaymentCommandDTO(BaseModel):
    order_id: str
    payment_method_id: Optional[str] = Field(
        default=None,
        description="Payment method to charge; defaults to the one given at checkout"
    )


class ProcessOrderRefundCommandDTO(BaseModel):
    order_id: str
    amount: Optional[Decimal] = Field(
        default=None,
        gt=0,
        description="Amount to refund; omitted refunds the full total"
    )
    reason: Optional[str] = None


class AssignOrderCommandDTO(BaseModel):
    order_id: str
    assignee_id: str


class UpdateOrderMilestoneCommandDTO(BaseModel):
    order_id: str
    milestone_id: str
    status: MilestoneStatus


class ListOrdersQueryDTO(BaseModel):
    """
    Query DTO for listing orders

    Filters combine with AND; search matches order number, customer name,
    customer email and product names (case-insensitive).
    """

    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    customer_id: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None
    search: Optional[str] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)


class OrderStatsQueryDTO(BaseModel):
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class OrderItemDTO(BaseModel):
    id: str
    product_id: str
    product_name: str
    delivery_time: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    customizations: Optional[Dict[str, Any]] = None
    status: str

    @classmethod
    def from_entity(cls, item: OrderItem) -> "OrderItemDTO":
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product_name,
            delivery_time=item.delivery_time,
            quantity=item.quantity,
            unit_price=item.unit_price,
            total_price=item.total_price,
            customizations=item.customizations,
            status=item.status.value,
        )


class OrderMilestoneDTO(BaseModel):
    id: str
    title: str
    description: str
    due_date: datetime
    status: str
    completed_at: Optional[datetime] = None
    deliverables: List[str] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, milestone: OrderMilestone) -> "OrderMilestoneDTO":
        return cls(
            id=milestone.id,
            title=milestone.title,
            description=milestone.description,
            due_date=milestone.due_date,
            status=milestone.status.value,
            completed_at=milestone.completed_at,
            deliverables=list(milestone.deliverables or []),
        )


class OrderResponseDTO(BaseModel):
    """
    Response DTO for a single order

    Carries the order with its line items and milestones.
    """

    order_id: str
    order_number: str
    customer_id: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    items: List[OrderItemDTO] = Field(default_factory=list)
    subtotal: Decimal
    discount_amount: Decimal
    discount_code: Optional[str] = None
    tax_amount: Decimal
    total: Decimal
    currency: str
    status: str
    payment_status: str
    payment_method_id: str
    payment_id: Optional[str] = None
    billing_address: Dict[str, Any] = Field(default_factory=dict)
    shipping_address: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    assigned_to: List[str] = Field(default_factory=list)
    milestones: List[OrderMilestoneDTO] = Field(default_factory=list)
    estimated_delivery: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entities(
        cls,
        order: Order,
        items: Optional[List[OrderItem]] = None,
        milestones: Optional[List[OrderMilestone]] = None,
    ) -> "OrderResponseDTO":
        return cls(
            order_id=order.id,
            order_number=order.order_number,
            customer_id=order.customer_id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            customer_phone=order.customer_phone,
            items=[OrderItemDTO.from_entity(item) for item in items or []],
            subtotal=order.subtotal,
            discount_amount=order.discount_amount,
            discount_code=order.discount_code,
            tax_amount=order.tax_amount,
            total=order.total,
            currency=order.currency,
            status=order.status.value,
            payment_status=order.payment_status.value,
            payment_method_id=order.payment_method_id,
            payment_id=order.payment_id,
            billing_address=order.billing_address or {},
            shipping_address=order.shipping_address,
            notes=order.notes,
            assigned_to=list(order.assigned_to or []),
            milestones=[OrderMilestoneDTO.from_entity(m) for m in milestones or []],
            estimated_delivery=order.estimated_delivery,
            delivered_at=order.delivered_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class ListOrdersResponseDTO(BaseModel):
    orders: List[OrderResponseDTO]
    total: int
    page: int
    limit: int
    has_more: bool


class OrderRefundResponseDTO(BaseModel):
    order: OrderResponseDTO
    refund_id: Optional[str] = None
    refunded_amount: Decimal


class TopProductDTO(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    revenue: Decimal


class OrderStatsResponseDTO(BaseModel):
    """
    Response DTO for order statistics

    Read-side aggregation over the orders created in the requested range.
    """

    total_orders: int
    total_revenue: Decimal
    average_order_value: Decimal
    orders_by_status: Dict[str, int]
    orders_by_payment_status: Dict[str, int]
    recent_orders: List[OrderResponseDTO]
    top_products: List[TopProductDTO]


class OrderInvoiceResponseDTO(BaseModel):
    order_id: str
    order_number: str
    filename: str
    content_type: str = "application/pdf"
    pdf_base64: str = Field(..., description="Base64-encoded PDF document")
