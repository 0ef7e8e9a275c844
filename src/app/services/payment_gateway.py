"""Payment Provider Gateway Interface

Capability surface the order and subscription use cases need from a payment
processor. Implementations translate provider status strings with
src.domain.payment.map_provider_status before returning, so callers only ever
see PaymentStatus values.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from src.domain.payment import PaymentStatus


class CustomerInfo(BaseModel):
    name: str = ""
    email: str = ""
    address: Dict[str, Any] = Field(default_factory=dict)


class PaymentRequest(BaseModel):
    """One-off charge request"""

    reference: str = Field(..., description="Order id or billing reference being paid")
    amount: Decimal = Field(..., gt=0)
    currency: str = "EUR"
    payment_method_id: Optional[str] = None
    customer: CustomerInfo = Field(default_factory=CustomerInfo)
    metadata: Dict[str, str] = Field(default_factory=dict)


class PaymentResult(BaseModel):
    success: bool
    payment_id: Optional[str] = None
    status: PaymentStatus = PaymentStatus.PENDING
    error: Optional[str] = None
    redirect_url: Optional[str] = None


class RefundRequest(BaseModel):
    payment_id: str
    amount: Optional[Decimal] = Field(default=None, description="None refunds the full charge")
    reason: str = "Customer requested refund"


class RefundResult(BaseModel):
    success: bool
    refund_id: Optional[str] = None
    amount: Optional[Decimal] = None
    error: Optional[str] = None


class RecurringPaymentRequest(BaseModel):
    customer_id: str
    plan_id: str
    payment_method_id: str
    amount: Decimal
    currency: str = "EUR"
    billing_cycle: str = "monthly"
    start_date: Optional[datetime] = None


class PaymentStatusResult(BaseModel):
    status: PaymentStatus
    amount: Optional[Decimal] = None


class PaymentGateway(ABC):
    """
    Abstract payment provider gateway

    Implementations must not raise for provider-side failures; they report
    them as success=False results carrying the provider message.
    """

    @abstractmethod
    async def process_payment(self, request: PaymentRequest) -> PaymentResult:
        """
        Charge a payment method

        Args:
            request: Amount, currency, customer and metadata to charge

        Returns:
            PaymentResult with provider payment id on success
        """
        pass

    @abstractmethod
    async def confirm_payment(
        self, payment_id: str, confirmation: Optional[Dict[str, Any]] = None
    ) -> PaymentResult:
        """Confirm a previously created payment (client-side confirmation flows)"""
        pass

    @abstractmethod
    async def process_refund(self, request: RefundRequest) -> RefundResult:
        """Refund all or part of a payment"""
        pass

    @abstractmethod
    async def create_recurring_payment(self, request: RecurringPaymentRequest) -> PaymentResult:
        """
        Create a recurring payment at the provider

        Returns:
            PaymentResult whose payment_id is the provider subscription id
        """
        pass

    @abstractmethod
    async def cancel_recurring_payment(self, recurring_payment_id: str) -> PaymentResult:
        """Stop a recurring payment"""
        pass

    @abstractmethod
    async def get_payment_status(self, payment_id: str) -> PaymentStatusResult:
        """Look up the current status of a payment"""
        pass
