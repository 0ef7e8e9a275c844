"""Payment status vocabulary

The service speaks a single PaymentStatus enum. Provider specific status
strings are translated here and nowhere else.
"""

from enum import Enum
from typing import Dict, Optional


class PaymentStatus(str, Enum):
    """Payment status of an order or billing attempt"""
    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"


STRIPE_STATUS_MAP: Dict[str, PaymentStatus] = {
    "succeeded": PaymentStatus.PAID,
    "processing": PaymentStatus.PROCESSING,
    "requires_payment_method": PaymentStatus.PENDING,
    "requires_confirmation": PaymentStatus.PENDING,
    "requires_action": PaymentStatus.PENDING,
    "requires_capture": PaymentStatus.PROCESSING,
    "canceled": PaymentStatus.FAILED,
}

PAYPAL_STATUS_MAP: Dict[str, PaymentStatus] = {
    "COMPLETED": PaymentStatus.PAID,
    "APPROVED": PaymentStatus.PROCESSING,
    "CREATED": PaymentStatus.PENDING,
    "SAVED": PaymentStatus.PENDING,
    "PAYER_ACTION_REQUIRED": PaymentStatus.PENDING,
    "VOIDED": PaymentStatus.FAILED,
}

PROVIDER_STATUS_MAPS: Dict[str, Dict[str, PaymentStatus]] = {
    "stripe": STRIPE_STATUS_MAP,
    "paypal": PAYPAL_STATUS_MAP,
}


def map_provider_status(provider: Optional[str], raw_status: Optional[str]) -> PaymentStatus:
    """
    Translate a provider status string into PaymentStatus

    Unknown providers may already speak our vocabulary; anything that cannot
    be recognised is treated as pending.

    Args:
        provider: Provider name (e.g., "stripe", "paypal", "bank_transfer")
        raw_status: Status string as reported by the provider

    Returns:
        PaymentStatus
    """
    if not raw_status:
        return PaymentStatus.PENDING

    table = PROVIDER_STATUS_MAPS.get((provider or "").lower())
    if table is not None and raw_status in table:
        return table[raw_status]

    try:
        return PaymentStatus(raw_status.lower())
    except ValueError:
        return PaymentStatus.PENDING
