"""Order, payment and subscription state machines

Every status change goes through :func:`can_transition` against one of the
tables below. Terminal states map to an empty set.
"""

import logging
from typing import Dict, FrozenSet, Optional
from src.domain.order import OrderStatus
from src.domain.payment import PaymentStatus
from src.domain.subscription import SubscriptionStatus

logger = logging.getLogger(__name__)

# pending -> confirmed -> in_progress -> completed; cancelled from any
# non-terminal state. completed and cancelled are terminal.
ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.IN_PROGRESS, OrderStatus.CANCELLED}),
    OrderStatus.IN_PROGRESS: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# failed is not terminal: a later charge may move it to processing again.
PAYMENT_TRANSITIONS: Dict[PaymentStatus, FrozenSet[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PROCESSING, PaymentStatus.FAILED}),
    PaymentStatus.PROCESSING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PROCESSING}),
    PaymentStatus.PAID: frozenset({PaymentStatus.REFUNDED, PaymentStatus.PARTIALLY_REFUNDED}),
    PaymentStatus.REFUNDED: frozenset(),
    PaymentStatus.PARTIALLY_REFUNDED: frozenset(),
}

SUBSCRIPTION_TRANSITIONS: Dict[SubscriptionStatus, FrozenSet[SubscriptionStatus]] = {
    SubscriptionStatus.ACTIVE: frozenset(
        {SubscriptionStatus.PAUSED, SubscriptionStatus.CANCELLED, SubscriptionStatus.EXPIRED}
    ),
    SubscriptionStatus.PAUSED: frozenset(
        {SubscriptionStatus.ACTIVE, SubscriptionStatus.CANCELLED}
    ),
    SubscriptionStatus.CANCELLED: frozenset(),
    SubscriptionStatus.EXPIRED: frozenset(),
}


def can_transition(current, target, table: Dict) -> bool:
    """Return True when *current* -> *target* is allowed by *table*"""
    allowed = table.get(current)
    if allowed is None:
        raise ValueError(f"Unknown status {current!r}")
    return target in allowed


def is_terminal(status, table: Dict) -> bool:
    return not table.get(status)


def describe_transition(current, target, table: Dict) -> str:
    allowed = sorted(s.value for s in table.get(current, ()))
    return (
        f"Invalid transition {current.value!r} -> {target.value!r}; "
        f"allowed targets: {allowed or '(terminal)'}"
    )


def log_transition(
    resource_type: str,
    resource_id: str,
    from_status,
    to_status,
    reason: Optional[str] = None,
) -> None:
    """Emit a log entry for a status change"""
    logger.info(
        f"{resource_type} {resource_id} status {from_status.value} -> {to_status.value}"
        + (f" ({reason})" if reason else "")
    )
