"""Unit tests for order, payment and subscription transition tables"""

import pytest

from src.domain.order import OrderStatus
from src.domain.payment import PaymentStatus
from src.domain.subscription import SubscriptionStatus
from src.domain.state import (
    ORDER_TRANSITIONS,
    PAYMENT_TRANSITIONS,
    SUBSCRIPTION_TRANSITIONS,
    can_transition,
    describe_transition,
    is_terminal,
)


class TestOrderTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.CONFIRMED),
            (OrderStatus.CONFIRMED, OrderStatus.IN_PROGRESS),
            (OrderStatus.IN_PROGRESS, OrderStatus.COMPLETED),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
            (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
            (OrderStatus.IN_PROGRESS, OrderStatus.CANCELLED),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target, ORDER_TRANSITIONS)

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.COMPLETED),
            (OrderStatus.PENDING, OrderStatus.IN_PROGRESS),
            (OrderStatus.COMPLETED, OrderStatus.PENDING),
            (OrderStatus.COMPLETED, OrderStatus.CANCELLED),
            (OrderStatus.CANCELLED, OrderStatus.CONFIRMED),
        ],
    )
    def test_rejected(self, current, target):
        assert not can_transition(current, target, ORDER_TRANSITIONS)

    def test_completed_and_cancelled_are_terminal(self):
        assert is_terminal(OrderStatus.COMPLETED, ORDER_TRANSITIONS)
        assert is_terminal(OrderStatus.CANCELLED, ORDER_TRANSITIONS)
        assert not is_terminal(OrderStatus.PENDING, ORDER_TRANSITIONS)


class TestPaymentTransitions:
    def test_failed_payment_can_be_retried(self):
        assert can_transition(PaymentStatus.FAILED, PaymentStatus.PROCESSING, PAYMENT_TRANSITIONS)

    def test_paid_only_moves_to_refunds(self):
        assert can_transition(PaymentStatus.PAID, PaymentStatus.REFUNDED, PAYMENT_TRANSITIONS)
        assert can_transition(PaymentStatus.PAID, PaymentStatus.PARTIALLY_REFUNDED, PAYMENT_TRANSITIONS)
        assert not can_transition(PaymentStatus.PAID, PaymentStatus.PROCESSING, PAYMENT_TRANSITIONS)

    def test_pending_cannot_jump_to_paid(self):
        assert not can_transition(PaymentStatus.PENDING, PaymentStatus.PAID, PAYMENT_TRANSITIONS)


class TestSubscriptionTransitions:
    def test_pause_and_resume(self):
        assert can_transition(SubscriptionStatus.ACTIVE, SubscriptionStatus.PAUSED, SUBSCRIPTION_TRANSITIONS)
        assert can_transition(SubscriptionStatus.PAUSED, SubscriptionStatus.ACTIVE, SUBSCRIPTION_TRANSITIONS)

    def test_only_active_expires(self):
        assert can_transition(SubscriptionStatus.ACTIVE, SubscriptionStatus.EXPIRED, SUBSCRIPTION_TRANSITIONS)
        assert not can_transition(SubscriptionStatus.PAUSED, SubscriptionStatus.EXPIRED, SUBSCRIPTION_TRANSITIONS)

    def test_no_reactivation_after_cancel_or_expiry(self):
        assert not can_transition(SubscriptionStatus.CANCELLED, SubscriptionStatus.ACTIVE, SUBSCRIPTION_TRANSITIONS)
        assert not can_transition(SubscriptionStatus.EXPIRED, SubscriptionStatus.ACTIVE, SUBSCRIPTION_TRANSITIONS)


class TestTransitionHelpers:
    def test_unknown_status_raises(self):
        with pytest.raises(ValueError):
            can_transition("bogus", OrderStatus.CONFIRMED, ORDER_TRANSITIONS)

    def test_describe_terminal_transition(self):
        message = describe_transition(OrderStatus.COMPLETED, OrderStatus.PENDING, ORDER_TRANSITIONS)

        assert "'completed' -> 'pending'" in message
        assert "(terminal)" in message
