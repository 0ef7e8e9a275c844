"""Pricing and scheduling rules

Pure functions shared by the order and subscription use cases: discount and
coupon tables, VAT, yearly pricing, calendar arithmetic and delivery
estimates.
"""

import re
from calendar import monthrange
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional
from src.domain.subscription import BillingCycle

CENT = Decimal("0.01")

TAX_RATE = Decimal("0.21")  # Spanish VAT

YEARLY_DISCOUNT = Decimal("0.9")  # 10% off twelve months

DEFAULT_DELIVERY_DAYS = 7

# Order discount codes
DISCOUNT_RATES = {
    "WELCOME10": Decimal("0.10"),
    "SAVE20": Decimal("0.20"),
    "FIRST50": Decimal("0.50"),
}

# Subscription coupons
COUPON_RATES = {
    "FIRST10": Decimal("0.10"),
    "SAVE20": Decimal("0.20"),
    "WELCOME50": Decimal("0.50"),
}

_LEADING_DIGITS = re.compile(r"(\d+)")


def to_money(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_discount(subtotal: Decimal, discount_code: Optional[str]) -> Decimal:
    """Unknown or missing codes give no discount"""
    rate = DISCOUNT_RATES.get(discount_code or "", Decimal("0"))
    return to_money(subtotal * rate)


def calculate_tax(taxable_amount: Decimal) -> Decimal:
    return to_money(taxable_amount * TAX_RATE)


def cycle_price(monthly_price: Decimal, billing_cycle: BillingCycle) -> Decimal:
    """Yearly plans cost twelve months with a 10% discount"""
    if billing_cycle == BillingCycle.YEARLY:
        return to_money(monthly_price * 12 * YEARLY_DISCOUNT)
    return to_money(monthly_price)


def apply_coupon(price: Decimal, coupon_code: Optional[str]) -> Decimal:
    """Unknown coupons are ignored"""
    rate = COUPON_RATES.get(coupon_code or "", Decimal("0"))
    return to_money(price * (1 - rate))


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of the target month"""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def add_billing_cycle(value: datetime, billing_cycle: BillingCycle) -> datetime:
    if billing_cycle == BillingCycle.YEARLY:
        return add_months(value, 12)
    return add_months(value, 1)


def next_billing_date(
    start_date: datetime,
    billing_cycle: BillingCycle,
    trial_end_date: Optional[datetime] = None,
) -> datetime:
    """One billing cycle after the trial end when there is one, else after start"""
    return add_billing_cycle(trial_end_date or start_date, billing_cycle)


def parse_delivery_days(delivery_time: Optional[str]) -> int:
    """Leading integer of a lead-time string ('7-10 días' -> 7)"""
    match = _LEADING_DIGITS.search(delivery_time or "")
    if not match:
        return DEFAULT_DELIVERY_DAYS
    return int(match.group(1))


def estimate_delivery(delivery_times: Iterable[Optional[str]], now: datetime) -> datetime:
    days = [parse_delivery_days(value) for value in delivery_times]
    return now + timedelta(days=max(days, default=DEFAULT_DELIVERY_DAYS))
