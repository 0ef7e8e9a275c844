"""Unit tests for provider status mapping"""

import pytest

from src.domain.payment import PaymentStatus, map_provider_status


class TestMapProviderStatus:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("succeeded", PaymentStatus.PAID),
            ("processing", PaymentStatus.PROCESSING),
            ("requires_payment_method", PaymentStatus.PENDING),
            ("canceled", PaymentStatus.FAILED),
        ],
    )
    def test_stripe(self, raw, expected):
        assert map_provider_status("stripe", raw) == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("COMPLETED", PaymentStatus.PAID),
            ("APPROVED", PaymentStatus.PROCESSING),
            ("CREATED", PaymentStatus.PENDING),
            ("VOIDED", PaymentStatus.FAILED),
        ],
    )
    def test_paypal(self, raw, expected):
        assert map_provider_status("paypal", raw) == expected

    def test_provider_name_is_case_insensitive(self):
        assert map_provider_status("Stripe", "succeeded") == PaymentStatus.PAID

    def test_native_vocabulary_passes_through(self):
        assert map_provider_status("bank_transfer", "refunded") == PaymentStatus.REFUNDED
        assert map_provider_status(None, "PAID") == PaymentStatus.PAID

    def test_unknown_status_is_pending(self):
        assert map_provider_status("stripe", "something_new") == PaymentStatus.PENDING
        assert map_provider_status("stripe", None) == PaymentStatus.PENDING
        assert map_provider_status("stripe", "") == PaymentStatus.PENDING
