"""Payment Provider Gateway Implementations

SimulatedPaymentGateway keeps payments in memory for development and tests.
HttpPaymentGateway talks JSON to a payments API; provider-side failures and
HTTP errors come back as success=False results.
"""

import logging
import uuid
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional
import httpx
from src.app.services.payment_gateway import (
    PaymentGateway,
    PaymentRequest,
    PaymentResult,
    RefundRequest,
    RefundResult,
    RecurringPaymentRequest,
    PaymentStatusResult,
)
from src.domain.payment import PaymentStatus, map_provider_status

logger = logging.getLogger(__name__)

DECLINED_MESSAGE = "Your card was declined."


def _provider_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:24]}"


class SimulatedPaymentGateway(PaymentGateway):
    """
    In-process payment gateway

    Every charge succeeds unless its payment method is in declined_methods,
    which makes the outcome deterministic for tests.
    """

    def __init__(
        self,
        declined_methods: Optional[Iterable[str]] = None,
        provider: str = "stripe",
    ):
        self.declined_methods = set(
            declined_methods if declined_methods is not None else {"pm_card_declined"}
        )
        self.provider = provider
        self.payments: Dict[str, Dict[str, Any]] = {}
        self.recurring_payments: Dict[str, Dict[str, Any]] = {}

    async def process_payment(self, request: PaymentRequest) -> PaymentResult:
        if request.payment_method_id in self.declined_methods:
            logger.info(f"Simulated charge for {request.reference} declined")
            return PaymentResult(success=False, status=PaymentStatus.FAILED, error=DECLINED_MESSAGE)

        payment_id = _provider_id("pi")
        status = map_provider_status(self.provider, "succeeded")
        self.payments[payment_id] = {
            "reference": request.reference,
            "amount": request.amount,
            "currency": request.currency,
            "status": status,
            "refunded": Decimal("0"),
        }
        logger.info(f"Simulated charge {payment_id} of {request.amount} {request.currency}")
        return PaymentResult(success=True, payment_id=payment_id, status=status)

    async def confirm_payment(
        self, payment_id: str, confirmation: Optional[Dict[str, Any]] = None
    ) -> PaymentResult:
        payment = self.payments.get(payment_id)
        if payment is None:
            return PaymentResult(success=False, status=PaymentStatus.FAILED, error="Payment not found")

        payment["status"] = PaymentStatus.PAID
        return PaymentResult(success=True, payment_id=payment_id, status=PaymentStatus.PAID)

    async def process_refund(self, request: RefundRequest) -> RefundResult:
        payment = self.payments.get(request.payment_id)
        if payment is None:
            return RefundResult(success=False, error="Payment not found")

        refundable = payment["amount"] - payment["refunded"]
        amount = request.amount if request.amount is not None else refundable
        if amount <= 0 or amount > refundable:
            return RefundResult(
                success=False,
                error=f"Refund amount {amount} exceeds refundable balance {refundable}",
            )

        payment["refunded"] += amount
        payment["status"] = (
            PaymentStatus.REFUNDED
            if payment["refunded"] == payment["amount"]
            else PaymentStatus.PARTIALLY_REFUNDED
        )
        return RefundResult(success=True, refund_id=_provider_id("re"), amount=amount)

    async def create_recurring_payment(self, request: RecurringPaymentRequest) -> PaymentResult:
        if request.payment_method_id in self.declined_methods:
            return PaymentResult(success=False, status=PaymentStatus.FAILED, error=DECLINED_MESSAGE)

        recurring_id = _provider_id("sub")
        self.recurring_payments[recurring_id] = {
            "customer_id": request.customer_id,
            "plan_id": request.plan_id,
            "amount": request.amount,
            "active": True,
        }
        return PaymentResult(success=True, payment_id=recurring_id, status=PaymentStatus.PAID)

    async def cancel_recurring_payment(self, recurring_payment_id: str) -> PaymentResult:
        # Cancelling something the provider never saw (trials) is a no-op
        recurring = self.recurring_payments.get(recurring_payment_id)
        if recurring is not None:
            recurring["active"] = False
        return PaymentResult(success=True, payment_id=recurring_payment_id)

    async def get_payment_status(self, payment_id: str) -> PaymentStatusResult:
        payment = self.payments.get(payment_id)
        if payment is None:
            return PaymentStatusResult(status=PaymentStatus.PENDING)
        return PaymentStatusResult(status=payment["status"], amount=payment["amount"])


class HttpPaymentGateway(PaymentGateway):
    """
    Payments API client

    Endpoints (relative to base_url):
    - POST   /payments                  charge
    - POST   /payments/{id}/confirm     confirm
    - GET    /payments/{id}             status
    - POST   /refunds                   refund
    - POST   /subscriptions             recurring payment
    - DELETE /subscriptions/{id}        cancel recurring payment
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 15.0,
        provider: str = "stripe",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize payments API client

        Args:
            base_url: Payments API base URL
            api_key: Optional bearer token
            timeout: Per-request timeout in seconds
            provider: Provider whose status vocabulary the API returns
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.provider = provider
        self.transport = transport
        self.headers = {"Content-Type": "application/json"}
        if api_key:
            self.headers["Authorization"] = f"Bearer {api_key}"

    async def _request(
        self, method: str, path: str, payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self.headers,
            transport=self.transport,
        ) as client:
            response = await client.request(method, path, json=payload)
            response.raise_for_status()
            return response.json() if response.content else {}

    def _error_message(self, error: httpx.HTTPError) -> str:
        if isinstance(error, httpx.HTTPStatusError):
            try:
                body = error.response.json()
            except ValueError:
                body = {}
            message = body.get("error") or body.get("message")
            if message:
                return str(message)
            return f"Payment provider returned HTTP {error.response.status_code}"
        return f"Payment provider unreachable: {error}"

    def _payment_result(self, data: Dict[str, Any]) -> PaymentResult:
        status = map_provider_status(self.provider, data.get("status"))
        success = status != PaymentStatus.FAILED and not data.get("error")
        return PaymentResult(
            success=success,
            payment_id=data.get("id"),
            status=status,
            error=data.get("error"),
            redirect_url=data.get("redirect_url"),
        )

    async def process_payment(self, request: PaymentRequest) -> PaymentResult:
        try:
            data = await self._request("POST", "/payments", request.model_dump(mode="json"))
        except httpx.HTTPError as e:
            logger.error(f"Payment for {request.reference} failed: {e}")
            return PaymentResult(success=False, status=PaymentStatus.FAILED, error=self._error_message(e))
        return self._payment_result(data)

    async def confirm_payment(
        self, payment_id: str, confirmation: Optional[Dict[str, Any]] = None
    ) -> PaymentResult:
        try:
            data = await self._request("POST", f"/payments/{payment_id}/confirm", confirmation or {})
        except httpx.HTTPError as e:
            logger.error(f"Confirmation of payment {payment_id} failed: {e}")
            return PaymentResult(success=False, status=PaymentStatus.FAILED, error=self._error_message(e))
        return self._payment_result(data)

    async def process_refund(self, request: RefundRequest) -> RefundResult:
        try:
            data = await self._request("POST", "/refunds", request.model_dump(mode="json"))
        except httpx.HTTPError as e:
            logger.error(f"Refund of payment {request.payment_id} failed: {e}")
            return RefundResult(success=False, error=self._error_message(e))

        amount = data.get("amount")
        return RefundResult(
            success=not data.get("error"),
            refund_id=data.get("id"),
            amount=Decimal(str(amount)) if amount is not None else request.amount,
            error=data.get("error"),
        )

    async def create_recurring_payment(self, request: RecurringPaymentRequest) -> PaymentResult:
        try:
            data = await self._request("POST", "/subscriptions", request.model_dump(mode="json"))
        except httpx.HTTPError as e:
            logger.error(f"Recurring payment for {request.customer_id} failed: {e}")
            return PaymentResult(success=False, status=PaymentStatus.FAILED, error=self._error_message(e))
        return self._payment_result(data)

    async def cancel_recurring_payment(self, recurring_payment_id: str) -> PaymentResult:
        try:
            await self._request("DELETE", f"/subscriptions/{recurring_payment_id}")
        except httpx.HTTPError as e:
            logger.error(f"Cancelling recurring payment {recurring_payment_id} failed: {e}")
            return PaymentResult(success=False, status=PaymentStatus.FAILED, error=self._error_message(e))
        return PaymentResult(success=True, payment_id=recurring_payment_id)

    async def get_payment_status(self, payment_id: str) -> PaymentStatusResult:
        try:
            data = await self._request("GET", f"/payments/{payment_id}")
        except httpx.HTTPError as e:
            logger.warning(f"Status lookup for payment {payment_id} failed: {e}")
            return PaymentStatusResult(status=PaymentStatus.PENDING)

        amount = data.get("amount")
        return PaymentStatusResult(
            status=map_provider_status(self.provider, data.get("status")),
            amount=Decimal(str(amount)) if amount is not None else None,
        )


def create_payment_gateway(
    kind: str = "simulated",
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    timeout: float = 15.0,
) -> PaymentGateway:
    """
    Factory function to create the configured payment gateway

    Args:
        kind: "simulated" or "http"
        base_url: Payments API base URL (http only)
        api_key: Optional API key (http only)
        timeout: Provider call timeout in seconds

    Returns:
        Configured PaymentGateway
    """
    if kind == "http":
        if not base_url:
            raise ValueError("PAYMENT_API_URL is required for the http payment gateway")
        return HttpPaymentGateway(base_url, api_key=api_key, timeout=timeout)
    if kind == "simulated":
        return SimulatedPaymentGateway()
    raise ValueError(f"Unknown payment gateway {kind!r}")
