"""Notification Service Implementations

Provides concrete implementations for customer notifications.
"""

import logging
from typing import Any, Dict, Optional
import httpx
from src.app.services.notification_service import NotificationService
from src.domain.order import Order, OrderStatus

logger = logging.getLogger(__name__)


def _order_payload(order: Order) -> Dict[str, Any]:
    return {
        "order_id": order.id,
        "order_number": order.order_number,
        "customer_id": order.customer_id,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "total": str(order.total),
        "currency": order.currency,
    }


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs customer messages

    Useful for development and testing, or as a fallback.
    """

    async def send_order_status_update(
        self, order: Order, status: OrderStatus, notes: Optional[str] = None
    ) -> bool:
        logger.info(
            f"[ORDER STATUS] {order.order_number} -> {status.value} "
            f"for {order.customer_email}" + (f": {notes}" if notes else "")
        )
        return True

    async def send_payment_confirmation(self, order: Order) -> bool:
        logger.info(
            f"[PAYMENT CONFIRMED] {order.order_number} "
            f"{order.total} {order.currency} for {order.customer_email}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that hands messages to a mailer via HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST notifications to
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.transport = transport

    async def send_order_status_update(
        self, order: Order, status: OrderStatus, notes: Optional[str] = None
    ) -> bool:
        payload = {
            "type": "order_status_update",
            **_order_payload(order),
            "status": status.value,
            "notes": notes,
        }
        return await self._post(payload, order)

    async def send_payment_confirmation(self, order: Order) -> bool:
        payload = {
            "type": "payment_confirmation",
            **_order_payload(order),
            "payment_id": order.payment_id,
        }
        return await self._post(payload, order)

    async def _post(self, payload: Dict[str, Any], order: Order) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook {payload['type']} sent for order {order.order_number} to {self.webhook_url}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send {payload['type']} webhook for order {order.order_number}: {e}"
            )
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_order_status_update(
        self, order: Order, status: OrderStatus, notes: Optional[str] = None
    ) -> bool:
        success = False
        for service in self.services:
            try:
                if await service.send_order_status_update(order, status, notes):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success

    async def send_payment_confirmation(self, order: Order) -> bool:
        """
        Send payment confirmation to all configured services

        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_payment_confirmation(order):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
