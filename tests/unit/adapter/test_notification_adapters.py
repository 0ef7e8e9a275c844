"""Unit tests for notification and event publisher adapters"""

import json
import logging
import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
import httpx

from src.adapter.services.event_publisher import (
    LoggingEventPublisher,
    WebhookEventPublisher,
    create_event_publisher,
)
from src.adapter.services.notification_service import (
    CompositeNotificationService,
    LoggingNotificationService,
    WebhookNotificationService,
    create_notification_service,
)
from src.app.services.event_publisher import DomainEvent, publish_safely
from src.domain.order import Order, OrderStatus
from src.domain.payment import PaymentStatus


@pytest.fixture
def sample_order():
    return Order(
        id="order-1",
        order_number="ORD-001000",
        customer_id="cus_123",
        customer_name="Ana García",
        customer_email="ana@example.com",
        subtotal=Decimal("100.00"),
        tax_amount=Decimal("21.00"),
        total=Decimal("121.00"),
        status=OrderStatus.CONFIRMED,
        payment_status=PaymentStatus.PAID,
        payment_method_id="pm_card_visa",
        payment_id="pi_123",
        billing_address={},
        assigned_to=[],
        created_at=datetime(2024, 3, 1),
        updated_at=datetime(2024, 3, 1),
    )


@pytest.fixture
def sample_event():
    return DomainEvent(
        name="order_created",
        aggregate_type="order",
        aggregate_id="order-1",
        payload={"value": "121.00", "currency": "EUR"},
    )


@pytest.mark.asyncio
class TestWebhookNotificationService:
    async def test_status_update_payload(self, sample_order):
        # Arrange
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(202)

        service = WebhookNotificationService(
            "https://mailer.test/hooks", transport=httpx.MockTransport(handler)
        )

        # Act
        sent = await service.send_order_status_update(sample_order, OrderStatus.CONFIRMED, "Kick-off")

        # Assert
        assert sent is True
        assert seen["url"] == "https://mailer.test/hooks"
        assert seen["body"]["type"] == "order_status_update"
        assert seen["body"]["order_number"] == "ORD-001000"
        assert seen["body"]["status"] == "confirmed"
        assert seen["body"]["notes"] == "Kick-off"
        assert seen["body"]["total"] == "121.00"

    async def test_payment_confirmation_payload(self, sample_order):
        # Arrange
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200)

        service = WebhookNotificationService(
            "https://mailer.test/hooks", transport=httpx.MockTransport(handler)
        )

        # Act
        sent = await service.send_payment_confirmation(sample_order)

        # Assert
        assert sent is True
        assert seen["body"]["type"] == "payment_confirmation"
        assert seen["body"]["payment_id"] == "pi_123"

    async def test_http_error_returns_false(self, sample_order):
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        service = WebhookNotificationService(
            "https://mailer.test/hooks", transport=httpx.MockTransport(handler)
        )

        # Act
        sent = await service.send_payment_confirmation(sample_order)

        # Assert
        assert sent is False


@pytest.mark.asyncio
class TestCompositeNotificationService:
    async def test_any_success_is_success(self, sample_order):
        # Arrange
        failing = MagicMock()
        failing.send_order_status_update = AsyncMock(side_effect=RuntimeError("down"))
        service = CompositeNotificationService([failing, LoggingNotificationService()])

        # Act
        sent = await service.send_order_status_update(sample_order, OrderStatus.CONFIRMED)

        # Assert
        assert sent is True
        failing.send_order_status_update.assert_called_once()

    async def test_all_failures_is_failure(self, sample_order):
        # Arrange
        failing = MagicMock()
        failing.send_payment_confirmation = AsyncMock(return_value=False)
        service = CompositeNotificationService([failing])

        # Act
        sent = await service.send_payment_confirmation(sample_order)

        # Assert
        assert sent is False


class TestCreateNotificationService:
    def test_logging_only_without_webhook(self):
        assert isinstance(create_notification_service(), LoggingNotificationService)

    def test_composite_with_webhook(self):
        service = create_notification_service("https://mailer.test/hooks")
        assert isinstance(service, CompositeNotificationService)
        assert isinstance(service.services[1], WebhookNotificationService)


@pytest.mark.asyncio
class TestEventPublishers:
    async def test_webhook_posts_event_json(self, sample_event):
        # Arrange
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            seen["content_type"] = request.headers["Content-Type"]
            return httpx.Response(204)

        publisher = WebhookEventPublisher(
            "https://analytics.test/events", transport=httpx.MockTransport(handler)
        )

        # Act
        await publisher.publish(sample_event)

        # Assert
        assert seen["content_type"] == "application/json"
        assert seen["body"]["name"] == "order_created"
        assert seen["body"]["aggregate_id"] == "order-1"
        assert seen["body"]["payload"] == {"value": "121.00", "currency": "EUR"}

    async def test_webhook_raises_on_error(self, sample_event):
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        publisher = WebhookEventPublisher(
            "https://analytics.test/events", transport=httpx.MockTransport(handler)
        )

        # Act & Assert
        with pytest.raises(httpx.HTTPStatusError):
            await publisher.publish(sample_event)

    async def test_publish_safely_swallows_delivery_failure(self, sample_event, caplog):
        # Arrange
        publisher = MagicMock()
        publisher.publish = AsyncMock(side_effect=RuntimeError("sink down"))

        # Act
        with caplog.at_level(logging.WARNING):
            await publish_safely(publisher, sample_event)

        # Assert
        assert "Dropped event order_created" in caplog.text

    async def test_logging_publisher(self, sample_event, caplog):
        # Act
        with caplog.at_level(logging.INFO):
            await LoggingEventPublisher().publish(sample_event)

        # Assert
        assert "[EVENT] order_created order=order-1" in caplog.text

    async def test_factory(self):
        assert isinstance(create_event_publisher(), LoggingEventPublisher)
        assert isinstance(create_event_publisher("https://analytics.test"), WebhookEventPublisher)
