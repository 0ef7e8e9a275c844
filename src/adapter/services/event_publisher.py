"""Event Publisher Implementations"""

import logging
from typing import Optional
import httpx
from src.app.services.event_publisher import EventPublisher, DomainEvent

logger = logging.getLogger(__name__)


class LoggingEventPublisher(EventPublisher):
    """Writes events to the application log"""

    async def publish(self, event: DomainEvent) -> None:
        logger.info(
            f"[EVENT] {event.name} {event.aggregate_type}={event.aggregate_id} "
            f"{event.model_dump_json(include={'payload'})}"
        )


class WebhookEventPublisher(EventPublisher):
    """
    Posts events as JSON to an analytics endpoint

    Raises on delivery failure; callers go through publish_safely.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.transport = transport

    async def publish(self, event: DomainEvent) -> None:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                self.webhook_url,
                content=event.model_dump_json(),
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()


def create_event_publisher(webhook_url: Optional[str] = None) -> EventPublisher:
    if webhook_url:
        return WebhookEventPublisher(webhook_url)
    return LoggingEventPublisher()
