"""Event Publisher Interface

Analytics events (order_created, subscription_cancelled, ...) leave the
service through this interface. Delivery is at-most-once: use cases publish
after commit through publish_safely, so a broken sink never fails a
transaction.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict
from pydantic import BaseModel, Field
from src.domain.base import utcnow

logger = logging.getLogger(__name__)


class DomainEvent(BaseModel):
    name: str
    aggregate_type: str
    aggregate_id: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=utcnow)


class EventPublisher(ABC):
    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """
        Publish an event to the analytics sink

        Args:
            event: DomainEvent to publish
        """
        pass


async def publish_safely(publisher: EventPublisher, event: DomainEvent) -> None:
    """Publish and swallow delivery failures after logging them"""
    try:
        await publisher.publish(event)
    except Exception as e:
        logger.warning(
            f"Dropped event {event.name} for {event.aggregate_type} {event.aggregate_id}: {e}"
        )
