"""Notification Service Interface

Defines the contract for customer notifications about their orders.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.order import Order, OrderStatus


class NotificationService(ABC):
    """
    Abstract notification service for customer messages

    Implementations can send notifications via:
    - Webhook (HTTP POST to the mailer)
    - Email
    - WhatsApp
    - etc.
    """

    @abstractmethod
    async def send_order_status_update(
        self, order: Order, status: OrderStatus, notes: Optional[str] = None
    ) -> bool:
        """
        Tell the customer their order changed status

        Args:
            order: Order that changed
            status: New status
            notes: Optional message from staff

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass

    @abstractmethod
    async def send_payment_confirmation(self, order: Order) -> bool:
        """
        Confirm a successful payment to the customer

        Args:
            order: Paid order

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
