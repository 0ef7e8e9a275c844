"""Order Repository Interface

Defines the contract for order persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from pydantic import BaseModel
from src.domain.order import Order, OrderStatus
from src.domain.payment import PaymentStatus


class OrderFilter(BaseModel):
    """Criteria for listing orders; every field is optional"""

    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    customer_id: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None
    search: Optional[str] = None


class OrderNumberConflictError(Exception):
    """Raised when the order number was taken by a concurrent checkout"""

    def __init__(self, order_number: str):
        super().__init__(f"Order number {order_number} already exists")
        self.order_number = order_number


class OrderRepository(ABC):
    """
    Repository interface for Order persistence

    get_by_id(for_update=True) locks the row (SELECT FOR UPDATE) so that
    concurrent mutations of one order are serialised.
    """

    @abstractmethod
    async def create(self, order: Order) -> Order:
        """
        Create a new order

        Args:
            order: Order entity to persist

        Returns:
            Created Order

        Raises:
            OrderNumberConflictError: If order_number is already taken
        """
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        """
        Retrieve order by ID

        Args:
            order_id: Order ID
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        """
        Update an existing order

        Args:
            order: Order entity with updated values

        Returns:
            Updated Order
        """
        pass

    @abstractmethod
    async def find(
        self, filters: OrderFilter, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        List orders matching filters, newest first

        Args:
            filters: OrderFilter criteria
            limit: Maximum number of orders to return
            offset: Offset for pagination

        Returns:
            Tuple of (page of orders, total matching count)
        """
        pass

    @abstractmethod
    async def list_created_between(
        self, date_from: Optional[datetime] = None, date_to: Optional[datetime] = None
    ) -> List[Order]:
        """
        Retrieve every order created within an optional date range

        Used by read-side aggregations.
        """
        pass

    @abstractmethod
    async def generate_order_number(self) -> str:
        """
        Generate the next order number

        Format: ORD-NNNNNN, sequence starting at 1000. The number is only
        reserved once create() succeeds; callers retry on OrderNumberConflictError.

        Returns:
            Unique order number string
        """
        pass
