"""PDF Generation Service Interface

Defines the contract for PDF generation operations.
"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.order import Order, OrderItem


class PdfService(ABC):
    """
    Service interface for PDF generation

    Provides PDF generation capabilities for order invoices.
    """

    @abstractmethod
    def generate_order_invoice(
        self,
        order: Order,
        items: List[OrderItem],
        company_name: str = "SoftCrown",
        company_address: str = "Calle Mayor 1, 28013 Madrid, ES",
    ) -> bytes:
        """
        Generate an invoice PDF for an order

        Args:
            order: Order with totals and customer details
            items: Line items of the order
            company_name: Company name to display on invoice
            company_address: Company address to display on invoice

        Returns:
            PDF document as bytes
        """
        pass
