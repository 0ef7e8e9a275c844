"""GenerateOrderInvoice Use Case

Renders an order invoice PDF.
"""

import base64
from libs.result import Result, Return, Error
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_item_repository import OrderItemRepository
from src.app.services.pdf_service import PdfService
from .dtos import OrderInvoiceResponseDTO


class GenerateOrderInvoice:
    """
    Use Case: Generate order invoice PDF

    Business Rules:
    1. Order must exist
    2. Any order can be invoiced; the payment status is printed on the document
    3. Returns PDF as base64-encoded string
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        item_repo: OrderItemRepository,
        pdf_service: PdfService,
        company_name: str = "SoftCrown",
        company_address: str = "Calle Mayor 1, 28013 Madrid, ES",
    ):
        self.order_repo = order_repo
        self.item_repo = item_repo
        self.pdf_service = pdf_service
        self.company_name = company_name
        self.company_address = company_address

    async def execute(self, order_id: str) -> Result[OrderInvoiceResponseDTO]:
        """
        Execute invoice generation

        Args:
            order_id: Order to invoice

        Returns:
            Result[OrderInvoiceResponseDTO]: Success with PDF or error
        """
        try:
            order = await self.order_repo.get_by_id(order_id)
            if not order:
                return Return.err(
                    Error(
                        code="ORDER_NOT_FOUND",
                        message="Order not found",
                        reason=f"No order with id {order_id}",
                    )
                )

            items = await self.item_repo.get_by_order_id(order.id)

            pdf_bytes = self.pdf_service.generate_order_invoice(
                order=order,
                items=items,
                company_name=self.company_name,
                company_address=self.company_address,
            )

            return Return.ok(
                OrderInvoiceResponseDTO(
                    order_id=order.id,
                    order_number=order.order_number,
                    filename=f"invoice-{order.order_number}.pdf",
                    pdf_base64=base64.b64encode(pdf_bytes).decode("utf-8"),
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="GENERATE_ORDER_INVOICE_FAILED",
                    message="Failed to generate order invoice",
                    reason=str(e),
                )
            )
