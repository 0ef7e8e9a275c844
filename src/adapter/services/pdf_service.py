"""ReportLab PDF Generation Service Implementation

Renders order invoices using the ReportLab library.
"""

from io import BytesIO
from typing import List

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from src.app.services.pdf_service import PdfService
from src.domain.order import Order, OrderItem
from src.domain.pricing import TAX_RATE

PRIMARY_COLOR = colors.HexColor("#1F3A5F")
MUTED_COLOR = colors.HexColor("#6B7B8C")
GRID_COLOR = colors.HexColor("#C9D1DA")

COLUMN_WIDTHS = [75 * mm, 20 * mm, 35 * mm, 40 * mm]


def _money(order: Order, amount) -> str:
    return f"{amount:,.2f} {order.currency}"


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    One A4 page per order: company header, invoice details, bill-to block,
    line items and the subtotal / discount / VAT / total summary.
    """

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
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20 * mm,
            leftMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=f"Invoice {order.order_number}",
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "CompanyTitle",
            parent=styles["Heading1"],
            fontSize=22,
            spaceAfter=6,
            textColor=PRIMARY_COLOR,
        )
        muted_style = ParagraphStyle(
            "Muted",
            parent=styles["Normal"],
            fontSize=9,
            textColor=MUTED_COLOR,
        )
        label_style = ParagraphStyle(
            "Label",
            parent=styles["Normal"],
            fontSize=10,
            fontName="Helvetica-Bold",
        )
        normal_style = ParagraphStyle("Body", parent=styles["Normal"], fontSize=10)

        elements = [
            Paragraph(company_name, title_style),
            Paragraph(company_address, muted_style),
            Spacer(1, 8 * mm),
            Paragraph("INVOICE", styles["Heading2"]),
            self._details_table(order),
            Spacer(1, 8 * mm),
            Paragraph("Bill To:", label_style),
        ]
        elements.extend(Paragraph(line, normal_style) for line in self._bill_to_lines(order))
        elements.append(Spacer(1, 8 * mm))
        elements.append(self._items_table(order, items))
        elements.append(Spacer(1, 4 * mm))
        elements.append(self._summary_table(order))

        if order.notes:
            elements.append(Spacer(1, 8 * mm))
            elements.append(Paragraph(f"<i>{order.notes}</i>", muted_style))

        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    def _details_table(self, order: Order) -> Table:
        rows = [
            ["Invoice Number:", order.order_number],
            ["Order Date:", order.created_at.strftime("%Y-%m-%d")],
            ["Payment Status:", order.payment_status.value.upper()],
        ]
        if order.payment_id:
            rows.append(["Payment Reference:", order.payment_id])

        table = Table(rows, colWidths=[45 * mm, 100 * mm])
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("TEXTCOLOR", (0, 0), (0, -1), MUTED_COLOR),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
                ]
            )
        )
        return table

    def _bill_to_lines(self, order: Order) -> List[str]:
        address = order.billing_address or {}
        lines = [order.customer_name or order.customer_id, order.customer_email]
        street = " ".join(
            str(address[key]) for key in ("address1", "address2") if address.get(key)
        )
        city = " ".join(
            str(address[key]) for key in ("postal_code", "city", "country") if address.get(key)
        )
        lines.extend(line for line in (street, city, order.customer_phone) if line)
        return lines

    def _items_table(self, order: Order, items: List[OrderItem]) -> Table:
        rows = [["Product", "Qty", "Unit Price", "Total"]]
        for item in items:
            rows.append(
                [
                    item.product_name or item.product_id,
                    str(item.quantity),
                    _money(order, item.unit_price),
                    _money(order, item.total_price),
                ]
            )

        table = Table(rows, colWidths=COLUMN_WIDTHS)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), PRIMARY_COLOR),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, GRID_COLOR),
                    ("TOPPADDING", (0, 0), (-1, -1), 5),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
                ]
            )
        )
        return table

    def _summary_table(self, order: Order) -> Table:
        rows = [["", "", "Subtotal:", _money(order, order.subtotal)]]
        if order.discount_amount:
            label = f"Discount ({order.discount_code}):" if order.discount_code else "Discount:"
            rows.append(["", "", label, f"-{_money(order, order.discount_amount)}"])
        rows.append(["", "", f"VAT ({TAX_RATE * 100:.0f}%):", _money(order, order.tax_amount)])
        rows.append(["", "", "Total:", _money(order, order.total)])

        table = Table(rows, colWidths=COLUMN_WIDTHS)
        table.setStyle(
            TableStyle(
                [
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
                    ("FONTNAME", (2, -1), (-1, -1), "Helvetica-Bold"),
                    ("LINEABOVE", (2, -1), (-1, -1), 1.2, PRIMARY_COLOR),
                ]
            )
        )
        return table
