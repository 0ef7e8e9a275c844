"""Orders API Routes

FastAPI routes for the order lifecycle: checkout, status, payment, refund,
assignment, milestones, statistics and invoices.
"""

import base64
from datetime import datetime
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.order_request import (
    CreateOrderRequestSchema,
    UpdateOrderStatusRequestSchema,
    ProcessPaymentRequestSchema,
    RefundRequestSchema,
    AssignOrderRequestSchema,
    UpdateMilestoneRequestSchema,
)
from src.app.use_cases.orders.dtos import (
    OrderItemInputDTO,
    CreateOrderCommandDTO,
    UpdateOrderStatusCommandDTO,
    ProcessOrderPaymentCommandDTO,
    ProcessOrderRefundCommandDTO,
    AssignOrderCommandDTO,
    UpdateOrderMilestoneCommandDTO,
    ListOrdersQueryDTO,
    OrderStatsQueryDTO,
    OrderResponseDTO,
    ListOrdersResponseDTO,
    OrderRefundResponseDTO,
    OrderStatsResponseDTO,
    OrderMilestoneDTO,
    OrderInvoiceResponseDTO,
)
from src.app.use_cases.orders import (
    CreateOrder,
    UpdateOrderStatus,
    ProcessOrderPayment,
    ProcessOrderRefund,
    AssignOrder,
    UpdateOrderMilestone,
    GetOrder,
    ListOrders,
    GetOrderStats,
    GenerateOrderInvoice,
)
from src.app.services.event_publisher import EventPublisher
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway
from src.app.services.pdf_service import PdfService
from src.adapter.repositories.order_repository import SqlAlchemyOrderRepository
from src.adapter.repositories.order_item_repository import SqlAlchemyOrderItemRepository
from src.adapter.repositories.order_milestone_repository import SqlAlchemyOrderMilestoneRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import (
    get_session,
    get_payment_gateway,
    get_event_publisher,
    get_notification_service,
    get_pdf_service,
)
from src.domain.order import OrderStatus
from src.domain.payment import PaymentStatus
from src.api.error import ClientError

router = APIRouter(prefix="/orders", tags=["Orders"])

NOT_FOUND_RESPONSE = {
    "description": "Order not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "ORDER_NOT_FOUND",
                    "message": "Order not found"
                }
            }
        }
    }
}


@router.post(
    "",
    response_model=OrderResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Validation error",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "body.items: List should have at least 1 item after validation, not 0"
                        }
                    }
                }
            }
        }
    }
)
async def create_order(
    request: CreateOrderRequestSchema,
    session: AsyncSession = Depends(get_session),
    event_publisher: EventPublisher = Depends(get_event_publisher),
):
    """
    Create an order from a checkout submission.

    Totals are computed server-side: discount on the subtotal, 21% VAT on the
    discounted amount. The order starts `pending` with payment `pending`, gets
    the next `ORD-` number and four delivery milestones.

    **Returns:**
    - 201: Order created
    - 400: Invalid request parameters
    """
    uow = SqlAlchemyUnitOfWork(session)
    order_repo = SqlAlchemyOrderRepository(session)
    item_repo = SqlAlchemyOrderItemRepository(session)
    milestone_repo = SqlAlchemyOrderMilestoneRepository(session)

    command = CreateOrderCommandDTO(
        customer_id=request.customer_id,
        items=[OrderItemInputDTO(**item.model_dump()) for item in request.items],
        billing_address=request.billing_address,
        shipping_address=request.shipping_address,
        payment_method_id=request.payment_method_id,
        discount_code=request.discount_code,
        notes=request.notes,
    )

    use_case = CreateOrder(
        uow,
        order_repo,
        item_repo,
        milestone_repo,
        event_publisher,
        currency=ApplicationConfig.DEFAULT_CURRENCY,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("", response_model=ListOrdersResponseDTO)
async def list_orders(
    order_status: Optional[OrderStatus] = Query(default=None, alias="status"),
    payment_status: Optional[PaymentStatus] = None,
    customer_id: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    min_amount: Optional[Decimal] = None,
    max_amount: Optional[Decimal] = None,
    search: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
):
    """
    List orders, newest first.

    **Query parameters:**
    - `status`, `payment_status`, `customer_id`: exact filters
    - `date_from`, `date_to`: creation date range (inclusive)
    - `min_amount`, `max_amount`: total range (inclusive)
    - `search`: case-insensitive match on order number, customer name/email or product name
    - `page` (default 1), `limit` (default 20, max 100)
    """
    query = ListOrdersQueryDTO(
        status=order_status,
        payment_status=payment_status,
        customer_id=customer_id,
        date_from=date_from,
        date_to=date_to,
        min_amount=min_amount,
        max_amount=max_amount,
        search=search,
        page=page,
        limit=limit,
    )

    use_case = ListOrders(SqlAlchemyOrderRepository(session), SqlAlchemyOrderItemRepository(session))
    result = await use_case.execute(query)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/stats", response_model=OrderStatsResponseDTO)
async def get_order_stats(
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    session: AsyncSession = Depends(get_session),
):
    """
    Order analytics: totals, revenue, average order value, breakdowns by
    status and payment status, the ten most recent orders and the ten best
    selling products by revenue.
    """
    use_case = GetOrderStats(SqlAlchemyOrderRepository(session), SqlAlchemyOrderItemRepository(session))
    result = await use_case.execute(OrderStatsQueryDTO(date_from=date_from, date_to=date_to))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{order_id}",
    response_model=OrderResponseDTO,
    responses={404: NOT_FOUND_RESPONSE}
)
async def get_order(order_id: str, session: AsyncSession = Depends(get_session)):
    use_case = GetOrder(
        SqlAlchemyOrderRepository(session),
        SqlAlchemyOrderItemRepository(session),
        SqlAlchemyOrderMilestoneRepository(session),
    )
    result = await use_case.execute(order_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{order_id}/status",
    response_model=OrderResponseDTO,
    responses={
        404: NOT_FOUND_RESPONSE,
        409: {
            "description": "Transition not allowed",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_STATUS_TRANSITION",
                            "message": "Cannot change order status from completed to pending"
                        }
                    }
                }
            }
        }
    }
)
async def update_order_status(
    order_id: str,
    request: UpdateOrderStatusRequestSchema,
    session: AsyncSession = Depends(get_session),
    event_publisher: EventPublisher = Depends(get_event_publisher),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Move an order to a new status.

    Allowed transitions: pending -> confirmed | cancelled,
    confirmed -> in_progress | cancelled, in_progress -> completed | cancelled.
    completed and cancelled are final.
    Reaching confirmed, in_progress or completed also completes the matching
    milestones.

    **Returns:**
    - 200: Updated order
    - 404: Order not found
    - 409: Transition not allowed
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = UpdateOrderStatus(
        uow,
        SqlAlchemyOrderRepository(session),
        SqlAlchemyOrderItemRepository(session),
        SqlAlchemyOrderMilestoneRepository(session),
        event_publisher,
        notification_service,
    )
    result = await use_case.execute(
        UpdateOrderStatusCommandDTO(
            order_id=order_id,
            status=request.status,
            notes=request.notes,
            notify_customer=request.notify_customer,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{order_id}/payment",
    response_model=OrderResponseDTO,
    responses={
        404: NOT_FOUND_RESPONSE,
        402: {
            "description": "Payment declined by the provider",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PAYMENT_FAILED",
                            "message": "Your card was declined."
                        }
                    }
                }
            }
        },
        409: {
            "description": "Order already paid or cancelled",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "ORDER_ALREADY_PAID",
                            "message": "Order ORD-001000 has already been paid"
                        }
                    }
                }
            }
        }
    }
)
async def process_order_payment(
    order_id: str,
    request: Optional[ProcessPaymentRequestSchema] = None,
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    event_publisher: EventPublisher = Depends(get_event_publisher),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Charge the order total through the payment provider.

    On success the payment becomes `paid` and a pending order is confirmed.
    A declined payment leaves the order with payment status `failed`.

    **Returns:**
    - 200: Order paid
    - 402: Payment declined
    - 404: Order not found
    - 409: Order already paid or cancelled
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = ProcessOrderPayment(
        uow,
        SqlAlchemyOrderRepository(session),
        SqlAlchemyOrderItemRepository(session),
        SqlAlchemyOrderMilestoneRepository(session),
        payment_gateway,
        event_publisher,
        notification_service,
    )
    result = await use_case.execute(
        ProcessOrderPaymentCommandDTO(
            order_id=order_id,
            payment_method_id=request.payment_method_id if request else None,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{order_id}/refund",
    response_model=OrderRefundResponseDTO,
    responses={
        404: NOT_FOUND_RESPONSE,
        402: {
            "description": "Refund rejected by the provider",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "REFUND_FAILED",
                            "message": "Refund amount 300.00 exceeds refundable balance 242.00"
                        }
                    }
                }
            }
        },
        409: {
            "description": "Order not paid",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "ORDER_NOT_PAID",
                            "message": "Order payment not completed"
                        }
                    }
                }
            }
        }
    }
)
async def process_order_refund(
    order_id: str,
    request: Optional[RefundRequestSchema] = None,
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    event_publisher: EventPublisher = Depends(get_event_publisher),
):
    """
    Refund a paid order, fully or partially.

    **Request body (optional):**
    - `amount`: amount to refund; omit to refund the full total
    - `reason`: free-text reason forwarded to the provider

    The payment status becomes `refunded` or `partially_refunded` and the
    order is cancelled.
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = ProcessOrderRefund(
        uow,
        SqlAlchemyOrderRepository(session),
        SqlAlchemyOrderItemRepository(session),
        SqlAlchemyOrderMilestoneRepository(session),
        payment_gateway,
        event_publisher,
    )
    result = await use_case.execute(
        ProcessOrderRefundCommandDTO(
            order_id=order_id,
            amount=request.amount if request else None,
            reason=request.reason if request else None,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{order_id}/assign",
    response_model=OrderResponseDTO,
    responses={404: NOT_FOUND_RESPONSE}
)
async def assign_order(
    order_id: str,
    request: AssignOrderRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Assign a team member to the order. Assigning the same member twice is a no-op."""
    uow = SqlAlchemyUnitOfWork(session)
    use_case = AssignOrder(uow, SqlAlchemyOrderRepository(session))
    result = await use_case.execute(
        AssignOrderCommandDTO(order_id=order_id, assignee_id=request.assignee_id)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put(
    "/{order_id}/milestones/{milestone_id}",
    response_model=OrderMilestoneDTO,
    responses={404: NOT_FOUND_RESPONSE}
)
async def update_order_milestone(
    order_id: str,
    milestone_id: str,
    request: UpdateMilestoneRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    uow = SqlAlchemyUnitOfWork(session)
    use_case = UpdateOrderMilestone(
        uow,
        SqlAlchemyOrderRepository(session),
        SqlAlchemyOrderMilestoneRepository(session),
    )
    result = await use_case.execute(
        UpdateOrderMilestoneCommandDTO(
            order_id=order_id,
            milestone_id=milestone_id,
            status=request.status,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


async def _generate_invoice(order_id: str, session: AsyncSession, pdf_service: PdfService):
    use_case = GenerateOrderInvoice(
        SqlAlchemyOrderRepository(session),
        SqlAlchemyOrderItemRepository(session),
        pdf_service,
        company_name=ApplicationConfig.COMPANY_NAME,
        company_address=ApplicationConfig.COMPANY_ADDRESS,
    )
    result = await use_case.execute(order_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{order_id}/invoice",
    response_model=OrderInvoiceResponseDTO,
    responses={404: NOT_FOUND_RESPONSE}
)
async def get_order_invoice(
    order_id: str,
    session: AsyncSession = Depends(get_session),
    pdf_service: PdfService = Depends(get_pdf_service),
):
    """
    Render the order invoice as a base64-encoded PDF.

    **Example response:**
    ```json
    {
      "order_id": "4f0c...",
      "order_number": "ORD-001000",
      "filename": "invoice-ORD-001000.pdf",
      "content_type": "application/pdf",
      "pdf_base64": "JVBERi0xLjQKJeLjz9..."
    }
    ```
    """
    return await _generate_invoice(order_id, session, pdf_service)


@router.get(
    "/{order_id}/invoice/pdf",
    responses={
        200: {
            "content": {"application/pdf": {}},
            "description": "PDF document"
        },
        404: NOT_FOUND_RESPONSE,
    }
)
async def download_order_invoice_pdf(
    order_id: str,
    session: AsyncSession = Depends(get_session),
    pdf_service: PdfService = Depends(get_pdf_service),
):
    """Download the order invoice as a PDF file."""
    invoice = await _generate_invoice(order_id, session, pdf_service)

    return Response(
        content=base64.b64decode(invoice.pdf_base64),
        media_type=invoice.content_type,
        headers={"Content-Disposition": f"attachment; filename={invoice.filename}"}
    )
