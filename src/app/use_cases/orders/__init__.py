"""Order domain use cases"""
from .create_order import CreateOrder
from .update_order_status import UpdateOrderStatus
from .process_order_payment import ProcessOrderPayment
from .process_order_refund import ProcessOrderRefund
from .assign_order import AssignOrder
from .update_order_milestone import UpdateOrderMilestone
from .get_order import GetOrder
from .list_orders import ListOrders
from .get_order_stats import GetOrderStats
from .generate_order_invoice import GenerateOrderInvoice
from .dtos import (
    OrderItemInputDTO,
    CreateOrderCommandDTO,
    UpdateOrderStatusCommandDTO,
    ProcessOrderPaymentCommandDTO,
    ProcessOrderRefundCommandDTO,
    AssignOrderCommandDTO,
    UpdateOrderMilestoneCommandDTO,
    ListOrdersQueryDTO,
    OrderStatsQueryDTO,
    OrderItemDTO,
    OrderMilestoneDTO,
    OrderResponseDTO,
    ListOrdersResponseDTO,
    OrderRefundResponseDTO,
    TopProductDTO,
    OrderStatsResponseDTO,
    OrderInvoiceResponseDTO,
)

__all__ = [
    "CreateOrder",
    "UpdateOrderStatus",
    "ProcessOrderPayment",
    "ProcessOrderRefund",
    "AssignOrder",
    "UpdateOrderMilestone",
    "GetOrder",
    "ListOrders",
    "GetOrderStats",
    "GenerateOrderInvoice",
    "OrderItemInputDTO",
    "CreateOrderCommandDTO",
    "UpdateOrderStatusCommandDTO",
    "ProcessOrderPaymentCommandDTO",
    "ProcessOrderRefundCommandDTO",
    "AssignOrderCommandDTO",
    "UpdateOrderMilestoneCommandDTO",
    "ListOrdersQueryDTO",
    "OrderStatsQueryDTO",
    "OrderItemDTO",
    "OrderMilestoneDTO",
    "OrderResponseDTO",
    "ListOrdersResponseDTO",
    "OrderRefundResponseDTO",
    "TopProductDTO",
    "OrderStatsResponseDTO",
    "OrderInvoiceResponseDTO",
]
