"""GetOrderStats Use Case

Read-side aggregation of orders for the analytics dashboard.
"""

from collections import Counter, defaultdict
from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_item_repository import OrderItemRepository
from src.domain.base import to_utc_naive
from src.domain.pricing import to_money
from .dtos import OrderStatsQueryDTO, OrderStatsResponseDTO, OrderResponseDTO, TopProductDTO

RECENT_ORDERS_LIMIT = 10
TOP_PRODUCTS_LIMIT = 10


class GetOrderStats:
    """
    Use Case: Order statistics

    Business Rules:
    1. Only orders created within [date_from, date_to] are counted
    2. Revenue is the sum of order totals
    3. Top products are ranked by line revenue
    4. No side effects
    """

    def __init__(self, order_repo: OrderRepository, item_repo: OrderItemRepository):
        self.order_repo = order_repo
        self.item_repo = item_repo

    async def execute(self, query: OrderStatsQueryDTO) -> Result[OrderStatsResponseDTO]:
        try:
            orders = await self.order_repo.list_created_between(
                to_utc_naive(query.date_from) if query.date_from else None,
                to_utc_naive(query.date_to) if query.date_to else None,
            )
            items = await self.item_repo.get_by_order_ids([order.id for order in orders])

            total_orders = len(orders)
            total_revenue = sum((order.total for order in orders), Decimal("0"))
            average_order_value = (
                to_money(total_revenue / total_orders) if total_orders else Decimal("0")
            )

            by_status = Counter(order.status.value for order in orders)
            by_payment_status = Counter(order.payment_status.value for order in orders)

            recent = sorted(orders, key=lambda order: order.created_at, reverse=True)
            recent = recent[:RECENT_ORDERS_LIMIT]

            products = defaultdict(lambda: {"name": "", "quantity": 0, "revenue": Decimal("0")})
            for item in items:
                stats = products[item.product_id]
                stats["name"] = stats["name"] or item.product_name
                stats["quantity"] += item.quantity
                stats["revenue"] += item.total_price

            top_products = sorted(
                (
                    TopProductDTO(
                        product_id=product_id,
                        product_name=stats["name"],
                        quantity=stats["quantity"],
                        revenue=stats["revenue"],
                    )
                    for product_id, stats in products.items()
                ),
                key=lambda product: product.revenue,
                reverse=True,
            )[:TOP_PRODUCTS_LIMIT]

            return Return.ok(
                OrderStatsResponseDTO(
                    total_orders=total_orders,
                    total_revenue=total_revenue,
                    average_order_value=average_order_value,
                    orders_by_status=dict(by_status),
                    orders_by_payment_status=dict(by_payment_status),
                    recent_orders=[OrderResponseDTO.from_entities(order) for order in recent],
                    top_products=top_products,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_ORDER_STATS_FAILED",
                    message="Failed to compute order statistics",
                    reason=str(e),
                )
            )
