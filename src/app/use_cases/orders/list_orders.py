"""ListOrders Use Case

Filtered, paginated order listing for the CRM dashboard.
"""

from collections import defaultdict
from libs.result import Result, Return, Error
from src.app.repositories.order_repository import OrderRepository, OrderFilter
from src.app.repositories.order_item_repository import OrderItemRepository
from src.domain.base import to_utc_naive
from .dtos import ListOrdersQueryDTO, ListOrdersResponseDTO, OrderResponseDTO


class ListOrders:
    """
    Use Case: List orders

    Business Rules:
    1. Newest orders first
    2. page is 1-based; has_more tells whether a further page exists
    3. Items are included, milestones are not
    """

    def __init__(self, order_repo: OrderRepository, item_repo: OrderItemRepository):
        self.order_repo = order_repo
        self.item_repo = item_repo

    async def execute(self, query: ListOrdersQueryDTO) -> Result[ListOrdersResponseDTO]:
        """
        Execute order listing

        Args:
            query: ListOrdersQueryDTO with filters and pagination

        Returns:
            Result[ListOrdersResponseDTO]: Page of orders or error
        """
        try:
            filters = OrderFilter(
                status=query.status,
                payment_status=query.payment_status,
                customer_id=query.customer_id,
                date_from=to_utc_naive(query.date_from) if query.date_from else None,
                date_to=to_utc_naive(query.date_to) if query.date_to else None,
                min_amount=query.min_amount,
                max_amount=query.max_amount,
                search=query.search,
            )
            offset = (query.page - 1) * query.limit
            orders, total = await self.order_repo.find(filters, limit=query.limit, offset=offset)

            items_by_order = defaultdict(list)
            for item in await self.item_repo.get_by_order_ids([order.id for order in orders]):
                items_by_order[item.order_id].append(item)

            return Return.ok(
                ListOrdersResponseDTO(
                    orders=[
                        OrderResponseDTO.from_entities(order, items_by_order[order.id])
                        for order in orders
                    ],
                    total=total,
                    page=query.page,
                    limit=query.limit,
                    has_more=offset + len(orders) < total,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_ORDERS_FAILED",
                    message="Failed to list orders",
                    reason=str(e),
                )
            )
