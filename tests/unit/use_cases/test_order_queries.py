"""Unit tests for order assignment, milestones, reads, statistics and invoices"""

import base64
import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.repositories.order_repository import OrderFilter
from src.app.use_cases.orders import (
    AssignOrder,
    UpdateOrderMilestone,
    GetOrder,
    ListOrders,
    GetOrderStats,
    GenerateOrderInvoice,
)
from src.app.use_cases.orders.dtos import (
    AssignOrderCommandDTO,
    UpdateOrderMilestoneCommandDTO,
    ListOrdersQueryDTO,
    OrderStatsQueryDTO,
)
from src.domain.order import Order, OrderItem, OrderMilestone, OrderStatus, MilestoneStatus
from src.domain.payment import PaymentStatus


def make_order(order_id="order-1", total="121.00", status=OrderStatus.PENDING,
               payment_status=PaymentStatus.PENDING, created_at=None, **overrides):
    values = dict(
        id=order_id,
        order_number=f"ORD-{order_id}",
        customer_id="cus_123",
        subtotal=Decimal(total),
        tax_amount=Decimal("0.00"),
        total=Decimal(total),
        status=status,
        payment_status=payment_status,
        payment_method_id="pm_card_visa",
        billing_address={},
        assigned_to=[],
        created_at=created_at or datetime(2024, 3, 1),
        updated_at=created_at or datetime(2024, 3, 1),
    )
    values.update(overrides)
    return Order(**values)


def make_item(order_id, product_id, quantity, total_price, name=None):
    return OrderItem(
        order_id=order_id,
        product_id=product_id,
        product_name=name or product_id,
        quantity=quantity,
        unit_price=Decimal(total_price) / quantity,
        total_price=Decimal(total_price),
    )


@pytest.fixture
def mock_order_repo():
    repo = MagicMock()
    repo.update = AsyncMock(side_effect=lambda order: order)
    return repo


@pytest.fixture
def mock_item_repo():
    repo = MagicMock()
    repo.get_by_order_id = AsyncMock(return_value=[])
    repo.get_by_order_ids = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_milestone_repo():
    repo = MagicMock()
    repo.get_by_order_id = AsyncMock(return_value=[])
    repo.update_many = AsyncMock(side_effect=lambda milestones: milestones)
    return repo


@pytest.mark.asyncio
class TestAssignOrder:
    async def test_assign_appends_member(self, mock_uow, mock_order_repo):
        # Arrange
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order(assigned_to=["dev_1"]))
        use_case = AssignOrder(mock_uow, mock_order_repo)

        # Act
        result = await use_case.execute(AssignOrderCommandDTO(order_id="order-1", assignee_id="dev_2"))

        # Assert
        assert result.value.assigned_to == ["dev_1", "dev_2"]
        mock_uow.commit.assert_called_once()

    async def test_assign_is_idempotent(self, mock_uow, mock_order_repo):
        # Arrange
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order(assigned_to=["dev_1"]))
        use_case = AssignOrder(mock_uow, mock_order_repo)

        # Act
        result = await use_case.execute(AssignOrderCommandDTO(order_id="order-1", assignee_id="dev_1"))

        # Assert
        assert result.value.assigned_to == ["dev_1"]
        mock_order_repo.update.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_assign_unknown_order(self, mock_uow, mock_order_repo):
        # Arrange
        mock_order_repo.get_by_id = AsyncMock(return_value=None)

        # Act
        result = await AssignOrder(mock_uow, mock_order_repo).execute(
            AssignOrderCommandDTO(order_id="missing", assignee_id="dev_1")
        )

        # Assert
        assert result.error.code == "ORDER_NOT_FOUND"


@pytest.mark.asyncio
class TestUpdateOrderMilestone:
    async def test_complete_milestone(self, mock_uow, mock_order_repo, mock_milestone_repo):
        # Arrange
        milestone = OrderMilestone(
            id="ms-2", order_id="order-1", position=1, title="Desarrollo Iniciado",
            due_date=datetime(2024, 3, 3),
        )
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order())
        mock_milestone_repo.get_by_id = AsyncMock(return_value=milestone)
        use_case = UpdateOrderMilestone(mock_uow, mock_order_repo, mock_milestone_repo)

        # Act
        result = await use_case.execute(
            UpdateOrderMilestoneCommandDTO(
                order_id="order-1", milestone_id="ms-2", status=MilestoneStatus.COMPLETED
            )
        )

        # Assert
        assert result.value.status == "completed"
        assert result.value.completed_at is not None
        mock_milestone_repo.get_by_id.assert_called_once_with("order-1", "ms-2")
        mock_milestone_repo.update_many.assert_called_once_with([milestone])
        mock_order_repo.update.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_reopen_clears_completion(self, mock_uow, mock_order_repo, mock_milestone_repo):
        # Arrange
        milestone = OrderMilestone(
            id="ms-2", order_id="order-1", position=1, title="Desarrollo Iniciado",
            due_date=datetime(2024, 3, 3), status=MilestoneStatus.COMPLETED,
            completed_at=datetime(2024, 3, 2),
        )
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order())
        mock_milestone_repo.get_by_id = AsyncMock(return_value=milestone)

        # Act
        result = await UpdateOrderMilestone(mock_uow, mock_order_repo, mock_milestone_repo).execute(
            UpdateOrderMilestoneCommandDTO(
                order_id="order-1", milestone_id="ms-2", status=MilestoneStatus.IN_PROGRESS
            )
        )

        # Assert
        assert result.value.status == "in_progress"
        assert result.value.completed_at is None

    async def test_unknown_milestone(self, mock_uow, mock_order_repo, mock_milestone_repo):
        # Arrange
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order())
        mock_milestone_repo.get_by_id = AsyncMock(return_value=None)

        # Act
        result = await UpdateOrderMilestone(mock_uow, mock_order_repo, mock_milestone_repo).execute(
            UpdateOrderMilestoneCommandDTO(
                order_id="order-1", milestone_id="nope", status=MilestoneStatus.COMPLETED
            )
        )

        # Assert
        assert result.error.code == "MILESTONE_NOT_FOUND"
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestGetOrder:
    async def test_returns_items_and_milestones(self, mock_order_repo, mock_item_repo, mock_milestone_repo):
        # Arrange
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order())
        mock_item_repo.get_by_order_id = AsyncMock(
            return_value=[make_item("order-1", "web-basic", 1, "100.00")]
        )

        # Act
        result = await GetOrder(mock_order_repo, mock_item_repo, mock_milestone_repo).execute("order-1")

        # Assert
        assert result.value.order_id == "order-1"
        assert len(result.value.items) == 1
        mock_order_repo.get_by_id.assert_called_once_with("order-1")

    async def test_not_found(self, mock_order_repo, mock_item_repo, mock_milestone_repo):
        # Arrange
        mock_order_repo.get_by_id = AsyncMock(return_value=None)

        # Act
        result = await GetOrder(mock_order_repo, mock_item_repo, mock_milestone_repo).execute("missing")

        # Assert
        assert result.error.code == "ORDER_NOT_FOUND"


@pytest.mark.asyncio
class TestListOrders:
    async def test_pagination_and_filters(self, mock_order_repo, mock_item_repo):
        """
        Given: 45 matching orders and page 2 of size 20
        When: Orders are listed
        Then: offset 20 is requested and has_more is True
        """
        # Arrange
        page = [make_order(order_id=f"o{i}") for i in range(20)]
        mock_order_repo.find = AsyncMock(return_value=(page, 45))
        mock_item_repo.get_by_order_ids = AsyncMock(
            return_value=[make_item("o0", "web-basic", 1, "100.00")]
        )

        # Act
        result = await ListOrders(mock_order_repo, mock_item_repo).execute(
            ListOrdersQueryDTO(status=OrderStatus.PENDING, search="ana", page=2, limit=20)
        )

        # Assert
        assert result.value.total == 45
        assert result.value.page == 2
        assert result.value.has_more is True
        assert len(result.value.orders[0].items) == 1
        assert result.value.orders[1].items == []

        filters = mock_order_repo.find.call_args.args[0]
        assert isinstance(filters, OrderFilter)
        assert filters.status == OrderStatus.PENDING
        assert filters.search == "ana"
        assert mock_order_repo.find.call_args.kwargs == {"limit": 20, "offset": 20}

    async def test_last_page(self, mock_order_repo, mock_item_repo):
        # Arrange
        mock_order_repo.find = AsyncMock(return_value=([make_order()], 41))

        # Act
        result = await ListOrders(mock_order_repo, mock_item_repo).execute(
            ListOrdersQueryDTO(page=3, limit=20)
        )

        # Assert
        assert result.value.has_more is False


@pytest.mark.asyncio
class TestGetOrderStats:
    async def test_aggregates(self, mock_order_repo, mock_item_repo):
        # Arrange
        orders = [
            make_order("o1", "100.00", OrderStatus.COMPLETED, PaymentStatus.PAID, datetime(2024, 3, 1)),
            make_order("o2", "50.00", OrderStatus.PENDING, PaymentStatus.PENDING, datetime(2024, 3, 3)),
            make_order("o3", "25.00", OrderStatus.PENDING, PaymentStatus.FAILED, datetime(2024, 3, 2)),
        ]
        mock_order_repo.list_created_between = AsyncMock(return_value=orders)
        mock_item_repo.get_by_order_ids = AsyncMock(
            return_value=[
                make_item("o1", "web-basic", 1, "100.00", "Web Básica"),
                make_item("o2", "seo-audit", 2, "50.00", "Auditoría SEO"),
                make_item("o3", "web-basic", 1, "25.00", "Web Básica"),
            ]
        )

        # Act
        result = await GetOrderStats(mock_order_repo, mock_item_repo).execute(OrderStatsQueryDTO())

        # Assert
        stats = result.value
        assert stats.total_orders == 3
        assert stats.total_revenue == Decimal("175.00")
        assert stats.average_order_value == Decimal("58.33")
        assert stats.orders_by_status == {"completed": 1, "pending": 2}
        assert stats.orders_by_payment_status == {"paid": 1, "pending": 1, "failed": 1}
        assert [o.order_id for o in stats.recent_orders] == ["o2", "o3", "o1"]
        assert stats.top_products[0].product_id == "web-basic"
        assert stats.top_products[0].quantity == 2
        assert stats.top_products[0].revenue == Decimal("125.00")

    async def test_empty_range(self, mock_order_repo, mock_item_repo):
        # Arrange
        mock_order_repo.list_created_between = AsyncMock(return_value=[])

        # Act
        result = await GetOrderStats(mock_order_repo, mock_item_repo).execute(
            OrderStatsQueryDTO(date_from=datetime(2030, 1, 1))
        )

        # Assert
        assert result.value.total_orders == 0
        assert result.value.average_order_value == Decimal("0")
        assert result.value.top_products == []


@pytest.mark.asyncio
class TestGenerateOrderInvoice:
    async def test_returns_base64_pdf(self, mock_order_repo, mock_item_repo):
        # Arrange
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order())
        pdf_service = MagicMock()
        pdf_service.generate_order_invoice = MagicMock(return_value=b"%PDF-1.4 test")
        use_case = GenerateOrderInvoice(mock_order_repo, mock_item_repo, pdf_service, company_name="Acme")

        # Act
        result = await use_case.execute("order-1")

        # Assert
        assert result.value.filename == "invoice-ORD-order-1.pdf"
        assert base64.b64decode(result.value.pdf_base64) == b"%PDF-1.4 test"
        assert pdf_service.generate_order_invoice.call_args.kwargs["company_name"] == "Acme"

    async def test_not_found(self, mock_order_repo, mock_item_repo):
        # Arrange
        mock_order_repo.get_by_id = AsyncMock(return_value=None)

        # Act
        result = await GenerateOrderInvoice(mock_order_repo, mock_item_repo, MagicMock()).execute("x")

        # Assert
        assert result.error.code == "ORDER_NOT_FOUND"
