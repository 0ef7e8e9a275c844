"""Integration tests for Orders API endpoints"""

import base64
import pytest
from decimal import Decimal
from httpx import AsyncClient


def checkout_payload(**overrides):
    payload = {
        "customer_id": "cus_123",
        "items": [
            {
                "product_id": "web-basic",
                "product_name": "Web Básica",
                "delivery_time": "7-10 días",
                "quantity": 2,
                "unit_price": "100.00",
            },
            {
                "product_id": "seo-audit",
                "product_name": "Auditoría SEO",
                "delivery_time": "3 días",
                "quantity": 1,
                "unit_price": "50.00",
            },
        ],
        "billing_address": {
            "first_name": "Ana",
            "last_name": "García",
            "email": "ana@example.com",
            "city": "Madrid",
        },
        "payment_method_id": "pm_card_visa",
        "discount_code": "SAVE20",
    }
    payload.update(overrides)
    return payload


async def create_order(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/api/orders", json=checkout_payload(**overrides))
    assert response.status_code == 201
    return response.json()


class TestOrdersAPIIntegration:
    """Integration test suite for Orders API endpoints"""

    @pytest.mark.asyncio
    async def test_create_order(self, client: AsyncClient):
        """POST /orders computes totals server-side and returns 201"""
        # Act
        data = await create_order(client)

        # Assert
        assert data["order_number"] == "ORD-001000"
        assert data["status"] == "pending"
        assert data["payment_status"] == "pending"
        assert Decimal(data["subtotal"]) == Decimal("250.00")
        assert Decimal(data["discount_amount"]) == Decimal("50.00")
        assert Decimal(data["tax_amount"]) == Decimal("42.00")
        assert Decimal(data["total"]) == Decimal("242.00")
        assert data["customer_name"] == "Ana García"
        assert len(data["items"]) == 2
        assert len(data["milestones"]) == 4

    @pytest.mark.asyncio
    async def test_order_numbers_increase(self, client: AsyncClient):
        # Act
        first = await create_order(client)
        second = await create_order(client)

        # Assert
        assert first["order_number"] == "ORD-001000"
        assert second["order_number"] == "ORD-001001"

    @pytest.mark.asyncio
    async def test_create_order_without_items_is_validation_error(self, client: AsyncClient):
        # Act
        response = await client.post("/api/orders", json=checkout_payload(items=[]))

        # Assert
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_create_order_without_contact_is_validation_error(self, client: AsyncClient):
        # Act
        response = await client.post(
            "/api/orders", json=checkout_payload(billing_address={"city": "Madrid"})
        )

        # Assert
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_free_order_is_rejected(self, client: AsyncClient):
        """
        Given: A checkout whose only item costs nothing
        When: POST /orders is called
        Then: 400 INVALID_ORDER_TOTAL and no order is stored
        """
        # Act
        response = await client.post(
            "/api/orders",
            json=checkout_payload(
                items=[{"product_id": "gift", "product_name": "Regalo", "quantity": 1, "unit_price": "0"}],
                discount_code=None,
            ),
        )

        # Assert
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ORDER_TOTAL"
        listed = (await client.get("/api/orders")).json()
        assert listed["total"] == 0

    @pytest.mark.asyncio
    async def test_get_unknown_order_returns_404(self, client: AsyncClient):
        # Act
        response = await client.get("/api/orders/does-not-exist")

        # Assert
        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "ORDER_NOT_FOUND", "message": "Order not found"}
        }

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, client: AsyncClient):
        """
        Given: A new order
        When: It is paid, worked on, completed and fetched again
        Then: Status, payment status and milestones follow each step
        """
        # Arrange
        order = await create_order(client)
        order_id = order["order_id"]

        # Act & Assert - payment confirms the order
        response = await client.post(f"/api/orders/{order_id}/payment")
        assert response.status_code == 200
        paid = response.json()
        assert paid["payment_status"] == "paid"
        assert paid["status"] == "confirmed"
        assert paid["payment_id"].startswith("pi_")

        # Act & Assert - paying twice is rejected
        response = await client.post(f"/api/orders/{order_id}/payment")
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ORDER_ALREADY_PAID"

        # Act & Assert - work starts and finishes
        response = await client.post(f"/api/orders/{order_id}/status", json={"status": "in_progress"})
        assert response.status_code == 200
        response = await client.post(
            f"/api/orders/{order_id}/status",
            json={"status": "completed", "notes": "Delivered", "notify_customer": True},
        )
        assert response.status_code == 200
        completed = response.json()
        assert completed["delivered_at"] is not None
        assert all(m["status"] == "completed" for m in completed["milestones"])

        # Act & Assert - completed is final
        response = await client.post(f"/api/orders/{order_id}/status", json={"status": "cancelled"})
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"

        # Act & Assert - state is persisted
        response = await client.get(f"/api/orders/{order_id}")
        assert response.json()["status"] == "completed"

    @pytest.mark.asyncio
    async def test_declined_payment_returns_402(self, client: AsyncClient):
        # Arrange
        order = await create_order(client, payment_method_id="pm_card_declined")

        # Act
        response = await client.post(f"/api/orders/{order['order_id']}/payment")

        # Assert
        assert response.status_code == 402
        assert response.json()["error"] == {
            "code": "PAYMENT_FAILED",
            "message": "Your card was declined.",
        }
        stored = (await client.get(f"/api/orders/{order['order_id']}")).json()
        assert stored["payment_status"] == "failed"
        assert stored["status"] == "pending"

    @pytest.mark.asyncio
    async def test_retry_with_other_payment_method(self, client: AsyncClient):
        # Arrange
        order = await create_order(client, payment_method_id="pm_card_declined")
        await client.post(f"/api/orders/{order['order_id']}/payment")

        # Act
        response = await client.post(
            f"/api/orders/{order['order_id']}/payment", json={"payment_method_id": "pm_card_visa"}
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["payment_status"] == "paid"

    @pytest.mark.asyncio
    async def test_partial_refund_cancels_order(self, client: AsyncClient):
        # Arrange
        order = await create_order(client)
        await client.post(f"/api/orders/{order['order_id']}/payment")

        # Act
        response = await client.post(
            f"/api/orders/{order['order_id']}/refund", json={"amount": "42.00", "reason": "Late"}
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["refund_id"].startswith("re_")
        assert Decimal(data["refunded_amount"]) == Decimal("42.00")
        assert data["order"]["payment_status"] == "partially_refunded"
        assert data["order"]["status"] == "cancelled"

    @pytest.mark.asyncio
    async def test_refund_of_unpaid_order_returns_409(self, client: AsyncClient):
        # Arrange
        order = await create_order(client)

        # Act
        response = await client.post(f"/api/orders/{order['order_id']}/refund")

        # Assert
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ORDER_NOT_PAID"

    @pytest.mark.asyncio
    async def test_refund_above_total_returns_400(self, client: AsyncClient):
        # Arrange
        order = await create_order(client)
        await client.post(f"/api/orders/{order['order_id']}/payment")

        # Act
        response = await client.post(f"/api/orders/{order['order_id']}/refund", json={"amount": "999"})

        # Assert
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REFUND_AMOUNT"

    @pytest.mark.asyncio
    async def test_assign_is_idempotent(self, client: AsyncClient):
        # Arrange
        order = await create_order(client)
        url = f"/api/orders/{order['order_id']}/assign"

        # Act
        await client.post(url, json={"assignee_id": "dev-1"})
        response = await client.post(url, json={"assignee_id": "dev-1"})

        # Assert
        assert response.status_code == 200
        assert response.json()["assigned_to"] == ["dev-1"]

    @pytest.mark.asyncio
    async def test_update_milestone(self, client: AsyncClient):
        # Arrange
        order = await create_order(client)
        milestone = order["milestones"][2]

        # Act
        response = await client.put(
            f"/api/orders/{order['order_id']}/milestones/{milestone['id']}",
            json={"status": "completed"},
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert response.json()["completed_at"] is not None

    @pytest.mark.asyncio
    async def test_update_unknown_milestone_returns_404(self, client: AsyncClient):
        # Arrange
        order = await create_order(client)

        # Act
        response = await client.put(
            f"/api/orders/{order['order_id']}/milestones/nope", json={"status": "completed"}
        )

        # Assert
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "MILESTONE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_list_filters_and_search(self, client: AsyncClient):
        # Arrange
        paid = await create_order(client)
        await client.post(f"/api/orders/{paid['order_id']}/payment")
        await create_order(
            client,
            items=[{"product_id": "shop", "product_name": "Tienda Online", "quantity": 1, "unit_price": "900"}],
        )

        # Act
        confirmed = (await client.get("/api/orders", params={"status": "confirmed"})).json()
        shops = (await client.get("/api/orders", params={"search": "tienda"})).json()
        first_page = (await client.get("/api/orders", params={"limit": 1})).json()

        # Assert
        assert [o["order_id"] for o in confirmed["orders"]] == [paid["order_id"]]
        assert shops["total"] == 1
        assert first_page["total"] == 2
        assert first_page["has_more"] is True

    @pytest.mark.asyncio
    async def test_list_rejects_limit_above_100(self, client: AsyncClient):
        # Act
        response = await client.get("/api/orders", params={"limit": 101})

        # Assert
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient):
        # Arrange
        await create_order(client)
        await create_order(client, discount_code=None)

        # Act
        response = await client.get("/api/orders/stats")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["total_orders"] == 2
        assert Decimal(data["total_revenue"]) == Decimal("544.50")
        assert data["orders_by_status"] == {"pending": 2}
        assert data["top_products"][0]["product_id"] == "web-basic"

    @pytest.mark.asyncio
    async def test_invoice_json_and_pdf(self, client: AsyncClient):
        # Arrange
        order = await create_order(client)

        # Act
        as_json = await client.get(f"/api/orders/{order['order_id']}/invoice")
        as_pdf = await client.get(f"/api/orders/{order['order_id']}/invoice/pdf")

        # Assert
        assert as_json.status_code == 200
        invoice = as_json.json()
        assert invoice["filename"] == "invoice-ORD-001000.pdf"
        assert base64.b64decode(invoice["pdf_base64"]).startswith(b"%PDF")

        assert as_pdf.status_code == 200
        assert as_pdf.headers["content-type"] == "application/pdf"
        assert as_pdf.headers["content-disposition"] == "attachment; filename=invoice-ORD-001000.pdf"
        assert as_pdf.content.startswith(b"%PDF")

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        # Act
        response = await client.get("/health")

        # Assert
        assert response.json() == {"status": "ok"}
