"""Integration tests for Subscriptions API endpoints"""

import pytest
from datetime import datetime
from decimal import Decimal
from httpx import AsyncClient


async def subscribe(client: AsyncClient, **overrides) -> dict:
    payload = {
        "customer_id": "cus_123",
        "plan_id": "standard-maintenance",
        "payment_method_id": "pm_card_visa",
        "start_date": "2024-01-31T00:00:00",
    }
    payload.update(overrides)
    response = await client.post("/api/subscriptions", json=payload)
    assert response.status_code == 201
    return response.json()


class TestSubscriptionsAPIIntegration:
    """Integration test suite for Subscriptions API endpoints"""

    @pytest.mark.asyncio
    async def test_list_plans(self, client: AsyncClient):
        # Act
        response = await client.get("/api/subscriptions/plans")

        # Assert
        assert response.status_code == 200
        plans = {plan["id"]: plan for plan in response.json()}
        assert Decimal(plans["premium-maintenance"]["price"]) == Decimal("199")
        assert Decimal(plans["premium-maintenance"]["yearly_price"]) == Decimal("2149.20")

    @pytest.mark.asyncio
    async def test_get_unknown_plan_returns_404(self, client: AsyncClient):
        # Act
        response = await client.get("/api/subscriptions/plans/gold-maintenance")

        # Assert
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PLAN_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_create_monthly_subscription(self, client: AsyncClient):
        """POST /subscriptions registers the recurring payment and clamps month-end dates"""
        # Act
        data = await subscribe(client)

        # Assert
        assert data["status"] == "active"
        assert Decimal(data["price"]) == Decimal("99.00")
        assert data["provider_subscription_id"].startswith("sub_")
        assert datetime.fromisoformat(data["next_billing_date"]) == datetime(2024, 2, 29)

    @pytest.mark.asyncio
    async def test_create_yearly_with_coupon_and_trial(self, client: AsyncClient):
        # Act
        data = await subscribe(
            client, billing_cycle="yearly", coupon_code="SAVE20", trial_days=14, start_date="2024-03-01T00:00:00"
        )

        # Assert
        assert Decimal(data["price"]) == Decimal("855.36")
        assert data["provider_subscription_id"] is None
        assert datetime.fromisoformat(data["trial_end_date"]) == datetime(2024, 3, 15)
        assert datetime.fromisoformat(data["next_billing_date"]) == datetime(2025, 3, 15)

    @pytest.mark.asyncio
    async def test_declined_recurring_payment_returns_402(self, client: AsyncClient):
        # Act
        response = await client.post(
            "/api/subscriptions",
            json={
                "customer_id": "cus_123",
                "plan_id": "basic-maintenance",
                "payment_method_id": "pm_card_declined",
            },
        )

        # Assert
        assert response.status_code == 402
        assert response.json()["error"]["code"] == "RECURRING_PAYMENT_FAILED"
        listed = (await client.get("/api/subscriptions")).json()
        assert listed["total"] == 0

    @pytest.mark.asyncio
    async def test_unknown_plan_returns_404(self, client: AsyncClient):
        # Act
        response = await client.post(
            "/api/subscriptions",
            json={"customer_id": "cus_123", "plan_id": "gold", "payment_method_id": "pm_card_visa"},
        )

        # Assert
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_pause_resume_cancel(self, client: AsyncClient):
        """
        Given: An active subscription
        When: It is paused, resumed and cancelled at period end
        Then: Each step is reflected and cancelling twice is rejected
        """
        # Arrange
        sub = await subscribe(client)
        base = f"/api/subscriptions/{sub['subscription_id']}"

        # Act & Assert - pause
        response = await client.post(f"{base}/pause")
        assert response.status_code == 200
        assert response.json()["status"] == "paused"

        # Act & Assert - pausing twice
        response = await client.post(f"{base}/pause")
        assert response.status_code == 409

        # Act & Assert - resume
        response = await client.post(f"{base}/resume")
        assert response.status_code == 200
        resumed = response.json()
        assert resumed["status"] == "active"
        assert resumed["paused_at"] is None

        # Act & Assert - cancel
        response = await client.post(f"{base}/cancel", json={"reason": "Moving provider"})
        assert response.status_code == 200
        cancelled = response.json()
        assert cancelled["status"] == "cancelled"
        assert cancelled["auto_renew"] is False
        assert cancelled["end_date"] == resumed["next_billing_date"]

        # Act & Assert - cancel again
        response = await client.post(f"{base}/cancel")
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"

    @pytest.mark.asyncio
    async def test_update_plan(self, client: AsyncClient):
        # Arrange
        sub = await subscribe(client)

        # Act
        response = await client.patch(
            f"/api/subscriptions/{sub['subscription_id']}", json={"plan_id": "premium-maintenance"}
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["plan_name"] == "Mantenimiento Premium"
        assert Decimal(response.json()["price"]) == Decimal("199.00")

    @pytest.mark.asyncio
    async def test_overdue_subscription_bills_consecutive_periods(self, client: AsyncClient):
        """
        Given: A subscription whose billing dates are long past
        When: Billing is triggered twice
        Then: Each call charges the next period and advances the date once
        """
        # Arrange
        sub = await subscribe(client)
        url = f"/api/subscriptions/{sub['subscription_id']}/billing"

        # Act
        first = await client.post(url)
        second = await client.post(url)

        # Assert
        assert first.status_code == 200
        assert first.json()["duplicate"] is False
        assert first.json()["not_due"] is False
        assert first.json()["charge"]["idempotency_key"] == f"billing:{sub['subscription_id']}:2024-02-29"
        assert first.json()["charge"]["status"] == "paid"
        assert datetime.fromisoformat(first.json()["subscription"]["next_billing_date"]) == datetime(2024, 3, 29)

        assert second.status_code == 200
        assert second.json()["charge"]["idempotency_key"] == f"billing:{sub['subscription_id']}:2024-03-29"
        assert datetime.fromisoformat(second.json()["subscription"]["next_billing_date"]) == datetime(2024, 4, 29)

    @pytest.mark.asyncio
    async def test_billing_ahead_of_schedule_returns_latest_charge(self, client: AsyncClient):
        """
        Given: A new subscription billed once ahead of its due date
        When: Billing is triggered again
        Then: The earlier charge is returned flagged not_due and the date does not move
        """
        # Arrange
        sub = await subscribe(client, start_date=None)
        url = f"/api/subscriptions/{sub['subscription_id']}/billing"
        first = (await client.post(url)).json()

        # Act
        response = await client.post(url)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["duplicate"] is True
        assert data["charge"]["charge_id"] == first["charge"]["charge_id"]
        assert data["subscription"]["next_billing_date"] == first["subscription"]["next_billing_date"]
        assert data["not_due"] is True
        assert data["charge"]["billing_period_start"] != data["subscription"]["next_billing_date"]

    @pytest.mark.asyncio
    async def test_declined_renewal_expires_subscription(self, client: AsyncClient):
        # Arrange
        sub = await subscribe(client, payment_method_id="pm_card_declined", trial_days=1)
        url = f"/api/subscriptions/{sub['subscription_id']}/billing"

        # Act
        response = await client.post(url)

        # Assert
        assert response.status_code == 402
        assert response.json()["error"]["code"] == "PAYMENT_FAILED"
        stored = (await client.get(f"/api/subscriptions/{sub['subscription_id']}")).json()
        assert stored["status"] == "expired"
        assert stored["end_date"] is not None

    @pytest.mark.asyncio
    async def test_billing_paused_subscription_returns_409(self, client: AsyncClient):
        # Arrange
        sub = await subscribe(client)
        await client.post(f"/api/subscriptions/{sub['subscription_id']}/pause")

        # Act
        response = await client.post(f"/api/subscriptions/{sub['subscription_id']}/billing")

        # Assert
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "SUBSCRIPTION_NOT_ACTIVE"

    @pytest.mark.asyncio
    async def test_list_and_stats(self, client: AsyncClient):
        # Arrange
        await subscribe(client)
        await subscribe(client, plan_id="premium-maintenance", billing_cycle="yearly")

        # Act
        listed = (await client.get("/api/subscriptions", params={"billing_cycle": "yearly"})).json()
        stats = (await client.get("/api/subscriptions/stats")).json()

        # Assert
        assert listed["total"] == 1
        assert stats["total_subscriptions"] == 2
        assert stats["active_subscriptions"] == 2
        assert Decimal(stats["monthly_recurring_revenue"]) == Decimal("278.10")

    @pytest.mark.asyncio
    async def test_get_unknown_subscription_returns_404(self, client: AsyncClient):
        # Act
        response = await client.get("/api/subscriptions/missing")

        # Assert
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "SUBSCRIPTION_NOT_FOUND"
