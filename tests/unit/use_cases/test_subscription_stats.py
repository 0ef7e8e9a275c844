"""Unit tests for GetSubscriptionStats and the plan catalogue use cases"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.adapter.repositories.maintenance_plan_repository import StaticMaintenancePlanRepository
from src.app.use_cases.subscriptions import (
    GetPlan,
    GetSubscriptionStats,
    ListPlans,
    SubscriptionStatsQueryDTO,
)
from src.domain.base import utcnow
from src.domain.subscription import Subscription, SubscriptionStatus, BillingCycle


def make_subscription(sub_id, plan_id, plan_name, price, created_at, **overrides):
    values = dict(
        id=sub_id,
        customer_id=f"cus_{sub_id}",
        plan_id=plan_id,
        plan_name=plan_name,
        status=SubscriptionStatus.ACTIVE,
        billing_cycle=BillingCycle.MONTHLY,
        price=price,
        currency="EUR",
        start_date=created_at,
        next_billing_date=created_at + timedelta(days=30),
        payment_method_id="pm_card_visa",
        created_at=created_at,
        updated_at=created_at,
    )
    values.update(overrides)
    return Subscription(**values)


@pytest.fixture
def subscriptions():
    now = utcnow()
    return [
        make_subscription(
            "s1", "standard-maintenance", "Mantenimiento Estándar", Decimal("99.00"), datetime(2024, 1, 1)
        ),
        make_subscription(
            "s2",
            "premium-maintenance",
            "Mantenimiento Premium",
            Decimal("2149.20"),
            datetime(2024, 2, 1),
            billing_cycle=BillingCycle.YEARLY,
        ),
        make_subscription(
            "s3",
            "basic-maintenance",
            "Mantenimiento Básico",
            Decimal("49.00"),
            datetime(2024, 3, 1),
            status=SubscriptionStatus.CANCELLED,
            cancelled_at=now - timedelta(days=5),
        ),
        make_subscription(
            "s4",
            "basic-maintenance",
            "Mantenimiento Básico",
            Decimal("49.00"),
            datetime(2023, 6, 1),
            status=SubscriptionStatus.CANCELLED,
            cancelled_at=datetime(2023, 7, 1),
        ),
    ]


@pytest.fixture
def mock_subscription_repo(subscriptions):
    repo = MagicMock()
    repo.list_created_between = AsyncMock(return_value=subscriptions)
    return repo


@pytest.mark.asyncio
class TestGetSubscriptionStats:
    async def test_recurring_revenue(self, mock_subscription_repo):
        """
        Given: A monthly 99.00 and a yearly 2149.20 active subscription
        When: Stats are computed
        Then: MRR = 99.00 + 179.10, ARR = MRR * 12, ARPU = MRR / 2
        """
        # Act
        result = await GetSubscriptionStats(mock_subscription_repo).execute(SubscriptionStatsQueryDTO())

        # Assert
        stats = result.value
        assert stats.total_subscriptions == 4
        assert stats.active_subscriptions == 2
        assert stats.monthly_recurring_revenue == Decimal("278.10")
        assert stats.annual_recurring_revenue == Decimal("3337.20")
        assert stats.average_revenue_per_user == Decimal("139.05")

    async def test_churn_counts_last_thirty_days_only(self, mock_subscription_repo):
        # Act
        result = await GetSubscriptionStats(mock_subscription_repo).execute(SubscriptionStatsQueryDTO())

        # Assert
        assert result.value.churn_rate == Decimal("25.00")
        assert result.value.subscriptions_by_status == {"active": 2, "cancelled": 2}

    async def test_plans_ordered_by_revenue(self, mock_subscription_repo):
        # Act
        result = await GetSubscriptionStats(mock_subscription_repo).execute(SubscriptionStatsQueryDTO())

        # Assert
        by_plan = result.value.subscriptions_by_plan
        assert [p.plan_id for p in by_plan] == [
            "premium-maintenance",
            "standard-maintenance",
            "basic-maintenance",
        ]
        assert by_plan[0].revenue == Decimal("179.10")
        assert by_plan[2].count == 2
        assert by_plan[2].revenue == Decimal("0")

    async def test_recent_subscriptions_newest_first(self, mock_subscription_repo):
        # Act
        result = await GetSubscriptionStats(mock_subscription_repo).execute(SubscriptionStatsQueryDTO())

        # Assert
        assert [s.subscription_id for s in result.value.recent_subscriptions] == ["s3", "s2", "s1", "s4"]

    async def test_date_range_passed_to_repository(self, mock_subscription_repo):
        # Act
        await GetSubscriptionStats(mock_subscription_repo).execute(
            SubscriptionStatsQueryDTO(date_from=datetime(2024, 1, 1), date_to=datetime(2024, 12, 31))
        )

        # Assert
        mock_subscription_repo.list_created_between.assert_called_once_with(
            datetime(2024, 1, 1), datetime(2024, 12, 31)
        )

    async def test_empty_period(self):
        # Arrange
        repo = MagicMock()
        repo.list_created_between = AsyncMock(return_value=[])

        # Act
        result = await GetSubscriptionStats(repo).execute(SubscriptionStatsQueryDTO())

        # Assert
        assert result.value.total_subscriptions == 0
        assert result.value.churn_rate == Decimal("0")
        assert result.value.average_revenue_per_user == Decimal("0")
        assert result.value.subscriptions_by_plan == []


@pytest.mark.asyncio
class TestPlanCatalogue:
    async def test_list_plans_includes_yearly_price(self):
        # Act
        result = await ListPlans(StaticMaintenancePlanRepository()).execute()

        # Assert
        plans = {plan.id: plan for plan in result.value}
        assert set(plans) == {"basic-maintenance", "standard-maintenance", "premium-maintenance"}
        assert plans["basic-maintenance"].price == Decimal("49")
        assert plans["basic-maintenance"].yearly_price == Decimal("529.20")
        assert plans["premium-maintenance"].yearly_price == Decimal("2149.20")

    async def test_get_plan(self):
        # Act
        result = await GetPlan(StaticMaintenancePlanRepository()).execute("standard-maintenance")

        # Assert
        assert result.value.name == "Mantenimiento Estándar"
        assert result.value.yearly_price == Decimal("1069.20")

    async def test_get_unknown_plan(self):
        # Act
        result = await GetPlan(StaticMaintenancePlanRepository()).execute("gold-maintenance")

        # Assert
        assert result.error.code == "PLAN_NOT_FOUND"
