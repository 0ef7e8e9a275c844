"""GetSubscriptionStats Use Case

Recurring revenue figures for the analytics dashboard.
"""

from collections import Counter
from datetime import timedelta
from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.base import utcnow, to_utc_naive
from src.domain.pricing import to_money
from src.domain.subscription import SubscriptionStatus
from .dtos import (
    SubscriptionStatsQueryDTO,
    SubscriptionStatsResponseDTO,
    SubscriptionResponseDTO,
    PlanStatsDTO,
)

CHURN_WINDOW = timedelta(days=30)
RECENT_SUBSCRIPTIONS_LIMIT = 10


class GetSubscriptionStats:
    """
    Use Case: Subscription statistics

    Business Rules:
    1. Only subscriptions created within [date_from, date_to] are counted
    2. MRR = sum of monthly amounts of active subscriptions (yearly / 12)
    3. ARR = MRR * 12
    4. churn rate = cancelled within the last 30 days / total * 100
    5. ARPU = MRR / active subscriptions
    6. Per-plan revenue counts active subscriptions only
    """

    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(self, query: SubscriptionStatsQueryDTO) -> Result[SubscriptionStatsResponseDTO]:
        try:
            subscriptions = await self.subscription_repo.list_created_between(
                to_utc_naive(query.date_from) if query.date_from else None,
                to_utc_naive(query.date_to) if query.date_to else None,
            )

            total = len(subscriptions)
            active = [s for s in subscriptions if s.status == SubscriptionStatus.ACTIVE]
            mrr = sum((s.monthly_amount for s in active), Decimal("0"))

            churn_cutoff = utcnow() - CHURN_WINDOW
            recently_cancelled = sum(
                1
                for s in subscriptions
                if s.status == SubscriptionStatus.CANCELLED
                and s.cancelled_at
                and s.cancelled_at >= churn_cutoff
            )
            churn_rate = (
                to_money(Decimal(recently_cancelled) / total * 100) if total else Decimal("0")
            )
            arpu = to_money(mrr / len(active)) if active else Decimal("0")

            plans = {}
            for s in subscriptions:
                stats = plans.setdefault(
                    s.plan_id, {"name": s.plan_name, "count": 0, "revenue": Decimal("0")}
                )
                stats["count"] += 1
                if s.status == SubscriptionStatus.ACTIVE:
                    stats["revenue"] += s.monthly_amount

            by_plan = sorted(
                (
                    PlanStatsDTO(
                        plan_id=plan_id,
                        plan_name=stats["name"],
                        count=stats["count"],
                        revenue=to_money(stats["revenue"]),
                    )
                    for plan_id, stats in plans.items()
                ),
                key=lambda plan: plan.revenue,
                reverse=True,
            )

            recent = sorted(subscriptions, key=lambda s: s.created_at, reverse=True)
            recent = recent[:RECENT_SUBSCRIPTIONS_LIMIT]

            return Return.ok(
                SubscriptionStatsResponseDTO(
                    total_subscriptions=total,
                    active_subscriptions=len(active),
                    monthly_recurring_revenue=to_money(mrr),
                    annual_recurring_revenue=to_money(mrr * 12),
                    churn_rate=churn_rate,
                    average_revenue_per_user=arpu,
                    subscriptions_by_status=dict(Counter(s.status.value for s in subscriptions)),
                    subscriptions_by_plan=by_plan,
                    recent_subscriptions=[SubscriptionResponseDTO.from_entity(s) for s in recent],
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_SUBSCRIPTION_STATS_FAILED",
                    message="Failed to compute subscription statistics",
                    reason=str(e),
                )
            )
