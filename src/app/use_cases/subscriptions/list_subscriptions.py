"""ListSubscriptions Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.subscription_repository import SubscriptionRepository, SubscriptionFilter
from src.domain.base import to_utc_naive
from .dtos import ListSubscriptionsQueryDTO, ListSubscriptionsResponseDTO, SubscriptionResponseDTO


class ListSubscriptions:
    """
    Use Case: List subscriptions

    Newest first; page is 1-based.
    """

    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(self, query: ListSubscriptionsQueryDTO) -> Result[ListSubscriptionsResponseDTO]:
        try:
            filters = SubscriptionFilter(
                status=query.status,
                customer_id=query.customer_id,
                plan_id=query.plan_id,
                billing_cycle=query.billing_cycle,
                date_from=to_utc_naive(query.date_from) if query.date_from else None,
                date_to=to_utc_naive(query.date_to) if query.date_to else None,
            )
            offset = (query.page - 1) * query.limit
            subscriptions, total = await self.subscription_repo.find(
                filters, limit=query.limit, offset=offset
            )

            return Return.ok(
                ListSubscriptionsResponseDTO(
                    subscriptions=[SubscriptionResponseDTO.from_entity(s) for s in subscriptions],
                    total=total,
                    page=query.page,
                    limit=query.limit,
                    has_more=offset + len(subscriptions) < total,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_SUBSCRIPTIONS_FAILED",
                    message="Failed to list subscriptions",
                    reason=str(e),
                )
            )
