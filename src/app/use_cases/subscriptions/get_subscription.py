"""GetSubscription Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.subscription_repository import SubscriptionRepository
from .dtos import SubscriptionResponseDTO


class GetSubscription:
    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(self, subscription_id: str) -> Result[SubscriptionResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id)
            if not subscription:
                return Return.err(
                    Error(
                        code="SUBSCRIPTION_NOT_FOUND",
                        message="Subscription not found",
                        reason=f"No subscription with id {subscription_id}",
                    )
                )

            return Return.ok(SubscriptionResponseDTO.from_entity(subscription))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_SUBSCRIPTION_FAILED",
                    message="Failed to retrieve subscription",
                    reason=str(e),
                )
            )
