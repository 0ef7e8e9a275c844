"""Subscription Billing Background Worker

Charges every active, auto-renewing subscription whose next billing date has
passed. Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
import time
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.repositories.subscription_charge_repository import SqlAlchemySubscriptionChargeRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.payment_gateway import create_payment_gateway
from src.adapter.services.event_publisher import create_event_publisher
from src.app.services.event_publisher import EventPublisher
from src.app.services.payment_gateway import PaymentGateway
from src.app.use_cases.subscriptions import ProcessSubscriptionBilling, BillingRunResultDTO
from src.domain.base import utcnow

logger = logging.getLogger(__name__)


class SubscriptionBillingWorker:
    """
    Background worker for recurring subscription billing

    Features:
    - Bills each due subscription in its own session and transaction
    - Idempotent: a period already charged is reported as skipped
    - A declined renewal expires the subscription (no retry)
    - Can run once or continuously

    Usage:
        worker = SubscriptionBillingWorker()
        result = await worker.run_once()

        worker = SubscriptionBillingWorker()
        await worker.run_forever(interval_seconds=3600)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        session_factory=None,
        payment_gateway: Optional[PaymentGateway] = None,
        event_publisher: Optional[EventPublisher] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            session_factory: Ready-made async session factory; skips engine creation
            payment_gateway: Gateway used for renewals (defaults to ApplicationConfig.PAYMENT_GATEWAY)
            event_publisher: Publisher for renewal/expiry events
        """
        self.engine = None
        if session_factory is None:
            self.engine = create_async_engine(db_uri or ApplicationConfig.DB_URI, echo=False, future=True)
            session_factory = sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )
        self.async_session_factory = session_factory

        self.payment_gateway = payment_gateway or create_payment_gateway(
            ApplicationConfig.PAYMENT_GATEWAY,
            base_url=ApplicationConfig.PAYMENT_API_URL,
            api_key=ApplicationConfig.PAYMENT_API_KEY,
            timeout=ApplicationConfig.PAYMENT_API_TIMEOUT,
        )
        self.event_publisher = event_publisher or create_event_publisher(
            ApplicationConfig.EVENT_WEBHOOK_URL
        )

        logger.info("SubscriptionBillingWorker initialized")

    async def run_once(self) -> BillingRunResultDTO:
        """
        Bill every subscription due at the time of the call

        Returns:
            BillingRunResultDTO with summary
        """
        start_time = time.time()
        now = utcnow()

        async with self.async_session_factory() as session:
            due = await SqlAlchemySubscriptionRepository(session).get_due_for_billing(now)
            due_ids = [subscription.id for subscription in due]

        logger.info(f"Found {len(due_ids)} subscriptions due for billing")

        renewed = 0
        failed = 0
        skipped = 0

        for subscription_id in due_ids:
            try:
                async with self.async_session_factory() as session:
                    use_case = ProcessSubscriptionBilling(
                        SqlAlchemyUnitOfWork(session),
                        SqlAlchemySubscriptionRepository(session),
                        SqlAlchemySubscriptionChargeRepository(session),
                        self.payment_gateway,
                        self.event_publisher,
                    )
                    result = await use_case.execute(subscription_id)

                if result.is_ok():
                    if result.value.duplicate:
                        skipped += 1
                    else:
                        renewed += 1
                        logger.info(
                            f"Renewed subscription {subscription_id} until "
                            f"{result.value.subscription.next_billing_date.isoformat()}"
                        )
                elif result.error.code == "PAYMENT_FAILED":
                    failed += 1
                    logger.warning(
                        f"Renewal of subscription {subscription_id} declined: {result.error.message}"
                    )
                else:
                    skipped += 1
                    logger.error(
                        f"Failed to bill subscription {subscription_id}: "
                        f"{result.error.code} {result.error.reason}"
                    )

            except Exception as e:
                logger.error(f"Unexpected error billing subscription {subscription_id}: {e}")
                skipped += 1

        execution_time_ms = int((time.time() - start_time) * 1000)

        logger.info(
            f"Subscription billing complete: {renewed}/{len(due_ids)} renewed, "
            f"{failed} failed, {skipped} skipped, {execution_time_ms}ms"
        )

        return BillingRunResultDTO(
            total_due=len(due_ids),
            renewed=renewed,
            failed=failed,
            skipped=skipped,
            executed_at=now,
            execution_time_ms=execution_time_ms,
        )

    async def run_forever(self, interval_seconds: int = None):
        """
        Run billing continuously

        Args:
            interval_seconds: Seconds between runs (default: ApplicationConfig.BILLING_INTERVAL_SECONDS)
        """
        interval_seconds = interval_seconds or ApplicationConfig.BILLING_INTERVAL_SECONDS
        logger.info(f"Starting continuous subscription billing with {interval_seconds}s interval")

        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Billing cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        if self.engine is not None:
            await self.engine.dispose()
        logger.info("SubscriptionBillingWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Bill everything due now
        python -m src.worker.subscription_billing

        # Run continuously
        python -m src.worker.subscription_billing --continuous --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Subscription Billing Worker")
    parser.add_argument("--continuous", action="store_true", help="Run continuously")
    parser.add_argument(
        "--interval",
        type=int,
        default=ApplicationConfig.BILLING_INTERVAL_SECONDS,
        help="Seconds between runs in continuous mode",
    )
    args = parser.parse_args()

    if not ApplicationConfig.BILLING_WORKER_ENABLED:
        logger.info("Subscription billing worker disabled by configuration")
        return

    worker = SubscriptionBillingWorker()

    try:
        if args.continuous:
            await worker.run_forever(args.interval)
        else:
            result = await worker.run_once()
            print("Subscription billing complete:")
            print(f"  Due subscriptions: {result.total_due}")
            print(f"  Renewed: {result.renewed}")
            print(f"  Failed: {result.failed}")
            print(f"  Skipped: {result.skipped}")
            print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
