"""Subscriptions API Routes

FastAPI routes for maintenance plan subscriptions.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.subscription_request import (
    CreateSubscriptionRequestSchema,
    UpdateSubscriptionRequestSchema,
    CancelSubscriptionRequestSchema,
    PauseSubscriptionRequestSchema,
)
from src.app.use_cases.subscriptions import (
    CreateSubscription,
    UpdateSubscription,
    CancelSubscription,
    PauseSubscription,
    ResumeSubscription,
    ProcessSubscriptionBilling,
    GetSubscription,
    ListSubscriptions,
    GetSubscriptionStats,
    ListPlans,
    GetPlan,
    CreateSubscriptionCommandDTO,
    UpdateSubscriptionCommandDTO,
    CancelSubscriptionCommandDTO,
    PauseSubscriptionCommandDTO,
    ListSubscriptionsQueryDTO,
    SubscriptionStatsQueryDTO,
    SubscriptionResponseDTO,
    ListSubscriptionsResponseDTO,
    BillingResultDTO,
    SubscriptionStatsResponseDTO,
    MaintenancePlanDTO,
)
from src.app.services.event_publisher import EventPublisher
from src.app.services.payment_gateway import PaymentGateway
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.repositories.subscription_charge_repository import SqlAlchemySubscriptionChargeRepository
from src.adapter.repositories.maintenance_plan_repository import StaticMaintenancePlanRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session, get_payment_gateway, get_event_publisher
from src.domain.subscription import SubscriptionStatus, BillingCycle
from src.api.error import ClientError

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])

NOT_FOUND_RESPONSE = {
    "description": "Subscription not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "SUBSCRIPTION_NOT_FOUND",
                    "message": "Subscription not found"
                }
            }
        }
    }
}


@router.post(
    "",
    response_model=SubscriptionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {
            "description": "Unknown or inactive plan",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PLAN_NOT_FOUND",
                            "message": "Plan not found"
                        }
                    }
                }
            }
        },
        402: {
            "description": "Recurring payment rejected by the provider",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "RECURRING_PAYMENT_FAILED",
                            "message": "Your card was declined."
                        }
                    }
                }
            }
        }
    }
)
async def create_subscription(
    request: CreateSubscriptionRequestSchema,
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    event_publisher: EventPublisher = Depends(get_event_publisher),
):
    """
    Subscribe a customer to a maintenance plan.

    Yearly billing is twelve months at a 10% discount. With `trial_days`
    the first charge moves to the end of the trial and no recurring payment
    is registered with the provider yet.

    **Returns:**
    - 201: Subscription created
    - 402: Provider rejected the recurring payment
    - 404: Plan not found or inactive
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = CreateSubscription(
        uow,
        SqlAlchemySubscriptionRepository(session),
        StaticMaintenancePlanRepository(),
        payment_gateway,
        event_publisher,
        currency=ApplicationConfig.DEFAULT_CURRENCY,
    )
    result = await use_case.execute(
        CreateSubscriptionCommandDTO(**request.model_dump())
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("", response_model=ListSubscriptionsResponseDTO)
async def list_subscriptions(
    subscription_status: Optional[SubscriptionStatus] = Query(default=None, alias="status"),
    customer_id: Optional[str] = None,
    plan_id: Optional[str] = None,
    billing_cycle: Optional[BillingCycle] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
):
    """List subscriptions, newest first, filtered by status, customer, plan, cycle and creation date."""
    query = ListSubscriptionsQueryDTO(
        status=subscription_status,
        customer_id=customer_id,
        plan_id=plan_id,
        billing_cycle=billing_cycle,
        date_from=date_from,
        date_to=date_to,
        page=page,
        limit=limit,
    )

    use_case = ListSubscriptions(SqlAlchemySubscriptionRepository(session))
    result = await use_case.execute(query)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/stats", response_model=SubscriptionStatsResponseDTO)
async def get_subscription_stats(
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    session: AsyncSession = Depends(get_session),
):
    """
    Recurring revenue analytics.

    MRR sums the monthly amount of active subscriptions (yearly price / 12),
    ARR is MRR x 12 and churn is the share cancelled during the last 30 days.
    """
    use_case = GetSubscriptionStats(SqlAlchemySubscriptionRepository(session))
    result = await use_case.execute(SubscriptionStatsQueryDTO(date_from=date_from, date_to=date_to))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/plans", response_model=List[MaintenancePlanDTO])
async def list_plans():
    result = await ListPlans(StaticMaintenancePlanRepository()).execute()

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/plans/{plan_id}", response_model=MaintenancePlanDTO)
async def get_plan(plan_id: str):
    result = await GetPlan(StaticMaintenancePlanRepository()).execute(plan_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{subscription_id}",
    response_model=SubscriptionResponseDTO,
    responses={404: NOT_FOUND_RESPONSE}
)
async def get_subscription(subscription_id: str, session: AsyncSession = Depends(get_session)):
    result = await GetSubscription(SqlAlchemySubscriptionRepository(session)).execute(subscription_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch(
    "/{subscription_id}",
    response_model=SubscriptionResponseDTO,
    responses={404: NOT_FOUND_RESPONSE}
)
async def update_subscription(
    subscription_id: str,
    request: UpdateSubscriptionRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Change plan, billing cycle or auto-renew.

    A plan or cycle change re-prices the subscription. A cycle change also
    restarts the billing period from now, without proration.
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = UpdateSubscription(
        uow,
        SqlAlchemySubscriptionRepository(session),
        StaticMaintenancePlanRepository(),
    )
    result = await use_case.execute(
        UpdateSubscriptionCommandDTO(subscription_id=subscription_id, **request.model_dump())
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{subscription_id}/cancel",
    response_model=SubscriptionResponseDTO,
    responses={
        404: NOT_FOUND_RESPONSE,
        402: {
            "description": "Provider could not cancel the recurring payment",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "CANCEL_RECURRING_PAYMENT_FAILED",
                            "message": "Failed to cancel recurring payment"
                        }
                    }
                }
            }
        }
    }
)
async def cancel_subscription(
    subscription_id: str,
    request: Optional[CancelSubscriptionRequestSchema] = None,
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    event_publisher: EventPublisher = Depends(get_event_publisher),
):
    """
    Cancel a subscription and its recurring payment.

    With `cancel_at_period_end` (default) the subscription stays usable until
    its next billing date; otherwise it ends immediately.
    """
    request = request or CancelSubscriptionRequestSchema()
    uow = SqlAlchemyUnitOfWork(session)
    use_case = CancelSubscription(
        uow,
        SqlAlchemySubscriptionRepository(session),
        payment_gateway,
        event_publisher,
    )
    result = await use_case.execute(
        CancelSubscriptionCommandDTO(
            subscription_id=subscription_id,
            reason=request.reason,
            cancel_at_period_end=request.cancel_at_period_end,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{subscription_id}/pause",
    response_model=SubscriptionResponseDTO,
    responses={404: NOT_FOUND_RESPONSE}
)
async def pause_subscription(
    subscription_id: str,
    request: Optional[PauseSubscriptionRequestSchema] = None,
    session: AsyncSession = Depends(get_session),
):
    uow = SqlAlchemyUnitOfWork(session)
    use_case = PauseSubscription(uow, SqlAlchemySubscriptionRepository(session))
    result = await use_case.execute(
        PauseSubscriptionCommandDTO(
            subscription_id=subscription_id,
            resume_date=request.resume_date if request else None,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{subscription_id}/resume",
    response_model=SubscriptionResponseDTO,
    responses={404: NOT_FOUND_RESPONSE}
)
async def resume_subscription(subscription_id: str, session: AsyncSession = Depends(get_session)):
    uow = SqlAlchemyUnitOfWork(session)
    use_case = ResumeSubscription(uow, SqlAlchemySubscriptionRepository(session))
    result = await use_case.execute(subscription_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{subscription_id}/billing",
    response_model=BillingResultDTO,
    responses={
        404: NOT_FOUND_RESPONSE,
        402: {
            "description": "Renewal charge declined; the subscription expires",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PAYMENT_FAILED",
                            "message": "Your card was declined."
                        }
                    }
                }
            }
        }
    }
)
async def process_subscription_billing(
    subscription_id: str,
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    event_publisher: EventPublisher = Depends(get_event_publisher),
):
    """
    Charge the current billing period of an active subscription.

    Billing the same period twice returns the recorded charge with
    `duplicate: true` and does not charge again. A subscription that is not
    due yet returns its latest charge with `not_due: true`; check the
    charge's `billing_period_start` for the period it covers.
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = ProcessSubscriptionBilling(
        uow,
        SqlAlchemySubscriptionRepository(session),
        SqlAlchemySubscriptionChargeRepository(session),
        payment_gateway,
        event_publisher,
    )
    result = await use_case.execute(subscription_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
