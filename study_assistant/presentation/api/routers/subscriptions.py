"""API router for subscription management."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from ....core.dependencies import get_subscription_service
from ....domain.models.subscription import Subscription, observed_status
from ....services.subscription_service import SubscriptionService, plan_display_name
from ..schemas.subscription_schemas import ListSubscriptionsResponse, SubscriptionResponse

router = APIRouter(prefix="/api/subscriptions", tags=["Subscriptions"])


def _to_response(subscription: Subscription, now: datetime) -> SubscriptionResponse:
    return SubscriptionResponse(
        id=subscription.id,
        plan_id=subscription.plan_id,
        plan_name=plan_display_name(subscription.plan_id),
        status=observed_status(subscription, now).value,
        expiry_date=subscription.expiry_date,
        auto_renew=subscription.auto_renew,
        is_active=subscription.is_active(now),
    )


@router.get("", response_model=ListSubscriptionsResponse)
async def list_subscriptions(
    subscription_service: SubscriptionService = Depends(get_subscription_service),
) -> ListSubscriptionsResponse:
    """List every subscription with its status as observed now."""
    now = subscription_service.now()
    items = [_to_response(item, now) for item in subscription_service.list()]
    return ListSubscriptionsResponse(items=items, count=len(items))


@router.get("/active", response_model=Optional[SubscriptionResponse])
async def get_active_subscription(
    subscription_service: SubscriptionService = Depends(get_subscription_service),
) -> Optional[SubscriptionResponse]:
    subscription = subscription_service.get_active()
    if not subscription:
        return None
    return _to_response(subscription, subscription_service.now())


@router.post("/{subscription_id}/cancel", status_code=status.HTTP_200_OK)
async def cancel_subscription(
    subscription_id: str,
    subscription_service: SubscriptionService = Depends(get_subscription_service),
) -> dict:
    """Cancel a subscription and disable auto-renewal."""
    if not subscription_service.cancel(subscription_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Подписка не найдена",
        )
    return {"message": "Подписка отменена"}
