"""Service for the subscription lifecycle."""

from __future__ import annotations

import calendar
import logging
import random
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from ..domain.models.subscription import Subscription, SubscriptionStatus
from ..infrastructure.repositories.subscription_repository import SubscriptionRepository
from .identifiers import base36_token

logger = logging.getLogger(__name__)

# Plan tier -> entitlement length in months. Unknown tiers get one month.
PLAN_DURATION_MONTHS: Dict[str, int] = {
    "basic": 1,
    "student": 1,
    "pro": 3,
    "premium": 12,
}
DEFAULT_DURATION_MONTHS = 1

PLAN_NAMES: Dict[str, str] = {
    "basic": "Базовый",
    "premium": "Премиум",
    "student": "Студенческий",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month's length."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def plan_expiry_date(plan_id: str, now: datetime) -> datetime:
    months = PLAN_DURATION_MONTHS.get(plan_id, DEFAULT_DURATION_MONTHS)
    return add_months(now, months)


def plan_display_name(plan_id: str) -> str:
    return PLAN_NAMES.get(plan_id, plan_id)


class SubscriptionService:
    """Service for creating, listing and cancelling subscriptions."""

    def __init__(
        self,
        subscription_repository: SubscriptionRepository,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.subscription_repository = subscription_repository
        self._clock = clock or utc_now
        self._rng = rng or random.SystemRandom()

    def now(self) -> datetime:
        return self._clock()

    def create(self, plan_id: str) -> Subscription:
        """
        Create an active subscription for a plan tier.

        Args:
            plan_id: Plan tier; unknown tiers fall back to one month

        Returns:
            The persisted Subscription
        """
        subscription = Subscription(
            id=f"sub_{base36_token(self._rng)}",
            plan_id=plan_id,
            status=SubscriptionStatus.ACTIVE,
            expiry_date=plan_expiry_date(plan_id, self.now()),
            auto_renew=True,
        )
        self.subscription_repository.add(subscription)
        logger.info(
            "Created subscription %s for plan %s until %s",
            subscription.id,
            plan_id,
            subscription.expiry_date.isoformat(),
        )
        return subscription

    def list(self) -> List[Subscription]:
        """List all subscriptions in storage order, whatever their status."""
        return self.subscription_repository.list_all()

    def get_active(self) -> Optional[Subscription]:
        """
        Get the subscription to present as current.

        Returns:
            First stored subscription that is active and not yet expired,
            None otherwise
        """
        now = self.now()
        for subscription in self.subscription_repository.list_all():
            if subscription.is_active(now):
                return subscription
        return None

    def cancel(self, subscription_id: str) -> bool:
        """
        Cancel a subscription and switch off auto-renewal.

        Args:
            subscription_id: Subscription ID

        Returns:
            True if cancelled, False if no subscription has that ID
        """
        subscription = self.subscription_repository.get_by_id(subscription_id)
        if subscription is None:
            return False

        subscription.status = SubscriptionStatus.CANCELLED
        subscription.auto_renew = False
        self.subscription_repository.replace(subscription)
        logger.info("Cancelled subscription %s", subscription_id)
        return True
