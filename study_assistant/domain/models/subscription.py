"""Subscription domain model and its read-time status projection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class Subscription:
    """
    Subscription entity granting access to a plan tier until ``expiry_date``.

    Attributes:
        id: Opaque identifier generated at creation
        plan_id: Plan tier (basic, premium, student, legacy pro, or anything else)
        status: Stored status; ``expired`` is only ever observed, never stored
        expiry_date: Timezone-aware UTC timestamp at which access ends
        auto_renew: True at creation, forced to False on cancellation
    """

    id: str
    plan_id: str
    status: SubscriptionStatus
    expiry_date: datetime
    auto_renew: bool = True

    def is_active(self, now: datetime) -> bool:
        """Check if subscription grants access at ``now``."""
        return self.status is SubscriptionStatus.ACTIVE and self.expiry_date > now

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "planId": self.plan_id,
            "status": self.status.value,
            "expiryDate": self.expiry_date.isoformat(),
            "autoRenew": self.auto_renew,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subscription":
        expiry = datetime.fromisoformat(str(data["expiryDate"]).replace("Z", "+00:00"))
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)
        return cls(
            id=data["id"],
            plan_id=data["planId"],
            status=SubscriptionStatus(data["status"]),
            expiry_date=expiry,
            auto_renew=bool(data.get("autoRenew", False)),
        )


def observed_status(subscription: Subscription, now: datetime) -> SubscriptionStatus:
    """Status as presented at ``now``: lapsed active records read as expired."""
    if subscription.status is SubscriptionStatus.ACTIVE and subscription.expiry_date <= now:
        return SubscriptionStatus.EXPIRED
    return subscription.status
