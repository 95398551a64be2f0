"""Repository for Subscription persistence."""

import logging
from typing import List, Optional

from ...domain.models.subscription import Subscription
from ...domain.ports.persistence import KeyValueStore

logger = logging.getLogger(__name__)


class SubscriptionRepository:
    """Repository keeping Subscription records as one JSON array in the store."""

    SLOT = "userSubscriptions"

    def __init__(self, store: KeyValueStore):
        self._store = store

    def list_all(self) -> List[Subscription]:
        """List every subscription in insertion order."""
        raw = self._store.get(self.SLOT)
        if not isinstance(raw, list):
            if raw is not None:
                logger.error("Slot %s does not hold a list; treating it as empty.", self.SLOT)
            return []
        subscriptions = []
        for index, item in enumerate(raw):
            try:
                subscriptions.append(Subscription.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.error("Skipping malformed record %d in slot %s.", index, self.SLOT)
        return subscriptions

    def get_by_id(self, subscription_id: str) -> Optional[Subscription]:
        """Get subscription by ID."""
        for subscription in self.list_all():
            if subscription.id == subscription_id:
                return subscription
        return None

    def add(self, subscription: Subscription) -> None:
        """Append a subscription to the stored collection."""
        subscriptions = self.list_all()
        subscriptions.append(subscription)
        self._save(subscriptions)

    def replace(self, subscription: Subscription) -> bool:
        """Overwrite the stored record sharing the subscription's ID."""
        subscriptions = self.list_all()
        for index, existing in enumerate(subscriptions):
            if existing.id == subscription.id:
                subscriptions[index] = subscription
                self._save(subscriptions)
                return True
        return False

    def _save(self, subscriptions: List[Subscription]) -> None:
        self._store.set(self.SLOT, [item.to_dict() for item in subscriptions])
