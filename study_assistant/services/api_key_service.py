"""Service for the mock API key management area."""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from ..domain.models.api_key import ApiKey, ApiKeyUsage, DailyUsage, UsageStats
from ..infrastructure.repositories.api_key_repository import ApiKeyRepository
from .identifiers import alphanumeric_token, base36_token
from .subscription_service import utc_now

logger = logging.getLogger(__name__)

KEY_PREFIX = "sk-"
KEY_BODY_LENGTH = 48
COST_PER_TOKEN = 0.0015
MASK_VISIBLE_PREFIX = 8
MASK_VISIBLE_SUFFIX = 4
MASK_CHAR = "*"

# Simulated round-trip times in seconds.
CREATE_LATENCY = 1.0
LIST_LATENCY = 0.5
GET_LATENCY = 0.3
UPDATE_LATENCY = 0.5
DELETE_LATENCY = 0.5
STATS_LATENCY = 0.8
TEST_LATENCY = 1.0


class ApiKeyServiceError(RuntimeError):
    """Simulated transient backend failure."""


class ApiKeyNotFoundError(LookupError):
    def __init__(self, api_key_id: str) -> None:
        super().__init__("API key not found")
        self.api_key_id = api_key_id


def mask_api_key(api_key: str) -> str:
    """Hide the middle of a secret, keeping its first 8 and last 4 characters.

    Secrets too short to have an interior are returned unchanged.
    """
    if len(api_key) <= MASK_VISIBLE_PREFIX + MASK_VISIBLE_SUFFIX:
        return api_key
    start = api_key[:MASK_VISIBLE_PREFIX]
    end = api_key[-MASK_VISIBLE_SUFFIX:]
    hidden = MASK_CHAR * (len(api_key) - MASK_VISIBLE_PREFIX - MASK_VISIBLE_SUFFIX)
    return f"{start}{hidden}{end}"


def format_cost(cost: float) -> str:
    """Render a USD amount with two to four decimals, e.g. ``$1,234.50``."""
    whole, fraction = f"{abs(cost):,.4f}".split(".")
    fraction = fraction.rstrip("0").ljust(2, "0")
    sign = "-" if cost < 0 else ""
    return f"{sign}${whole}.{fraction}"


def format_tokens(tokens: int) -> str:
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{tokens / 1_000:.1f}K"
    return str(tokens)


class ApiKeyService:
    """Simulates a remote key-management backend on top of the local store."""

    def __init__(
        self,
        api_key_repository: ApiKeyRepository,
        latency_scale: float = 1.0,
        failure_rate: float = 0.05,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.api_key_repository = api_key_repository
        self._latency_scale = latency_scale
        self._failure_rate = failure_rate
        self._rng = rng or random.SystemRandom()
        self._clock = clock or utc_now

    async def create(
        self, name: str, project_id: str, organization_id: Optional[str] = None
    ) -> ApiKey:
        """
        Create a new API key for a project.

        Args:
            name: Display name for the key
            project_id: Owning project
            organization_id: Optional owning organization

        Returns:
            The stored ApiKey, secret included

        Raises:
            ApiKeyServiceError: On a simulated backend failure
        """
        await self._simulate_latency(CREATE_LATENCY)
        if self._rng.random() < self._failure_rate:
            logger.warning("Simulated failure while creating API key for project %s", project_id)
            raise ApiKeyServiceError("Failed to create API key. Please try again.")

        now = self._clock()
        api_key = ApiKey(
            id=f"key_{int(now.timestamp() * 1000)}_{base36_token(self._rng)}",
            name=name,
            api_key=KEY_PREFIX + alphanumeric_token(self._rng, KEY_BODY_LENGTH),
            project_id=project_id,
            organization_id=organization_id,
            created_at=now,
            is_active=True,
            usage=ApiKeyUsage(),
        )
        self.api_key_repository.add(api_key)
        logger.info("Created API key %s for project %s", api_key.id, project_id)
        return api_key

    async def list(self, project_id: str) -> List[ApiKey]:
        """List all API keys of a project."""
        await self._simulate_latency(LIST_LATENCY)
        return self.api_key_repository.list_by_project_id(project_id)

    async def get(self, api_key_id: str) -> Optional[ApiKey]:
        await self._simulate_latency(GET_LATENCY)
        return self.api_key_repository.get_by_id(api_key_id)

    async def update(
        self,
        api_key_id: str,
        name: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> ApiKey:
        """
        Rename and/or toggle an API key. Fields left as None are unchanged.

        Raises:
            ApiKeyNotFoundError: If no key has that ID
        """
        await self._simulate_latency(UPDATE_LATENCY)
        api_key = self._require(api_key_id)
        if name is not None:
            api_key.name = name
        if is_active is not None:
            api_key.is_active = is_active
        self.api_key_repository.replace(api_key)
        return api_key

    async def delete(self, api_key_id: str) -> None:
        """
        Delete an API key permanently.

        Raises:
            ApiKeyNotFoundError: If no key has that ID
        """
        await self._simulate_latency(DELETE_LATENCY)
        if not self.api_key_repository.delete(api_key_id):
            raise ApiKeyNotFoundError(api_key_id)
        logger.info("Deleted API key %s", api_key_id)

    async def get_usage_stats(self, api_key_id: str, days: int = 30) -> UsageStats:
        """
        Generate usage figures for the last ``days`` days, ending today.

        The key's stored usage snapshot is overwritten with the totals of this
        window; it is not accumulated across calls.

        Raises:
            ApiKeyNotFoundError: If no key has that ID
        """
        await self._simulate_latency(STATS_LATENCY)
        api_key = self._require(api_key_id)

        today = self._clock()
        daily_usage: List[DailyUsage] = []
        total_requests = 0
        total_tokens = 0
        total_cost = 0.0
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            requests = self._rng.randint(0, 99)
            tokens = requests * self._rng.randint(500, 1499)
            cost = tokens * COST_PER_TOKEN
            daily_usage.append(
                DailyUsage(
                    date=day.date().isoformat(),
                    requests=requests,
                    tokens=tokens,
                    cost=round(cost, 2),
                )
            )
            total_requests += requests
            total_tokens += tokens
            total_cost += cost

        api_key.usage = ApiKeyUsage(
            requests=total_requests,
            tokens=total_tokens,
            cost=round(total_cost, 2),
        )
        self.api_key_repository.replace(api_key)

        return UsageStats(
            total_requests=total_requests,
            total_tokens=total_tokens,
            total_cost=round(total_cost, 2),
            daily_usage=daily_usage,
        )

    async def test_api_key(self, api_key: str) -> bool:
        """Simulate a credential check; well-formed keys pass 90% of the time."""
        await self._simulate_latency(TEST_LATENCY)
        if api_key.startswith(KEY_PREFIX) and len(api_key) >= 20:
            return self._rng.random() < 0.9
        return False

    def _require(self, api_key_id: str) -> ApiKey:
        api_key = self.api_key_repository.get_by_id(api_key_id)
        if api_key is None:
            raise ApiKeyNotFoundError(api_key_id)
        return api_key

    async def _simulate_latency(self, seconds: float) -> None:
        await asyncio.sleep(seconds * self._latency_scale)
