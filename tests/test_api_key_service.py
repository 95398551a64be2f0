import asyncio
import random
from datetime import timedelta

import pytest

from study_assistant.services.api_key_service import (
    ApiKeyNotFoundError,
    ApiKeyService,
    ApiKeyServiceError,
    format_cost,
    format_tokens,
    mask_api_key,
)

from conftest import FIXED_NOW


@pytest.fixture
def api_key_service(api_key_repository, clock):
    return ApiKeyService(
        api_key_repository,
        latency_scale=0,
        failure_rate=0,
        rng=random.Random(99),
        clock=lambda: clock.now,
    )


def test_create_generates_prefixed_secret(api_key_service):
    api_key = asyncio.run(api_key_service.create("Курсовые", "proj_1", organization_id="org_1"))

    assert api_key.api_key.startswith("sk-")
    assert len(api_key.api_key) == 3 + 48
    assert api_key.api_key[3:].isalnum()
    assert api_key.id.startswith(f"key_{int(FIXED_NOW.timestamp() * 1000)}_")
    assert api_key.is_active is True
    assert api_key.organization_id == "org_1"
    assert (api_key.usage.requests, api_key.usage.tokens, api_key.usage.cost) == (0, 0, 0.0)


def test_create_can_fail_transiently(api_key_repository):
    service = ApiKeyService(api_key_repository, latency_scale=0, failure_rate=1.0)

    with pytest.raises(ApiKeyServiceError, match="Please try again"):
        asyncio.run(service.create("key", "proj_1"))
    assert api_key_repository.list_all() == []


def test_list_filters_by_project(api_key_service):
    async def scenario():
        first = await api_key_service.create("one", "proj_1")
        await api_key_service.create("two", "proj_2")
        third = await api_key_service.create("three", "proj_1")
        return first, third, await api_key_service.list("proj_1")

    first, third, listed = asyncio.run(scenario())

    assert [key.id for key in listed] == [first.id, third.id]


def test_update_merges_partial_changes(api_key_service):
    async def scenario():
        created = await api_key_service.create("old name", "proj_1")
        renamed = await api_key_service.update(created.id, name="new name")
        toggled = await api_key_service.update(created.id, is_active=False)
        return created, renamed, toggled, await api_key_service.get(created.id)

    created, renamed, toggled, stored = asyncio.run(scenario())

    assert renamed.name == "new name" and renamed.is_active is True
    assert toggled.name == "new name" and toggled.is_active is False
    assert stored.api_key == created.api_key
    assert stored.is_active is False


def test_update_unknown_key(api_key_service):
    with pytest.raises(ApiKeyNotFoundError):
        asyncio.run(api_key_service.update("key_missing", name="x"))


def test_delete_removes_key(api_key_service):
    async def scenario():
        created = await api_key_service.create("gone", "proj_1")
        await api_key_service.delete(created.id)
        return await api_key_service.list("proj_1")

    assert asyncio.run(scenario()) == []


def test_delete_unknown_key(api_key_service):
    with pytest.raises(ApiKeyNotFoundError):
        asyncio.run(api_key_service.delete("key_missing"))


def test_usage_stats_cover_requested_window(api_key_service):
    async def scenario():
        created = await api_key_service.create("stats", "proj_1")
        return created, await api_key_service.get_usage_stats(created.id, days=7)

    created, stats = asyncio.run(scenario())

    assert len(stats.daily_usage) == 7
    assert stats.daily_usage[-1].date == FIXED_NOW.date().isoformat()
    assert stats.daily_usage[0].date == (FIXED_NOW - timedelta(days=6)).date().isoformat()
    assert stats.total_requests == sum(day.requests for day in stats.daily_usage)
    assert stats.total_tokens == sum(day.tokens for day in stats.daily_usage)
    assert stats.total_cost == pytest.approx(stats.total_tokens * 0.0015, abs=0.01)
    for day in stats.daily_usage:
        assert 0 <= day.requests <= 99
        assert day.requests * 500 <= day.tokens <= day.requests * 1499


def test_usage_snapshot_is_overwritten_not_accumulated(api_key_service):
    async def scenario():
        created = await api_key_service.create("stats", "proj_1")
        await api_key_service.get_usage_stats(created.id, days=30)
        latest = await api_key_service.get_usage_stats(created.id, days=1)
        return latest, await api_key_service.get(created.id)

    latest, stored = asyncio.run(scenario())

    assert stored.usage.requests == latest.total_requests
    assert stored.usage.tokens == latest.total_tokens
    assert stored.usage.cost == latest.total_cost


def test_usage_stats_unknown_key(api_key_service):
    with pytest.raises(ApiKeyNotFoundError):
        asyncio.run(api_key_service.get_usage_stats("key_missing"))


def test_test_api_key_rejects_bad_format(api_key_service):
    assert asyncio.run(api_key_service.test_api_key("pk-live-123")) is False
    assert asyncio.run(api_key_service.test_api_key("sk-short")) is False


def test_mask_api_key_preserves_length():
    secret = "sk-" + "abcdefghij" * 2 + "XYZ123456"
    assert len(secret) == 32

    masked = mask_api_key(secret)

    assert len(masked) == 32
    assert masked[:8] == secret[:8]
    assert masked[-4:] == secret[-4:]
    assert masked[8:-4] == "*" * 20


def test_mask_api_key_short_input_unchanged():
    assert mask_api_key("sk-1234") == "sk-1234"
    assert mask_api_key("12345678") == "12345678"


@pytest.mark.parametrize("secret", ["sk-123456", "sk-1234567", "sk-12345678", "sk-123456789"])
def test_mask_api_key_never_overlaps_prefix_and_suffix(secret):
    assert mask_api_key(secret) == secret


def test_mask_api_key_first_masked_length():
    assert mask_api_key("sk-1234567890") == "sk-12345*7890"


def test_format_cost():
    assert format_cost(0) == "$0.00"
    assert format_cost(12.5) == "$12.50"
    assert format_cost(0.0015) == "$0.0015"
    assert format_cost(1234.5678) == "$1,234.5678"


def test_format_tokens():
    assert format_tokens(999) == "999"
    assert format_tokens(1500) == "1.5K"
    assert format_tokens(2_300_000) == "2.3M"
