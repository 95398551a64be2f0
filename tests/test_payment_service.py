import asyncio
import random
from unittest.mock import Mock

import pytest

from study_assistant.domain.models.payment import PaymentData
from study_assistant.domain.models.subscription import SubscriptionStatus
from study_assistant.services.payment_service import (
    DECLINED_ERROR,
    INVALID_CARD_DATA_ERROR,
    PaymentService,
)

pytestmark = pytest.mark.payment


def _payment(**overrides):
    data = dict(
        card_number="4532015112830366",
        expiry_date="12/28",
        cvv="123",
        cardholder_name="Ivan Petrov",
        email="ivan@example.com",
        plan_id="premium",
        amount=2990.0,
    )
    data.update(overrides)
    return PaymentData(**data)


def _rng(draw):
    rng = Mock(spec=random.Random)
    rng.random.return_value = draw
    rng.choice.side_effect = lambda seq: seq[1]
    return rng


def test_successful_payment_creates_subscription(subscription_service):
    service = PaymentService(subscription_service, processing_delay=0, rng=_rng(0.5))

    result = asyncio.run(service.process_payment(_payment()))

    assert result.success is True
    assert result.transaction_id == "tx_111111111"
    assert result.error is None
    active = subscription_service.get_active()
    assert active is not None
    assert active.plan_id == "premium"
    assert active.status is SubscriptionStatus.ACTIVE


def test_declined_payment_has_no_side_effect(subscription_service):
    service = PaymentService(subscription_service, processing_delay=0, rng=_rng(0.95))

    result = asyncio.run(service.process_payment(_payment()))

    assert result.success is False
    assert result.error == DECLINED_ERROR
    assert result.transaction_id is None
    assert subscription_service.list() == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"card_number": "4532 0151 1283 0366"},
        {"card_number": "123"},
        {"cvv": ""},
        {"expiry_date": ""},
    ],
)
def test_shape_gate_rejects_malformed_card_data(subscription_service, overrides):
    rng = _rng(0.0)
    service = PaymentService(subscription_service, processing_delay=0, rng=rng)

    result = asyncio.run(service.process_payment(_payment(**overrides)))

    assert result.success is False
    assert result.error == INVALID_CARD_DATA_ERROR
    rng.random.assert_not_called()
    assert subscription_service.list() == []


def test_shape_gate_does_not_run_luhn(subscription_service):
    service = PaymentService(subscription_service, processing_delay=0, rng=_rng(0.0))

    result = asyncio.run(service.process_payment(_payment(card_number="1111111111111111")))

    assert result.success is True


def test_processing_waits_for_the_simulated_delay(subscription_service, monkeypatch):
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr("study_assistant.services.payment_service.asyncio.sleep", fake_sleep)
    service = PaymentService(subscription_service, rng=_rng(0.0))

    asyncio.run(service.process_payment(_payment()))

    assert delays == [2.0]


def test_success_rate_is_roughly_ninety_percent(subscription_service):
    service = PaymentService(subscription_service, processing_delay=0, rng=random.Random(1234))

    async def run_many():
        return [await service.process_payment(_payment(plan_id="basic")) for _ in range(500)]

    results = asyncio.run(run_many())
    successes = sum(1 for result in results if result.success)

    assert 420 <= successes <= 480
    assert len(subscription_service.list()) == successes
