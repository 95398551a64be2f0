"""Simulated payment gateway that activates subscriptions on success."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional

from ..domain.models.payment import PaymentData, PaymentResult
from .identifiers import base36_token
from .subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

INVALID_CARD_DATA_ERROR = "Неверные данные карты"
DECLINED_ERROR = "Платеж отклонен банком"


class PaymentService:
    """Processes payments against a simulated gateway.

    Only the shape of the card data is checked here. Luhn, expiry and CVV
    format checks belong to the form layer and run before this service.
    """

    def __init__(
        self,
        subscription_service: SubscriptionService,
        processing_delay: float = 2.0,
        success_rate: float = 0.9,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._subscriptions = subscription_service
        self._processing_delay = processing_delay
        self._success_rate = success_rate
        self._rng = rng or random.SystemRandom()

    async def process_payment(self, payment: PaymentData) -> PaymentResult:
        await asyncio.sleep(self._processing_delay)

        if len(payment.card_number) != 16 or not payment.cvv or not payment.expiry_date:
            logger.info("Rejected payment for plan %s: malformed card data", payment.plan_id)
            return PaymentResult(success=False, error=INVALID_CARD_DATA_ERROR)

        if self._rng.random() >= self._success_rate:
            logger.info("Payment for plan %s declined by gateway", payment.plan_id)
            return PaymentResult(success=False, error=DECLINED_ERROR)

        transaction_id = f"tx_{base36_token(self._rng)}"
        subscription = self._subscriptions.create(payment.plan_id)
        logger.info(
            "Payment %s accepted (%.2f), subscription %s activated",
            transaction_id,
            payment.amount,
            subscription.id,
        )
        return PaymentResult(success=True, transaction_id=transaction_id)
