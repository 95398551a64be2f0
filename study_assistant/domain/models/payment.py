"""Value objects passed through the simulated payment flow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class PaymentData:
    card_number: str
    expiry_date: str
    cvv: str
    cardholder_name: str
    email: str
    plan_id: str
    amount: float


@dataclass(slots=True)
class PaymentResult:
    success: bool
    transaction_id: Optional[str] = None
    error: Optional[str] = None
