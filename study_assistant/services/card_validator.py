"""Card and payment form validation.

These checks run before a payment reaches the orchestrator. They never raise:
invalid input yields ``False`` and callers turn the booleans into field-level
messages.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Dict, Optional

from ..domain.models.payment import PaymentData

_CARD_NUMBER_RE = re.compile(r"[0-9]{16}")
_EXPIRY_RE = re.compile(r"(0[1-9]|1[0-2])/([0-9]{2})")
_CVV_RE = re.compile(r"[0-9]{3,4}")
_WHITESPACE_RE = re.compile(r"\s")

CARD_NUMBER_ERROR = "Неверный номер карты"
EXPIRY_DATE_ERROR = "Неверный срок действия (MM/YY)"
CVV_ERROR = "CVV должен содержать 3-4 цифры"
CARDHOLDER_NAME_ERROR = "Укажите имя держателя карты"
EMAIL_ERROR = "Укажите корректный email"


def strip_whitespace(value: str) -> str:
    return _WHITESPACE_RE.sub("", value)


def validate_card_number(card_number: str) -> bool:
    """Check a 16-digit card number against the Luhn checksum."""
    digits = strip_whitespace(card_number)
    if not _CARD_NUMBER_RE.fullmatch(digits):
        return False

    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def validate_expiry_date(expiry_date: str, today: Optional[date] = None) -> bool:
    """Accept ``MM/YY`` values that are not before the current month.

    Years are compared modulo 100, so ``01/00`` reads as already expired.
    """
    match = _EXPIRY_RE.fullmatch(expiry_date)
    if not match:
        return False
    month, year = int(match.group(1)), int(match.group(2))
    today = today or date.today()
    current_year = today.year % 100
    return year > current_year or (year == current_year and month >= today.month)


def validate_cvv(cvv: str) -> bool:
    return bool(_CVV_RE.fullmatch(cvv))


def format_card_number(card_number: str) -> str:
    """Group the card number in blocks of four separated by spaces."""
    digits = strip_whitespace(card_number)
    return " ".join(digits[i : i + 4] for i in range(0, len(digits), 4))


def normalize_expiry_input(raw: str) -> str:
    """Apply the ``MM/YY`` input mask to free-form user input."""
    digits = re.sub(r"\D", "", raw)
    if len(digits) >= 2:
        digits = f"{digits[:2]}/{digits[2:4]}"
    return digits[:5]


def validate_payment_form(data: PaymentData, today: Optional[date] = None) -> Dict[str, str]:
    """Return a field -> message map; an empty map means the form is valid."""
    errors: Dict[str, str] = {}
    if not validate_card_number(data.card_number):
        errors["cardNumber"] = CARD_NUMBER_ERROR
    if not validate_expiry_date(data.expiry_date, today=today):
        errors["expiryDate"] = EXPIRY_DATE_ERROR
    if not validate_cvv(data.cvv):
        errors["cvv"] = CVV_ERROR
    if not data.cardholder_name.strip():
        errors["cardholderName"] = CARDHOLDER_NAME_ERROR
    if "@" not in data.email:
        errors["email"] = EMAIL_ERROR
    return errors
