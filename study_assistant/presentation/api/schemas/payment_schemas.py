"""Pydantic schemas for payment endpoints."""

from typing import Optional

from pydantic import BaseModel, Field


class PaymentRequest(BaseModel):
    """Card form as submitted by the client."""

    card_number: str = Field(..., description="Card number, spaces allowed")
    expiry_date: str = Field(..., description="Expiry date as MM/YY")
    cvv: str
    cardholder_name: str
    email: str
    plan_id: str
    amount: float = Field(..., ge=0)


class PaymentResponse(BaseModel):
    success: bool
    transaction_id: Optional[str] = None
    error: Optional[str] = None
