"""API router for card payments."""

from dataclasses import replace
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ....core.dependencies import get_payment_service
from ....domain.models.payment import PaymentData
from ....services.card_validator import (
    normalize_expiry_input,
    strip_whitespace,
    validate_payment_form,
)
from ....services.payment_service import PaymentService
from ....services.subscription_service import (
    DEFAULT_DURATION_MONTHS,
    PLAN_DURATION_MONTHS,
    PLAN_NAMES,
)
from ..schemas.payment_schemas import PaymentRequest, PaymentResponse
from ..schemas.subscription_schemas import PlanResponse

router = APIRouter(prefix="/api/payments", tags=["Payments"])


@router.get("/plans", response_model=List[PlanResponse])
async def list_plans() -> List[PlanResponse]:
    """List the plan tiers offered for purchase."""
    return [
        PlanResponse(
            plan_id=plan_id,
            plan_name=plan_name,
            duration_months=PLAN_DURATION_MONTHS.get(plan_id, DEFAULT_DURATION_MONTHS),
        )
        for plan_id, plan_name in PLAN_NAMES.items()
    ]


@router.post("", response_model=PaymentResponse)
async def process_payment(
    request: PaymentRequest,
    payment_service: PaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    """Validate the card form, then charge it and activate the plan."""
    payment = PaymentData(
        card_number=request.card_number,
        expiry_date=normalize_expiry_input(request.expiry_date),
        cvv=request.cvv,
        cardholder_name=request.cardholder_name,
        email=request.email,
        plan_id=request.plan_id,
        amount=request.amount,
    )

    errors = validate_payment_form(payment)
    if errors:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": errors},
        )

    result = await payment_service.process_payment(
        replace(payment, card_number=strip_whitespace(payment.card_number))
    )
    return PaymentResponse(
        success=result.success,
        transaction_id=result.transaction_id,
        error=result.error,
    )
