"""Loan amortization endpoints."""

from fastapi import APIRouter

from rigel_tax.api.schemas import (
    AmortizationEntrySchema,
    AmortizationRequest,
    AmortizationResponse,
    ErrorResponse,
)
from rigel_tax.calculators.amortization import build_amortization_schedule, monthly_payment
from rigel_tax.calculators.types import ZERO, Loan

router = APIRouter(prefix="/loans", tags=["loans"])


@router.post(
    "/amortization",
    response_model=AmortizationResponse,
    responses={422: {"model": ErrorResponse}},
)
async def amortization_schedule(payload: AmortizationRequest) -> AmortizationResponse:
    """Monthly payment and full amortization schedule for a fixed-payment loan."""
    loan = Loan(
        principal=payload.principal,
        annual_rate_pct=payload.annual_rate_pct,
        term_months=payload.term_months,
        start_date=payload.start_date,
    )
    schedule = build_amortization_schedule(loan)

    return AmortizationResponse(
        monthly_payment=monthly_payment(loan.principal, loan.annual_rate_pct, loan.term_months),
        total_interest=sum((e.interest_payment for e in schedule), ZERO),
        schedule=[AmortizationEntrySchema.model_validate(e) for e in schedule],
    )
