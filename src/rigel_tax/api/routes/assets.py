"""Asset depreciation and disposal endpoints."""

from fastapi import APIRouter

from rigel_tax.api.schemas import (
    DepreciationRequest,
    DepreciationResponse,
    DisposalRequest,
    DisposalResponse,
)
from rigel_tax.calculators.amortization import (
    declining_balance_depreciation,
    depreciation_until_disposal,
    gain_or_loss_on_disposal,
    months_between,
    straight_line_depreciation,
    sum_of_years_depreciation,
)

router = APIRouter(prefix="/assets", tags=["assets"])


@router.post("/depreciation", response_model=DepreciationResponse)
async def depreciation(payload: DepreciationRequest) -> DepreciationResponse:
    """Annual depreciation charge for the requested method and year."""
    if payload.method == "declining-balance":
        charge = declining_balance_depreciation(
            payload.asset_cost,
            payload.salvage_value,
            payload.useful_life_years,
            payload.year,
        )
    elif payload.method == "sum-of-years":
        charge = sum_of_years_depreciation(
            payload.asset_cost,
            payload.salvage_value,
            payload.useful_life_years,
            payload.year,
        )
    else:
        charge = straight_line_depreciation(
            payload.asset_cost,
            payload.salvage_value,
            payload.useful_life_years,
            payload.year,
        )

    return DepreciationResponse(method=payload.method, year=payload.year, depreciation=charge)


@router.post("/disposal", response_model=DisposalResponse)
async def disposal(payload: DisposalRequest) -> DisposalResponse:
    """Depreciation accumulated up to disposal and the gain or loss on sale."""
    accumulated = depreciation_until_disposal(
        payload.cost_price,
        payload.annual_rate_pct,
        payload.purchase_date,
        payload.disposal_date,
    )
    return DisposalResponse(
        months_held=months_between(payload.purchase_date, payload.disposal_date),
        accumulated_depreciation=accumulated,
        net_book_value=payload.cost_price - accumulated,
        gain_or_loss=gain_or_loss_on_disposal(
            payload.cost_price, accumulated, payload.selling_price
        ),
    )
