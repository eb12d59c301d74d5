"""Deferred tax endpoints."""

from fastapi import APIRouter

from rigel_tax.api.dependencies import AppSettings
from rigel_tax.api.schemas import (
    CategoryResultSchema,
    DeferredTaxRequest,
    DeferredTaxResponse,
    DeferredTaxSummarySchema,
    MovementReconcileRequest,
    MovementReconciliationResponse,
    TaxLossResultSchema,
)
from rigel_tax.calculators.deferred_tax import DeferredTaxCalculator, reconcile_movements
from rigel_tax.calculators.types import (
    DeferredTaxMovement,
    TaxLossCarryForward,
    TemporaryDifferenceCategory,
)

router = APIRouter(prefix="/deferred-tax", tags=["deferred-tax"])


@router.post("/summary", response_model=DeferredTaxResponse)
async def summarize_deferred_tax(
    payload: DeferredTaxRequest,
    settings: AppSettings,
) -> DeferredTaxResponse:
    """Compute DTA/DTL per category and per loss, and the aggregate position."""
    calculator = DeferredTaxCalculator(settings.default_corporate_tax_rate)

    category_results = [
        calculator.compute_category(TemporaryDifferenceCategory(**c.model_dump()))
        for c in payload.categories
    ]
    loss_results = [
        calculator.evaluate_tax_loss(TaxLossCarryForward(**loss.model_dump()), payload.tax_rate)
        for loss in payload.losses
    ]
    summary = calculator.aggregate_summary(category_results, loss_results, payload.multi_entity)

    return DeferredTaxResponse(
        categories=[
            CategoryResultSchema(
                description=r.category.description,
                category_type=r.category.category_type,
                entity_name=r.category.entity_name,
                temporary_difference=r.temporary_difference,
                deferred_tax_asset=r.deferred_tax_asset,
                deferred_tax_liability=r.deferred_tax_liability,
                requires_manual_review=r.requires_manual_review,
            )
            for r in category_results
        ],
        losses=[
            TaxLossResultSchema(
                loss_type=r.loss.loss_type,
                entity_name=r.loss.entity_name,
                loss_amount=r.loss.loss_amount,
                deferred_tax_asset=r.deferred_tax_asset,
            )
            for r in loss_results
        ],
        summary=DeferredTaxSummarySchema.model_validate(summary),
    )


@router.post("/movements/reconcile", response_model=MovementReconciliationResponse)
async def reconcile_deferred_tax_movements(
    payload: MovementReconcileRequest,
) -> MovementReconciliationResponse:
    """Roll deferred tax balances forward and check the recorded closing balance."""
    reconciliation = reconcile_movements(
        DeferredTaxMovement(**m.model_dump()) for m in payload.movements
    )
    return MovementReconciliationResponse.model_validate(reconciliation)
