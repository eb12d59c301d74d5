"""Deferred tax calculation (IAS 12).

Converts temporary differences between book values and tax bases, plus
unused tax losses, into deferred tax assets (DTA) and liabilities (DTL).

Routing rules for a recognised temporary difference:
- temporary_taxable    -> DTL = |book - tax| * rate
- temporary_deductible -> DTA = |book - tax| * rate
- initial_recognition, uncertain_positions -> no automatic amount; the
  result is flagged ``requires_manual_review`` so the reviewer enters it.

Tax losses: DTA = loss * rate * utilization probability (cents). No
"probable" threshold is applied here; the probability factor is the only
recognition weighting.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from rigel_tax.calculators.types import (
    ZERO,
    BucketTotal,
    CategoryResult,
    CategoryType,
    DeferredTaxMovement,
    DeferredTaxSummary,
    MovementReconciliation,
    MovementType,
    TaxLossCarryForward,
    TaxLossResult,
    TemporaryDifferenceCategory,
    round_to_cents,
)

DEFAULT_ENTITY_NAME = "Main Entity"
RECONCILIATION_TOLERANCE = Decimal("0.01")

_MANUAL_CATEGORY_TYPES = {
    CategoryType.INITIAL_RECOGNITION,
    CategoryType.UNCERTAIN_POSITIONS,
}


class DeferredTaxCalculator:
    """Computes deferred tax per category, per loss and in aggregate."""

    def __init__(self, default_tax_rate: Decimal = Decimal("0.27")):
        self.default_tax_rate = default_tax_rate

    def compute_category(self, category: TemporaryDifferenceCategory) -> CategoryResult:
        """Compute DTA/DTL for one temporary difference category.

        Raises:
            ValueError: If the category uses the ``tax_losses`` summary bucket
                as its type; losses go through ``compute_tax_loss``.
        """
        if category.category_type == CategoryType.TAX_LOSSES:
            raise ValueError(f"Category {category.description!r} cannot use the tax_losses type")

        temporary_difference = category.temporary_difference

        if not category.recognition_criteria_met:
            return CategoryResult(
                category=category,
                temporary_difference=temporary_difference,
                deferred_tax_asset=ZERO,
                deferred_tax_liability=ZERO,
            )

        amount = abs(temporary_difference) * category.applicable_tax_rate

        if category.category_type == CategoryType.TEMPORARY_TAXABLE:
            return CategoryResult(
                category=category,
                temporary_difference=temporary_difference,
                deferred_tax_asset=ZERO,
                deferred_tax_liability=amount,
            )

        if category.category_type == CategoryType.TEMPORARY_DEDUCTIBLE:
            return CategoryResult(
                category=category,
                temporary_difference=temporary_difference,
                deferred_tax_asset=amount,
                deferred_tax_liability=ZERO,
            )

        return CategoryResult(
            category=category,
            temporary_difference=temporary_difference,
            deferred_tax_asset=ZERO,
            deferred_tax_liability=ZERO,
            requires_manual_review=category.category_type in _MANUAL_CATEGORY_TYPES,
        )

    def compute_tax_loss(
        self,
        loss: TaxLossCarryForward,
        tax_rate: Decimal | None = None,
    ) -> Decimal:
        """Deferred tax asset for a tax loss carry-forward, rounded to cents."""
        rate = self.default_tax_rate if tax_rate is None else tax_rate
        return round_to_cents(loss.loss_amount * rate * loss.utilization_probability)

    def evaluate_tax_loss(
        self,
        loss: TaxLossCarryForward,
        tax_rate: Decimal | None = None,
    ) -> TaxLossResult:
        return TaxLossResult(loss=loss, deferred_tax_asset=self.compute_tax_loss(loss, tax_rate))

    def aggregate_summary(
        self,
        category_results: Sequence[CategoryResult],
        loss_results: Sequence[TaxLossResult],
        multi_entity: bool = False,
    ) -> DeferredTaxSummary:
        """Aggregate computed categories and losses into a summary.

        Category buckets keep first-seen order; losses always land in a
        trailing ``tax_losses`` bucket. Entity grouping is only populated in
        multi-entity mode.
        """
        loss_dta = sum((r.deferred_tax_asset for r in loss_results), ZERO)
        total_dta = sum((r.deferred_tax_asset for r in category_results), ZERO) + loss_dta
        total_dtl = sum((r.deferred_tax_liability for r in category_results), ZERO)

        by_category: dict[str, BucketTotal] = {}
        for result in category_results:
            key = result.category.category_type.value
            bucket = by_category.setdefault(key, BucketTotal(key=key))
            bucket.dta += result.deferred_tax_asset
            bucket.dtl += result.deferred_tax_liability

        category_buckets = list(by_category.values())
        if loss_results:
            category_buckets.append(
                BucketTotal(key=CategoryType.TAX_LOSSES.value, dta=loss_dta, dtl=ZERO)
            )

        entity_buckets: list[BucketTotal] = []
        if multi_entity:
            entity_buckets = _group_by_entity(category_results, loss_results)

        return DeferredTaxSummary(
            total_dta=total_dta,
            total_dtl=total_dtl,
            net_position=total_dta - total_dtl,
            by_category=category_buckets,
            by_entity=entity_buckets,
        )

    def summarize(
        self,
        categories: Iterable[TemporaryDifferenceCategory],
        losses: Iterable[TaxLossCarryForward],
        multi_entity: bool = False,
        tax_rate: Decimal | None = None,
    ) -> DeferredTaxSummary:
        """Compute every category and loss, then aggregate."""
        category_results = [self.compute_category(c) for c in categories]
        loss_results = [self.evaluate_tax_loss(loss, tax_rate) for loss in losses]
        return self.aggregate_summary(category_results, loss_results, multi_entity)


def _entity_key(entity_name: str | None) -> str:
    return entity_name or DEFAULT_ENTITY_NAME


def _group_by_entity(
    category_results: Sequence[CategoryResult],
    loss_results: Sequence[TaxLossResult],
) -> list[BucketTotal]:
    by_entity: dict[str, BucketTotal] = {}

    for result in category_results:
        key = _entity_key(result.category.entity_name)
        bucket = by_entity.setdefault(key, BucketTotal(key=key))
        bucket.dta += result.deferred_tax_asset
        bucket.dtl += result.deferred_tax_liability

    for result in loss_results:
        key = _entity_key(result.loss.entity_name)
        bucket = by_entity.setdefault(key, BucketTotal(key=key))
        bucket.dta += result.deferred_tax_asset

    return list(by_entity.values())


def reconcile_movements(movements: Iterable[DeferredTaxMovement]) -> MovementReconciliation:
    """Roll deferred tax balances forward from opening to closing.

    Expected closing = opening + originations + reversals + rate changes.
    Reversals are expected to carry negative movements. When closing
    balance movements are recorded, the roll-forward is reconciled against
    them within one cent; with no recorded closing it is reconciled trivially.
    """
    opening_dta = opening_dtl = ZERO
    movement_dta = movement_dtl = ZERO
    recorded_dta: Decimal | None = None
    recorded_dtl: Decimal | None = None

    for m in movements:
        if m.movement_type == MovementType.OPENING_BALANCE:
            opening_dta += m.deferred_tax_asset_movement
            opening_dtl += m.deferred_tax_liability_movement
        elif m.movement_type == MovementType.CLOSING_BALANCE:
            recorded_dta = (recorded_dta or ZERO) + m.deferred_tax_asset_movement
            recorded_dtl = (recorded_dtl or ZERO) + m.deferred_tax_liability_movement
        else:
            movement_dta += m.deferred_tax_asset_movement
            movement_dtl += m.deferred_tax_liability_movement

    expected_dta = opening_dta + movement_dta
    expected_dtl = opening_dtl + movement_dtl

    reconciled = True
    if recorded_dta is not None and recorded_dtl is not None:
        reconciled = (
            abs(expected_dta - recorded_dta) < RECONCILIATION_TOLERANCE
            and abs(expected_dtl - recorded_dtl) < RECONCILIATION_TOLERANCE
        )

    return MovementReconciliation(
        opening_dta=opening_dta,
        opening_dtl=opening_dtl,
        movement_dta=movement_dta,
        movement_dtl=movement_dtl,
        expected_closing_dta=expected_dta,
        expected_closing_dtl=expected_dtl,
        recorded_closing_dta=recorded_dta,
        recorded_closing_dtl=recorded_dtl,
        is_reconciled=reconciled,
    )
