"""Pydantic schemas for API request/response models."""

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from rigel_tax.calculators.types import AgeGroup, CategoryType, LossType, MovementType


# ============================================================================
# Base schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str
    code: str | None = None


class CalculationBase(BaseModel):
    """Base schema for calculation results built from dataclasses."""

    model_config = ConfigDict(from_attributes=True)


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollCalculateRequest(BaseModel):
    """Monthly payroll inputs for one employee."""

    tax_year: int | None = None
    basic_salary: Decimal = Field(ge=0)
    allowances: Decimal = Field(default=Decimal("0"), ge=0)
    overtime_pay: Decimal = Field(default=Decimal("0"), ge=0)
    medical_aid: Decimal = Field(default=Decimal("0"), ge=0)
    pension_fund: Decimal = Field(default=Decimal("0"), ge=0)


class PayrollCalculateResponse(CalculationBase):
    """Computed monthly payroll figures."""

    tax_year: int
    gross_salary: Decimal
    paye_tax: Decimal
    uif: Decimal
    medical_aid: Decimal
    pension_fund: Decimal
    total_deductions: Decimal
    net_salary: Decimal


class IncomeTaxRequest(BaseModel):
    """Annual income tax inputs."""

    annual_income: Decimal = Field(ge=0)
    tax_year: int | None = None
    age_group: AgeGroup = AgeGroup.UNDER_65
    entity_type: Literal["individual", "company"] = "individual"


class IncomeTaxResponse(BaseModel):
    """Annual income tax result."""

    tax_year: int
    entity_type: str
    tax: Decimal
    net_income: Decimal


class TaxBracketSchema(CalculationBase):
    """One progressive bracket."""

    min_amount: Decimal
    max_amount: Decimal | None
    rate: Decimal
    flat_amount: Decimal


class TaxTableResponse(CalculationBase):
    """A tax year's brackets, rebates and UIF parameters."""

    tax_year: int
    source: str
    brackets: list[TaxBracketSchema]
    primary_rebate: Decimal
    secondary_rebate: Decimal
    tertiary_rebate: Decimal
    uif_rate: Decimal
    uif_monthly_cap: Decimal


# ============================================================================
# Deferred tax schemas
# ============================================================================


class TemporaryDifferenceSchema(BaseModel):
    """A temporary difference category."""

    description: str
    category_type: CategoryType
    book_value: Decimal
    tax_value: Decimal
    applicable_tax_rate: Decimal = Field(ge=0, le=1)
    recognition_criteria_met: bool = True
    entity_name: str | None = None
    reversal_pattern: str | None = None

    @field_validator("category_type")
    @classmethod
    def not_summary_bucket(cls, value: CategoryType) -> CategoryType:
        if value == CategoryType.TAX_LOSSES:
            raise ValueError("tax_losses is a summary bucket; submit tax losses under 'losses'")
        return value


class TaxLossSchema(BaseModel):
    """A tax loss carry-forward."""

    loss_type: LossType
    loss_amount: Decimal = Field(ge=0)
    origination_year: int
    expiry_year: int | None = None
    utilization_probability: Decimal = Field(default=Decimal("1"), ge=0, le=1)
    entity_name: str | None = None


class DeferredTaxRequest(BaseModel):
    """Categories and losses to evaluate."""

    tax_rate: Decimal | None = Field(default=None, ge=0, le=1)
    multi_entity: bool = False
    categories: list[TemporaryDifferenceSchema] = Field(default_factory=list)
    losses: list[TaxLossSchema] = Field(default_factory=list)


class CategoryResultSchema(BaseModel):
    """Deferred tax for one category."""

    description: str
    category_type: CategoryType
    entity_name: str | None = None
    temporary_difference: Decimal
    deferred_tax_asset: Decimal
    deferred_tax_liability: Decimal
    requires_manual_review: bool


class TaxLossResultSchema(BaseModel):
    """Deferred tax asset for one tax loss."""

    loss_type: LossType
    entity_name: str | None = None
    loss_amount: Decimal
    deferred_tax_asset: Decimal


class BucketTotalSchema(CalculationBase):
    """DTA/DTL for one grouping key."""

    key: str
    dta: Decimal
    dtl: Decimal


class DeferredTaxSummarySchema(CalculationBase):
    """Aggregate deferred tax position."""

    total_dta: Decimal
    total_dtl: Decimal
    net_position: Decimal
    by_category: list[BucketTotalSchema]
    by_entity: list[BucketTotalSchema]


class DeferredTaxResponse(BaseModel):
    """Per-item results and the summary."""

    categories: list[CategoryResultSchema]
    losses: list[TaxLossResultSchema]
    summary: DeferredTaxSummarySchema


class MovementSchema(BaseModel):
    """A deferred tax balance movement."""

    movement_type: MovementType
    deferred_tax_asset_movement: Decimal = Decimal("0")
    deferred_tax_liability_movement: Decimal = Decimal("0")
    movement_date: date | None = None
    description: str | None = None


class MovementReconcileRequest(BaseModel):
    """Movements to roll forward."""

    movements: list[MovementSchema]


class MovementReconciliationResponse(CalculationBase):
    """Deferred tax roll-forward."""

    opening_dta: Decimal
    opening_dtl: Decimal
    movement_dta: Decimal
    movement_dtl: Decimal
    expected_closing_dta: Decimal
    expected_closing_dtl: Decimal
    recorded_closing_dta: Decimal | None
    recorded_closing_dtl: Decimal | None
    is_reconciled: bool


# ============================================================================
# Ledger schemas
# ============================================================================


class LedgerAccountSchema(BaseModel):
    """Chart-of-accounts entry."""

    id: str
    code: str
    name: str
    type: str


class LedgerPostingSchema(BaseModel):
    """A single posting."""

    account: LedgerAccountSchema
    debit: Decimal = Field(default=Decimal("0"), ge=0)
    credit: Decimal = Field(default=Decimal("0"), ge=0)
    entry_type: str | None = None


class TrialBalanceRequest(BaseModel):
    """Postings to aggregate."""

    postings: list[LedgerPostingSchema]
    accounts: list[LedgerAccountSchema] | None = None
    exclude_adjustments: bool = False


class TrialBalanceRowSchema(CalculationBase):
    """One trial balance row."""

    code: str
    name: str
    type: str
    debit: Decimal
    credit: Decimal


class TrialBalanceTotalsSchema(CalculationBase):
    """Trial balance column totals."""

    debit: Decimal
    credit: Decimal
    balanced: bool


class TrialBalanceResponse(CalculationBase):
    """Trial balance rows and totals."""

    accounts_count: int
    rows: list[TrialBalanceRowSchema]
    totals: TrialBalanceTotalsSchema


class VatEstimateRequest(BaseModel):
    """Revenue and expense aggregates for a VAT estimate."""

    revenue: Decimal
    expenses: Decimal
    vat_rate: Decimal | None = Field(default=None, ge=0, le=1)


class VatEstimateResponse(CalculationBase):
    """Estimated VAT position."""

    vat_rate: Decimal
    output_vat: Decimal
    input_vat: Decimal
    vat_due: Decimal


class VatAmountRequest(BaseModel):
    """Add VAT to, or extract VAT from, a single amount."""

    amount: Decimal = Field(ge=0)
    vat_rate: Decimal | None = Field(default=None, ge=0, le=1)
    mode: Literal["add", "extract"] = "add"


class VatAmountResponse(BaseModel):
    """VAT split of a single amount."""

    vat_rate: Decimal
    net_amount: Decimal
    vat_amount: Decimal
    gross_amount: Decimal


class CorporateTaxBracketSchema(BaseModel):
    """Corporate tax bracket."""

    threshold: Decimal = Field(ge=0)
    rate: Decimal = Field(ge=0, le=1)


class TaxReportRequest(BaseModel):
    """Postings and tax configuration for the tax report."""

    postings: list[LedgerPostingSchema]
    vat_rate: Decimal | None = Field(default=None, ge=0, le=1)
    corp_tax_brackets: list[CorporateTaxBracketSchema] | None = None


class TaxReportResponse(CalculationBase):
    """Income and VAT summary."""

    vat_rate: Decimal
    vat_due: Decimal
    revenue: Decimal
    expenses: Decimal
    depreciation_expense: Decimal
    taxable_income: Decimal
    corp_tax: Decimal


# ============================================================================
# Loan and asset schemas
# ============================================================================


class AmortizationRequest(BaseModel):
    """Loan terms."""

    principal: Decimal = Field(gt=0)
    annual_rate_pct: Decimal = Field(ge=0)
    term_months: int = Field(ge=1, le=600)
    start_date: date


class AmortizationEntrySchema(CalculationBase):
    """One amortization period."""

    payment_number: int
    payment_date: date
    principal_payment: Decimal
    interest_payment: Decimal
    total_payment: Decimal
    remaining_balance: Decimal


class AmortizationResponse(BaseModel):
    """Monthly payment and full schedule."""

    monthly_payment: Decimal
    total_interest: Decimal
    schedule: list[AmortizationEntrySchema]


class DepreciationRequest(BaseModel):
    """Depreciation calculator inputs."""

    asset_cost: Decimal = Field(ge=0)
    salvage_value: Decimal = Field(default=Decimal("0"), ge=0)
    useful_life_years: int = Field(ge=1, le=100)
    method: Literal["straight-line", "declining-balance", "sum-of-years"] = "straight-line"
    year: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def check_values(self) -> "DepreciationRequest":
        if self.salvage_value > self.asset_cost:
            raise ValueError("Salvage value cannot be greater than asset cost")
        if self.year > self.useful_life_years:
            raise ValueError("Year cannot be beyond the asset's useful life")
        return self


class DepreciationResponse(BaseModel):
    """Annual depreciation charge."""

    method: str
    year: int
    depreciation: Decimal


class DisposalRequest(BaseModel):
    """Asset disposal inputs."""

    cost_price: Decimal = Field(ge=0)
    annual_rate_pct: Decimal = Field(ge=0)
    purchase_date: date
    disposal_date: date
    selling_price: Decimal = Field(ge=0)


class DisposalResponse(BaseModel):
    """Depreciation to disposal and resulting gain or loss."""

    months_held: int
    accumulated_depreciation: Decimal
    net_book_value: Decimal
    gain_or_loss: Decimal
