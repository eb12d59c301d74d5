"""Type definitions for the tax and payroll calculators."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


class CategoryType(str, Enum):
    """Deferred tax category types."""

    TEMPORARY_TAXABLE = "temporary_taxable"
    TEMPORARY_DEDUCTIBLE = "temporary_deductible"
    INITIAL_RECOGNITION = "initial_recognition"
    UNCERTAIN_POSITIONS = "uncertain_positions"
    # Summary bucket only, never set on a category
    TAX_LOSSES = "tax_losses"


class LossType(str, Enum):
    """Tax loss carry-forward types."""

    ASSESSED_LOSS = "assessed_loss"
    CAPITAL_LOSS = "capital_loss"
    OTHER = "other"


class MovementType(str, Enum):
    """Deferred tax movement types for the balance roll-forward."""

    OPENING_BALANCE = "opening_balance"
    ORIGINATION = "origination"
    REVERSAL = "reversal"
    RATE_CHANGE = "rate_change"
    CLOSING_BALANCE = "closing_balance"


class AgeGroup(str, Enum):
    """Taxpayer age groups that determine which rebates apply."""

    UNDER_65 = "under65"
    AGE_65_TO_74 = "65to74"
    AGE_75_PLUS = "75plus"


# ===== Deferred tax =====


@dataclass(frozen=True)
class TemporaryDifferenceCategory:
    """A book/tax basis difference for one asset or liability."""

    description: str
    category_type: CategoryType
    book_value: Decimal
    tax_value: Decimal
    applicable_tax_rate: Decimal  # As decimal, e.g., 0.27 for 27%
    recognition_criteria_met: bool = True
    entity_name: str | None = None
    reversal_pattern: str | None = None

    @property
    def temporary_difference(self) -> Decimal:
        """Signed difference: book value minus tax value."""
        return self.book_value - self.tax_value


@dataclass(frozen=True)
class TaxLossCarryForward:
    """An unused tax loss that may be set off against future taxable income."""

    loss_type: LossType
    loss_amount: Decimal
    origination_year: int
    expiry_year: int | None = None
    utilization_probability: Decimal = Decimal("1")  # 0-1
    entity_name: str | None = None


@dataclass(frozen=True)
class CategoryResult:
    """Deferred tax computed for one temporary difference category."""

    category: TemporaryDifferenceCategory
    temporary_difference: Decimal
    deferred_tax_asset: Decimal
    deferred_tax_liability: Decimal
    # True when recognition is met but no automatic DTA/DTL rule exists
    requires_manual_review: bool = False


@dataclass(frozen=True)
class TaxLossResult:
    """Deferred tax asset computed for one tax loss."""

    loss: TaxLossCarryForward
    deferred_tax_asset: Decimal


@dataclass
class BucketTotal:
    """DTA/DTL accumulated for one grouping key."""

    key: str
    dta: Decimal = ZERO
    dtl: Decimal = ZERO


@dataclass
class DeferredTaxSummary:
    """Aggregate deferred tax position."""

    total_dta: Decimal
    total_dtl: Decimal
    net_position: Decimal
    by_category: list[BucketTotal] = field(default_factory=list)
    by_entity: list[BucketTotal] = field(default_factory=list)


@dataclass(frozen=True)
class DeferredTaxMovement:
    """A single movement in the deferred tax balances."""

    movement_type: MovementType
    deferred_tax_asset_movement: Decimal = ZERO
    deferred_tax_liability_movement: Decimal = ZERO
    movement_date: date | None = None
    description: str | None = None


@dataclass(frozen=True)
class MovementReconciliation:
    """Roll-forward of deferred tax balances from opening to closing."""

    opening_dta: Decimal
    opening_dtl: Decimal
    movement_dta: Decimal
    movement_dtl: Decimal
    expected_closing_dta: Decimal
    expected_closing_dtl: Decimal
    recorded_closing_dta: Decimal | None
    recorded_closing_dtl: Decimal | None
    is_reconciled: bool


# ===== Ledger =====


@dataclass(frozen=True)
class LedgerAccount:
    """A chart-of-accounts entry."""

    id: str
    code: str
    name: str
    type: str  # ASSET, LIABILITY, EQUITY, REVENUE, EXPENSE


@dataclass(frozen=True)
class LedgerPosting:
    """A single debit/credit posting against an account."""

    account: LedgerAccount
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    entry_type: str | None = None  # "adjustment" marks period-end adjustments


@dataclass
class TrialBalanceRow:
    """Accumulated debit and credit for one account."""

    code: str
    name: str
    type: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO


@dataclass(frozen=True)
class TrialBalanceTotals:
    """Column totals of a trial balance."""

    debit: Decimal
    credit: Decimal

    # Tolerance for rounding drift between the columns
    BALANCE_TOLERANCE = Decimal("0.01")

    @property
    def difference(self) -> Decimal:
        return self.debit - self.credit

    @property
    def balanced(self) -> bool:
        return abs(self.difference) < self.BALANCE_TOLERANCE


@dataclass
class TrialBalance:
    """Trial balance rows with totals."""

    rows: list[TrialBalanceRow]
    totals: TrialBalanceTotals
    accounts_count: int = 0


@dataclass(frozen=True)
class VatEstimate:
    """Simplified VAT position for a period."""

    output_vat: Decimal
    input_vat: Decimal
    vat_due: Decimal


@dataclass(frozen=True)
class CorporateTaxBracket:
    """Corporate tax bracket: `rate` applies to income up to `threshold`."""

    threshold: Decimal
    rate: Decimal


@dataclass(frozen=True)
class TaxReport:
    """Income and VAT summary derived from ledger postings."""

    vat_rate: Decimal
    vat_due: Decimal
    revenue: Decimal
    expenses: Decimal
    depreciation_expense: Decimal
    taxable_income: Decimal
    corp_tax: Decimal


# ===== Payroll =====


@dataclass(frozen=True)
class PayrollEntry:
    """Monthly payroll inputs for one employee."""

    basic_salary: Decimal
    allowances: Decimal = ZERO
    overtime_pay: Decimal = ZERO
    medical_aid: Decimal = ZERO
    pension_fund: Decimal = ZERO

    @property
    def gross_salary(self) -> Decimal:
        return self.basic_salary + self.allowances + self.overtime_pay


@dataclass(frozen=True)
class PayrollResult:
    """Computed monthly payroll figures."""

    gross_salary: Decimal
    paye_tax: Decimal
    uif: Decimal
    medical_aid: Decimal
    pension_fund: Decimal
    total_deductions: Decimal
    net_salary: Decimal


# ===== Loans =====


@dataclass(frozen=True)
class Loan:
    """A fixed-payment loan."""

    principal: Decimal
    annual_rate_pct: Decimal  # Percent, e.g., 11.5
    term_months: int
    start_date: date


@dataclass(frozen=True)
class AmortizationEntry:
    """One period of a loan amortization schedule."""

    payment_number: int
    payment_date: date
    principal_payment: Decimal
    interest_payment: Decimal
    total_payment: Decimal
    remaining_balance: Decimal
