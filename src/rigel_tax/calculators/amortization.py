"""Loan amortization and asset depreciation."""

from __future__ import annotations

import calendar
from datetime import date
from decimal import Decimal

from rigel_tax.calculators.types import (
    ZERO,
    AmortizationEntry,
    Loan,
    round_to_cents,
)

HUNDRED = Decimal("100")
MONTHS_PER_YEAR = Decimal("12")


class InvalidLoanTermError(ValueError):
    """Raised when a loan term is not a positive number of months."""

    def __init__(self, term_months: int):
        self.term_months = term_months
        super().__init__(f"Loan term must be at least 1 month, got {term_months}")


def monthly_rate(annual_rate_pct: Decimal) -> Decimal:
    """Convert an annual percentage rate to a monthly fraction."""
    return annual_rate_pct / HUNDRED / MONTHS_PER_YEAR


def monthly_payment(principal: Decimal, annual_rate_pct: Decimal, term_months: int) -> Decimal:
    """Fixed monthly payment for a fully amortizing loan, in cents.

    Interest-free loans split the principal evenly; otherwise the annuity
    formula P * r * (1 + r)^n / ((1 + r)^n - 1) applies.
    """
    if term_months <= 0:
        raise InvalidLoanTermError(term_months)

    r = monthly_rate(annual_rate_pct)
    if r == 0:
        return round_to_cents(principal / term_months)

    growth = (1 + r) ** term_months
    return round_to_cents(principal * r * growth / (growth - 1))


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the month's end."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def build_amortization_schedule(loan: Loan) -> list[AmortizationEntry]:
    """Period-by-period split of each payment into principal and interest.

    Interest is charged on the opening balance each month and rounded to
    cents. The final payment settles whatever balance remains, so the
    schedule always ends at zero and the principal column sums exactly to
    the loan principal. The schedule depends only on the loan record.
    """
    payment = monthly_payment(loan.principal, loan.annual_rate_pct, loan.term_months)
    r = monthly_rate(loan.annual_rate_pct)

    schedule: list[AmortizationEntry] = []
    balance = loan.principal

    for period in range(1, loan.term_months + 1):
        interest = round_to_cents(balance * r)
        principal_portion = payment - interest

        if period == loan.term_months or principal_portion > balance:
            principal_portion = balance

        balance = max(ZERO, balance - principal_portion)

        schedule.append(
            AmortizationEntry(
                payment_number=period,
                payment_date=add_months(loan.start_date, period - 1),
                principal_payment=principal_portion,
                interest_payment=interest,
                total_payment=principal_portion + interest,
                remaining_balance=balance,
            )
        )

    return schedule


# ===== Depreciation =====


def _check_useful_life(useful_life_years: int) -> None:
    if useful_life_years < 1:
        raise ValueError(f"Useful life must be at least 1 year, got {useful_life_years}")


def _within_life(year: int, useful_life_years: int) -> bool:
    return 1 <= year <= useful_life_years


def straight_line_depreciation(
    cost: Decimal,
    salvage_value: Decimal,
    useful_life_years: int,
    year: int = 1,
) -> Decimal:
    """Annual straight-line depreciation charge (zero outside the useful life)."""
    _check_useful_life(useful_life_years)
    if not _within_life(year, useful_life_years):
        return ZERO
    return round_to_cents((cost - salvage_value) / useful_life_years)


def declining_balance_depreciation(
    cost: Decimal,
    salvage_value: Decimal,
    useful_life_years: int,
    year: int = 1,
    factor: Decimal = Decimal("1"),
) -> Decimal:
    """Declining-balance charge for a given year of the asset's life.

    The rate is ``factor / useful_life_years`` applied to the opening book
    value (cost in year 1), not to the depreciable amount; the charge never
    takes book value below salvage. For 10,000 cost, 1,000 salvage and a
    5-year life, year 1 is 2,000. A charge of ``(cost - salvage) / life``
    (1,800 here) is ``straight_line_depreciation``. Zero outside the useful life.
    """
    _check_useful_life(useful_life_years)
    if not _within_life(year, useful_life_years):
        return ZERO
    rate = factor / useful_life_years
    book_value = cost
    charge = ZERO
    for _ in range(year):
        charge = min(round_to_cents(book_value * rate), max(ZERO, book_value - salvage_value))
        book_value -= charge
    return charge


def sum_of_years_depreciation(
    cost: Decimal,
    salvage_value: Decimal,
    useful_life_years: int,
    year: int = 1,
) -> Decimal:
    """Sum-of-the-years'-digits charge for a given year (1-based)."""
    _check_useful_life(useful_life_years)
    if not _within_life(year, useful_life_years):
        return ZERO
    digits = useful_life_years * (useful_life_years + 1) // 2
    remaining_life = useful_life_years - year + 1
    return round_to_cents((cost - salvage_value) * remaining_life / digits)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end, never negative."""
    return max(0, (end.year - start.year) * 12 + (end.month - start.month))


def depreciation_until_disposal(
    cost: Decimal,
    annual_rate_pct: Decimal,
    purchase_date: date,
    disposal_date: date,
) -> Decimal:
    """Accumulated monthly depreciation up to disposal, capped at cost."""
    months = months_between(purchase_date, disposal_date)
    total = cost * monthly_rate(annual_rate_pct) * months
    return round_to_cents(min(total, cost))


def gain_or_loss_on_disposal(
    cost: Decimal,
    accumulated_depreciation: Decimal,
    selling_price: Decimal,
) -> Decimal:
    """Selling price less net book value (positive = gain)."""
    net_book_value = max(ZERO, cost - min(accumulated_depreciation, cost))
    return selling_price - net_book_value
