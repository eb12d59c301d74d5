"""Trial balance aggregation, VAT estimation and the ledger tax report."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from rigel_tax.calculators.payroll_tax import DEFAULT_COMPANY_TAX_RATE, calculate_company_tax
from rigel_tax.calculators.types import (
    ZERO,
    CorporateTaxBracket,
    LedgerAccount,
    LedgerPosting,
    TaxReport,
    TrialBalance,
    TrialBalanceRow,
    TrialBalanceTotals,
    VatEstimate,
    round_to_cents,
)

ADJUSTMENT_ENTRY_TYPE = "adjustment"
DEFAULT_VAT_RATE = Decimal("0.15")
DEPRECIATION_ACCOUNT_CODE = "6101"


def build_trial_balance(
    postings: Iterable[LedgerPosting],
    accounts: Sequence[LedgerAccount] | None = None,
    exclude_adjustments: bool = False,
) -> TrialBalance:
    """Aggregate postings into one debit/credit row per account.

    Debits and credits are accumulated independently per account and never
    netted. Rows appear in the order accounts are first posted to.
    ``exclude_adjustments`` gives the pre-adjustment view.
    """
    rows: dict[str, TrialBalanceRow] = {}

    for posting in postings:
        if exclude_adjustments and posting.entry_type == ADJUSTMENT_ENTRY_TYPE:
            continue

        account = posting.account
        row = rows.get(account.id)
        if row is None:
            row = TrialBalanceRow(code=account.code, name=account.name, type=account.type)
            rows[account.id] = row
        row.debit += posting.debit
        row.credit += posting.credit

    row_list = list(rows.values())
    totals = TrialBalanceTotals(
        debit=sum((r.debit for r in row_list), ZERO),
        credit=sum((r.credit for r in row_list), ZERO),
    )

    return TrialBalance(
        rows=row_list,
        totals=totals,
        accounts_count=len(accounts) if accounts is not None else len(row_list),
    )


def render_trial_balance_lines(trial_balance: TrialBalance) -> list[str]:
    """Render the human-readable report lines for a trial balance."""
    lines = [
        f"{r.code}  {r.name}  {r.type}  Dr {r.debit:.2f}  Cr {r.credit:.2f}"
        for r in trial_balance.rows
    ]
    totals = trial_balance.totals
    lines.append(f"Totals  Dr {totals.debit:.2f}  Cr {totals.credit:.2f}")
    return lines


# ===== VAT =====


def estimate_vat(revenue: Decimal, expenses: Decimal, vat_rate: Decimal) -> VatEstimate:
    """Simplified VAT estimate: output VAT on revenue less input VAT on expenses.

    Zero-rated and exempt supplies are not distinguished.
    """
    output_vat = revenue * vat_rate
    input_vat = expenses * vat_rate
    return VatEstimate(
        output_vat=output_vat,
        input_vat=input_vat,
        vat_due=output_vat - input_vat,
    )


def add_vat(net_amount: Decimal, vat_rate: Decimal) -> tuple[Decimal, Decimal]:
    """Return ``(vat, gross)`` for a VAT-exclusive amount."""
    vat = round_to_cents(net_amount * vat_rate)
    return vat, net_amount + vat


def extract_vat(gross_amount: Decimal, vat_rate: Decimal) -> tuple[Decimal, Decimal]:
    """Return ``(vat, net)`` for a VAT-inclusive amount."""
    vat = round_to_cents(gross_amount * vat_rate / (1 + vat_rate))
    return vat, gross_amount - vat


# ===== Tax report =====


def calculate_progressive_corporate_tax(
    income: Decimal,
    brackets: Sequence[CorporateTaxBracket],
    corporate_tax_rate: Decimal = DEFAULT_COMPANY_TAX_RATE,
) -> Decimal:
    """Corporate tax across ascending ``{threshold, rate}`` brackets.

    Each bracket's rate applies to income between the previous threshold and
    its own; income beyond the last threshold is taxed at the last rate.
    Without brackets the flat ``corporate_tax_rate`` applies.
    """
    if not brackets:
        return income * corporate_tax_rate

    ordered = sorted(brackets, key=lambda b: b.threshold)
    tax = ZERO
    previous = ZERO
    for bracket in ordered:
        if income > bracket.threshold:
            tax += (bracket.threshold - previous) * bracket.rate
            previous = bracket.threshold
        else:
            return tax + (income - previous) * bracket.rate

    return tax + (income - previous) * ordered[-1].rate


def build_tax_report(
    postings: Iterable[LedgerPosting],
    vat_rate: Decimal = DEFAULT_VAT_RATE,
    corp_tax_brackets: Sequence[CorporateTaxBracket] | None = None,
    corporate_tax_rate: Decimal = DEFAULT_COMPANY_TAX_RATE,
) -> TaxReport:
    """Derive revenue, expenses, VAT due and corporate tax from postings.

    VAT due here is output VAT on revenue only; use ``estimate_vat`` when
    input VAT on expenses should be claimed. Without brackets, corporate tax
    is ``corporate_tax_rate`` on taxable income, floored at zero.
    """
    revenue = ZERO
    expenses = ZERO
    depreciation = ZERO

    for p in postings:
        account_type = p.account.type.upper()
        if account_type == "REVENUE":
            revenue += p.credit - p.debit
        elif account_type == "EXPENSE":
            expenses += p.debit - p.credit
        if p.account.code == DEPRECIATION_ACCOUNT_CODE:
            depreciation += p.debit - p.credit

    taxable_income = revenue - expenses
    if corp_tax_brackets:
        corp_tax = round_to_cents(
            calculate_progressive_corporate_tax(taxable_income, corp_tax_brackets)
        )
    else:
        corp_tax = calculate_company_tax(taxable_income, corporate_tax_rate)

    return TaxReport(
        vat_rate=vat_rate,
        vat_due=round_to_cents(revenue * vat_rate),
        revenue=revenue,
        expenses=expenses,
        depreciation_expense=depreciation,
        taxable_income=taxable_income,
        corp_tax=corp_tax,
    )
