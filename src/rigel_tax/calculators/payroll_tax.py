"""South African PAYE and UIF calculation for monthly payroll."""

from __future__ import annotations

from decimal import Decimal

from rigel_tax.calculators.tax_tables import IncomeTaxTable
from rigel_tax.calculators.types import (
    ZERO,
    AgeGroup,
    PayrollEntry,
    PayrollResult,
    round_to_cents,
)

MONTHS_PER_YEAR = Decimal("12")
DEFAULT_COMPANY_TAX_RATE = Decimal("0.27")


class PayrollTaxCalculator:
    """Calculates PAYE, UIF and net pay against one year's tax table.

    PAYE is derived by annualising the monthly gross (x12), applying the
    table's progressive brackets, subtracting the primary rebate (floored at
    zero) and spreading the result back over 12 months.

    UIF is a flat percentage of gross, capped at a fixed monthly ceiling.

    Medical aid and pension fund contributions are pass-through deductions.
    Net salary is NOT floored at zero: when deductions exceed gross the
    result is negative and left to the caller to handle.
    """

    def __init__(self, table: IncomeTaxTable):
        self.table = table

    def calculate_bracket_tax(self, annual_income: Decimal) -> Decimal:
        """Tax on annual income before rebates (unrounded)."""
        if annual_income <= 0:
            return ZERO

        bracket = self.table.bracket_for(annual_income)
        return bracket.flat_amount + (annual_income - bracket.min_amount) * bracket.rate

    def rebate_for(self, age_group: AgeGroup = AgeGroup.UNDER_65) -> Decimal:
        """Total rebate for an age group."""
        rebate = self.table.primary_rebate
        if age_group in (AgeGroup.AGE_65_TO_74, AgeGroup.AGE_75_PLUS):
            rebate += self.table.secondary_rebate
        if age_group == AgeGroup.AGE_75_PLUS:
            rebate += self.table.tertiary_rebate
        return rebate

    def calculate_annual_tax(
        self,
        annual_income: Decimal,
        age_group: AgeGroup = AgeGroup.UNDER_65,
    ) -> Decimal:
        """Annual income tax after age-group rebates, floored at zero."""
        tax = self.calculate_bracket_tax(annual_income) - self.rebate_for(age_group)
        return max(ZERO, tax)

    def calculate_monthly_paye(self, gross_monthly_salary: Decimal) -> Decimal:
        """Monthly PAYE withholding for a gross monthly salary."""
        annual_salary = gross_monthly_salary * MONTHS_PER_YEAR
        annual_tax = self.calculate_annual_tax(annual_salary, AgeGroup.UNDER_65)
        return round_to_cents(annual_tax / MONTHS_PER_YEAR)

    def calculate_uif(self, gross_monthly_salary: Decimal) -> Decimal:
        """Employee UIF contribution, capped at the monthly ceiling."""
        if gross_monthly_salary <= 0:
            return ZERO
        uif = min(gross_monthly_salary * self.table.uif_rate, self.table.uif_monthly_cap)
        return round_to_cents(uif)

    def calculate_payroll(self, entry: PayrollEntry) -> PayrollResult:
        """Compute gross, statutory deductions and net salary for one entry."""
        gross = entry.gross_salary
        paye = self.calculate_monthly_paye(gross)
        uif = self.calculate_uif(gross)

        total_deductions = paye + uif + entry.medical_aid + entry.pension_fund

        return PayrollResult(
            gross_salary=gross,
            paye_tax=paye,
            uif=uif,
            medical_aid=entry.medical_aid,
            pension_fund=entry.pension_fund,
            total_deductions=total_deductions,
            net_salary=gross - total_deductions,
        )


def calculate_company_tax(
    taxable_income: Decimal,
    rate: Decimal = DEFAULT_COMPANY_TAX_RATE,
) -> Decimal:
    """Flat-rate company income tax (no tax on a loss)."""
    if taxable_income <= 0:
        return ZERO
    return round_to_cents(taxable_income * rate)
