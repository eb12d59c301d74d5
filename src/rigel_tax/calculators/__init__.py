"""Tax and payroll calculation library."""

from rigel_tax.calculators.amortization import (
    InvalidLoanTermError,
    build_amortization_schedule,
    monthly_payment,
)
from rigel_tax.calculators.deferred_tax import DeferredTaxCalculator, reconcile_movements
from rigel_tax.calculators.ledger import (
    build_tax_report,
    build_trial_balance,
    estimate_vat,
    render_trial_balance_lines,
)
from rigel_tax.calculators.payroll_tax import PayrollTaxCalculator, calculate_company_tax
from rigel_tax.calculators.tax_tables import (
    IncomeTaxTable,
    TaxBracket,
    TaxTableNotFoundError,
    get_tax_table,
)

__all__ = [
    "DeferredTaxCalculator",
    "IncomeTaxTable",
    "InvalidLoanTermError",
    "PayrollTaxCalculator",
    "TaxBracket",
    "TaxTableNotFoundError",
    "build_amortization_schedule",
    "build_tax_report",
    "build_trial_balance",
    "calculate_company_tax",
    "estimate_vat",
    "get_tax_table",
    "monthly_payment",
    "reconcile_movements",
    "render_trial_balance_lines",
]
