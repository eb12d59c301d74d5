"""Unit tests for PayrollTaxCalculator.

Monthly PAYE annualises the gross, applies the year's brackets, subtracts
the primary rebate and divides back by 12.
"""

from decimal import Decimal

import pytest

from rigel_tax.calculators.payroll_tax import PayrollTaxCalculator, calculate_company_tax
from rigel_tax.calculators.tax_tables import SA_2024, IncomeTaxTable, TaxBracket
from rigel_tax.calculators.types import AgeGroup, PayrollEntry


class TestBracketTax:
    """Test progressive bracket selection and tax within a bracket."""

    def test_first_bracket_is_flat_rate(self, paye_2024):
        """Income in the first bracket is taxed at 18% with no base amount."""
        assert paye_2024.calculate_bracket_tax(Decimal("120000")) == Decimal("21600.00")

    def test_upper_bound_is_inclusive(self, paye_2024):
        """Income exactly at a bracket's max stays in that bracket."""
        assert paye_2024.calculate_bracket_tax(Decimal("237100")) == Decimal("42678.00")

    def test_just_above_bound_moves_to_next_bracket(self, paye_2024):
        """One cent above the max is taxed from the next bracket's base."""
        tax = paye_2024.calculate_bracket_tax(Decimal("237100.01"))
        assert tax == Decimal("42678") + Decimal("0.01") * Decimal("0.26")

    def test_second_bracket_uses_base_amount(self, paye_2024):
        """flat + (income - min) * rate."""
        # 42678 + 2900 * 0.26
        assert paye_2024.calculate_bracket_tax(Decimal("240000")) == Decimal("43432.00")

    def test_top_bracket_2024(self, paye_2024):
        """The 2024 snapshot tops out at 41%."""
        # 251258 + 1142100 * 0.41
        assert paye_2024.calculate_bracket_tax(Decimal("2000000")) == Decimal("719519.00")

    def test_top_bracket_2025(self, paye_2025):
        """From 2025 income above 1,817,000 is taxed at 45%."""
        # 644489 + 183000 * 0.45
        assert paye_2025.calculate_bracket_tax(Decimal("2000000")) == Decimal("726839.00")

    def test_zero_income(self, paye_2024):
        assert paye_2024.calculate_bracket_tax(Decimal("0")) == Decimal("0")

    def test_malformed_table_without_open_bracket(self):
        """A table whose brackets stop short cannot place higher incomes."""
        table = IncomeTaxTable(
            tax_year=1999,
            brackets=(
                TaxBracket(
                    min_amount=Decimal("0"),
                    max_amount=Decimal("1000"),
                    rate=Decimal("0.10"),
                ),
            ),
            primary_rebate=Decimal("0"),
        )
        calc = PayrollTaxCalculator(table)

        with pytest.raises(ValueError):
            calc.calculate_bracket_tax(Decimal("5000"))


class TestMonthlyPaye:
    """Test monthly PAYE withholding."""

    def test_paye_at_first_bracket_boundary(self, paye_2024):
        """Annual 237,100: (42678 - 17235) / 12."""
        annual_tax = paye_2024.calculate_annual_tax(Decimal("237100"))
        assert annual_tax == Decimal("25443")
        assert annual_tax / 12 == Decimal("2120.25")

    def test_monthly_paye_at_first_bracket_boundary(self, paye_2024):
        """A monthly gross annualising to exactly 237,100 withholds 2120.25."""
        monthly = Decimal("237100") / 12
        assert paye_2024.calculate_monthly_paye(monthly) == Decimal("2120.25")

    def test_paye_first_bracket(self, paye_2024):
        """R10,000/month: (120000 * 0.18 - 17235) / 12."""
        assert paye_2024.calculate_monthly_paye(Decimal("10000")) == Decimal("363.75")

    def test_paye_second_bracket(self, paye_2024):
        """R20,000/month: (43432 - 17235) / 12 rounded to cents."""
        assert paye_2024.calculate_monthly_paye(Decimal("20000")) == Decimal("2183.08")

    def test_paye_below_tax_threshold(self, paye_2024):
        """Rebate exceeds bracket tax, so no PAYE is withheld."""
        assert paye_2024.calculate_monthly_paye(Decimal("5000")) == Decimal("0.00")

    def test_paye_zero_salary(self, paye_2024):
        assert paye_2024.calculate_monthly_paye(Decimal("0")) == Decimal("0.00")


class TestAgeRebates:
    """Test age-group rebates on annual tax."""

    @pytest.mark.parametrize(
        "age_group,expected",
        [
            (AgeGroup.UNDER_65, Decimal("100272")),
            (AgeGroup.AGE_65_TO_74, Decimal("90828")),
            (AgeGroup.AGE_75_PLUS, Decimal("87683")),
        ],
    )
    def test_rebates_reduce_annual_tax(self, paye_2024, age_group, expected):
        """Bracket tax on R500,000 is 117,507 before rebates."""
        assert paye_2024.calculate_annual_tax(Decimal("500000"), age_group) == expected

    def test_rebate_totals(self, paye_2024):
        assert paye_2024.rebate_for(AgeGroup.UNDER_65) == Decimal("17235")
        assert paye_2024.rebate_for(AgeGroup.AGE_65_TO_74) == Decimal("26679")
        assert paye_2024.rebate_for(AgeGroup.AGE_75_PLUS) == Decimal("29824")

    def test_annual_tax_never_negative(self, paye_2024):
        assert paye_2024.calculate_annual_tax(Decimal("50000"), AgeGroup.AGE_75_PLUS) == 0


class TestUif:
    """Test UIF contributions."""

    def test_uif_one_percent(self, paye_2024):
        assert paye_2024.calculate_uif(Decimal("10000")) == Decimal("100.00")

    def test_uif_capped(self, paye_2024):
        """UIF never exceeds the monthly ceiling."""
        assert paye_2024.calculate_uif(Decimal("20000")) == Decimal("177.12")
        assert paye_2024.calculate_uif(Decimal("1000000")) == Decimal("177.12")

    def test_uif_at_cap_threshold(self, paye_2024):
        assert paye_2024.calculate_uif(Decimal("17712")) == Decimal("177.12")

    def test_uif_zero_salary(self, paye_2024):
        assert paye_2024.calculate_uif(Decimal("0")) == Decimal("0")


class TestCalculatePayroll:
    """Test full payroll entries."""

    def test_gross_includes_allowances_and_overtime(self, paye_2024):
        entry = PayrollEntry(
            basic_salary=Decimal("8000"),
            allowances=Decimal("1500"),
            overtime_pay=Decimal("500"),
        )
        result = paye_2024.calculate_payroll(entry)

        assert result.gross_salary == Decimal("10000")
        assert result.paye_tax == Decimal("363.75")
        assert result.uif == Decimal("100.00")

    def test_net_salary(self, paye_2024):
        """Net = gross - PAYE - UIF - medical aid - pension."""
        entry = PayrollEntry(
            basic_salary=Decimal("20000"),
            medical_aid=Decimal("1500"),
            pension_fund=Decimal("1000"),
        )
        result = paye_2024.calculate_payroll(entry)

        assert result.total_deductions == Decimal("2183.08") + Decimal("177.12") + Decimal("2500")
        assert result.net_salary == Decimal("15139.80")

    def test_net_salary_can_be_negative(self, paye_2024):
        """Deductions larger than gross are reported as-is."""
        entry = PayrollEntry(
            basic_salary=Decimal("5000"),
            medical_aid=Decimal("4000"),
            pension_fund=Decimal("2000"),
        )
        result = paye_2024.calculate_payroll(entry)

        assert result.paye_tax == Decimal("0.00")
        assert result.uif == Decimal("50.00")
        assert result.net_salary == Decimal("-1050.00")

    def test_zero_salary(self, paye_2024):
        result = paye_2024.calculate_payroll(PayrollEntry(basic_salary=Decimal("0")))

        assert result.gross_salary == 0
        assert result.paye_tax == 0
        assert result.uif == 0
        assert result.net_salary == 0

    def test_table_is_a_parameter(self):
        """The same salary yields different PAYE under a different table."""
        table = IncomeTaxTable(
            tax_year=SA_2024.tax_year,
            brackets=SA_2024.brackets,
            primary_rebate=Decimal("0"),
        )
        paye = PayrollTaxCalculator(table).calculate_monthly_paye(Decimal("10000"))
        # 21600 / 12 with no rebate
        assert paye == Decimal("1800.00")


class TestCompanyTax:
    """Test flat company income tax."""

    def test_flat_rate(self):
        assert calculate_company_tax(Decimal("1000000")) == Decimal("270000.00")

    def test_custom_rate(self):
        assert calculate_company_tax(Decimal("1000"), Decimal("0.28")) == Decimal("280.00")

    def test_no_tax_on_loss(self):
        assert calculate_company_tax(Decimal("-5000")) == Decimal("0")
