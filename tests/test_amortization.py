"""Unit tests for loan amortization and asset depreciation."""

from datetime import date
from decimal import Decimal

import pytest

from rigel_tax.calculators.amortization import (
    InvalidLoanTermError,
    add_months,
    build_amortization_schedule,
    declining_balance_depreciation,
    depreciation_until_disposal,
    gain_or_loss_on_disposal,
    monthly_payment,
    months_between,
    straight_line_depreciation,
    sum_of_years_depreciation,
)
from rigel_tax.calculators.types import Loan


def make_loan(
    principal: str = "10000",
    rate: str = "12",
    term: int = 12,
    start: date = date(2024, 1, 15),
) -> Loan:
    return Loan(
        principal=Decimal(principal),
        annual_rate_pct=Decimal(rate),
        term_months=term,
        start_date=start,
    )


class TestMonthlyPayment:
    """Test the fixed monthly payment."""

    def test_annuity_payment(self):
        """10,000 at 12% over 12 months."""
        assert monthly_payment(Decimal("10000"), Decimal("12"), 12) == Decimal("888.49")

    def test_zero_rate_splits_evenly(self):
        assert monthly_payment(Decimal("1200"), Decimal("0"), 12) == Decimal("100.00")

    @pytest.mark.parametrize("term", [0, -6])
    def test_non_positive_term_rejected(self, term):
        with pytest.raises(InvalidLoanTermError) as exc_info:
            monthly_payment(Decimal("1000"), Decimal("10"), term)

        assert exc_info.value.term_months == term

    def test_invalid_term_is_a_value_error(self):
        with pytest.raises(ValueError):
            build_amortization_schedule(make_loan(term=0))


class TestAmortizationSchedule:
    """Test the period-by-period schedule."""

    def test_schedule_length_and_numbering(self):
        schedule = build_amortization_schedule(make_loan())

        assert len(schedule) == 12
        assert [e.payment_number for e in schedule] == list(range(1, 13))

    def test_ends_at_zero(self):
        schedule = build_amortization_schedule(make_loan())
        assert schedule[-1].remaining_balance == 0

    def test_principal_sums_to_loan(self):
        """The final period absorbs rounding drift."""
        loan = make_loan(principal="250000", rate="11.75", term=240)
        schedule = build_amortization_schedule(loan)

        assert sum(e.principal_payment for e in schedule) == loan.principal
        assert schedule[-1].remaining_balance == 0

    def test_first_period_interest(self):
        """Interest on the opening balance: 10000 * 1%."""
        first = build_amortization_schedule(make_loan())[0]

        assert first.interest_payment == Decimal("100.00")
        assert first.principal_payment == Decimal("788.49")
        assert first.total_payment == Decimal("888.49")
        assert first.remaining_balance == Decimal("9211.51")

    def test_regular_periods_pay_fixed_amount(self):
        schedule = build_amortization_schedule(make_loan())

        for entry in schedule[:-1]:
            assert entry.total_payment == Decimal("888.49")

    def test_balance_decreases(self):
        schedule = build_amortization_schedule(make_loan())
        balances = [e.remaining_balance for e in schedule]

        assert balances == sorted(balances, reverse=True)

    def test_zero_rate_schedule(self):
        schedule = build_amortization_schedule(make_loan(principal="1200", rate="0"))

        assert all(e.interest_payment == 0 for e in schedule)
        assert all(e.principal_payment == Decimal("100.00") for e in schedule)
        assert schedule[-1].remaining_balance == 0

    def test_single_period(self):
        schedule = build_amortization_schedule(make_loan(principal="1000", rate="12", term=1))

        assert len(schedule) == 1
        assert schedule[0].principal_payment == Decimal("1000")
        assert schedule[0].interest_payment == Decimal("10.00")

    def test_payment_dates_clamp_to_month_end(self):
        schedule = build_amortization_schedule(make_loan(term=3, start=date(2024, 1, 31)))

        assert [e.payment_date for e in schedule] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
        ]

    def test_schedule_is_deterministic(self):
        loan = make_loan()
        assert build_amortization_schedule(loan) == build_amortization_schedule(loan)


class TestAddMonths:
    """Test calendar month arithmetic."""

    def test_clamps_day(self):
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_crosses_year(self):
        assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)

    def test_zero(self):
        assert add_months(date(2024, 5, 20), 0) == date(2024, 5, 20)


class TestDepreciation:
    """Test the depreciation methods."""

    def test_straight_line(self):
        assert straight_line_depreciation(Decimal("10000"), Decimal("1000"), 5) == Decimal("1800.00")

    def test_straight_line_rejects_zero_life(self):
        with pytest.raises(ValueError):
            straight_line_depreciation(Decimal("10000"), Decimal("0"), 0)

    def test_declining_balance_first_years(self):
        """Double declining: 40% of opening book value."""
        cost, salvage = Decimal("10000"), Decimal("0")

        assert declining_balance_depreciation(cost, salvage, 5, 1, Decimal("2")) == Decimal("4000.00")
        assert declining_balance_depreciation(cost, salvage, 5, 2, Decimal("2")) == Decimal("2400.00")

    def test_declining_balance_stops_at_salvage(self):
        """Year 1 charge would be 5000 but only 2000 remains above salvage."""
        charge = declining_balance_depreciation(
            Decimal("10000"), Decimal("8000"), 4, 1, Decimal("2")
        )
        assert charge == Decimal("2000")

    def test_sum_of_years(self):
        cost, salvage = Decimal("10000"), Decimal("1000")

        assert sum_of_years_depreciation(cost, salvage, 5, 1) == Decimal("3000.00")
        assert sum_of_years_depreciation(cost, salvage, 5, 5) == Decimal("600.00")

    def test_sum_of_years_outside_life(self):
        assert sum_of_years_depreciation(Decimal("10000"), Decimal("1000"), 5, 6) == 0

    def test_straight_line_same_charge_every_year(self):
        cost, salvage = Decimal("10000"), Decimal("1000")

        assert straight_line_depreciation(cost, salvage, 5, 1) == Decimal("1800.00")
        assert straight_line_depreciation(cost, salvage, 5, 5) == Decimal("1800.00")

    def test_declining_balance_on_book_value_not_depreciable_amount(self):
        """Single-rate declining balance: 10,000 / 5, salvage only caps it."""
        charge = declining_balance_depreciation(Decimal("10000"), Decimal("1000"), 5, 1)
        assert charge == Decimal("2000.00")

    @pytest.mark.parametrize("year", [0, 6, 50, 2_000_000])
    def test_all_methods_zero_outside_life(self, year):
        """Years beyond the useful life return at once with no charge."""
        cost, salvage = Decimal("10000"), Decimal("1000")

        assert straight_line_depreciation(cost, salvage, 5, year) == 0
        assert declining_balance_depreciation(cost, salvage, 5, year, Decimal("2")) == 0
        assert sum_of_years_depreciation(cost, salvage, 5, year) == 0


class TestDisposal:
    """Test depreciation until disposal and the gain or loss on sale."""

    def test_months_between(self):
        assert months_between(date(2024, 1, 15), date(2024, 6, 1)) == 5

    def test_months_between_never_negative(self):
        assert months_between(date(2024, 6, 1), date(2024, 1, 1)) == 0

    def test_depreciation_until_disposal(self):
        """12,000 at 10% a year for 5 months."""
        accumulated = depreciation_until_disposal(
            Decimal("12000"), Decimal("10"), date(2024, 1, 1), date(2024, 6, 1)
        )
        assert accumulated == Decimal("500.00")

    def test_depreciation_capped_at_cost(self):
        accumulated = depreciation_until_disposal(
            Decimal("1000"), Decimal("50"), date(2010, 1, 1), date(2024, 1, 1)
        )
        assert accumulated == Decimal("1000.00")

    def test_gain_on_disposal(self):
        """Sold for 11,600 with a net book value of 11,500."""
        assert gain_or_loss_on_disposal(
            Decimal("12000"), Decimal("500"), Decimal("11600")
        ) == Decimal("100")

    def test_loss_on_disposal(self):
        assert gain_or_loss_on_disposal(
            Decimal("12000"), Decimal("600"), Decimal("10000")
        ) == Decimal("-1400")
