"""Unit tests for the per-year tax table registry."""

from decimal import Decimal

import pytest

from rigel_tax.calculators.tax_tables import (
    SA_2024,
    SA_2025,
    TAX_TABLES,
    TaxTableNotFoundError,
    get_tax_table,
    tax_table_from_payload,
    tax_table_to_payload,
)


class TestRegistry:
    """Test built-in table lookup."""

    def test_builtin_years(self):
        assert sorted(TAX_TABLES) == [2024, 2025, 2026]

    def test_get_table(self):
        assert get_tax_table(2024) is SA_2024

    def test_2024_snapshot_brackets(self):
        assert len(SA_2024.brackets) == 6
        assert SA_2024.brackets[-1].rate == Decimal("0.41")
        assert SA_2024.brackets[-1].max_amount is None

    def test_2025_adds_top_bracket(self):
        assert len(SA_2025.brackets) == 7
        top = SA_2025.brackets[-1]
        assert top.min_amount == Decimal("1817000")
        assert top.flat_amount == Decimal("644489")

    def test_unknown_year(self):
        with pytest.raises(TaxTableNotFoundError) as exc_info:
            get_tax_table(1995)

        assert exc_info.value.tax_year == 1995
        assert exc_info.value.available == [2024, 2025, 2026]
        assert "1995" in str(exc_info.value)


class TestPayload:
    """Test the stored JSON payload format."""

    def test_round_trip(self):
        payload = tax_table_to_payload(SA_2025)
        table = tax_table_from_payload(2025, payload)

        assert table == SA_2025
        assert table.source == "store"

    def test_parse_numeric_payload(self):
        table = tax_table_from_payload(
            2030,
            {
                "brackets": [
                    {"min": 0, "max": 100000, "rate": 0.2, "flat": 0},
                    {"min": 100000, "max": None, "rate": 0.3, "flat": 20000},
                ],
                "rebates": {"primary": 1000},
            },
        )

        assert table.tax_year == 2030
        assert table.brackets[1].flat_amount == Decimal("20000")
        assert table.brackets[0].rate == Decimal("0.2")
        assert table.secondary_rebate == 0
        assert table.uif_monthly_cap == Decimal("177.12")

    def test_payload_without_brackets(self):
        with pytest.raises(ValueError):
            tax_table_from_payload(2030, {"brackets": []})

    def test_amounts_serialized_as_strings(self):
        payload = tax_table_to_payload(SA_2024)

        assert payload["brackets"][0] == {"min": "0", "max": "237100", "rate": "0.18", "flat": "0"}
        assert payload["brackets"][-1]["max"] is None
        assert payload["uif"] == {"rate": "0.01", "monthly_cap": "177.12"}
