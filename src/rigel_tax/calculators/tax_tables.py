"""Per-year income tax tables (brackets, rebates, UIF).

Tables change every tax year, so calculators take a table as a parameter
instead of embedding bracket constants. Built-in tables cover the years the
application ships with; further years are loaded from the tax table store
(see ``rigel_tax.services.tax_table_service``) using the JSON payload format:

    {
        "brackets": [
            {"min": 0, "max": 237100, "rate": 0.18, "flat": 0},
            {"min": 237100, "max": 370500, "rate": 0.26, "flat": 42678},
            ...
            {"min": 857900, "max": null, "rate": 0.41, "flat": 251258}
        ],
        "rebates": {"primary": 17235, "secondary": 9444, "tertiary": 3145},
        "uif": {"rate": 0.01, "monthly_cap": 177.12}
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


class TaxTableNotFoundError(Exception):
    """Raised when no tax table exists for the requested year."""

    def __init__(self, tax_year: int, available: list[int] | None = None):
        self.tax_year = tax_year
        self.available = available or []
        msg = f"No tax table for year {tax_year}"
        if self.available:
            msg += f". Available years: {self.available}"
        super().__init__(msg)


@dataclass(frozen=True)
class TaxBracket:
    """Tax bracket for progressive taxation.

    Tax within the bracket is ``flat_amount + (income - min_amount) * rate``.
    ``max_amount`` is an inclusive upper bound.
    """

    min_amount: Decimal
    max_amount: Decimal | None  # None = no upper limit
    rate: Decimal  # As decimal, e.g., 0.18 for 18%
    flat_amount: Decimal = Decimal("0")  # Tax owed on income up to min_amount

    def contains(self, income: Decimal) -> bool:
        return self.max_amount is None or income <= self.max_amount


@dataclass(frozen=True)
class IncomeTaxTable:
    """Brackets, rebates and UIF parameters for one tax year."""

    tax_year: int
    brackets: tuple[TaxBracket, ...]
    primary_rebate: Decimal
    secondary_rebate: Decimal = Decimal("0")
    tertiary_rebate: Decimal = Decimal("0")
    uif_rate: Decimal = Decimal("0.01")
    uif_monthly_cap: Decimal = Decimal("177.12")
    source: str = field(default="builtin", compare=False)

    def bracket_for(self, income: Decimal) -> TaxBracket:
        """Return the first bracket (ascending) whose upper bound holds."""
        for bracket in sorted(self.brackets, key=lambda b: b.min_amount):
            if bracket.contains(income):
                return bracket
        # Tables always end with an open bracket; guard malformed payloads
        raise ValueError(f"Tax table {self.tax_year} has no bracket for income {income}")


def _brackets(rows: list[tuple[int, int | None, str, int]]) -> tuple[TaxBracket, ...]:
    return tuple(
        TaxBracket(
            min_amount=Decimal(lower),
            max_amount=Decimal(upper) if upper is not None else None,
            rate=Decimal(rate),
            flat_amount=Decimal(flat),
        )
        for lower, upper, rate, flat in rows
    )


# 2024 payroll snapshot (SARS monthly PAYE)
SA_2024 = IncomeTaxTable(
    tax_year=2024,
    brackets=_brackets(
        [
            (0, 237100, "0.18", 0),
            (237100, 370500, "0.26", 42678),
            (370500, 512800, "0.31", 77362),
            (512800, 673000, "0.36", 121475),
            (673000, 857900, "0.39", 179147),
            (857900, None, "0.41", 251258),
        ]
    ),
    primary_rebate=Decimal("17235"),
    secondary_rebate=Decimal("9444"),
    tertiary_rebate=Decimal("3145"),
)

_SA_2025_BRACKETS = _brackets(
    [
        (0, 237100, "0.18", 0),
        (237100, 370500, "0.26", 42678),
        (370500, 512800, "0.31", 77362),
        (512800, 673000, "0.36", 121475),
        (673000, 857900, "0.39", 179147),
        (857900, 1817000, "0.41", 251258),
        (1817000, None, "0.45", 644489),
    ]
)

SA_2025 = IncomeTaxTable(
    tax_year=2025,
    brackets=_SA_2025_BRACKETS,
    primary_rebate=Decimal("17235"),
    secondary_rebate=Decimal("9444"),
    tertiary_rebate=Decimal("3145"),
)

# Unchanged from 2025 (no inflation adjustment published)
SA_2026 = IncomeTaxTable(
    tax_year=2026,
    brackets=_SA_2025_BRACKETS,
    primary_rebate=Decimal("17235"),
    secondary_rebate=Decimal("9444"),
    tertiary_rebate=Decimal("3145"),
)

# Registry of built-in tax tables
TAX_TABLES: dict[int, IncomeTaxTable] = {
    2024: SA_2024,
    2025: SA_2025,
    2026: SA_2026,
}


def get_tax_table(tax_year: int) -> IncomeTaxTable:
    """Get the built-in tax table for a year.

    Raises:
        TaxTableNotFoundError: If no built-in table exists for the year.
    """
    if tax_year not in TAX_TABLES:
        raise TaxTableNotFoundError(tax_year, sorted(TAX_TABLES))
    return TAX_TABLES[tax_year]


def tax_table_from_payload(
    tax_year: int, payload: dict[str, Any], source: str = "store"
) -> IncomeTaxTable:
    """Parse a stored JSON payload into a tax table."""
    brackets = []
    for b in payload.get("brackets", []):
        brackets.append(
            TaxBracket(
                min_amount=Decimal(str(b["min"])),
                max_amount=Decimal(str(b["max"])) if b.get("max") is not None else None,
                rate=Decimal(str(b["rate"])),
                flat_amount=Decimal(str(b.get("flat", 0))),
            )
        )
    if not brackets:
        raise ValueError(f"Tax table payload for {tax_year} has no brackets")

    rebates = payload.get("rebates", {})
    uif = payload.get("uif", {})

    return IncomeTaxTable(
        tax_year=tax_year,
        brackets=tuple(brackets),
        primary_rebate=Decimal(str(rebates.get("primary", 0))),
        secondary_rebate=Decimal(str(rebates.get("secondary", 0))),
        tertiary_rebate=Decimal(str(rebates.get("tertiary", 0))),
        uif_rate=Decimal(str(uif.get("rate", "0.01"))),
        uif_monthly_cap=Decimal(str(uif.get("monthly_cap", "177.12"))),
        source=source,
    )


def tax_table_to_payload(table: IncomeTaxTable) -> dict[str, Any]:
    """Serialize a tax table into the JSON payload format.

    Amounts are stored as strings so no precision is lost in JSON.
    """
    return {
        "brackets": [
            {
                "min": str(b.min_amount),
                "max": str(b.max_amount) if b.max_amount is not None else None,
                "rate": str(b.rate),
                "flat": str(b.flat_amount),
            }
            for b in table.brackets
        ],
        "rebates": {
            "primary": str(table.primary_rebate),
            "secondary": str(table.secondary_rebate),
            "tertiary": str(table.tertiary_rebate),
        },
        "uif": {
            "rate": str(table.uif_rate),
            "monthly_cap": str(table.uif_monthly_cap),
        },
    }
