"""Tax table resolution from the versioned store."""

from __future__ import annotations

import hashlib
import json
import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rigel_tax.calculators.tax_tables import (
    TAX_TABLES,
    IncomeTaxTable,
    TaxTableNotFoundError,
    tax_table_from_payload,
    tax_table_to_payload,
)
from rigel_tax.models import TaxTableVersion

logger = logging.getLogger(__name__)

DEFAULT_JURISDICTION = "ZA"


def compute_logic_hash(payload: dict) -> str:
    """Deterministic hash of a table payload."""
    return hashlib.sha256(json.dumps(payload, sort_keys=True).encode()).hexdigest()


class TaxTableService:
    """Resolves income tax tables by year.

    Stored versions take precedence; built-in tables are the fallback so a
    fresh database still calculates for the shipped years.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._table_cache: dict[str, IncomeTaxTable] = {}

    async def get_table(
        self,
        tax_year: int,
        jurisdiction_code: str = DEFAULT_JURISDICTION,
    ) -> IncomeTaxTable:
        """Get the tax table for a year.

        Raises:
            TaxTableNotFoundError: If neither the store nor the built-in
                registry has a table for the year.
        """
        cache_key = f"{jurisdiction_code}:{tax_year}"
        if cache_key in self._table_cache:
            return self._table_cache[cache_key]

        version = await self._get_version(tax_year, jurisdiction_code)
        if version is not None:
            table = tax_table_from_payload(tax_year, version.payload_json, source="store")
        elif tax_year in TAX_TABLES:
            logger.info("No stored tax table for %s %s, using built-in", jurisdiction_code, tax_year)
            table = TAX_TABLES[tax_year]
        else:
            raise TaxTableNotFoundError(tax_year, await self.available_years(jurisdiction_code))

        self._table_cache[cache_key] = table
        return table

    async def save_table(
        self,
        table: IncomeTaxTable,
        effective_start: date | None = None,
        effective_end: date | None = None,
        source_url: str | None = None,
        jurisdiction_code: str = DEFAULT_JURISDICTION,
    ) -> TaxTableVersion:
        """Store a tax table, replacing any existing version for the year."""
        payload = tax_table_to_payload(table)
        logic_hash = compute_logic_hash(payload)

        version = await self._get_version(table.tax_year, jurisdiction_code)
        if version is None:
            version = TaxTableVersion(
                jurisdiction_code=jurisdiction_code,
                tax_year=table.tax_year,
                effective_start=effective_start or date(table.tax_year - 1, 3, 1),
            )
            self.session.add(version)
        elif effective_start is not None:
            version.effective_start = effective_start

        version.effective_end = effective_end
        version.source_url = source_url
        version.logic_hash = logic_hash
        version.payload_json = payload

        await self.session.flush()
        self._table_cache.pop(f"{jurisdiction_code}:{table.tax_year}", None)
        logger.info("Stored tax table %s %s (%s)", jurisdiction_code, table.tax_year, logic_hash[:12])
        return version

    async def available_years(self, jurisdiction_code: str = DEFAULT_JURISDICTION) -> list[int]:
        """Years with a stored or built-in table."""
        result = await self.session.execute(
            select(TaxTableVersion.tax_year).where(
                TaxTableVersion.jurisdiction_code == jurisdiction_code
            )
        )
        stored = set(result.scalars().all())
        return sorted(stored | set(TAX_TABLES))

    async def _get_version(
        self, tax_year: int, jurisdiction_code: str
    ) -> TaxTableVersion | None:
        result = await self.session.execute(
            select(TaxTableVersion).where(
                TaxTableVersion.jurisdiction_code == jurisdiction_code,
                TaxTableVersion.tax_year == tax_year,
            )
        )
        return result.scalar_one_or_none()
