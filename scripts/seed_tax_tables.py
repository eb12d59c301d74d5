"""Seed script for the built-in income tax tables.

Run with:
    python scripts/seed_tax_tables.py

This stores every built-in tax table in the tax table store so that the
tables can be inspected and replaced per year without a code change.
"""

from __future__ import annotations

import asyncio
import logging

from rigel_tax.calculators.tax_tables import TAX_TABLES
from rigel_tax.config import get_settings
from rigel_tax.database import create_schema, dispose_db, get_session
from rigel_tax.logging_config import configure_logging
from rigel_tax.services.tax_table_service import TaxTableService

logger = logging.getLogger("seed_tax_tables")

SARS_RATES_URL = "https://www.sars.gov.za/tax-rates/income-tax/rates-of-tax-for-individuals/"


async def seed_tax_tables() -> None:
    """Store the built-in tables, replacing existing versions."""
    await create_schema()

    async with get_session() as session:
        service = TaxTableService(session)
        for tax_year, table in sorted(TAX_TABLES.items()):
            version = await service.save_table(table, source_url=SARS_RATES_URL)
            logger.info("Seeded %s (effective %s)", tax_year, version.effective_start)

    await dispose_db()


def main() -> None:
    """Run the seed script."""
    configure_logging(get_settings().log_level)
    asyncio.run(seed_tax_tables())


if __name__ == "__main__":
    main()
