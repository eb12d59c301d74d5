"""Services backed by the database."""

from rigel_tax.services.tax_table_service import TaxTableService

__all__ = ["TaxTableService"]
