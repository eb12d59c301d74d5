"""ORM models."""

from rigel_tax.models.base import Base, TimestampMixin
from rigel_tax.models.tax_table import TaxTableVersion

__all__ = ["Base", "TaxTableVersion", "TimestampMixin"]
