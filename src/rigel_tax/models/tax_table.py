"""Versioned tax table storage."""

from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, CheckConstraint, Date, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from rigel_tax.models.base import Base, TimestampMixin


class TaxTableVersion(Base, TimestampMixin):
    """Income tax table for one jurisdiction and tax year.

    ``payload_json`` holds brackets, rebates and UIF parameters in the format
    parsed by ``rigel_tax.calculators.tax_tables.tax_table_from_payload``.
    """

    __tablename__ = "tax_table_version"

    tax_table_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    jurisdiction_code: Mapped[str] = mapped_column(String(8), nullable=False, default="ZA")
    tax_year: Mapped[int] = mapped_column(Integer, nullable=False)
    effective_start: Mapped[date] = mapped_column(Date, nullable=False)
    effective_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    source_url: Mapped[str | None] = mapped_column(String, nullable=True)
    logic_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    payload_json: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )

    __table_args__ = (
        UniqueConstraint("jurisdiction_code", "tax_year", name="tax_table_version_year_unique"),
        CheckConstraint(
            "effective_end IS NULL OR effective_end >= effective_start",
            name="tax_table_version_dates_check",
        ),
    )
