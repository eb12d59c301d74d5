"""Configuration management for the tax engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    database_url: str
    engine_version: str
    host: str
    port: int
    debug: bool
    log_level: str
    default_tax_year: int
    default_vat_rate: Decimal
    default_corporate_tax_rate: Decimal

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            database_url=os.getenv(
                "DATABASE_URL",
                "sqlite+aiosqlite:///./rigel_tax.db",
            ),
            engine_version=os.getenv("ENGINE_VERSION", "1.0.0"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            default_tax_year=int(os.getenv("DEFAULT_TAX_YEAR", "2024")),
            default_vat_rate=Decimal(os.getenv("DEFAULT_VAT_RATE", "0.15")),
            default_corporate_tax_rate=Decimal(
                os.getenv("DEFAULT_CORPORATE_TAX_RATE", "0.27")
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
