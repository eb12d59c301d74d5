"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rigel_tax.config import Settings, get_settings
from rigel_tax.database import init_db
from rigel_tax.services.tax_table_service import TaxTableService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, session_factory = init_db()
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_app_settings() -> Settings:
    """Settings dependency (overridable in tests)."""
    return get_settings()


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]


def get_tax_table_service(db: DbSession) -> TaxTableService:
    """Tax table service bound to the request session."""
    return TaxTableService(db)


TaxTables = Annotated[TaxTableService, Depends(get_tax_table_service)]
