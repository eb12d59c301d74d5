"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rigel_tax import __version__
from rigel_tax.api.routes import (
    assets_router,
    deferred_tax_router,
    health_router,
    ledger_router,
    loans_router,
    payroll_router,
)
from rigel_tax.calculators.amortization import InvalidLoanTermError
from rigel_tax.calculators.tax_tables import TaxTableNotFoundError
from rigel_tax.database import create_schema, dispose_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    await create_schema()
    yield
    # Shutdown
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Rigel Tax Engine API",
        description="Payroll tax, deferred tax, ledger and loan calculators",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(TaxTableNotFoundError)
    async def tax_table_not_found_handler(
        request: Request, exc: TaxTableNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc), "code": "TAX_TABLE_NOT_FOUND"},
        )

    @app.exception_handler(InvalidLoanTermError)
    async def invalid_loan_term_handler(
        request: Request, exc: InvalidLoanTermError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc), "code": "INVALID_LOAN_TERM"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(payroll_router, prefix="/api/v1")
    app.include_router(deferred_tax_router, prefix="/api/v1")
    app.include_router(ledger_router, prefix="/api/v1")
    app.include_router(loans_router, prefix="/api/v1")
    app.include_router(assets_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
