"""API routes."""

from rigel_tax.api.routes.assets import router as assets_router
from rigel_tax.api.routes.deferred_tax import router as deferred_tax_router
from rigel_tax.api.routes.health import router as health_router
from rigel_tax.api.routes.ledger import router as ledger_router
from rigel_tax.api.routes.loans import router as loans_router
from rigel_tax.api.routes.payroll import router as payroll_router

__all__ = [
    "assets_router",
    "deferred_tax_router",
    "health_router",
    "ledger_router",
    "loans_router",
    "payroll_router",
]
