"""API route modules."""

from labour_ledger.api.routes.attendance import router as attendance_router
from labour_ledger.api.routes.categories import router as categories_router
from labour_ledger.api.routes.health import router as health_router
from labour_ledger.api.routes.payments import router as payments_router
from labour_ledger.api.routes.reports import router as reports_router
from labour_ledger.api.routes.workers import router as workers_router

__all__ = [
    "attendance_router",
    "categories_router",
    "health_router",
    "payments_router",
    "reports_router",
    "workers_router",
]
