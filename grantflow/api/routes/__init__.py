"""API routers."""

from grantflow.api.routes.admin import router as admin_router
from grantflow.api.routes.budgets import router as budgets_router
from grantflow.api.routes.foundation import router as foundation_router
from grantflow.api.routes.health import router as health_router
from grantflow.api.routes.meeting import router as meeting_router
from grantflow.api.routes.proposals import router as proposals_router
from grantflow.api.routes.workspace import router as workspace_router

__all__: list[str] = [
    "admin_router",
    "budgets_router",
    "foundation_router",
    "health_router",
    "meeting_router",
    "proposals_router",
    "workspace_router",
]
