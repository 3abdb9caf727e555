"""API routers."""

from app.routers.applications import router as applications_router
from app.routers.dashboard import router as dashboard_router
from app.routers.search import router as search_router
from app.routers.team import router as team_router

__all__ = [
    "applications_router",
    "dashboard_router",
    "search_router",
    "team_router",
]
