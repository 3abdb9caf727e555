"""Application services."""

from app.services.dashboard_service import OrganizationDashboardService
from app.services.gateway import ProjectGateway
from app.services.search_service import SearchService

__all__ = ["OrganizationDashboardService", "ProjectGateway", "SearchService"]
