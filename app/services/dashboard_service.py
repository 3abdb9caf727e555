"""Organization dashboard service."""

import asyncio
import logging

from app.core.config import settings
from app.core.storage import utc_now
from app.schemas.dashboard import (
    ApplicationSummary,
    DashboardProject,
    DashboardRefreshResponse,
    OrganizationStats,
    TeamAnalytics,
)
from app.services.gateway import ProjectGateway
from app.utils import statistics

logger = logging.getLogger(__name__)


class OrganizationDashboardService:
    """Builds dashboard views from an organization's projects and applications.

    Store failures propagate as ``GatewayError``.
    """

    def __init__(self, gateway: ProjectGateway):
        self.gateway = gateway

    async def get_organization_stats(self, organization_id: str) -> OrganizationStats:
        projects = await self.gateway.fetch_projects(organization_id=organization_id)
        applications = [app for p in projects for app in p["applications"]]
        return statistics.organization_stats(projects, applications)

    async def get_project_overview(
        self, organization_id: str, limit: int | None = None
    ) -> list[DashboardProject]:
        projects = await self.gateway.fetch_projects(
            organization_id=organization_id,
            limit=limit or settings.dashboard_projects_limit,
        )
        return [statistics.project_overview(p) for p in projects]

    async def get_recent_applications(
        self, organization_id: str, limit: int | None = None
    ) -> list[ApplicationSummary]:
        projects = await self.gateway.fetch_projects(
            organization_id=organization_id, include_blocked=True
        )
        if not projects:
            return []

        applications = await self.gateway.fetch_applications(
            project_ids=[p["id"] for p in projects],
            limit=limit or settings.dashboard_applications_limit,
        )
        return [statistics.summarize_application(app) for app in applications]

    async def get_team_analytics(self, organization_id: str) -> TeamAnalytics:
        projects = await self.gateway.fetch_projects(
            organization_id=organization_id, include_blocked=True
        )
        if not projects:
            return TeamAnalytics()

        accepted = await self.gateway.fetch_applications(
            project_ids=[p["id"] for p in projects], statuses=["accepted"]
        )
        return statistics.team_analytics(projects, accepted)

    async def refresh_organization_data(
        self, organization_id: str
    ) -> DashboardRefreshResponse:
        """Fetch every dashboard section concurrently."""
        stats, projects, applications, team = await asyncio.gather(
            self.get_organization_stats(organization_id),
            self.get_project_overview(organization_id),
            self.get_recent_applications(organization_id),
            self.get_team_analytics(organization_id),
        )
        logger.info(
            f"Refreshed dashboard for organization {organization_id}: "
            f"{stats.total_projects} projects, {stats.total_applications} applications"
        )
        return DashboardRefreshResponse(
            stats=stats,
            projects=projects,
            applications=applications,
            team_analytics=team,
            last_updated=utc_now(),
        )


def get_dashboard_service() -> OrganizationDashboardService:
    """Dependency provider for the dashboard service."""
    return OrganizationDashboardService(ProjectGateway())
