"""API routes for the organization dashboard."""

import logging

from fastapi import APIRouter, Depends, Query

from app.core.exceptions import GatewayError, to_http_exception
from app.schemas.dashboard import (
    ApplicationSummary,
    DashboardProject,
    DashboardRefreshResponse,
    OrganizationStats,
    TeamAnalytics,
)
from app.services.dashboard_service import (
    OrganizationDashboardService,
    get_dashboard_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard/organization", tags=["dashboard"])


@router.get("/{organization_id}", response_model=DashboardRefreshResponse)
async def refresh_dashboard(
    organization_id: str,
    dashboard: OrganizationDashboardService = Depends(get_dashboard_service),
):
    """All dashboard sections, fetched concurrently."""
    try:
        return await dashboard.refresh_organization_data(organization_id)
    except GatewayError as e:
        logger.error(f"Dashboard refresh failed for {organization_id}: {e}")
        raise to_http_exception(e)


@router.get("/{organization_id}/stats", response_model=OrganizationStats)
async def get_stats(
    organization_id: str,
    dashboard: OrganizationDashboardService = Depends(get_dashboard_service),
):
    """Project and application counters."""
    try:
        return await dashboard.get_organization_stats(organization_id)
    except GatewayError as e:
        logger.error(f"Stats failed for {organization_id}: {e}")
        raise to_http_exception(e)


@router.get("/{organization_id}/projects", response_model=list[DashboardProject])
async def get_projects(
    organization_id: str,
    limit: int | None = Query(default=None, ge=1, le=50),
    dashboard: OrganizationDashboardService = Depends(get_dashboard_service),
):
    """Newest projects with application counters."""
    try:
        return await dashboard.get_project_overview(organization_id, limit)
    except GatewayError as e:
        logger.error(f"Project overview failed for {organization_id}: {e}")
        raise to_http_exception(e)


@router.get("/{organization_id}/applications", response_model=list[ApplicationSummary])
async def get_applications(
    organization_id: str,
    limit: int | None = Query(default=None, ge=1, le=50),
    dashboard: OrganizationDashboardService = Depends(get_dashboard_service),
):
    """Most recent applications to the organization's projects."""
    try:
        return await dashboard.get_recent_applications(organization_id, limit)
    except GatewayError as e:
        logger.error(f"Recent applications failed for {organization_id}: {e}")
        raise to_http_exception(e)


@router.get("/{organization_id}/team", response_model=TeamAnalytics)
async def get_team_analytics(
    organization_id: str,
    dashboard: OrganizationDashboardService = Depends(get_dashboard_service),
):
    """Team members grouped by project."""
    try:
        return await dashboard.get_team_analytics(organization_id)
    except GatewayError as e:
        logger.error(f"Team analytics failed for {organization_id}: {e}")
        raise to_http_exception(e)
