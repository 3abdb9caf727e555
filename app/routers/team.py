"""API routes for project teams."""

import logging

from fastapi import APIRouter, Depends, Query

from app.core.exceptions import ApplicationError, to_http_exception
from app.core.identity import get_current_user_id
from app.schemas.team import TeamActivityItem, TeamMember, TeamStats
from app.services.team_service import TeamService, get_team_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects/{project_id}/team", tags=["team"])


@router.get("", response_model=list[TeamMember])
async def get_team_members(
    project_id: str,
    team: TeamService = Depends(get_team_service),
):
    """Owner and accepted developers of a project."""
    try:
        return await team.get_team_members(project_id)
    except ApplicationError as e:
        raise to_http_exception(e)


@router.get("/activities", response_model=list[TeamActivityItem])
async def get_team_activities(
    project_id: str,
    limit: int | None = Query(default=None, ge=1, le=100),
    team: TeamService = Depends(get_team_service),
):
    """Activity feed of a project team."""
    try:
        return await team.get_team_activities(project_id, limit)
    except ApplicationError as e:
        raise to_http_exception(e)


@router.get("/stats", response_model=TeamStats)
async def get_team_stats(
    project_id: str,
    team: TeamService = Depends(get_team_service),
):
    """Team size and engagement."""
    try:
        return await team.get_team_stats(project_id)
    except ApplicationError as e:
        raise to_http_exception(e)


@router.post("/leave")
async def leave_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    team: TeamService = Depends(get_team_service),
):
    """Leave a project team."""
    try:
        await team.leave_project(project_id, user_id)
    except ApplicationError as e:
        logger.error(f"{user_id} could not leave project {project_id}: {e}")
        raise to_http_exception(e)
    return {"status": "success", "message": "Left the project team"}


@router.delete("/{member_id}")
async def remove_member(
    project_id: str,
    member_id: str,
    user_id: str = Depends(get_current_user_id),
    team: TeamService = Depends(get_team_service),
):
    """Remove a developer from the team (project owner only)."""
    try:
        await team.remove_member(project_id, member_id, user_id)
    except ApplicationError as e:
        logger.error(f"Could not remove {member_id} from project {project_id}: {e}")
        raise to_http_exception(e)
    return {"status": "success", "message": "Team member removed"}


@router.post("/{member_id}/status-manager")
async def promote_member(
    project_id: str,
    member_id: str,
    user_id: str = Depends(get_current_user_id),
    team: TeamService = Depends(get_team_service),
):
    """Allow a developer to update project status (project owner only)."""
    try:
        await team.set_status_manager(project_id, member_id, user_id, enabled=True)
    except ApplicationError as e:
        raise to_http_exception(e)
    return {"status": "success", "message": "Developer promoted to status manager"}


@router.delete("/{member_id}/status-manager")
async def demote_member(
    project_id: str,
    member_id: str,
    user_id: str = Depends(get_current_user_id),
    team: TeamService = Depends(get_team_service),
):
    """Revoke status manager rights (project owner only)."""
    try:
        await team.set_status_manager(project_id, member_id, user_id, enabled=False)
    except ApplicationError as e:
        raise to_http_exception(e)
    return {"status": "success", "message": "Developer removed from status manager role"}
