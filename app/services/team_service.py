"""Team management over accepted applications."""

import logging
from datetime import timedelta

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.exceptions import GatewayError, NotFoundError, PermissionDeniedError
from app.core.storage import async_session, utc_now
from app.models.application import Application
from app.models.project import Project
from app.models.team import TeamActivity
from app.schemas.team import TeamActivityItem, TeamMember, TeamStats, TeamUser
from app.services.gateway import ProjectGateway
from app.utils.statistics import member_name, team_completion_rate

logger = logging.getLogger(__name__)


def _team_user(profile: dict | None, fallback_id: str) -> TeamUser:
    profile = profile or {}
    if profile.get("role") == "organization":
        name = profile.get("organization_name") or "Unknown Organization"
    else:
        name = member_name(profile)
    return TeamUser(
        id=profile.get("id") or fallback_id,
        role=profile.get("role") or "developer",
        name=name,
        email=profile.get("email") or "",
        avatar_url=profile.get("avatar_url"),
        organization_name=profile.get("organization_name"),
    )


class TeamService:
    """Service for project teams.

    Team members are never stored: they are the project owner plus the
    developers whose application to the project is accepted.
    """

    def __init__(
        self,
        gateway: ProjectGateway,
        session_factory: async_sessionmaker[AsyncSession] = async_session,
    ):
        self.gateway = gateway
        self.session_factory = session_factory

    async def get_team_members(self, project_id: str) -> list[TeamMember]:
        project = await self.gateway.fetch_project(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)

        members = [
            TeamMember(
                id=f"organization-{project['organization_id']}",
                project_id=project_id,
                user_id=project["organization_id"],
                role="owner",
                joined_at=project["created_at"],
                status_manager=True,
                user=_team_user(project["organization"], project["organization_id"]),
            )
        ]

        accepted = sorted(
            (app for app in project["applications"] if app["status"] == "accepted"),
            key=lambda app: (app["created_at"], app["id"]),
        )
        for app in accepted:
            members.append(
                TeamMember(
                    id=f"developer-{app['id']}",
                    project_id=project_id,
                    user_id=app["developer_id"],
                    role="status_manager" if app["status_manager"] else "member",
                    joined_at=app["created_at"],
                    status_manager=app["status_manager"],
                    user=_team_user(app["developer"], app["developer_id"]),
                )
            )
        return members

    async def _require_owner(
        self, session: AsyncSession, project_id: str, user_id: str, action: str
    ) -> None:
        project = await session.get(Project, project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        if project.organization_id != user_id:
            raise PermissionDeniedError(f"Only organization owners can {action}")

    async def _update_membership(
        self,
        project_id: str,
        developer_id: str,
        values: dict,
        owner_id: str | None = None,
        action: str = "",
    ) -> None:
        """Update the accepted application backing a membership."""
        try:
            async with self.session_factory() as session:
                if owner_id is not None:
                    await self._require_owner(session, project_id, owner_id, action)

                result = await session.execute(
                    update(Application)
                    .where(Application.project_id == project_id)
                    .where(Application.developer_id == developer_id)
                    .where(Application.status == "accepted")
                    .values(**values, updated_at=utc_now())
                )
                if result.rowcount == 0:
                    raise NotFoundError("Team member", developer_id)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Database error updating team of project {project_id}: {e}")
            raise GatewayError("update team membership", str(e)) from e

    async def remove_member(
        self, project_id: str, user_id: str, current_user_id: str
    ) -> None:
        """Remove a developer from the team (organization owner only)."""
        await self._update_membership(
            project_id,
            user_id,
            {"status": "removed", "status_manager": False},
            owner_id=current_user_id,
            action="remove team members",
        )
        logger.info(f"Removed {user_id} from project {project_id}")
        await self.log_activity(
            project_id,
            current_user_id,
            "member_removed",
            "Removed team member from project",
            {"removed_user_id": user_id},
        )

    async def leave_project(self, project_id: str, user_id: str) -> None:
        """Withdraw the caller's own accepted application."""
        await self._update_membership(
            project_id, user_id, {"status": "withdrawn", "status_manager": False}
        )
        logger.info(f"{user_id} left project {project_id}")
        await self.log_activity(project_id, user_id, "member_left", "Left the project team")

    async def set_status_manager(
        self,
        project_id: str,
        developer_id: str,
        current_user_id: str,
        enabled: bool,
    ) -> None:
        """Promote or demote a team member as status manager (owner only)."""
        action = "promote developers" if enabled else "demote developers"
        await self._update_membership(
            project_id,
            developer_id,
            {"status_manager": enabled},
            owner_id=current_user_id,
            action=action,
        )
        if enabled:
            description = "Promoted developer to status manager"
            details = {"promoted_user_id": developer_id}
        else:
            description = "Removed developer from status manager role"
            details = {"demoted_user_id": developer_id}
        await self.log_activity(
            project_id, current_user_id, "project_updated", description, details
        )

    async def log_activity(
        self,
        project_id: str,
        user_id: str,
        activity_type: str,
        description: str,
        details: dict | None = None,
    ) -> None:
        """Append to the activity feed; failures are logged and ignored."""
        try:
            async with self.session_factory() as session:
                session.add(
                    TeamActivity(
                        project_id=project_id,
                        user_id=user_id,
                        activity_type=activity_type,
                        description=description,
                        details=details,
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to log team activity for project {project_id}: {e}")

    async def get_team_activities(
        self, project_id: str, limit: int | None = None
    ) -> list[TeamActivityItem]:
        query = (
            select(TeamActivity)
            .options(selectinload(TeamActivity.user))
            .where(TeamActivity.project_id == project_id)
            .order_by(TeamActivity.created_at.desc())
            .limit(limit or settings.team_activities_limit)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                activities = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching activities of {project_id}: {e}")
            raise GatewayError("fetch team activities", str(e)) from e

        return [
            TeamActivityItem(
                id=activity.id,
                project_id=activity.project_id,
                user_id=activity.user_id,
                user_name=activity.user.display_name if activity.user else "Unknown User",
                activity_type=activity.activity_type,
                description=activity.description,
                details=activity.details,
                created_at=activity.created_at,
            )
            for activity in activities
        ]

    async def get_team_stats(self, project_id: str) -> TeamStats:
        """Team size and engagement; zeros when the store is unavailable."""
        since = utc_now() - timedelta(days=settings.team_recent_activity_days)
        try:
            members = await self.get_team_members(project_id)
            async with self.session_factory() as session:
                recent = await session.scalar(
                    select(func.count(TeamActivity.id))
                    .where(TeamActivity.project_id == project_id)
                    .where(TeamActivity.created_at >= since)
                )
        except (GatewayError, SQLAlchemyError) as e:
            logger.error(f"Error fetching team stats for project {project_id}: {e}")
            return TeamStats()

        recent = recent or 0
        return TeamStats(
            total_members=len(members),
            active_members=sum(1 for m in members if m.status == "active"),
            recent_activities=recent,
            completion_rate=team_completion_rate(len(members), recent),
        )


def get_team_service() -> TeamService:
    """Dependency provider for the team service."""
    return TeamService(ProjectGateway())
