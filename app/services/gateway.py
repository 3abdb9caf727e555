"""Read access to projects and applications as denormalized records."""

import logging
from collections.abc import Collection

from sqlalchemy import String, cast, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from app.core.exceptions import GatewayError
from app.core.storage import async_session
from app.models.application import Application
from app.models.profile import Profile
from app.models.project import Project

logger = logging.getLogger(__name__)


def profile_to_dict(profile: Profile | None) -> dict | None:
    if profile is None:
        return None
    return {
        "id": profile.id,
        "role": profile.role,
        "first_name": profile.first_name,
        "last_name": profile.last_name,
        "email": profile.email,
        "organization_name": profile.organization_name,
        "avatar_url": profile.avatar_url,
        "skills": list(profile.skills or []),
    }


def application_to_dict(application: Application, with_project: bool = False) -> dict:
    record = {
        "id": application.id,
        "project_id": application.project_id,
        "developer_id": application.developer_id,
        "status": application.status,
        "status_manager": application.status_manager,
        "cover_letter": application.cover_letter,
        "portfolio_links": list(application.portfolio_links or []),
        "created_at": application.created_at,
        "updated_at": application.updated_at,
        "developer": profile_to_dict(application.developer),
    }
    if with_project:
        record["project"] = {
            "id": application.project.id,
            "title": application.project.title,
            "organization_id": application.project.organization_id,
        }
    return record


def project_to_dict(project: Project) -> dict:
    return {
        "id": project.id,
        "organization_id": project.organization_id,
        "title": project.title,
        "description": project.description,
        "requirements": project.requirements,
        "technology_stack": list(project.technology_stack or []),
        "difficulty_level": project.difficulty_level,
        "application_type": project.application_type,
        "max_team_size": project.max_team_size,
        "status": project.status,
        "is_remote": project.is_remote,
        "location": project.location,
        "deadline": project.deadline,
        "blocked": project.blocked,
        "created_at": project.created_at,
        "updated_at": project.updated_at,
        "organization": profile_to_dict(project.organization),
        "applications": [application_to_dict(app) for app in project.applications],
    }


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProjectGateway:
    """Fetches working sets from the relational store.

    Store failures surface as ``GatewayError``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = async_session):
        self.session_factory = session_factory

    def _project_query(self):
        return select(Project).options(
            selectinload(Project.organization),
            selectinload(Project.applications).selectinload(Application.developer),
        )

    async def fetch_projects(
        self,
        organization_id: str | None = None,
        include_blocked: bool = False,
        limit: int | None = None,
    ) -> list[dict]:
        """Projects with their organization and applications, newest first."""
        query = self._project_query().order_by(Project.created_at.desc())
        if organization_id is not None:
            query = query.where(Project.organization_id == organization_id)
        if not include_blocked:
            query = query.where(Project.blocked.is_(False))
        if limit is not None:
            query = query.limit(limit)

        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return [project_to_dict(p) for p in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching projects: {e}")
            raise GatewayError("fetch projects", str(e)) from e

    async def fetch_project(self, project_id: str) -> dict | None:
        query = self._project_query().where(Project.id == project_id)
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                project = result.scalar_one_or_none()
                return project_to_dict(project) if project else None
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching project {project_id}: {e}")
            raise GatewayError("fetch project", str(e)) from e

    async def fetch_applications(
        self,
        project_ids: Collection[str] | None = None,
        developer_id: str | None = None,
        statuses: Collection[str] | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        """Applications with developer and project details, newest first."""
        if project_ids is not None and not project_ids:
            return []

        query = (
            select(Application)
            .options(
                selectinload(Application.developer),
                selectinload(Application.project),
            )
            .order_by(Application.created_at.desc())
        )
        if project_ids is not None:
            query = query.where(Application.project_id.in_(list(project_ids)))
        if developer_id is not None:
            query = query.where(Application.developer_id == developer_id)
        if statuses:
            query = query.where(Application.status.in_(list(statuses)))
        if limit is not None:
            query = query.limit(limit)

        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return [
                    application_to_dict(app, with_project=True)
                    for app in result.scalars().all()
                ]
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching applications: {e}")
            raise GatewayError("fetch applications", str(e)) from e

    async def fetch_application(self, application_id: str) -> dict | None:
        query = (
            select(Application)
            .options(
                selectinload(Application.developer),
                selectinload(Application.project),
            )
            .where(Application.id == application_id)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                application = result.scalar_one_or_none()
                if application is None:
                    return None
                return application_to_dict(application, with_project=True)
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching application {application_id}: {e}")
            raise GatewayError("fetch application", str(e)) from e

    async def fetch_profile(self, profile_id: str) -> dict | None:
        try:
            async with self.session_factory() as session:
                return profile_to_dict(await session.get(Profile, profile_id))
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching profile {profile_id}: {e}")
            raise GatewayError("fetch profile", str(e)) from e

    async def technology_stacks(self, partial: str, limit: int) -> list[list[str]]:
        """Technology lists of the newest visible projects mentioning ``partial``."""
        query = (
            select(Project.technology_stack)
            .where(Project.blocked.is_(False))
            .where(
                cast(Project.technology_stack, String).ilike(
                    _like_pattern(partial), escape="\\"
                )
            )
            .order_by(Project.created_at.desc())
            .limit(limit)
        )
        async with self.session_factory() as session:
            result = await session.execute(query)
            return [list(stack or []) for stack in result.scalars().all()]

    async def titles_matching(self, partial: str, limit: int) -> list[str]:
        query = (
            select(Project.title)
            .where(Project.blocked.is_(False))
            .where(Project.title.ilike(_like_pattern(partial), escape="\\"))
            .order_by(Project.created_at.desc())
            .limit(limit)
        )
        async with self.session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def organizations_matching(self, partial: str, limit: int) -> list[str]:
        query = (
            select(Profile.organization_name)
            .where(Profile.organization_name.is_not(None))
            .where(Profile.organization_name.ilike(_like_pattern(partial), escape="\\"))
            .limit(limit)
        )
        async with self.session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())
