"""Application service for project applications."""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import (
    ApplicationNotEditableError,
    DuplicateApplicationError,
    GatewayError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
)
from app.core.storage import async_session, utc_now
from app.models.application import Application
from app.models.project import Project
from app.schemas.application import (
    ApplicationCreateRequest,
    ApplicationDetail,
    ApplicationResponse,
    ApplicationStats,
    ApplicationUpdateRequest,
)
from app.services.gateway import ProjectGateway
from app.utils.statistics import application_stats

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    "pending": frozenset({"accepted", "rejected", "withdrawn"}),
    "accepted": frozenset({"withdrawn", "removed"}),
}
CLOSED_STATUSES = frozenset({"withdrawn", "removed"})


def check_transition(current: str, target: str) -> None:
    """Raise ``InvalidTransitionError`` unless current -> target is allowed."""
    if target not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(current, target)


class ApplicationService:
    """Core service for handling project applications."""

    def __init__(
        self,
        gateway: ProjectGateway,
        session_factory: async_sessionmaker[AsyncSession] = async_session,
    ):
        self.gateway = gateway
        self.session_factory = session_factory

    async def submit_application(
        self, developer_id: str, request: ApplicationCreateRequest
    ) -> ApplicationResponse:
        """Apply to a project; one live application per developer and project."""
        try:
            async with self.session_factory() as session:
                project = await session.get(Project, request.project_id)
                if project is None or project.blocked:
                    raise NotFoundError("Project", request.project_id)

                existing = await session.scalar(
                    select(Application.id)
                    .where(Application.project_id == request.project_id)
                    .where(Application.developer_id == developer_id)
                    .where(Application.status.not_in(sorted(CLOSED_STATUSES)))
                )
                if existing is not None:
                    raise DuplicateApplicationError(request.project_id, developer_id)

                application = Application(
                    project_id=request.project_id,
                    developer_id=developer_id,
                    status="pending",
                    cover_letter=request.cover_letter,
                    portfolio_links=request.portfolio_links,
                )
                session.add(application)
                await session.commit()
                await session.refresh(application)
        except SQLAlchemyError as e:
            logger.error(f"Database error submitting application: {e}")
            raise GatewayError("submit application", str(e)) from e

        logger.info(
            f"Developer {developer_id} applied to project {request.project_id}"
        )
        return ApplicationResponse.model_validate(application, from_attributes=True)

    async def _transition(
        self,
        application_id: str,
        target: str,
        authorize,
    ) -> ApplicationResponse:
        try:
            async with self.session_factory() as session:
                application = await session.get(Application, application_id)
                if application is None:
                    raise NotFoundError("Application", application_id)

                project = await session.get(Project, application.project_id)
                authorize(application, project)
                check_transition(application.status, target)

                application.status = target
                if target in CLOSED_STATUSES:
                    application.status_manager = False
                application.updated_at = utc_now()
                await session.commit()
                await session.refresh(application)
        except SQLAlchemyError as e:
            logger.error(f"Database error updating application {application_id}: {e}")
            raise GatewayError("update application", str(e)) from e

        logger.info(f"Application {application_id} is now {target}")
        return ApplicationResponse.model_validate(application, from_attributes=True)

    async def update_application_status(
        self, application_id: str, status: str, current_user_id: str
    ) -> ApplicationResponse:
        """Accept or reject an application (organization owner only)."""

        def authorize(application: Application, project: Project | None) -> None:
            if project is None or project.organization_id != current_user_id:
                raise PermissionDeniedError(
                    "Only the project owner can review applications"
                )

        return await self._transition(application_id, status, authorize)

    async def withdraw_application(
        self, application_id: str, developer_id: str
    ) -> ApplicationResponse:
        """Withdraw the caller's own application."""

        def authorize(application: Application, project: Project | None) -> None:
            if application.developer_id != developer_id:
                raise PermissionDeniedError("Only the applicant can withdraw")

        return await self._transition(application_id, "withdrawn", authorize)

    async def update_application(
        self, application_id: str, developer_id: str, request: ApplicationUpdateRequest
    ) -> ApplicationResponse:
        """Edit the caller's own application while it is still pending."""
        changes = request.model_dump(exclude_unset=True)
        try:
            async with self.session_factory() as session:
                application = await session.get(Application, application_id)
                if application is None:
                    raise NotFoundError("Application", application_id)
                if application.developer_id != developer_id:
                    raise PermissionDeniedError("Only the applicant can edit an application")

                result = await session.execute(
                    update(Application)
                    .where(Application.id == application_id)
                    .where(Application.status == "pending")
                    .values(**changes, updated_at=utc_now())
                )
                if result.rowcount == 0:
                    raise ApplicationNotEditableError(application_id, application.status)

                await session.commit()
                await session.refresh(application)
        except SQLAlchemyError as e:
            logger.error(f"Database error editing application {application_id}: {e}")
            raise GatewayError("edit application", str(e)) from e

        logger.info(f"Developer {developer_id} edited application {application_id}")
        return ApplicationResponse.model_validate(application, from_attributes=True)

    async def get_application(
        self, application_id: str, current_user_id: str
    ) -> ApplicationDetail:
        """One application, visible to its applicant and the project owner."""
        application = await self.gateway.fetch_application(application_id)
        if application is None:
            raise NotFoundError("Application", application_id)

        owner_id = (application.get("project") or {}).get("organization_id")
        if current_user_id not in (application["developer_id"], owner_id):
            raise PermissionDeniedError("Not allowed to view this application")
        return ApplicationDetail.model_validate(application)

    async def get_project_applications(
        self, project_id: str, current_user_id: str
    ) -> list[ApplicationDetail]:
        """All applications to a project, newest first (organization owner only)."""
        project = await self.gateway.fetch_project(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        if project["organization_id"] != current_user_id:
            raise PermissionDeniedError("Only the project owner can list applications")

        applications = await self.gateway.fetch_applications(project_ids=[project_id])
        return [ApplicationDetail.model_validate(a) for a in applications]

    async def get_developer_applications(self, developer_id: str) -> list[ApplicationDetail]:
        applications = await self.gateway.fetch_applications(developer_id=developer_id)
        return [ApplicationDetail.model_validate(a) for a in applications]

    async def has_applied(self, project_id: str, developer_id: str) -> bool:
        """Whether the developer holds a live application to the project."""
        try:
            applications = await self.gateway.fetch_applications(
                project_ids=[project_id], developer_id=developer_id
            )
        except GatewayError as e:
            logger.error(f"Error checking application of {developer_id} to {project_id}: {e}")
            return False
        return any(a["status"] not in CLOSED_STATUSES for a in applications)

    async def get_project_application_stats(self, project_id: str) -> ApplicationStats:
        applications = await self.gateway.fetch_applications(project_ids=[project_id])
        return application_stats(applications)

    async def get_developer_application_stats(self, developer_id: str) -> ApplicationStats:
        applications = await self.gateway.fetch_applications(developer_id=developer_id)
        return application_stats(applications)


def get_application_service() -> ApplicationService:
    """Dependency provider for the application service."""
    return ApplicationService(ProjectGateway())
