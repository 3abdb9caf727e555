"""API routes for project applications."""

import logging

from fastapi import APIRouter, Depends, status

from app.core.exceptions import ApplicationError, to_http_exception
from app.core.identity import get_current_user_id
from app.schemas.application import (
    ApplicationCreateRequest,
    ApplicationDetail,
    ApplicationResponse,
    ApplicationStats,
    ApplicationStatusUpdate,
    ApplicationUpdateRequest,
    AppliedResponse,
)
from app.services.application_service import (
    ApplicationService,
    get_application_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["applications"])


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def submit_application(
    request: ApplicationCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Apply to a project as the calling developer."""
    try:
        return await service.submit_application(user_id, request)
    except ApplicationError as e:
        logger.error(f"Application to {request.project_id} rejected: {e}")
        raise to_http_exception(e)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    request: ApplicationStatusUpdate,
    user_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Accept or reject an application (project owner only)."""
    try:
        return await service.update_application_status(
            application_id, request.status, user_id
        )
    except ApplicationError as e:
        raise to_http_exception(e)


@router.post("/{application_id}/withdraw", response_model=ApplicationResponse)
async def withdraw_application(
    application_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Withdraw the caller's application."""
    try:
        return await service.withdraw_application(application_id, user_id)
    except ApplicationError as e:
        raise to_http_exception(e)


@router.get("/stats/project/{project_id}", response_model=ApplicationStats)
async def get_project_stats(
    project_id: str,
    service: ApplicationService = Depends(get_application_service),
):
    """Application counts for a project."""
    try:
        return await service.get_project_application_stats(project_id)
    except ApplicationError as e:
        raise to_http_exception(e)


@router.get("/stats/developer/{developer_id}", response_model=ApplicationStats)
async def get_developer_stats(
    developer_id: str,
    service: ApplicationService = Depends(get_application_service),
):
    """Application counts for a developer."""
    try:
        return await service.get_developer_application_stats(developer_id)
    except ApplicationError as e:
        raise to_http_exception(e)


@router.get("/mine", response_model=list[ApplicationDetail])
async def get_my_applications(
    user_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Applications submitted by the caller, newest first."""
    try:
        return await service.get_developer_applications(user_id)
    except ApplicationError as e:
        raise to_http_exception(e)


@router.get("/project/{project_id}", response_model=list[ApplicationDetail])
async def get_project_applications(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Applications to a project (project owner only)."""
    try:
        return await service.get_project_applications(project_id, user_id)
    except ApplicationError as e:
        raise to_http_exception(e)


@router.get("/project/{project_id}/applied", response_model=AppliedResponse)
async def has_applied(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Whether the caller already holds a live application to the project."""
    return AppliedResponse(has_applied=await service.has_applied(project_id, user_id))


@router.get("/{application_id}", response_model=ApplicationDetail)
async def get_application(
    application_id: str,
    user_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
):
    """One application, for its applicant or the project owner."""
    try:
        return await service.get_application(application_id, user_id)
    except ApplicationError as e:
        raise to_http_exception(e)


@router.patch("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: str,
    request: ApplicationUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: ApplicationService = Depends(get_application_service),
):
    """Edit the cover letter or portfolio links of a pending application."""
    try:
        return await service.update_application(application_id, user_id, request)
    except ApplicationError as e:
        logger.error(f"Edit of application {application_id} rejected: {e}")
        raise to_http_exception(e)
