"""Schemas for project applications."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.dashboard import ProjectRef
from app.schemas.search import DeveloperInfo

ApplicationStatus = Literal["pending", "accepted", "rejected", "withdrawn", "removed"]


class ApplicationCreateRequest(BaseModel):
    """Request to apply to a project."""

    project_id: str = Field(..., description="Project to apply to")
    cover_letter: str | None = Field(default=None, description="Motivation letter")
    portfolio_links: list[str] = Field(default_factory=list)


class ApplicationUpdateRequest(BaseModel):
    """Applicant edits to a pending application."""

    cover_letter: str | None = None
    portfolio_links: list[str] | None = None


class ApplicationStatusUpdate(BaseModel):
    """Organization decision on an application."""

    status: Literal["accepted", "rejected"]


class ApplicationResponse(BaseModel):
    """Application as stored."""

    id: str
    project_id: str
    developer_id: str
    status: ApplicationStatus
    status_manager: bool = False
    cover_letter: str | None = None
    portfolio_links: list[str] | None = None
    created_at: datetime
    updated_at: datetime


class ApplicationDetail(ApplicationResponse):
    """Application with the applicant and project it belongs to."""

    developer: DeveloperInfo | None = None
    project: ProjectRef | None = None


class AppliedResponse(BaseModel):
    has_applied: bool


class ApplicationStats(BaseModel):
    """Application counts by status."""

    total: int = 0
    pending: int = 0
    accepted: int = 0
    rejected: int = 0
    withdrawn: int = 0
