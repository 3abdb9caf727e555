"""Schemas for the organization dashboard."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.search import DeveloperInfo


class OrganizationStats(BaseModel):
    """Headline numbers for an organization."""

    total_projects: int = 0
    active_projects: int = 0
    completed_projects: int = 0
    total_applications: int = 0
    pending_applications: int = 0
    accepted_applications: int = 0
    rejected_applications: int = 0
    acceptance_rate: float = Field(default=0.0, description="Percent, two decimals")
    average_response_time: int = Field(default=0, description="Hours")
    total_team_members: int = 0


class ProjectRef(BaseModel):
    """Minimal project reference."""

    id: str
    title: str


class ApplicationSummary(BaseModel):
    """Application with developer and project details."""

    id: str
    developer_id: str
    project_id: str
    status: str
    created_at: datetime
    updated_at: datetime
    developer: DeveloperInfo
    project: ProjectRef


class DashboardProject(BaseModel):
    """Project card with application counters."""

    id: str
    title: str
    status: str
    difficulty_level: str
    application_type: str
    technology_stack: list[str] = Field(default_factory=list)
    deadline: datetime | None = None
    created_at: datetime
    application_count: int = 0
    pending_applications: int = 0
    accepted_applications: int = 0
    team_member_count: int = 0
    last_activity: datetime
    recent_applications: list[ApplicationSummary] = Field(default_factory=list)


class TeamMemberSummary(BaseModel):
    """Developer on one of the organization's teams."""

    id: str
    name: str
    avatar_url: str | None = None
    role: Literal["organization", "developer"] = "developer"
    joined_at: datetime
    project_count: int = 1


class MemberDistribution(BaseModel):
    """Members grouped by project."""

    project_id: str
    project_title: str
    member_count: int
    members: list[TeamMemberSummary] = Field(default_factory=list)


class MemberActivity(BaseModel):
    """Recent team join."""

    member_id: str
    member_name: str
    action: str = "joined_project"
    timestamp: datetime
    project_id: str
    project_title: str


class TeamAnalytics(BaseModel):
    """Team composition across an organization's projects."""

    total_members: int = 0
    active_members: int = 0
    average_projects_per_member: float = 0.0
    member_distribution: list[MemberDistribution] = Field(default_factory=list)
    recent_activity: list[MemberActivity] = Field(default_factory=list)


class DashboardRefreshResponse(BaseModel):
    """Everything the organization dashboard renders, fetched together."""

    stats: OrganizationStats
    projects: list[DashboardProject]
    applications: list[ApplicationSummary]
    team_analytics: TeamAnalytics
    last_updated: datetime
