"""Schemas for project search requests and responses."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.core.config import settings

ProjectStatus = Literal["pending", "open", "in_progress", "completed", "paused"]
DifficultyLevel = Literal["beginner", "intermediate", "advanced"]
ApplicationType = Literal["individual", "team", "both"]
SortKey = Literal["relevance", "created_at", "deadline", "title", "popularity"]
SortOrder = Literal["asc", "desc"]
ViewerRole = Literal["developer", "organization", "admin", "anonymous"]


class DateRange(BaseModel):
    """Inclusive creation date window."""

    start: datetime | None = Field(default=None, description="Earliest created_at")
    end: datetime | None = Field(default=None, description="Latest created_at")

    @field_validator("start", "end")
    @classmethod
    def _to_naive_utc(cls, value: datetime | None) -> datetime | None:
        # Stored timestamps are naive UTC
        if value is not None and value.tzinfo is not None:
            return value.astimezone(UTC).replace(tzinfo=None)
        return value


class SearchFilters(BaseModel):
    """Predicate filters applied to the project working set.

    A list filter is active when it holds at least one value.
    """

    status: list[ProjectStatus] | None = Field(
        default=None, description="Allowed statuses; role default when empty"
    )
    technology_stack: list[str] | None = Field(
        default=None, description="Projects using any of these technologies"
    )
    difficulty_level: list[DifficultyLevel] | None = Field(
        default=None, description="Allowed difficulty levels"
    )
    application_type: list[ApplicationType] | None = Field(
        default=None, description="Allowed application types"
    )
    is_remote: bool | None = Field(default=None, description="Remote only / on-site only")
    date_range: DateRange | None = Field(default=None, description="created_at window")


class SearchRequest(BaseModel):
    """Full search request."""

    query: str = Field(default="", description="Free-text query")
    filters: SearchFilters = Field(default_factory=SearchFilters)
    sort_by: SortKey = Field(default="relevance")
    sort_order: SortOrder = Field(default="desc")
    page: int = Field(default=1, ge=1, description="1-indexed page number")
    limit: int = Field(default=20, gt=0, description="Page size")

    @field_validator("limit")
    @classmethod
    def _within_max_limit(cls, value: int) -> int:
        if value > settings.search_max_limit:
            raise ValueError(f"limit must be <= {settings.search_max_limit}")
        return value


class OrganizationInfo(BaseModel):
    """Organization fields embedded in a project result."""

    id: str
    organization_name: str | None = None
    avatar_url: str | None = None


class PublicDeveloperInfo(BaseModel):
    """Developer fields anyone browsing projects may see."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None


class DeveloperInfo(BaseModel):
    """Developer fields embedded in applications and team listings."""

    id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str = ""
    avatar_url: str | None = None
    skills: list[str] = Field(default_factory=list)


class ProjectMember(BaseModel):
    """Accepted application shown as a team member on a project card."""

    id: str
    status: str
    status_manager: bool = False
    developer: PublicDeveloperInfo | None = None


class ProjectResult(BaseModel):
    """Project as returned by search."""

    id: str
    organization_id: str
    title: str
    description: str
    requirements: str
    technology_stack: list[str]
    difficulty_level: str
    application_type: str
    max_team_size: int
    status: str
    is_remote: bool
    location: str | None = None
    deadline: datetime | None = None
    created_at: datetime
    organization: OrganizationInfo | None = None
    applications: list[ProjectMember] = Field(
        default_factory=list, description="Accepted applications only"
    )


class SearchResponse(BaseModel):
    """Response for a search."""

    projects: list[ProjectResult]
    total_count: int
    search_time: int = Field(..., description="Processing time in milliseconds")
    suggestions: list[str] = Field(default_factory=list)
    page: int = 1
    total_pages: int = 0


class SearchSuggestion(BaseModel):
    """Autocomplete suggestion."""

    text: str
    type: Literal["project", "technology", "organization", "skill"]


class SearchHistoryItem(BaseModel):
    """Single search history entry."""

    id: str
    search_term: str
    filters: dict | None = None
    result_count: int
    created_at: datetime


class PopularSearchItem(BaseModel):
    """Popular search counter."""

    search_term: str
    search_count: int
    last_searched: datetime


class SearchAnalyticsEvent(BaseModel):
    """Search impression or click reported by a client."""

    search_term: str = Field(..., min_length=1)
    result_count: int = Field(default=0, ge=0)
    clicked_project_id: str | None = None
    click_position: int | None = Field(default=None, ge=0)
    session_id: str | None = None
