"""Schemas for project teams."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ActivityType = Literal[
    "member_joined",
    "member_left",
    "member_removed",
    "project_updated",
    "message_sent",
    "milestone_reached",
]


class TeamUser(BaseModel):
    """Profile fields shown in team listings."""

    id: str
    role: str
    name: str
    email: str = ""
    avatar_url: str | None = None
    organization_name: str | None = None


class TeamMember(BaseModel):
    """Derived team membership: the owner or an accepted applicant."""

    id: str
    project_id: str
    user_id: str
    role: Literal["owner", "status_manager", "member"]
    joined_at: datetime
    status: Literal["active", "inactive"] = "active"
    status_manager: bool = False
    user: TeamUser


class TeamActivityItem(BaseModel):
    """Entry of a project's activity feed."""

    id: str
    project_id: str
    user_id: str
    user_name: str
    activity_type: ActivityType
    description: str
    details: dict | None = None
    created_at: datetime


class TeamStats(BaseModel):
    """Team engagement numbers for a project."""

    total_members: int = 0
    active_members: int = 0
    recent_activities: int = 0
    completion_rate: int = Field(default=0, description="Percent")
