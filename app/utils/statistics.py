"""Reductions behind dashboard and team statistics.

Every function here takes plain record dicts, as returned by the gateway,
and returns zero-valued results for empty input.
"""

import math
from collections import Counter
from collections.abc import Iterable

from app.schemas.application import ApplicationStats
from app.schemas.dashboard import (
    ApplicationSummary,
    DashboardProject,
    MemberActivity,
    MemberDistribution,
    OrganizationStats,
    ProjectRef,
    TeamAnalytics,
    TeamMemberSummary,
)
from app.schemas.search import DeveloperInfo

ACTIVE_PROJECT_STATUSES = frozenset({"open", "in_progress"})
RECENT_APPLICATIONS_PER_PROJECT = 3
RECENT_TEAM_JOINS = 5


def count_by_status(records: Iterable[dict]) -> Counter:
    return Counter(record.get("status") for record in records)


def acceptance_rate(applications: list[dict]) -> float:
    """Accepted share of all applications, in percent."""
    if not applications:
        return 0.0
    accepted = count_by_status(applications)["accepted"]
    return round(accepted / len(applications) * 100, 2)


def average_response_hours(applications: Iterable[dict]) -> int:
    """Mean hours between submission and last update of answered applications."""
    hours = [
        (app["updated_at"] - app["created_at"]).total_seconds() / 3600
        for app in applications
        if app.get("status") != "pending"
        and app.get("created_at")
        and app.get("updated_at")
    ]
    if not hours:
        return 0
    # half-up, not banker's rounding
    return math.floor(sum(hours) / len(hours) + 0.5)


def unique_team_members(applications: Iterable[dict]) -> set[str]:
    """Developer ids with at least one accepted application."""
    return {
        app["developer_id"]
        for app in applications
        if app.get("status") == "accepted" and app.get("developer_id")
    }


def organization_stats(projects: list[dict], applications: list[dict]) -> OrganizationStats:
    """Headline dashboard numbers for one organization."""
    project_counts = count_by_status(projects)
    application_counts = count_by_status(applications)

    return OrganizationStats(
        total_projects=len(projects),
        active_projects=sum(project_counts[s] for s in ACTIVE_PROJECT_STATUSES),
        completed_projects=project_counts["completed"],
        total_applications=len(applications),
        pending_applications=application_counts["pending"],
        accepted_applications=application_counts["accepted"],
        rejected_applications=application_counts["rejected"],
        acceptance_rate=acceptance_rate(applications),
        average_response_time=average_response_hours(applications),
        total_team_members=len(unique_team_members(applications)),
    )


def application_stats(applications: Iterable[dict]) -> ApplicationStats:
    applications = list(applications)
    counts = count_by_status(applications)
    return ApplicationStats(
        total=len(applications),
        pending=counts["pending"],
        accepted=counts["accepted"],
        rejected=counts["rejected"],
        withdrawn=counts["withdrawn"],
    )


def member_name(developer: dict | None) -> str:
    if not developer:
        return "Unknown User"
    name = f"{developer.get('first_name') or ''} {developer.get('last_name') or ''}"
    return name.strip() or "Unknown User"


def developer_info(application: dict) -> DeveloperInfo:
    developer = application.get("developer") or {}
    return DeveloperInfo(
        id=developer.get("id") or application["developer_id"],
        first_name=developer.get("first_name"),
        last_name=developer.get("last_name"),
        email=developer.get("email") or "",
        avatar_url=developer.get("avatar_url"),
        skills=developer.get("skills") or [],
    )


def summarize_application(application: dict, project: dict | None = None) -> ApplicationSummary:
    """Application card, tolerant of missing developer or project data."""
    project = project or application.get("project") or {}
    return ApplicationSummary(
        id=application["id"],
        developer_id=application["developer_id"],
        project_id=application["project_id"],
        status=application["status"],
        created_at=application["created_at"],
        updated_at=application.get("updated_at") or application["created_at"],
        developer=developer_info(application),
        project=ProjectRef(
            id=project.get("id") or application["project_id"],
            title=project.get("title") or "Unknown Project",
        ),
    )


def _newest_first(records: Iterable[dict]) -> list[dict]:
    return sorted(
        records,
        key=lambda record: (record["created_at"], record.get("id") or ""),
        reverse=True,
    )


def project_overview(project: dict) -> DashboardProject:
    """Dashboard card for one project and its applications."""
    applications = project.get("applications") or []
    counts = count_by_status(applications)
    newest = _newest_first(applications)

    recent = [
        summarize_application(app, project)
        for app in newest
        if app.get("developer")
    ][:RECENT_APPLICATIONS_PER_PROJECT]

    return DashboardProject(
        id=project["id"],
        title=project["title"],
        status=project["status"],
        difficulty_level=project["difficulty_level"],
        application_type=project["application_type"],
        technology_stack=project.get("technology_stack") or [],
        deadline=project.get("deadline"),
        created_at=project["created_at"],
        application_count=len(applications),
        pending_applications=counts["pending"],
        accepted_applications=counts["accepted"],
        team_member_count=counts["accepted"],
        last_activity=newest[0]["created_at"] if newest else project["created_at"],
        recent_applications=recent,
    )


def team_analytics(projects: list[dict], applications: list[dict]) -> TeamAnalytics:
    """Group accepted applications into per-project teams."""
    accepted = [app for app in applications if app.get("status") == "accepted"]
    if not accepted:
        return TeamAnalytics(
            member_distribution=[
                MemberDistribution(
                    project_id=p["id"], project_title=p["title"], member_count=0
                )
                for p in projects
            ]
        )

    projects_per_member = Counter(app["developer_id"] for app in accepted)
    titles = {p["id"]: p["title"] for p in projects}

    def to_member(app: dict) -> TeamMemberSummary:
        developer = app.get("developer") or {}
        return TeamMemberSummary(
            id=developer.get("id") or app["developer_id"],
            name=member_name(developer),
            avatar_url=developer.get("avatar_url"),
            joined_at=app["created_at"],
            project_count=projects_per_member[app["developer_id"]],
        )

    distribution = []
    for project in projects:
        members = sorted(
            (app for app in accepted if app["project_id"] == project["id"]),
            key=lambda app: (app["created_at"], app["developer_id"]),
        )
        distribution.append(
            MemberDistribution(
                project_id=project["id"],
                project_title=project["title"],
                member_count=len(members),
                members=[to_member(app) for app in members],
            )
        )

    recent_activity = [
        MemberActivity(
            member_id=app["developer_id"],
            member_name=member_name(app.get("developer")),
            timestamp=app["created_at"],
            project_id=app["project_id"],
            project_title=titles.get(app["project_id"], "Unknown Project"),
        )
        for app in _newest_first(accepted)[:RECENT_TEAM_JOINS]
    ]

    total_members = len(projects_per_member)
    return TeamAnalytics(
        total_members=total_members,
        # every accepted member counts as active until activity tracking exists
        active_members=total_members,
        average_projects_per_member=round(len(accepted) / total_members, 2),
        member_distribution=distribution,
        recent_activity=recent_activity,
    )


def team_completion_rate(member_count: int, recent_activity_count: int) -> int:
    """Engagement score in percent from team size and recent activity."""
    if member_count == 0:
        return 0
    activity_score = min(recent_activity_count * 5, 40)
    team_size_score = min(member_count * 10, 30)
    return min(activity_score + team_size_score, 100)

