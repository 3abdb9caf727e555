"""Database models."""

from app.models.application import Application
from app.models.profile import Profile
from app.models.project import Project
from app.models.search import PopularSearch, SearchAnalytics, SearchHistory
from app.models.team import TeamActivity

__all__ = [
    "Application",
    "PopularSearch",
    "Profile",
    "Project",
    "SearchAnalytics",
    "SearchHistory",
    "TeamActivity",
]
