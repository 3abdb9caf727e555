"""Project filtering logic."""

import json
import logging
from collections.abc import Iterable

from pydantic import ValidationError

from app.schemas.search import SearchFilters

logger = logging.getLogger(__name__)

DEVELOPER_STATUSES = frozenset({"open", "in_progress"})
PUBLIC_STATUSES = frozenset({"open"})


def default_status_filter(viewer_role: str | None) -> frozenset[str]:
    """Statuses a viewer sees when no status filter is requested."""
    if viewer_role == "developer":
        return DEVELOPER_STATUSES
    return PUBLIC_STATUSES


def parse_filters_param(raw: str | None) -> SearchFilters:
    """Decode filters passed as a JSON query parameter.

    Malformed input falls back to no filters.
    """
    if not raw:
        return SearchFilters()
    try:
        return SearchFilters.model_validate(json.loads(raw))
    except (ValueError, RecursionError, ValidationError, TypeError) as e:
        logger.warning(f"Ignoring malformed search filters {raw[:200]!r}: {e}")
        return SearchFilters()


class ProjectFilter:
    """In-memory predicate filters over the project working set."""

    def __init__(
        self,
        filters: SearchFilters | None = None,
        query: str = "",
        viewer_role: str | None = None,
    ):
        self.filters = filters or SearchFilters()
        self.query = (query or "").strip().lower()
        self.statuses = (
            frozenset(self.filters.status)
            if self.filters.status
            else default_status_filter(viewer_role)
        )
        self.technologies = {
            tech.lower() for tech in self.filters.technology_stack or []
        }

    def apply(self, projects: Iterable[dict]) -> list[dict]:
        """Return the projects passing every active filter, in input order."""
        return [project for project in projects if self.matches(project)]

    def matches(self, project: dict) -> bool:
        """Check a single project against all active filters."""
        if project.get("status") not in self.statuses:
            return False

        if self.query and not self._matches_query(project):
            return False

        if self.filters.difficulty_level:
            if project.get("difficulty_level") not in self.filters.difficulty_level:
                return False

        if self.filters.application_type:
            if project.get("application_type") not in self.filters.application_type:
                return False

        if self.technologies:
            stack = {tech.lower() for tech in project.get("technology_stack") or []}
            if not stack & self.technologies:
                return False

        if self.filters.is_remote is not None:
            if bool(project.get("is_remote")) != self.filters.is_remote:
                return False

        return self._matches_date_range(project)

    def _matches_query(self, project: dict) -> bool:
        """Case-insensitive substring match on the searchable text fields."""
        organization = project.get("organization") or {}
        fields = [
            project.get("title"),
            project.get("description"),
            project.get("requirements"),
            organization.get("organization_name"),
            *(project.get("technology_stack") or []),
        ]
        return any(self.query in field.lower() for field in fields if field)

    def _matches_date_range(self, project: dict) -> bool:
        date_range = self.filters.date_range
        if date_range is None:
            return True

        created_at = project.get("created_at")
        if created_at is None:
            return date_range.start is None and date_range.end is None
        if date_range.start and created_at < date_range.start:
            return False
        if date_range.end and created_at > date_range.end:
            return False
        return True
