"""Project search: working set -> filter -> sort -> paginate."""

import logging
import time

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.exceptions import GatewayError
from app.schemas.search import (
    ProjectResult,
    SearchFilters,
    SearchRequest,
    SearchResponse,
    SearchSuggestion,
)
from app.services.gateway import ProjectGateway
from app.utils.filters import ProjectFilter
from app.utils.pagination import paginate
from app.utils.sorting import sort_projects

logger = logging.getLogger(__name__)

TECHNOLOGY_SUGGESTIONS = 3
TECHNOLOGY_SOURCE_PROJECTS = 5
PROJECT_SUGGESTIONS = 3
ORGANIZATION_SUGGESTIONS = 2


def to_project_result(project: dict) -> ProjectResult:
    """Search result view of a project; only accepted applications are kept."""
    accepted = [
        app for app in project.get("applications") or [] if app.get("status") == "accepted"
    ]
    return ProjectResult.model_validate({**project, "applications": accepted})


class SearchService:
    """Service for searching the project catalogue."""

    def __init__(self, gateway: ProjectGateway):
        self.gateway = gateway

    async def search(
        self, request: SearchRequest, viewer_role: str | None = None
    ) -> SearchResponse:
        """Run a search.

        Store failures propagate as ``GatewayError``.
        """
        started = time.perf_counter()

        working_set = await self.gateway.fetch_projects()
        matched = ProjectFilter(request.filters, request.query, viewer_role).apply(
            working_set
        )
        ordered = sort_projects(matched, request.sort_by, request.sort_order)
        page = paginate(
            ordered, request.page, min(request.limit, settings.search_max_limit)
        )

        search_time = int((time.perf_counter() - started) * 1000)

        query = request.query.strip()
        suggestions: list[str] = []
        if query and len(query) < settings.suggestion_max_query_length:
            suggestions = [s.text for s in await self.get_suggestions(query)]

        logger.info(
            f"Search '{query}' matched {page.total_count} of {len(working_set)} "
            f"projects in {search_time}ms"
        )

        return SearchResponse(
            projects=[to_project_result(p) for p in page.items],
            total_count=page.total_count,
            search_time=search_time,
            suggestions=suggestions,
            page=page.page,
            total_pages=page.total_pages,
        )

    async def get_suggestions(self, partial: str) -> list[SearchSuggestion]:
        """Autocomplete from technologies, project titles and organizations."""
        partial = partial.strip()
        if not partial:
            return []

        needle = partial.lower()
        suggestions: list[SearchSuggestion] = []
        try:
            seen: set[str] = set()
            for stack in await self.gateway.technology_stacks(
                partial, TECHNOLOGY_SOURCE_PROJECTS
            ):
                for tech in stack:
                    if needle in tech.lower() and tech not in seen:
                        seen.add(tech)
                        suggestions.append(SearchSuggestion(text=tech, type="technology"))
            del suggestions[TECHNOLOGY_SUGGESTIONS:]

            for title in await self.gateway.titles_matching(partial, PROJECT_SUGGESTIONS):
                suggestions.append(SearchSuggestion(text=title, type="project"))

            for name in await self.gateway.organizations_matching(
                partial, ORGANIZATION_SUGGESTIONS
            ):
                suggestions.append(SearchSuggestion(text=name, type="organization"))
        except SQLAlchemyError as e:
            logger.error(f"Error getting search suggestions for '{partial}': {e}")
            return []

        return suggestions[: settings.suggestion_limit]

    async def quick_search(self, query: str, limit: int | None = None) -> list[ProjectResult]:
        """Newest open projects matching a query, for the navigation bar."""
        if not query.strip():
            return []

        try:
            working_set = await self.gateway.fetch_projects()
        except GatewayError as e:
            logger.error(f"Quick search failed: {e}")
            return []

        matched = ProjectFilter(SearchFilters(status=["open"]), query).apply(working_set)
        ordered = sort_projects(matched, "created_at", "desc")
        return [
            to_project_result(p) for p in ordered[: limit or settings.quick_search_limit]
        ]


def get_search_service() -> SearchService:
    """Dependency provider for the search service."""
    return SearchService(ProjectGateway())
