"""API routes for project search."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from app.core.config import settings
from app.core.exceptions import GatewayError, to_http_exception
from app.core.identity import get_current_user_id, get_optional_user_id, get_viewer_role
from app.schemas.search import (
    PopularSearchItem,
    ProjectResult,
    SearchAnalyticsEvent,
    SearchHistoryItem,
    SearchRequest,
    SearchResponse,
    SearchSuggestion,
    SortKey,
    SortOrder,
)
from app.services.search_history import (
    SearchHistoryRecorder,
    get_search_history_recorder,
)
from app.services.search_service import SearchService, get_search_service
from app.utils.filters import parse_filters_param

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


async def _run_search(
    request: SearchRequest,
    background_tasks: BackgroundTasks,
    service: SearchService,
    recorder: SearchHistoryRecorder,
    user_id: str | None,
    viewer_role: str,
) -> SearchResponse:
    try:
        result = await service.search(request, viewer_role=viewer_role)
    except GatewayError as e:
        logger.error(f"Search failed: {e}")
        raise to_http_exception(e)

    background_tasks.add_task(
        recorder.record_search,
        user_id,
        request.query,
        request.filters,
        result.total_count,
    )
    return result


@router.post("", response_model=SearchResponse)
async def search_projects(
    request: SearchRequest,
    background_tasks: BackgroundTasks,
    service: SearchService = Depends(get_search_service),
    recorder: SearchHistoryRecorder = Depends(get_search_history_recorder),
    user_id: str | None = Depends(get_optional_user_id),
    viewer_role: str = Depends(get_viewer_role),
):
    """Search projects with filters, sorting and pagination."""
    return await _run_search(
        request, background_tasks, service, recorder, user_id, viewer_role
    )


@router.get("", response_model=SearchResponse)
async def search_projects_by_query(
    background_tasks: BackgroundTasks,
    q: str = Query(default=""),
    filters: str | None = Query(default=None, description="JSON-encoded filters"),
    sort_by: SortKey = Query(default="relevance"),
    sort_order: SortOrder = Query(default="desc"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(
        default=settings.search_default_limit, gt=0, le=settings.search_max_limit
    ),
    service: SearchService = Depends(get_search_service),
    recorder: SearchHistoryRecorder = Depends(get_search_history_recorder),
    user_id: str | None = Depends(get_optional_user_id),
    viewer_role: str = Depends(get_viewer_role),
):
    """Search projects from URL parameters; malformed filters are ignored."""
    request = SearchRequest(
        query=q,
        filters=parse_filters_param(filters),
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return await _run_search(
        request, background_tasks, service, recorder, user_id, viewer_role
    )


@router.get("/quick", response_model=list[ProjectResult])
async def quick_search(
    q: str = Query(default=""),
    limit: int = Query(default=settings.quick_search_limit, ge=1, le=20),
    service: SearchService = Depends(get_search_service),
):
    """Compact search for the navigation bar."""
    return await service.quick_search(q, limit)


@router.get("/suggestions", response_model=list[SearchSuggestion])
async def get_suggestions(
    q: str = Query(default=""),
    service: SearchService = Depends(get_search_service),
):
    """Autocomplete suggestions for a partial query."""
    return await service.get_suggestions(q)


@router.get("/history", response_model=list[SearchHistoryItem])
async def get_search_history(
    limit: int = Query(default=settings.search_history_limit, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    recorder: SearchHistoryRecorder = Depends(get_search_history_recorder),
):
    """Most recent searches of the caller."""
    entries = await recorder.get_history(user_id, limit)
    return [
        SearchHistoryItem.model_validate(entry, from_attributes=True)
        for entry in entries
    ]


@router.delete("/history")
async def clear_search_history(
    user_id: str = Depends(get_current_user_id),
    recorder: SearchHistoryRecorder = Depends(get_search_history_recorder),
):
    """Delete the caller's whole search history."""
    try:
        deleted = await recorder.delete_history(user_id)
    except GatewayError as e:
        raise to_http_exception(e)
    return {"status": "success", "deleted": deleted}


@router.delete("/history/{entry_id}")
async def delete_search_history_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id),
    recorder: SearchHistoryRecorder = Depends(get_search_history_recorder),
):
    """Delete one entry of the caller's search history."""
    try:
        deleted = await recorder.delete_history(user_id, entry_id)
    except GatewayError as e:
        raise to_http_exception(e)
    if not deleted:
        raise HTTPException(status_code=404, detail="Search history entry not found")
    return {"status": "success", "deleted": deleted}


@router.get("/popular", response_model=list[PopularSearchItem])
async def get_popular_searches(
    limit: int = Query(default=settings.popular_searches_limit, ge=1, le=100),
    recorder: SearchHistoryRecorder = Depends(get_search_history_recorder),
):
    """Most searched terms across all users."""
    entries = await recorder.get_popular(limit)
    return [
        PopularSearchItem.model_validate(entry, from_attributes=True)
        for entry in entries
    ]


@router.post("/analytics", status_code=status.HTTP_202_ACCEPTED)
async def track_search_analytics(
    event: SearchAnalyticsEvent,
    background_tasks: BackgroundTasks,
    user_id: str | None = Depends(get_optional_user_id),
    recorder: SearchHistoryRecorder = Depends(get_search_history_recorder),
):
    """Record a search impression or result click."""
    background_tasks.add_task(recorder.track_analytics, user_id, event)
    return {"status": "accepted"}
