"""Tests for API routes."""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.core.exceptions import (
    ApplicationNotEditableError,
    DuplicateApplicationError,
    GatewayError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
)
from app.main import app
from app.schemas.application import ApplicationDetail, ApplicationResponse, ApplicationStats
from app.schemas.dashboard import OrganizationStats, TeamAnalytics
from app.schemas.search import SearchFilters, SearchResponse, SearchSuggestion
from app.schemas.team import TeamStats
from app.services.application_service import get_application_service
from app.services.dashboard_service import get_dashboard_service
from app.services.search_history import get_search_history_recorder
from app.services.search_service import get_search_service
from app.services.team_service import get_team_service

NOW = datetime(2025, 3, 1, 12, 0)


@pytest.fixture
def search_service():
    service = MagicMock()
    service.search = AsyncMock(
        return_value=SearchResponse(projects=[], total_count=0, search_time=1)
    )
    service.get_suggestions = AsyncMock(return_value=[])
    service.quick_search = AsyncMock(return_value=[])
    return service


@pytest.fixture
def recorder():
    recorder = MagicMock()
    recorder.record_search = AsyncMock()
    recorder.track_analytics = AsyncMock()
    recorder.get_history = AsyncMock(return_value=[])
    recorder.get_popular = AsyncMock(return_value=[])
    recorder.delete_history = AsyncMock(return_value=1)
    return recorder


@pytest.fixture
def dashboard_service():
    return MagicMock()


@pytest.fixture
def team_service():
    return MagicMock()


@pytest.fixture
def application_service():
    return MagicMock()


@pytest.fixture
def client(search_service, recorder, dashboard_service, team_service, application_service):
    """Test client with every service replaced by a mock."""
    app.dependency_overrides[get_search_service] = lambda: search_service
    app.dependency_overrides[get_search_history_recorder] = lambda: recorder
    app.dependency_overrides[get_dashboard_service] = lambda: dashboard_service
    app.dependency_overrides[get_team_service] = lambda: team_service
    app.dependency_overrides[get_application_service] = lambda: application_service
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def _application(**overrides):
    data = {
        "id": "a-1",
        "project_id": "p-1",
        "developer_id": "dev-1",
        "status": "pending",
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return ApplicationResponse(**data)


class TestMainEndpoints:
    """Tests for service-level endpoints."""

    def test_api_info(self, client):
        """Test API info endpoint."""
        response = client.get("/api")
        assert response.status_code == 200
        assert response.json()["message"] == "DevTogether API"

    def test_health(self, client):
        """Test health check endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "devtogether"}

    def test_openapi(self, client):
        """Test that the OpenAPI document lists the routers."""
        paths = client.get("/openapi.json").json()["paths"]
        assert "/search" in paths
        assert "/dashboard/organization/{organization_id}" in paths
        assert "/projects/{project_id}/team" in paths
        assert "/applications" in paths


class TestSearchRoutes:
    """Tests for /search routes."""

    def test_post_search(self, client, search_service, recorder):
        """Test a structured search records telemetry in the background."""
        response = client.post(
            "/search",
            json={"query": "react", "filters": {"technology_stack": ["React"]}},
            headers={"X-User-Id": "dev-1", "X-User-Role": "developer"},
        )

        assert response.status_code == 200
        assert response.json()["total_count"] == 0
        request = search_service.search.call_args.args[0]
        assert request.query == "react"
        assert search_service.search.call_args.kwargs["viewer_role"] == "developer"
        recorder.record_search.assert_called_once_with(
            "dev-1", "react", SearchFilters(technology_stack=["React"]), 0
        )

    def test_get_search_with_malformed_filters(self, client, search_service):
        """Test malformed JSON filters are ignored."""
        response = client.get("/search", params={"q": "react", "filters": "{oops"})

        assert response.status_code == 200
        request = search_service.search.call_args.args[0]
        assert request.filters == SearchFilters()
        assert search_service.search.call_args.kwargs["viewer_role"] == "anonymous"

    def test_get_search_with_oversized_integer_filter(self, client, search_service):
        """Test filters the JSON decoder refuses are ignored instead of failing."""
        response = client.get(
            "/search", params={"q": "react", "filters": '{"is_remote": ' + "9" * 5000 + "}"}
        )

        assert response.status_code == 200
        request = search_service.search.call_args.args[0]
        assert request.filters == SearchFilters()

    def test_get_search_limit_capped_by_settings(self, client, search_service):
        """Test page sizes above the configured maximum are rejected."""
        assert client.get("/search", params={"limit": 100}).status_code == 200
        assert client.get("/search", params={"limit": 101}).status_code == 422

    def test_get_search_with_filters(self, client, search_service):
        """Test JSON filters and paging parameters."""
        response = client.get(
            "/search",
            params={
                "q": "water",
                "filters": '{"is_remote": true}',
                "sort_by": "title",
                "sort_order": "asc",
                "page": 2,
                "limit": 5,
            },
        )

        assert response.status_code == 200
        request = search_service.search.call_args.args[0]
        assert request.filters.is_remote is True
        assert (request.sort_by, request.sort_order, request.page, request.limit) == (
            "title",
            "asc",
            2,
            5,
        )

    def test_invalid_sort_key(self, client):
        """Test unknown sort keys are rejected."""
        response = client.post("/search", json={"sort_by": "rating"})
        assert response.status_code == 422

    def test_store_failure_is_bad_gateway(self, client, search_service, recorder):
        """Test store failures surface as 502."""
        search_service.search.side_effect = GatewayError("fetch projects", "down")

        response = client.post("/search", json={"query": "react"})

        assert response.status_code == 502
        recorder.record_search.assert_not_called()

    def test_suggestions(self, client, search_service):
        """Test suggestions endpoint."""
        search_service.get_suggestions.return_value = [
            SearchSuggestion(text="React", type="technology")
        ]

        response = client.get("/search/suggestions", params={"q": "re"})

        assert response.json() == [{"text": "React", "type": "technology"}]

    def test_quick_search(self, client, search_service):
        """Test quick search endpoint."""
        response = client.get("/search/quick", params={"q": "react", "limit": 3})

        assert response.status_code == 200
        search_service.quick_search.assert_awaited_once_with("react", 3)

    def test_history_requires_user(self, client):
        """Test anonymous callers have no history."""
        assert client.get("/search/history").status_code == 401

    def test_history(self, client, recorder):
        """Test history of the caller."""
        entry = MagicMock(
            id="h-1", search_term="react", filters=None, result_count=2, created_at=NOW
        )
        recorder.get_history.return_value = [entry]

        response = client.get("/search/history", headers={"X-User-Id": "dev-1"})

        assert response.status_code == 200
        assert response.json()[0]["search_term"] == "react"
        recorder.get_history.assert_awaited_once_with("dev-1", 10)

    def test_delete_history_entry(self, client, recorder):
        """Test deleting one entry."""
        response = client.delete("/search/history/h-1", headers={"X-User-Id": "dev-1"})

        assert response.status_code == 200
        recorder.delete_history.assert_awaited_once_with("dev-1", "h-1")

    def test_delete_missing_history_entry(self, client, recorder):
        """Test deleting an unknown entry."""
        recorder.delete_history.return_value = 0

        response = client.delete("/search/history/h-9", headers={"X-User-Id": "dev-1"})

        assert response.status_code == 404

    def test_clear_history(self, client, recorder):
        """Test clearing the whole history."""
        recorder.delete_history.return_value = 3

        response = client.delete("/search/history", headers={"X-User-Id": "dev-1"})

        assert response.json() == {"status": "success", "deleted": 3}

    def test_popular(self, client, recorder):
        """Test popular searches endpoint."""
        recorder.get_popular.return_value = [
            MagicMock(search_term="react", search_count=4, last_searched=NOW)
        ]

        response = client.get("/search/popular")

        assert response.json()[0]["search_count"] == 4

    def test_analytics_accepted(self, client, recorder):
        """Test analytics events are accepted for background storage."""
        response = client.post(
            "/search/analytics",
            json={"search_term": "react", "result_count": 3, "clicked_project_id": "p-1"},
        )

        assert response.status_code == 202
        recorder.track_analytics.assert_called_once()


class TestDashboardRoutes:
    """Tests for /dashboard routes."""

    def test_stats(self, client, dashboard_service):
        """Test organization stats endpoint."""
        dashboard_service.get_organization_stats = AsyncMock(
            return_value=OrganizationStats(total_projects=2, acceptance_rate=50.0)
        )

        response = client.get("/dashboard/organization/org-1/stats")

        assert response.status_code == 200
        assert response.json()["total_projects"] == 2
        assert response.json()["acceptance_rate"] == 50.0

    def test_team(self, client, dashboard_service):
        """Test team analytics endpoint."""
        dashboard_service.get_team_analytics = AsyncMock(return_value=TeamAnalytics())

        response = client.get("/dashboard/organization/org-1/team")

        assert response.json()["total_members"] == 0

    def test_store_failure(self, client, dashboard_service):
        """Test dashboard store failures are 502."""
        dashboard_service.refresh_organization_data = AsyncMock(
            side_effect=GatewayError("fetch projects", "down")
        )

        response = client.get("/dashboard/organization/org-1")

        assert response.status_code == 502

    def test_projects_limit_passed(self, client, dashboard_service):
        """Test the projects limit query parameter."""
        dashboard_service.get_project_overview = AsyncMock(return_value=[])

        client.get("/dashboard/organization/org-1/projects", params={"limit": 3})

        dashboard_service.get_project_overview.assert_awaited_once_with("org-1", 3)


class TestTeamRoutes:
    """Tests for /projects/{id}/team routes."""

    def test_unknown_project(self, client, team_service):
        """Test 404 for a missing project."""
        team_service.get_team_members = AsyncMock(side_effect=NotFoundError("Project", "p-9"))

        response = client.get("/projects/p-9/team")

        assert response.status_code == 404

    def test_stats(self, client, team_service):
        """Test team stats endpoint."""
        team_service.get_team_stats = AsyncMock(
            return_value=TeamStats(total_members=3, completion_rate=30)
        )

        response = client.get("/projects/p-1/team/stats")

        assert response.json()["completion_rate"] == 30

    def test_remove_requires_owner(self, client, team_service):
        """Test 403 for non-owners."""
        team_service.remove_member = AsyncMock(
            side_effect=PermissionDeniedError("Only organization owners can remove team members")
        )

        response = client.delete("/projects/p-1/team/dev-2", headers={"X-User-Id": "dev-1"})

        assert response.status_code == 403
        team_service.remove_member.assert_awaited_once_with("p-1", "dev-2", "dev-1")

    def test_remove_requires_identity(self, client, team_service):
        """Test 401 without a caller id."""
        team_service.remove_member = AsyncMock()

        response = client.delete("/projects/p-1/team/dev-2")

        assert response.status_code == 401
        team_service.remove_member.assert_not_awaited()

    def test_leave(self, client, team_service):
        """Test leaving a team."""
        team_service.leave_project = AsyncMock()

        response = client.post("/projects/p-1/team/leave", headers={"X-User-Id": "dev-1"})

        assert response.status_code == 200
        team_service.leave_project.assert_awaited_once_with("p-1", "dev-1")

    def test_promote_and_demote(self, client, team_service):
        """Test status manager toggling."""
        team_service.set_status_manager = AsyncMock()
        headers = {"X-User-Id": "org-1"}

        client.post("/projects/p-1/team/dev-2/status-manager", headers=headers)
        client.delete("/projects/p-1/team/dev-2/status-manager", headers=headers)

        calls = team_service.set_status_manager.await_args_list
        assert [c.kwargs["enabled"] for c in calls] == [True, False]


class TestApplicationRoutes:
    """Tests for /applications routes."""

    def test_submit(self, client, application_service):
        """Test submitting an application."""
        application_service.submit_application = AsyncMock(return_value=_application())

        response = client.post(
            "/applications", json={"project_id": "p-1"}, headers={"X-User-Id": "dev-1"}
        )

        assert response.status_code == 201
        assert response.json()["status"] == "pending"

    def test_duplicate_is_conflict(self, client, application_service):
        """Test 409 for a second live application."""
        application_service.submit_application = AsyncMock(
            side_effect=DuplicateApplicationError("p-1", "dev-1")
        )

        response = client.post(
            "/applications", json={"project_id": "p-1"}, headers={"X-User-Id": "dev-1"}
        )

        assert response.status_code == 409

    def test_invalid_transition_is_conflict(self, client, application_service):
        """Test 409 for a forbidden status change."""
        application_service.update_application_status = AsyncMock(
            side_effect=InvalidTransitionError("rejected", "accepted")
        )

        response = client.patch(
            "/applications/a-1/status",
            json={"status": "accepted"},
            headers={"X-User-Id": "org-1"},
        )

        assert response.status_code == 409

    def test_status_must_be_decision(self, client):
        """Test only accepted or rejected can be set by review."""
        response = client.patch(
            "/applications/a-1/status",
            json={"status": "withdrawn"},
            headers={"X-User-Id": "org-1"},
        )
        assert response.status_code == 422

    def test_withdraw(self, client, application_service):
        """Test withdrawing an application."""
        application_service.withdraw_application = AsyncMock(
            return_value=_application(status="withdrawn")
        )

        response = client.post("/applications/a-1/withdraw", headers={"X-User-Id": "dev-1"})

        assert response.json()["status"] == "withdrawn"
        application_service.withdraw_application.assert_awaited_once_with("a-1", "dev-1")

    def test_developer_stats(self, client, application_service):
        """Test developer stats endpoint."""
        application_service.get_developer_application_stats = AsyncMock(
            return_value=ApplicationStats(total=2, pending=1, rejected=1)
        )

        response = client.get("/applications/stats/developer/dev-3")

        assert response.json()["total"] == 2

    def test_my_applications(self, client, application_service):
        """Test the caller's own applications."""
        application_service.get_developer_applications = AsyncMock(
            return_value=[ApplicationDetail(**_application().model_dump())]
        )

        response = client.get("/applications/mine", headers={"X-User-Id": "dev-1"})

        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == ["a-1"]
        application_service.get_developer_applications.assert_awaited_once_with("dev-1")

    def test_my_applications_requires_identity(self, client):
        """Test anonymous callers have no applications to list."""
        assert client.get("/applications/mine").status_code == 401

    def test_project_applications_owner_only(self, client, application_service):
        """Test 403 when a non-owner lists a project's applications."""
        application_service.get_project_applications = AsyncMock(
            side_effect=PermissionDeniedError("Only the project owner can list applications")
        )

        response = client.get("/applications/project/p-1", headers={"X-User-Id": "org-2"})

        assert response.status_code == 403
        application_service.get_project_applications.assert_awaited_once_with("p-1", "org-2")

    def test_has_applied(self, client, application_service):
        """Test the applied flag for the caller."""
        application_service.has_applied = AsyncMock(return_value=True)

        response = client.get(
            "/applications/project/p-1/applied", headers={"X-User-Id": "dev-1"}
        )

        assert response.json() == {"has_applied": True}
        application_service.has_applied.assert_awaited_once_with("p-1", "dev-1")

    def test_get_application(self, client, application_service):
        """Test reading one application."""
        application_service.get_application = AsyncMock(
            return_value=ApplicationDetail(**_application().model_dump())
        )

        response = client.get("/applications/a-1", headers={"X-User-Id": "dev-1"})

        assert response.status_code == 200
        assert response.json()["id"] == "a-1"
        application_service.get_application.assert_awaited_once_with("a-1", "dev-1")

    def test_get_unknown_application(self, client, application_service):
        """Test 404 for a missing application."""
        application_service.get_application = AsyncMock(
            side_effect=NotFoundError("Application", "missing")
        )

        response = client.get("/applications/missing", headers={"X-User-Id": "dev-1"})

        assert response.status_code == 404

    def test_edit_pending_application(self, client, application_service):
        """Test editing the cover letter of a pending application."""
        application_service.update_application = AsyncMock(
            return_value=_application(cover_letter="Updated letter")
        )

        response = client.patch(
            "/applications/a-1",
            json={"cover_letter": "Updated letter"},
            headers={"X-User-Id": "dev-1"},
        )

        assert response.status_code == 200
        assert response.json()["cover_letter"] == "Updated letter"
        application_id, user_id, request = application_service.update_application.await_args.args
        assert (application_id, user_id) == ("a-1", "dev-1")
        assert request.model_dump(exclude_unset=True) == {"cover_letter": "Updated letter"}

    def test_edit_decided_application_is_conflict(self, client, application_service):
        """Test 409 when the application is no longer pending."""
        application_service.update_application = AsyncMock(
            side_effect=ApplicationNotEditableError("a-1", "accepted")
        )

        response = client.patch(
            "/applications/a-1", json={"cover_letter": "late"}, headers={"X-User-Id": "dev-1"}
        )

        assert response.status_code == 409
