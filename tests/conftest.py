"""Pytest configuration and fixtures."""

import os
import sys
from datetime import datetime, timedelta
from itertools import count
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment variables before importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("LOG_LEVEL", "WARNING")

BASE_TIME = datetime(2025, 3, 1, 12, 0, 0)


@pytest.fixture
def make_project():
    """Factory for project records shaped like the gateway output."""
    ids = count(1)

    def _make(**overrides):
        n = next(ids)
        project = {
            "id": f"project-{n}",
            "organization_id": "org-1",
            "title": f"Project {n}",
            "description": "Help a nonprofit",
            "requirements": "",
            "technology_stack": [],
            "difficulty_level": "beginner",
            "application_type": "individual",
            "max_team_size": 1,
            "status": "open",
            "is_remote": True,
            "location": None,
            "deadline": None,
            "blocked": False,
            "created_at": BASE_TIME + timedelta(days=n),
            "updated_at": BASE_TIME + timedelta(days=n),
            "organization": {
                "id": "org-1",
                "role": "organization",
                "organization_name": "Clean Water Trust",
                "avatar_url": None,
            },
            "applications": [],
        }
        project.update(overrides)
        return project

    return _make


@pytest.fixture
def make_application():
    """Factory for application records shaped like the gateway output."""
    ids = count(1)

    def _make(**overrides):
        n = next(ids)
        application = {
            "id": f"application-{n}",
            "project_id": "project-1",
            "developer_id": f"dev-{n}",
            "status": "pending",
            "status_manager": False,
            "created_at": BASE_TIME,
            "updated_at": BASE_TIME,
            "developer": {
                "id": overrides.get("developer_id", f"dev-{n}"),
                "first_name": "Ada",
                "last_name": f"Dev{n}",
                "email": f"dev{n}@example.org",
                "avatar_url": None,
                "skills": ["Python"],
            },
        }
        application.update(overrides)
        return application

    return _make


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Session factory bound to a fresh on-disk SQLite database."""
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

    from app.core.storage import init_models

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_models(engine)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def seeded(session_factory):
    """Two organizations, three developers, projects and applications.

    org-1 owns "Water Access App" (open, React, two accepted and one
    rejected application), "Donor CRM" (open, Python, one pending) and a
    blocked project. org-2 owns an in-progress project with one member.
    """
    from app.models import Application, Profile, Project

    async with session_factory() as session:
        session.add_all(
            [
                Profile(id="org-1", role="organization", email="water@example.org",
                        organization_name="Clean Water Trust"),
                Profile(id="org-2", role="organization", email="food@example.org",
                        organization_name="Food Bank Network"),
                Profile(id="dev-1", role="developer", email="ada@example.org",
                        first_name="Ada", last_name="Lovelace", skills=["React"]),
                Profile(id="dev-2", role="developer", email="alan@example.org",
                        first_name="Alan", last_name="Turing", skills=["Python"]),
                Profile(id="dev-3", role="developer", email="grace@example.org",
                        first_name="Grace", last_name="Hopper"),
            ]
        )
        await session.flush()
        session.add_all(
            [
                Project(id="p-water", organization_id="org-1", title="Water Access App",
                        description="Map clean water points", requirements="React skills",
                        technology_stack=["React", "TypeScript"], status="open",
                        difficulty_level="intermediate", application_type="team",
                        max_team_size=4, created_at=BASE_TIME),
                Project(id="p-crm", organization_id="org-1", title="Donor CRM",
                        description="Track donations", requirements="Django",
                        technology_stack=["Python"], status="open",
                        difficulty_level="beginner", application_type="individual",
                        created_at=BASE_TIME + timedelta(days=1)),
                Project(id="p-blocked", organization_id="org-1", title="Blocked React Site",
                        description="Spam", requirements="",
                        technology_stack=["React"], status="open", blocked=True,
                        created_at=BASE_TIME + timedelta(days=2)),
                Project(id="p-food", organization_id="org-2", title="Food Routing",
                        description="Route deliveries", requirements="Python",
                        technology_stack=["Python", "PostGIS"], status="in_progress",
                        difficulty_level="advanced", application_type="both",
                        max_team_size=3, created_at=BASE_TIME + timedelta(days=3)),
            ]
        )
        await session.flush()
        session.add_all(
            [
                Application(id="a-1", project_id="p-water", developer_id="dev-1",
                            status="accepted", status_manager=True,
                            created_at=BASE_TIME, updated_at=BASE_TIME + timedelta(hours=2)),
                Application(id="a-2", project_id="p-water", developer_id="dev-2",
                            status="accepted",
                            created_at=BASE_TIME + timedelta(hours=1),
                            updated_at=BASE_TIME + timedelta(hours=5)),
                Application(id="a-3", project_id="p-water", developer_id="dev-3",
                            status="rejected",
                            created_at=BASE_TIME + timedelta(hours=2),
                            updated_at=BASE_TIME + timedelta(hours=8)),
                Application(id="a-4", project_id="p-crm", developer_id="dev-3",
                            status="pending",
                            created_at=BASE_TIME + timedelta(days=1, hours=1),
                            updated_at=BASE_TIME + timedelta(days=1, hours=1)),
                Application(id="a-5", project_id="p-food", developer_id="dev-2",
                            status="accepted",
                            created_at=BASE_TIME + timedelta(days=3, hours=1),
                            updated_at=BASE_TIME + timedelta(days=3, hours=3)),
            ]
        )
        await session.commit()

    return session_factory


@pytest.fixture
def mock_gateway():
    """Mock project gateway for testing."""
    gateway = MagicMock()
    gateway.fetch_projects = AsyncMock(return_value=[])
    gateway.fetch_project = AsyncMock(return_value=None)
    gateway.fetch_applications = AsyncMock(return_value=[])
    gateway.fetch_application = AsyncMock(return_value=None)
    gateway.technology_stacks = AsyncMock(return_value=[])
    gateway.titles_matching = AsyncMock(return_value=[])
    gateway.organizations_matching = AsyncMock(return_value=[])
    return gateway
