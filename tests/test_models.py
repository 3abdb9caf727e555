"""Tests for database models."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.models import Application, PopularSearch, Profile, Project, TeamActivity
from app.services.gateway import project_to_dict


class TestProfile:
    """Tests for Profile model."""

    def test_display_name_developer(self):
        """Test developers are shown by full name."""
        profile = Profile(role="developer", first_name="Ada", last_name="Lovelace")
        assert profile.display_name == "Ada Lovelace"

    def test_display_name_organization(self):
        """Test organizations are shown by organization name."""
        profile = Profile(role="organization", organization_name="Clean Water Trust")
        assert profile.display_name == "Clean Water Trust"

    def test_display_name_fallback(self):
        """Test profiles without names."""
        assert Profile(role="developer").display_name == "Unknown User"


class TestPersistence:
    """Tests for model defaults and constraints."""

    @pytest.mark.asyncio
    async def test_project_defaults(self, session_factory):
        """Test generated ids and column defaults."""
        async with session_factory() as session:
            session.add(Profile(id="org-1", role="organization", email="a@example.org"))
            session.add(Project(organization_id="org-1", title="Tutor Match"))
            await session.commit()

            project = (await session.execute(select(Project))).scalar_one()

        assert len(project.id) == 36
        assert project.status == "pending"
        assert project.technology_stack == []
        assert project.blocked is False
        assert project.created_at is not None

    @pytest.mark.asyncio
    async def test_popular_search_term_unique(self, session_factory):
        """Test one counter row per term."""
        async with session_factory() as session:
            session.add(PopularSearch(search_term="react"))
            await session.commit()

            session.add(PopularSearch(search_term="react"))
            with pytest.raises(IntegrityError):
                await session.commit()

    @pytest.mark.asyncio
    async def test_individual_project_is_single_seat(self, session_factory):
        """Test individual projects cannot declare a larger team."""
        async with session_factory() as session:
            session.add(Profile(id="org-1", role="organization", email="a@example.org"))
            await session.commit()

            session.add(
                Project(
                    organization_id="org-1",
                    title="Tutor Match",
                    application_type="individual",
                    max_team_size=3,
                )
            )
            with pytest.raises(IntegrityError):
                await session.commit()

    @pytest.mark.asyncio
    async def test_team_project_allows_larger_team(self, session_factory):
        """Test the seat limit only binds individual projects."""
        async with session_factory() as session:
            session.add(Profile(id="org-1", role="organization", email="a@example.org"))
            session.add(
                Project(
                    organization_id="org-1",
                    title="Tutor Match",
                    application_type="team",
                    max_team_size=3,
                )
            )
            await session.commit()

            project = (await session.execute(select(Project))).scalar_one()

        assert project.max_team_size == 3

    @pytest.mark.asyncio
    async def test_team_activity_roundtrip(self, seeded):
        """Test activity details are stored as JSON."""
        async with seeded() as session:
            session.add(
                TeamActivity(
                    project_id="p-water",
                    user_id="org-1",
                    activity_type="project_updated",
                    description="Promoted developer to status manager",
                    details={"promoted_user_id": "dev-2"},
                )
            )
            await session.commit()
            activity = (await session.execute(select(TeamActivity))).scalar_one()

        assert activity.details == {"promoted_user_id": "dev-2"}


class TestGatewayRecords:
    """Tests for converting loaded models to records."""

    @pytest.mark.asyncio
    async def test_project_to_dict(self, seeded):
        """Test the denormalized project record."""
        from sqlalchemy.orm import selectinload

        async with seeded() as session:
            result = await session.execute(
                select(Project)
                .where(Project.id == "p-water")
                .options(
                    selectinload(Project.organization),
                    selectinload(Project.applications).selectinload(Application.developer),
                )
            )
            record = project_to_dict(result.scalar_one())

        assert record["organization"]["organization_name"] == "Clean Water Trust"
        assert len(record["applications"]) == 3
        assert {a["developer"]["first_name"] for a in record["applications"]} == {
            "Ada",
            "Alan",
            "Grace",
        }
