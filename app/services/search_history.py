"""Search history, popular search counters and search analytics."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import GatewayError
from app.core.storage import async_session, new_id, utc_now
from app.models.search import PopularSearch, SearchAnalytics, SearchHistory
from app.schemas.search import SearchAnalyticsEvent, SearchFilters

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def normalize_term(term: str) -> str:
    return term.strip().lower()


class SearchHistoryRecorder:
    """Side-channel persistence of search telemetry.

    Writes never raise: a failed write is logged and dropped so that the
    search result path is unaffected.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = async_session):
        self.session_factory = session_factory

    async def record_search(
        self,
        user_id: str | None,
        search_term: str,
        filters: SearchFilters | None,
        result_count: int,
    ) -> None:
        """Store a search in the user's history and bump its popularity."""
        if not search_term or not search_term.strip():
            return

        if user_id:
            snapshot = (
                filters.model_dump(mode="json", exclude_none=True) if filters else None
            )
            try:
                async with self.session_factory() as session:
                    session.add(
                        SearchHistory(
                            user_id=user_id,
                            search_term=search_term,
                            filters=snapshot,
                            result_count=result_count,
                        )
                    )
                    await session.commit()
            except SQLAlchemyError as e:
                logger.error(f"Failed to save search history for user {user_id}: {e}")

        await self.increment_popularity(search_term)

    async def increment_popularity(self, search_term: str) -> None:
        """Insert the normalized term with count 1 or atomically add 1."""
        term = normalize_term(search_term)
        if not term:
            return

        try:
            async with self.session_factory() as session:
                dialect = session.get_bind().dialect.name
                insert = _UPSERT_DIALECTS.get(dialect)
                if insert is None:
                    raise NotImplementedError(f"No upsert support for {dialect}")

                now = utc_now()
                stmt = insert(PopularSearch).values(
                    id=new_id(),
                    search_term=term,
                    search_count=1,
                    last_searched=now,
                    created_at=now,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[PopularSearch.search_term],
                    set_={
                        "search_count": PopularSearch.search_count + 1,
                        "last_searched": now,
                    },
                )
                await session.execute(stmt)
                await session.commit()
        except (SQLAlchemyError, NotImplementedError) as e:
            logger.error(f"Failed to update popular search '{term}': {e}")

    async def track_analytics(
        self, user_id: str | None, event: SearchAnalyticsEvent
    ) -> None:
        """Append a search impression or click."""
        try:
            async with self.session_factory() as session:
                session.add(
                    SearchAnalytics(
                        search_term=event.search_term,
                        user_id=user_id,
                        result_count=event.result_count,
                        clicked_project_id=event.clicked_project_id,
                        click_position=event.click_position,
                        session_id=event.session_id,
                    )
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to track search analytics: {e}")

    async def get_history(self, user_id: str, limit: int = 10) -> list[SearchHistory]:
        """Most recent searches of a user; empty on store failure."""
        query = (
            select(SearchHistory)
            .where(SearchHistory.user_id == user_id)
            .order_by(SearchHistory.created_at.desc())
            .limit(limit)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch search history for user {user_id}: {e}")
            return []

    async def delete_history(self, user_id: str, entry_id: str | None = None) -> int:
        """Delete one entry, or the whole history of a user."""
        stmt = delete(SearchHistory).where(SearchHistory.user_id == user_id)
        if entry_id is not None:
            stmt = stmt.where(SearchHistory.id == entry_id)

        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
                logger.info(f"Deleted {result.rowcount} search history entries for {user_id}")
                return result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete search history for user {user_id}: {e}")
            raise GatewayError("delete search history", str(e)) from e

    async def get_popular(self, limit: int = 10) -> list[PopularSearch]:
        """Most searched terms; empty on store failure."""
        query = (
            select(PopularSearch)
            .order_by(PopularSearch.search_count.desc(), PopularSearch.last_searched.desc())
            .limit(limit)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch popular searches: {e}")
            return []


search_history_recorder = SearchHistoryRecorder()


def get_search_history_recorder() -> SearchHistoryRecorder:
    """Dependency provider for the search history recorder."""
    return search_history_recorder
