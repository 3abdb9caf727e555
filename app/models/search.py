"""Search telemetry models."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.storage import Base, new_id, utc_now


class SearchHistory(Base):
    """Model for a user's past searches."""

    __tablename__ = "search_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    search_term: Mapped[str] = mapped_column(String(500), nullable=False)
    filters: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    result_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False, index=True
    )


class PopularSearch(Base):
    """One counter row per normalized search term."""

    __tablename__ = "popular_searches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    search_term: Mapped[str] = mapped_column(
        String(500), nullable=False, unique=True, index=True
    )
    search_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    last_searched: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )


class SearchAnalytics(Base):
    """Model for search impressions and result clicks."""

    __tablename__ = "search_analytics"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    search_term: Mapped[str] = mapped_column(String(500), nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    result_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    clicked_project_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    click_position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    session_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
