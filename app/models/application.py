"""Application model."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.storage import Base, new_id, utc_now


class Application(Base):
    """Model for a developer's application to a project."""

    __tablename__ = "applications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id"), nullable=False, index=True
    )
    developer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True
    )
    status_manager: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    cover_letter: Mapped[str | None] = mapped_column(Text, nullable=True)
    portfolio_links: Mapped[list | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False
    )

    project = relationship("Project", back_populates="applications", lazy="raise")
    developer = relationship("Profile", lazy="raise")
