"""Project model."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.storage import Base, new_id, utc_now


class Project(Base):
    """Model for a project posted by an organization."""

    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint(
            "application_type <> 'individual' OR max_team_size = 1",
            name="ck_projects_individual_team_size",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    requirements: Mapped[str] = mapped_column(Text, nullable=False, default="")
    technology_stack: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    difficulty_level: Mapped[str] = mapped_column(
        String(20), nullable=False, default="beginner"
    )
    application_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="individual"
    )
    max_team_size: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True
    )
    is_remote: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    deadline: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, onupdate=utc_now, nullable=False
    )

    organization = relationship("Profile", lazy="raise")
    applications = relationship(
        "Application", back_populates="project", lazy="raise"
    )
