"""Application configuration management."""

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: AnyUrl
    database_echo: bool = False

    # Logging
    log_level: str = "INFO"

    # Search
    search_default_limit: int = Field(default=20, ge=1, le=100)
    search_max_limit: int = Field(default=100, ge=1, le=500)
    suggestion_max_query_length: int = Field(
        default=3,
        ge=0,
        description="Suggestions are only computed for queries shorter than this",
    )
    suggestion_limit: int = Field(default=8, ge=1, le=50)
    quick_search_limit: int = Field(default=5, ge=1, le=50)
    search_history_limit: int = Field(default=10, ge=1, le=100)
    popular_searches_limit: int = Field(default=10, ge=1, le=100)

    # Organization dashboard
    dashboard_projects_limit: int = Field(default=6, ge=1, le=50)
    dashboard_applications_limit: int = Field(default=8, ge=1, le=50)

    # Team workspace
    team_activities_limit: int = Field(default=20, ge=1, le=100)
    team_recent_activity_days: int = Field(default=7, ge=1, le=90)

    # HTTP
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
