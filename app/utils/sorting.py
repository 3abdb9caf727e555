"""Ordering of project search results."""

import unicodedata
from datetime import datetime

SORT_KEYS = ("relevance", "created_at", "deadline", "title", "popularity")


def collation_key(text: str | None) -> str:
    """Case- and accent-insensitive key for human-readable ordering."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def team_size(project: dict) -> int:
    """Number of accepted members on a project."""
    return sum(
        1
        for application in project.get("applications") or []
        if application.get("status") == "accepted"
    )


def sort_projects(
    projects: list[dict],
    sort_by: str = "relevance",
    sort_order: str = "desc",
) -> list[dict]:
    """Return a new, stably sorted list of projects.

    Projects without a deadline always come last when sorting by deadline.
    Relevance has no scoring model and orders newest first.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_by}")

    descending = sort_order == "desc"

    if sort_by == "relevance":
        return sorted(projects, key=_created_at, reverse=True)

    if sort_by == "created_at":
        return sorted(projects, key=_created_at, reverse=descending)

    if sort_by == "title":
        return sorted(
            projects,
            key=lambda p: collation_key(p.get("title")),
            reverse=descending,
        )

    if sort_by == "popularity":
        return sorted(projects, key=team_size, reverse=descending)

    dated = [p for p in projects if p.get("deadline") is not None]
    undated = [p for p in projects if p.get("deadline") is None]
    return sorted(dated, key=lambda p: p["deadline"], reverse=descending) + undated


def _created_at(project: dict) -> datetime:
    return project.get("created_at") or datetime.min
