"""Offset/limit windowing over an already sorted collection."""

import math
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Page:
    """One window of a collection."""

    items: list[Any] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    limit: int = 20

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.limit) if self.total_count else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def paginate(items: list[Any], page: int = 1, limit: int = 20) -> Page:
    """Slice ``items`` to the requested 1-indexed page.

    Pages past the end are empty rather than an error.
    """
    if page < 1:
        raise ValueError("page must be >= 1")
    if limit < 1:
        raise ValueError("limit must be > 0")

    offset = (page - 1) * limit
    return Page(
        items=list(items[offset : offset + limit]),
        total_count=len(items),
        page=page,
        limit=limit,
    )
