"""Utility functions and classes."""

from app.utils.filters import ProjectFilter, default_status_filter
from app.utils.pagination import Page, paginate
from app.utils.sorting import sort_projects

__all__ = ["Page", "ProjectFilter", "default_status_filter", "paginate", "sort_projects"]
