"""Pydantic schemas for request/response validation."""

from app.schemas.search import SearchFilters, SearchRequest, SearchResponse

__all__ = ["SearchFilters", "SearchRequest", "SearchResponse"]
