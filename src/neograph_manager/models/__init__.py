"""Data models for graph queries."""

from neograph_manager.models.query import Query

__all__ = ["Query"]
