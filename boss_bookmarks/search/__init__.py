"""Relevance-scored bookmark search for the host's global search."""

from boss_bookmarks.search.provider import PROVIDER_ID, BookmarkSearchProvider, calculate_score

__all__ = ["PROVIDER_ID", "BookmarkSearchProvider", "calculate_score"]
