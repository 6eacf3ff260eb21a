"""Panel-style filtering of bookmarks and collections.

Unlike the search provider these filters do not rank: they keep input order
and only drop non-matching items.  A blank query keeps everything.
"""

from __future__ import annotations

from collections.abc import Sequence

from boss_bookmarks.models.bookmark import Bookmark, BookmarkCollection


def bookmark_matches(bookmark: Bookmark, query: str) -> bool:
    """Case-insensitive substring match on title, URL or any tag."""
    needle = query.lower()
    tab = bookmark.tab_config
    if needle in tab.title.lower():
        return True
    if tab.url is not None and needle in tab.url.lower():
        return True
    return any(needle in tag.lower() for tag in bookmark.tags)


def filter_bookmarks(bookmarks: Sequence[Bookmark], query: str) -> list[Bookmark]:
    if not query.strip():
        return list(bookmarks)
    return [b for b in bookmarks if bookmark_matches(b, query)]


def filter_collections(collections: Sequence[BookmarkCollection], query: str) -> list[BookmarkCollection]:
    """Keep collections whose name contains *query* (case-insensitive)."""
    if not query.strip():
        return list(collections)
    needle = query.lower()
    return [c for c in collections if needle in c.name.lower()]
