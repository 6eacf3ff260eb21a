"""Data models for the bookmarks engine."""

from boss_bookmarks.models.bookmark import (
    FAVORITES_NAME,
    Bookmark,
    BookmarkCollection,
    FavoriteWorkspace,
    TabReference,
    utc_now,
)
from boss_bookmarks.models.enums import ActionKind, IconKind, TabType
from boss_bookmarks.models.search import (
    CustomAction,
    FaviconIcon,
    MaterialIcon,
    OpenFileAction,
    OpenUrlAction,
    SearchMatchRange,
    SearchResult,
)

__all__ = [
    "FAVORITES_NAME",
    "ActionKind",
    "Bookmark",
    "BookmarkCollection",
    "CustomAction",
    "FavoriteWorkspace",
    "FaviconIcon",
    "IconKind",
    "MaterialIcon",
    "OpenFileAction",
    "OpenUrlAction",
    "SearchMatchRange",
    "SearchResult",
    "TabReference",
    "TabType",
    "utc_now",
]
