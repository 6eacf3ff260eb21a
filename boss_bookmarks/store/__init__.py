"""Bookmark document persistence."""

from boss_bookmarks.store.base import BookmarkStore
from boss_bookmarks.store.local import LocalBookmarkStore
from boss_bookmarks.store.serializer import MalformedDataError

__all__ = ["BookmarkStore", "LocalBookmarkStore", "MalformedDataError"]
