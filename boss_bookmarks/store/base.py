"""Persistence interface for bookmark documents.

The store owns two JSON documents under a single directory: the bookmark
collections and the favorite workspaces.  The interface is async so that
blocking file I/O never runs on the caller's event loop.

Stores never raise to their callers.  I/O failures and malformed documents
are logged and converted to a fallback value (``False`` for saves, an empty
list for loads).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from boss_bookmarks.models.bookmark import BookmarkCollection, FavoriteWorkspace

COLLECTIONS_FILE = "collections.json"
FAVORITE_WORKSPACES_FILE = "favorite-workspaces.json"


@runtime_checkable
class BookmarkStore(Protocol):
    """Async protocol for reading and writing bookmark documents.

    Storage layout::

        {directory}/collections.json
        {directory}/favorite-workspaces.json
    """

    async def ensure_directory(self) -> bool:
        """Create the storage directory if needed.  Returns whether it exists afterwards."""
        ...

    async def save_collections(self, collections: Sequence[BookmarkCollection]) -> bool:
        """Overwrite the collections document.  Returns ``False`` on failure."""
        ...

    async def load_collections(self) -> list[BookmarkCollection]:
        """Read the collections document.  Empty list if missing or unreadable."""
        ...

    async def save_favorite_workspaces(self, favorites: Sequence[FavoriteWorkspace]) -> bool:
        """Overwrite the favorite-workspaces document.  Returns ``False`` on failure."""
        ...

    async def load_favorite_workspaces(self) -> list[FavoriteWorkspace]:
        """Read the favorite-workspaces document.  Empty list if missing or unreadable."""
        ...
