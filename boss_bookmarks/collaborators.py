"""Contracts between the bookmarks engine and its host application.

The engine never renders UI, switches workspaces or opens tabs itself.  It
hands tab references to ``SplitViewOperations`` and registers a
``SearchProvider`` with the host's global search.  ``BookmarkDataProvider``
is what the engine exposes upward; ``BookmarkManager`` satisfies it.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from boss_bookmarks.models.bookmark import Bookmark, BookmarkCollection, FavoriteWorkspace, TabReference
    from boss_bookmarks.models.search import SearchResult
    from boss_bookmarks.state import StateFlow


@runtime_checkable
class SplitViewOperations(Protocol):
    """Host operations that open a tab in the active panel."""

    def open_url_in_active_panel(self, url: str, title: str, *, force_new_tab: bool = False) -> None: ...

    def open_file_in_active_panel(self, file_path: str, file_name: str) -> None: ...

    def add_terminal_tab(self, tab_id: str, title: str, working_directory: str | None = None) -> None: ...


@runtime_checkable
class WorkspaceDataProvider(Protocol):
    """Host-owned workspace storage.  The engine only references workspaces by id."""

    async def load_workspace(self, workspace_id: str) -> Any: ...

    async def save_workspace(self, workspace: Any) -> None: ...

    async def rename_workspace(self, old_name: str, new_name: str) -> None: ...

    async def delete_workspace(self, name: str) -> None: ...

    async def export_workspace(self, workspace: Any) -> str | None: ...


@runtime_checkable
class SearchProvider(Protocol):
    """A source of results for the host's global search.

    The host re-queries on demand; providers push nothing.
    """

    provider_id: str
    display_name: str

    async def search(self, query: str, limit: int) -> list[SearchResult]: ...


@runtime_checkable
class BookmarkDataProvider(Protocol):
    """Reactive bookmark state plus the full mutation set, as offered to the host UI."""

    @property
    def collections(self) -> StateFlow[Sequence[BookmarkCollection]]: ...

    @property
    def favorite_workspaces(self) -> StateFlow[Sequence[FavoriteWorkspace]]: ...

    def add_bookmark(self, collection_name: str, bookmark: Bookmark) -> None: ...

    def remove_bookmark(self, collection_id: str, bookmark_id: str) -> None: ...

    def update_bookmark(self, collection_id: str, bookmark: Bookmark) -> None: ...

    def move_bookmark(self, bookmark_id: str, from_collection_id: str, to_collection_id: str) -> None: ...

    def mark_bookmark_as_accessed(self, collection_id: str, bookmark_id: str) -> None: ...

    def is_tab_bookmarked(self, tab: TabReference) -> bool: ...

    def find_bookmark_for_tab(self, tab: TabReference) -> tuple[str, str] | None: ...

    def create_collection(self, name: str) -> BookmarkCollection: ...

    def delete_collection(self, collection_id: str) -> None: ...

    def rename_collection(self, collection_id: str, new_name: str) -> None: ...

    def add_favorite_workspace(self, workspace_id: str, workspace_name: str) -> None: ...

    def remove_favorite_workspace(self, workspace_id: str) -> None: ...

    def is_favorite(self, workspace_id: str) -> bool: ...
