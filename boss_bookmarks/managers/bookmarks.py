"""Bookmark manager -- the single owner of bookmark and favorite-workspace state.

State lives in two ``MutableStateFlow`` holders, each carrying an immutable
tuple snapshot.  Every mutation:

1. builds the new tuple from the current one,
2. publishes it in one assignment (observers never see a half-applied move),
3. triggers a background save of the affected document.

Mutations are synchronous and never block on disk I/O.  Unknown ids or
names are silent no-ops; callers that need feedback re-read the snapshot.

Nothing is written before the initial load has landed.  Mutations made
while it is still running are kept and re-applied on top of the loaded
snapshot, which is then saved.

The owner context is the asyncio loop that called ``start()`` (or the first
mutation).  Saves triggered from other threads are marshalled onto it.
"""

from __future__ import annotations

import asyncio
import threading
import uuid
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from loguru import logger

from boss_bookmarks.managers.writer import CoalescingWriter
from boss_bookmarks.models.bookmark import (
    FAVORITES_NAME,
    Bookmark,
    BookmarkCollection,
    FavoriteWorkspace,
    TabReference,
)
from boss_bookmarks.state import MutableStateFlow, StateFlow

if TYPE_CHECKING:
    from boss_bookmarks.store.base import BookmarkStore

T = TypeVar("T")

Collections = tuple[BookmarkCollection, ...]
FavoriteWorkspaces = tuple[FavoriteWorkspace, ...]

Change = Callable[[T], T | None]
"""Pure state transition.  Returns ``None`` when nothing changes."""


def _index_of(collections: Collections, predicate: Callable[[BookmarkCollection], bool]) -> int:
    for i, collection in enumerate(collections):
        if predicate(collection):
            return i
    return -1


def _replace(collections: Collections, index: int, collection: BookmarkCollection) -> Collections:
    return (*collections[:index], collection, *collections[index + 1 :])


def _replay(state: T, changes: list[Change[T]]) -> T:
    for change in changes:
        updated = change(state)
        if updated is not None:
            state = updated
    return state


def normalize_favorites(loaded: list[BookmarkCollection]) -> tuple[Collections, bool]:
    """Enforce "exactly one favorites collection" on loaded data.

    Prepends a fresh favorites collection when none is flagged, and demotes
    any extra flagged collections after the first.  Returns the normalised
    tuple and whether it differs from what was loaded.
    """
    result: list[BookmarkCollection] = []
    seen_favorite = False
    changed = False
    for collection in loaded:
        if collection.is_favorite:
            if seen_favorite:
                collection = collection.model_copy(update={"is_favorite": False})
                changed = True
            seen_favorite = True
        result.append(collection)
    if not seen_favorite:
        result.insert(0, BookmarkCollection.favorites())
        changed = True
    return tuple(result), changed


class BookmarkManager:
    """Owns collections and favorite workspaces; persists every change.

    Usage::

        manager = BookmarkManager(LocalBookmarkStore(path))
        manager.start()               # schedules the initial load
        await manager.wait_loaded()   # optional
        manager.create_collection("Work")
        await manager.flush()         # optional: wait for pending saves
    """

    def __init__(self, store: BookmarkStore) -> None:
        self._store = store
        self._collections: MutableStateFlow[Collections] = MutableStateFlow(())
        self._favorite_workspaces: MutableStateFlow[FavoriteWorkspaces] = MutableStateFlow(())
        self._lock = threading.RLock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._load_task: asyncio.Task[None] | None = None
        self._loaded = False
        self._early_collection_changes: list[Change[Collections]] = []
        self._early_favorite_changes: list[Change[FavoriteWorkspaces]] = []

        self._collections_writer = CoalescingWriter(
            "collections", lambda: self._collections.value, store.save_collections
        )
        self._favorites_writer = CoalescingWriter(
            "favorite-workspaces", lambda: self._favorite_workspaces.value, store.save_favorite_workspaces
        )

    # -- Observable state ------------------------------------------------------

    @property
    def collections(self) -> StateFlow[Collections]:
        return self._collections.as_state_flow()

    @property
    def favorite_workspaces(self) -> StateFlow[FavoriteWorkspaces]:
        return self._favorite_workspaces.as_state_flow()

    # -- Lifecycle -------------------------------------------------------------

    def start(self) -> asyncio.Task[None]:
        """Schedule the initial load on the running loop and return its task.  Idempotent.

        Returns immediately; observers see empty state until the load lands.
        """
        if self._load_task is None:
            self._loop = asyncio.get_running_loop()
            self._load_task = self._loop.create_task(self._load_all_data(), name="bookmarks-load")
        return self._load_task

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def wait_loaded(self) -> None:
        """Start loading if needed and wait for the initial snapshot."""
        await asyncio.shield(self.start())

    async def flush(self) -> None:
        """Wait until every triggered save has been written."""
        if self._load_task is not None:
            await asyncio.shield(self._load_task)
        writers = (self._collections_writer, self._favorites_writer)
        while any(w.pending for w in writers):
            for writer in writers:
                await writer.wait_idle()

    async def aclose(self) -> None:
        """Let in-flight saves complete.  State is left in place."""
        await self.flush()
        logger.debug("BookmarkManager: closed")

    async def _load_all_data(self) -> None:
        # Each document is read on its own so a failure in one never resets the other.
        loaded_collections, bootstrapped = await self._read_collections()
        loaded_favorites = await self._read_favorite_workspaces()

        with self._lock:
            collections = _replay(loaded_collections, self._early_collection_changes)
            favorites = _replay(loaded_favorites, self._early_favorite_changes)
            if self._early_collection_changes or self._early_favorite_changes:
                logger.info(
                    "BookmarkManager: re-applied {} change(s) made during load",
                    len(self._early_collection_changes) + len(self._early_favorite_changes),
                )
            self._early_collection_changes.clear()
            self._early_favorite_changes.clear()
            self._collections.value = collections
            self._favorite_workspaces.value = favorites
            self._loaded = True

        if bootstrapped or collections != loaded_collections:
            self._save_collections()
        if favorites != loaded_favorites:
            self._save_favorite_workspaces()

        logger.info(
            "BookmarkManager: loaded {} collections, {} favorite workspaces",
            len(collections),
            len(favorites),
        )

    async def _read_collections(self) -> tuple[Collections, bool]:
        """Load and normalise collections.  The flag says whether the result must be saved."""
        try:
            loaded = await self._store.load_collections()
        except Exception:
            logger.opt(exception=True).warning("BookmarkManager: error loading collections")
            return (BookmarkCollection.favorites(),), False
        collections, changed = normalize_favorites(loaded)
        if changed:
            logger.info("BookmarkManager: bootstrapped '{}' collection", FAVORITES_NAME)
        return collections, changed

    async def _read_favorite_workspaces(self) -> FavoriteWorkspaces:
        try:
            return tuple(await self._store.load_favorite_workspaces())
        except Exception:
            logger.opt(exception=True).warning("BookmarkManager: error loading favorite workspaces")
            return ()

    # -- State transitions -----------------------------------------------------

    def _update_collections(self, change: Change[Collections]) -> bool:
        """Apply *change*, publish the result and schedule a save.  Returns whether anything changed."""
        with self._lock:
            if not self._loaded:
                self._early_collection_changes.append(change)
            updated = change(self._collections.value)
            if updated is None:
                return False
            self._collections.value = updated
        self._save_collections()
        return True

    def _update_favorite_workspaces(self, change: Change[FavoriteWorkspaces]) -> bool:
        with self._lock:
            if not self._loaded:
                self._early_favorite_changes.append(change)
            updated = change(self._favorite_workspaces.value)
            if updated is None:
                return False
            self._favorite_workspaces.value = updated
        self._save_favorite_workspaces()
        return True

    # -- Bookmark operations ---------------------------------------------------

    def add_bookmark(self, collection_name: str, bookmark: Bookmark) -> None:
        """Append *bookmark* to the first collection named *collection_name*."""

        def change(collections: Collections) -> Collections | None:
            index = _index_of(collections, lambda c: c.name == collection_name)
            if index < 0:
                return None
            return _replace(collections, index, collections[index].add_bookmark(bookmark))

        self._update_collections(change)

    def remove_bookmark(self, collection_id: str, bookmark_id: str) -> None:
        def change(collections: Collections) -> Collections | None:
            index = _index_of(collections, lambda c: c.id == collection_id)
            if index < 0 or collections[index].find_bookmark(bookmark_id) is None:
                return None
            return _replace(collections, index, collections[index].remove_bookmark(bookmark_id))

        self._update_collections(change)

    def update_bookmark(self, collection_id: str, bookmark: Bookmark) -> None:
        """Replace the bookmark with ``bookmark.id`` in place."""

        def change(collections: Collections) -> Collections | None:
            index = _index_of(collections, lambda c: c.id == collection_id)
            if index < 0 or collections[index].find_bookmark(bookmark.id) is None:
                return None
            return _replace(collections, index, collections[index].update_bookmark(bookmark))

        self._update_collections(change)

    def move_bookmark(self, bookmark_id: str, from_collection_id: str, to_collection_id: str) -> None:
        """Remove from the source collection and append to the destination, in one snapshot."""

        def change(collections: Collections) -> Collections | None:
            from_index = _index_of(collections, lambda c: c.id == from_collection_id)
            to_index = _index_of(collections, lambda c: c.id == to_collection_id)
            if from_index < 0 or to_index < 0:
                return None
            bookmark = collections[from_index].find_bookmark(bookmark_id)
            if bookmark is None:
                return None
            updated = _replace(collections, from_index, collections[from_index].remove_bookmark(bookmark_id))
            return _replace(updated, to_index, updated[to_index].add_bookmark(bookmark))

        self._update_collections(change)

    def copy_bookmark(self, bookmark_id: str, from_collection_id: str, to_collection_id: str) -> Bookmark | None:
        """Append a copy of the bookmark, with a fresh id, to the destination collection."""
        copy_id = str(uuid.uuid4())
        made: list[Bookmark] = []

        def change(collections: Collections) -> Collections | None:
            from_index = _index_of(collections, lambda c: c.id == from_collection_id)
            to_index = _index_of(collections, lambda c: c.id == to_collection_id)
            if from_index < 0 or to_index < 0:
                return None
            original = collections[from_index].find_bookmark(bookmark_id)
            if original is None:
                return None
            copy = original.with_new_id(copy_id)
            made.append(copy)
            return _replace(collections, to_index, collections[to_index].add_bookmark(copy))

        if not self._update_collections(change):
            return None
        return made[0]

    def mark_bookmark_as_accessed(self, collection_id: str, bookmark_id: str) -> None:
        def change(collections: Collections) -> Collections | None:
            index = _index_of(collections, lambda c: c.id == collection_id)
            if index < 0:
                return None
            bookmark = collections[index].find_bookmark(bookmark_id)
            if bookmark is None:
                return None
            accessed = bookmark.mark_as_accessed()
            return _replace(collections, index, collections[index].update_bookmark(accessed))

        self._update_collections(change)

    def is_tab_bookmarked(self, tab: TabReference) -> bool:
        return self.find_bookmark_for_tab(tab) is not None

    def find_bookmark_for_tab(self, tab: TabReference) -> tuple[str, str] | None:
        """Return ``(collection_id, bookmark_id)`` of the first structural match.

        Matching compares tab type, title, url and file path -- not bookmark
        ids.  Scan order is collection order, then insertion order.
        """
        for collection in self._collections.value:
            for bookmark in collection.bookmarks:
                if bookmark.tab_config.same_target(tab):
                    return collection.id, bookmark.id
        return None

    # -- Collection operations -------------------------------------------------

    def create_collection(self, name: str) -> BookmarkCollection:
        """Append a new, empty collection.  Names are not required to be unique."""
        collection = BookmarkCollection(name=name)
        self._update_collections(lambda collections: (*collections, collection))
        return collection

    def delete_collection(self, collection_id: str) -> None:
        """Delete a collection.  The favorites collection is silently kept."""

        def change(collections: Collections) -> Collections | None:
            index = _index_of(collections, lambda c: c.id == collection_id)
            if index < 0 or collections[index].is_favorite:
                return None
            return (*collections[:index], *collections[index + 1 :])

        self._update_collections(change)

    def rename_collection(self, collection_id: str, new_name: str) -> None:
        def change(collections: Collections) -> Collections | None:
            index = _index_of(collections, lambda c: c.id == collection_id)
            if index < 0:
                return None
            return _replace(collections, index, collections[index].model_copy(update={"name": new_name}))

        self._update_collections(change)

    def clear_collection(self, collection_id: str) -> None:
        """Remove every bookmark from a collection, keeping the collection."""

        def change(collections: Collections) -> Collections | None:
            index = _index_of(collections, lambda c: c.id == collection_id)
            if index < 0 or not collections[index].bookmarks:
                return None
            return _replace(collections, index, collections[index].model_copy(update={"bookmarks": ()}))

        self._update_collections(change)

    def find_collection(self, collection_id: str) -> BookmarkCollection | None:
        for collection in self._collections.value:
            if collection.id == collection_id:
                return collection
        return None

    def find_collection_by_name(self, name: str) -> BookmarkCollection | None:
        for collection in self._collections.value:
            if collection.name == name:
                return collection
        return None

    def get_favorites_collection(self) -> BookmarkCollection:
        """Return the favorites collection (a fresh empty one if somehow missing)."""
        for collection in self._collections.value:
            if collection.is_favorite:
                return collection
        return BookmarkCollection.favorites()

    # -- Favorite workspace operations -----------------------------------------

    def add_favorite_workspace(self, workspace_id: str, workspace_name: str) -> None:
        """Favorite a workspace.  Adding an already favorited id is a no-op."""
        favorite = FavoriteWorkspace.create(workspace_id, workspace_name)

        def change(current: FavoriteWorkspaces) -> FavoriteWorkspaces | None:
            if any(f.workspace_id == workspace_id for f in current):
                return None
            return (*current, favorite)

        self._update_favorite_workspaces(change)

    def remove_favorite_workspace(self, workspace_id: str) -> None:
        def change(current: FavoriteWorkspaces) -> FavoriteWorkspaces | None:
            kept = tuple(f for f in current if f.workspace_id != workspace_id)
            return kept if len(kept) != len(current) else None

        self._update_favorite_workspaces(change)

    def clear_favorite_workspaces(self) -> None:
        self._update_favorite_workspaces(lambda current: () if current else None)

    def is_favorite(self, workspace_id: str) -> bool:
        return any(f.workspace_id == workspace_id for f in self._favorite_workspaces.value)

    # -- Persistence -----------------------------------------------------------

    def _save_collections(self) -> None:
        self._schedule(self._collections_writer)

    def _save_favorite_workspaces(self) -> None:
        self._schedule(self._favorites_writer)

    def _schedule(self, writer: CoalescingWriter) -> None:
        """Trigger *writer* on the owner loop without blocking the caller.

        Before the initial load lands this only makes sure the load is
        running; the load saves whatever changed once it completes.
        """
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if self._load_task is None:
            if running is None:
                logger.warning("BookmarkManager: not started, {} change kept in memory only", writer.name)
                return
            self.start()
        if not self._loaded:
            return

        if running is self._loop:
            writer.trigger()
            return
        try:
            self._loop.call_soon_threadsafe(writer.trigger)
        except RuntimeError:
            logger.warning("BookmarkManager: owner loop closed, {} change not persisted", writer.name)
