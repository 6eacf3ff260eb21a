"""Local filesystem bookmark store.

Stores both documents as JSON files in one directory, by default::

    ~/Documents/BOSS/bookmarks/collections.json
    ~/Documents/BOSS/bookmarks/favorite-workspaces.json

Uses ``anyio.to_thread.run_sync`` for non-blocking file I/O.

Writes are atomic: data is written to a temporary file in the same directory,
then renamed to the target path.  A reader (or a crash mid-write) never sees
a half-written document.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Callable, Sequence
from functools import partial
from pathlib import Path
from typing import TypeVar

from anyio import to_thread
from loguru import logger

from boss_bookmarks.models.bookmark import BookmarkCollection, FavoriteWorkspace
from boss_bookmarks.store.base import COLLECTIONS_FILE, FAVORITE_WORKSPACES_FILE
from boss_bookmarks.store.serializer import (
    MalformedDataError,
    deserialize_collections,
    deserialize_favorite_workspaces,
    serialize_collections,
    serialize_favorite_workspaces,
)

T = TypeVar("T")


class LocalBookmarkStore:
    """Local filesystem implementation of the BookmarkStore protocol."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def collections_path(self) -> Path:
        return self._directory / COLLECTIONS_FILE

    @property
    def favorite_workspaces_path(self) -> Path:
        return self._directory / FAVORITE_WORKSPACES_FILE

    # -- Directory -------------------------------------------------------------

    async def ensure_directory(self) -> bool:
        return await to_thread.run_sync(partial(_ensure_directory, self._directory))

    # -- Write -----------------------------------------------------------------

    async def save_collections(self, collections: Sequence[BookmarkCollection]) -> bool:
        data = serialize_collections(collections)
        return await to_thread.run_sync(partial(_save_document, self.collections_path, data))

    async def save_favorite_workspaces(self, favorites: Sequence[FavoriteWorkspace]) -> bool:
        data = serialize_favorite_workspaces(favorites)
        return await to_thread.run_sync(partial(_save_document, self.favorite_workspaces_path, data))

    # -- Read ------------------------------------------------------------------

    async def load_collections(self) -> list[BookmarkCollection]:
        return await to_thread.run_sync(partial(_load_document, self.collections_path, deserialize_collections))

    async def load_favorite_workspaces(self) -> list[FavoriteWorkspace]:
        return await to_thread.run_sync(
            partial(_load_document, self.favorite_workspaces_path, deserialize_favorite_workspaces)
        )


# -- Sync helpers (run in thread pool) -----------------------------------------


def _ensure_directory(path: Path) -> bool:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.opt(exception=exc).warning("Error ensuring bookmarks directory {}", path)
        return False
    return path.is_dir()


def _save_document(path: Path, data: str) -> bool:
    if not _ensure_directory(path.parent):
        return False
    try:
        _atomic_write(path, data)
    except OSError as exc:
        logger.opt(exception=exc).warning("Error saving {}", path.name)
        return False
    logger.debug("Saved {} ({} bytes)", path, len(data))
    return True


def _load_document(path: Path, decode: Callable[[bytes], list[T]]) -> list[T]:
    try:
        if not path.exists():
            return []
        return decode(path.read_bytes())
    except (OSError, MalformedDataError) as exc:
        logger.opt(exception=exc).warning("Error loading {}", path.name)
        return []


def _atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + rename.

    The temp file is created in the same directory so ``os.replace`` is
    atomic on POSIX and overwrites the target on Windows.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up temp file on any failure.
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise
