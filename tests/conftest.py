"""Shared test fixtures.

Everything runs against a temporary bookmarks directory; no test touches
the real ``~/Documents/BOSS``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest

from boss_bookmarks.managers.bookmarks import BookmarkManager
from boss_bookmarks.models.bookmark import Bookmark, BookmarkCollection, TabReference
from boss_bookmarks.models.enums import TabType
from boss_bookmarks.settings import _get_settings_cached
from boss_bookmarks.store.local import LocalBookmarkStore


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Point settings at the temp dir and invalidate the settings cache."""
    monkeypatch.setenv("BOSS_BOOKMARKS_DOCUMENTS_DIR", str(tmp_path / "Documents"))
    monkeypatch.delenv("BOSS_BOOKMARKS_DATA_DIR", raising=False)
    _get_settings_cached.cache_clear()
    yield
    _get_settings_cached.cache_clear()


# ---------------------------------------------------------------------------
# Store and manager
# ---------------------------------------------------------------------------


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "Documents" / "BOSS" / "bookmarks"


@pytest.fixture
def store(data_dir: Path) -> LocalBookmarkStore:
    return LocalBookmarkStore(data_dir)


@pytest.fixture
async def manager(store: LocalBookmarkStore) -> AsyncIterator[BookmarkManager]:
    """A manager whose initial load has completed."""
    m = BookmarkManager(store)
    await m.wait_loaded()
    yield m
    await m.aclose()


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

CREATED = datetime(2026, 1, 15, 10, 30, 30, 123000, tzinfo=UTC)


@pytest.fixture
def github_tab() -> TabReference:
    return TabReference(type=TabType.BROWSER, title="GitHub", url="https://github.com")


@pytest.fixture
def editor_tab() -> TabReference:
    return TabReference(type=TabType.EDITOR, title="main.py", file_path="/home/user/project/main.py")


@pytest.fixture
def terminal_tab() -> TabReference:
    return TabReference(type=TabType.TERMINAL, title="zsh")


@pytest.fixture
def sample_collections() -> list[BookmarkCollection]:
    """A favorites collection plus a populated and an empty regular collection."""
    docs = Bookmark(
        id="bm-docs",
        tab_config=TabReference(
            type=TabType.BROWSER,
            title="Python docs",
            url="https://docs.python.org/3/",
            favicon_cache_key="docs.python.org",
        ),
        tags=frozenset({"python", "reference"}),
        notes="stdlib reference",
        created_at=CREATED,
        last_accessed_at=CREATED,
    )
    readme = Bookmark(
        id="bm-readme",
        tab_config=TabReference(type=TabType.EDITOR, title="README.md", file_path="/repo/README.md"),
        created_at=CREATED,
    )
    return [
        BookmarkCollection(id="fav", name="Favorites", is_favorite=True, bookmarks=(docs,)),
        BookmarkCollection(id="work", name="Work", bookmarks=(readme,)),
        BookmarkCollection(id="empty", name="Later"),
    ]
