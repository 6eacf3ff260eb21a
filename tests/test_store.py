"""Unit tests for LocalBookmarkStore.

No host application required -- uses a temporary directory.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from boss_bookmarks.models.bookmark import BookmarkCollection, FavoriteWorkspace
from boss_bookmarks.store.base import BookmarkStore
from boss_bookmarks.store.local import LocalBookmarkStore


def test_satisfies_protocol(store: LocalBookmarkStore) -> None:
    assert isinstance(store, BookmarkStore)


async def test_ensure_directory_creates_tree(store: LocalBookmarkStore, data_dir: Path) -> None:
    assert not data_dir.exists()
    assert await store.ensure_directory() is True
    assert data_dir.is_dir()
    # Idempotent.
    assert await store.ensure_directory() is True


async def test_ensure_directory_fails_when_path_is_a_file(tmp_path: Path) -> None:
    blocker = tmp_path / "bookmarks"
    blocker.write_text("not a directory")
    store = LocalBookmarkStore(blocker)
    assert await store.ensure_directory() is False


async def test_save_and_load_collections(
    store: LocalBookmarkStore, sample_collections: list[BookmarkCollection]
) -> None:
    assert await store.save_collections(sample_collections) is True
    assert store.collections_path.exists()

    assert await store.load_collections() == sample_collections


async def test_save_and_load_favorite_workspaces(store: LocalBookmarkStore) -> None:
    favorites = [FavoriteWorkspace.create("ws-1", "Backend")]
    assert await store.save_favorite_workspaces(favorites) is True
    assert store.favorite_workspaces_path.name == "favorite-workspaces.json"

    assert await store.load_favorite_workspaces() == favorites


async def test_documents_are_separate_files(
    store: LocalBookmarkStore, sample_collections: list[BookmarkCollection]
) -> None:
    await store.save_collections(sample_collections)
    await store.save_favorite_workspaces([])

    assert json.loads(store.favorite_workspaces_path.read_text(encoding="utf-8")) == []
    assert len(json.loads(store.collections_path.read_text(encoding="utf-8"))) == 3


async def test_load_missing_files_returns_empty(store: LocalBookmarkStore) -> None:
    assert await store.load_collections() == []
    assert await store.load_favorite_workspaces() == []


@pytest.mark.parametrize("content", ["not valid json{{{", '{"wrong": "shape"}'])
async def test_load_corrupt_collections_returns_empty(store: LocalBookmarkStore, data_dir: Path, content: str) -> None:
    data_dir.mkdir(parents=True)
    store.collections_path.write_text(content, encoding="utf-8")
    assert await store.load_collections() == []


async def test_load_corrupt_favorites_returns_empty(store: LocalBookmarkStore, data_dir: Path) -> None:
    data_dir.mkdir(parents=True)
    store.favorite_workspaces_path.write_text("[{", encoding="utf-8")
    assert await store.load_favorite_workspaces() == []


async def test_save_overwrites_whole_file(
    store: LocalBookmarkStore, sample_collections: list[BookmarkCollection]
) -> None:
    await store.save_collections(sample_collections)
    await store.save_collections(sample_collections[:1])

    assert await store.load_collections() == sample_collections[:1]


async def test_save_leaves_no_temp_files(
    store: LocalBookmarkStore, data_dir: Path, sample_collections: list[BookmarkCollection]
) -> None:
    await store.save_collections(sample_collections)
    await store.save_favorite_workspaces([])

    assert sorted(p.name for p in data_dir.iterdir()) == ["collections.json", "favorite-workspaces.json"]


async def test_save_failure_returns_false(tmp_path: Path, sample_collections: list[BookmarkCollection]) -> None:
    blocker = tmp_path / "bookmarks"
    blocker.write_text("not a directory")
    store = LocalBookmarkStore(blocker)

    assert await store.save_collections(sample_collections) is False
    assert await store.save_favorite_workspaces([]) is False


async def test_save_recreates_deleted_directory(
    store: LocalBookmarkStore, data_dir: Path, sample_collections: list[BookmarkCollection]
) -> None:
    await store.save_collections(sample_collections)
    for path in data_dir.iterdir():
        path.unlink()
    data_dir.rmdir()

    assert await store.save_collections(sample_collections) is True
    assert await store.load_collections() == sample_collections


async def test_load_non_utf8_returns_empty(store: LocalBookmarkStore, data_dir: Path) -> None:
    data_dir.mkdir(parents=True)
    store.collections_path.write_bytes(b"\xff\xfe\x00garbage")
    store.favorite_workspaces_path.write_bytes(b"\xff")

    assert await store.load_collections() == []
    assert await store.load_favorite_workspaces() == []


async def test_one_bad_document_leaves_the_other_readable(store: LocalBookmarkStore, data_dir: Path) -> None:
    data_dir.mkdir(parents=True)
    store.collections_path.write_bytes(b"\xff")
    store.favorite_workspaces_path.write_text('[{"workspaceId": "w1"}]', encoding="utf-8")

    assert await store.load_collections() == []
    [favorite] = await store.load_favorite_workspaces()
    assert favorite.workspace_id == "w1"


async def test_load_tolerates_null_fields(store: LocalBookmarkStore, data_dir: Path) -> None:
    data_dir.mkdir(parents=True)
    store.collections_path.write_text(
        json.dumps([
            {
                "id": "work",
                "name": "Work",
                "bookmarks": [{"id": "b1", "tabConfig": {"type": "browser", "title": "Docs"}, "notes": None}],
            }
        ]),
        encoding="utf-8",
    )

    [work] = await store.load_collections()
    assert work.name == "Work"
    assert work.bookmarks[0].notes == ""
