"""Unit tests for the JSON serializer."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import pytest

from boss_bookmarks.models.bookmark import BookmarkCollection, FavoriteWorkspace
from boss_bookmarks.models.enums import TabType
from boss_bookmarks.store.serializer import (
    MalformedDataError,
    deserialize_collections,
    deserialize_favorite_workspaces,
    serialize_collections,
    serialize_favorite_workspaces,
)


def test_collections_roundtrip(sample_collections: list[BookmarkCollection]) -> None:
    raw = serialize_collections(sample_collections)
    assert deserialize_collections(raw) == sample_collections


def test_empty_list_roundtrip() -> None:
    assert deserialize_collections(serialize_collections([])) == []
    assert deserialize_favorite_workspaces(serialize_favorite_workspaces([])) == []


def test_collection_without_bookmarks_roundtrip() -> None:
    collections = [BookmarkCollection(id="c1", name="Empty")]
    assert deserialize_collections(serialize_collections(collections)) == collections


def test_wire_format_uses_camel_case_and_epoch_millis(sample_collections: list[BookmarkCollection]) -> None:
    data = json.loads(serialize_collections(sample_collections))

    favorites = data[0]
    assert favorites["isFavorite"] is True
    bookmark = favorites["bookmarks"][0]
    assert set(bookmark) == {"id", "tabConfig", "tags", "notes", "createdAt", "lastAccessedAt"}
    assert bookmark["tabConfig"]["faviconCacheKey"] == "docs.python.org"
    assert bookmark["tabConfig"]["type"] == "browser"
    assert bookmark["tags"] == ["python", "reference"]  # sorted
    assert isinstance(bookmark["createdAt"], int)
    assert bookmark["createdAt"] == 1768473030123


def test_output_is_pretty_printed(sample_collections: list[BookmarkCollection]) -> None:
    raw = serialize_collections(sample_collections)
    assert raw.startswith("[\n  {")


def test_encoding_is_deterministic(sample_collections: list[BookmarkCollection]) -> None:
    assert serialize_collections(sample_collections) == serialize_collections(list(sample_collections))


def test_unknown_fields_are_ignored() -> None:
    raw = json.dumps([
        {
            "id": "c1",
            "name": "Work",
            "isFavorite": False,
            "color": "#ff0000",
            "bookmarks": [
                {
                    "id": "b1",
                    "tabConfig": {"type": "browser", "title": "Example", "url": "https://example.com", "pinned": True},
                    "rating": 5,
                }
            ],
        }
    ])
    [collection] = deserialize_collections(raw)
    assert collection.name == "Work"
    assert collection.bookmarks[0].tab_config.url == "https://example.com"


def test_missing_optional_fields_get_defaults() -> None:
    raw = json.dumps([{"name": "Old", "bookmarks": [{"tabConfig": {"title": "Legacy"}}]}])
    [collection] = deserialize_collections(raw)

    assert collection.id  # generated
    assert collection.is_favorite is False
    bookmark = collection.bookmarks[0]
    assert bookmark.tab_config.type == TabType.OTHER
    assert bookmark.tags == frozenset()
    assert bookmark.notes == ""
    assert bookmark.last_accessed_at is None


def test_iso_timestamps_accepted() -> None:
    raw = json.dumps([{"workspaceId": "ws-1", "workspaceName": "A", "favoritedAt": "2026-01-15T10:30:30.123Z"}])
    [favorite] = deserialize_favorite_workspaces(raw)
    assert favorite.favorited_at.year == 2026
    assert favorite.favorited_at.microsecond == 123000


def test_favorite_workspaces_roundtrip() -> None:
    favorites = [FavoriteWorkspace.create("ws-1", "Backend"), FavoriteWorkspace.create("ws-2", "Frontend")]
    raw = serialize_favorite_workspaces(favorites)
    assert json.loads(raw)[0]["workspaceId"] == "ws-1"
    assert deserialize_favorite_workspaces(raw) == favorites


def test_non_ascii_is_preserved() -> None:
    collections = [BookmarkCollection(id="c1", name="Lesezeichen äöü")]
    raw = serialize_collections(collections)
    assert "äöü" in raw
    assert deserialize_collections(raw) == collections


@pytest.mark.parametrize("raw", ["not valid json{{{", "{}", '[{"bookmarks": "nope"}]', ""])
def test_malformed_collections_raise(raw: str) -> None:
    with pytest.raises(MalformedDataError):
        deserialize_collections(raw)


def test_malformed_favorites_raise() -> None:
    with pytest.raises(MalformedDataError):
        deserialize_favorite_workspaces('[{"workspaceName": "no id"}]')


def test_null_fields_fall_back_to_defaults() -> None:
    raw = json.dumps([
        {
            "id": "c1",
            "name": None,
            "isFavorite": None,
            "bookmarks": [
                {
                    "id": "b1",
                    "tabConfig": {"type": "browser", "title": None, "url": "https://example.com", "filePath": None},
                    "tags": None,
                    "notes": None,
                    "createdAt": 1768473030123,
                    "lastAccessedAt": None,
                }
            ],
        }
    ])
    [collection] = deserialize_collections(raw)

    assert collection.name == ""
    assert collection.is_favorite is False
    bookmark = collection.bookmarks[0]
    assert bookmark.notes == ""
    assert bookmark.tags == frozenset()
    assert bookmark.tab_config.title == ""
    assert bookmark.tab_config.url == "https://example.com"
    assert bookmark.tab_config.file_path is None
    assert bookmark.last_accessed_at is None


def test_null_required_field_is_still_malformed() -> None:
    with pytest.raises(MalformedDataError):
        deserialize_favorite_workspaces('[{"workspaceId": null, "workspaceName": "A"}]')


def test_non_utf8_bytes_raise_malformed() -> None:
    with pytest.raises(MalformedDataError):
        deserialize_collections(b"\xff\xfe[")


@pytest.mark.parametrize(
    "moment",
    [
        datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC),
        datetime(1970, 3, 1, 12, 0, 0, 500000, tzinfo=UTC),
        datetime(2026, 1, 15, 10, 30, 30, 123000, tzinfo=UTC),
    ],
)
def test_timestamps_roundtrip_as_milliseconds(moment: datetime) -> None:
    favorites = [FavoriteWorkspace(workspace_id="ws-1", favorited_at=moment)]
    raw = serialize_favorite_workspaces(favorites)

    assert json.loads(raw)[0]["favoritedAt"] == (moment - datetime(1970, 1, 1, tzinfo=UTC)) // timedelta(
        milliseconds=1
    )
    assert deserialize_favorite_workspaces(raw)[0].favorited_at == moment


def test_small_epoch_values_are_milliseconds() -> None:
    [favorite] = deserialize_favorite_workspaces('[{"workspaceId": "ws-1", "favoritedAt": 1000}]')
    assert favorite.favorited_at == datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)


def test_out_of_range_timestamp_is_malformed() -> None:
    with pytest.raises(MalformedDataError):
        deserialize_favorite_workspaces('[{"workspaceId": "ws-1", "favoritedAt": 1e300}]')
