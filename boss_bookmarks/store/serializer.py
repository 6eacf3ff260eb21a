"""JSON encoding and decoding for the persisted bookmark documents.

Output is pretty-printed with camelCase keys.  Decoding ignores unknown
keys and substitutes defaults for missing optional ones, so files written by
older or newer versions still load.  Anything that is not valid JSON, or
does not fit the schema at all, raises ``MalformedDataError``.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import TypeAdapter, ValidationError

from boss_bookmarks.models.bookmark import BookmarkCollection, FavoriteWorkspace


class MalformedDataError(ValueError):
    """Raised when a persisted document cannot be decoded."""


_collections_adapter = TypeAdapter(list[BookmarkCollection])
_favorites_adapter = TypeAdapter(list[FavoriteWorkspace])


def _encode(adapter: TypeAdapter, items: Sequence) -> str:
    return adapter.dump_json(list(items), indent=2, by_alias=True).decode("utf-8")


def _decode(adapter: TypeAdapter, raw: str | bytes, what: str) -> list:
    try:
        return adapter.validate_json(raw)
    except ValidationError as exc:
        msg = f"Invalid {what} document: {exc.error_count()} error(s)"
        raise MalformedDataError(msg) from exc
    except UnicodeDecodeError as exc:
        msg = f"Invalid {what} document: not UTF-8"
        raise MalformedDataError(msg) from exc


def serialize_collections(collections: Sequence[BookmarkCollection]) -> str:
    return _encode(_collections_adapter, collections)


def deserialize_collections(raw: str | bytes) -> list[BookmarkCollection]:
    """Decode a collections document.  Raises ``MalformedDataError``."""
    return _decode(_collections_adapter, raw, "collections")


def serialize_favorite_workspaces(favorites: Sequence[FavoriteWorkspace]) -> str:
    return _encode(_favorites_adapter, favorites)


def deserialize_favorite_workspaces(raw: str | bytes) -> list[FavoriteWorkspace]:
    """Decode a favorite-workspaces document.  Raises ``MalformedDataError``."""
    return _decode(_favorites_adapter, raw, "favorite workspaces")
