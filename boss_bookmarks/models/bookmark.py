"""Bookmark, collection and favorite-workspace data models.

All models are frozen: the manager publishes tuples of these objects as
immutable snapshots, and every change produces a new object via
``model_copy``.

Wire format (``collections.json`` / ``favorite-workspaces.json``) uses
camelCase keys and epoch-millisecond timestamps.  Decoding ignores unknown
keys and fills defaults for missing optional ones.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Annotated, Any, get_args

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from boss_bookmarks.models.enums import TabType

FAVORITES_NAME = "Favorites"
"""Reserved name of the permanent favorites collection."""

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def utc_now() -> datetime:
    """Current UTC time truncated to millisecond precision (the wire precision)."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _to_epoch_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (value - _EPOCH) // timedelta(milliseconds=1)


def _from_epoch_ms(value: Any) -> Any:
    # Numbers are always milliseconds; pydantic alone would read small ones as seconds.
    if isinstance(value, int | float) and not isinstance(value, bool):
        try:
            return _EPOCH + timedelta(milliseconds=value)
        except OverflowError as exc:
            msg = f"timestamp out of range: {value}"
            raise ValueError(msg) from exc
    return value


Timestamp = Annotated[
    datetime,
    BeforeValidator(_from_epoch_ms),
    PlainSerializer(_to_epoch_ms, return_type=int, when_used="json"),
]
"""Datetime encoded as epoch milliseconds in JSON.

Validation accepts epoch milliseconds as well as ISO-8601 strings.
"""


def _new_id() -> str:
    return str(uuid.uuid4())


class WireModel(BaseModel):
    """Base for persisted models: frozen, camelCase on the wire, lenient on input."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        """Treat ``null`` like a missing key unless the field is optional.

        Defaults then apply, so one stray ``null`` does not reject a whole document.
        """
        if not isinstance(data, dict):
            return data
        nullable = _nullable_keys(cls)
        return {key: value for key, value in data.items() if value is not None or key in nullable}


def _nullable_keys(model: type[BaseModel]) -> set[str]:
    keys: set[str] = set()
    for name, field in model.model_fields.items():
        if type(None) in get_args(field.annotation):
            keys.update((name, field.alias or name))
    return keys


# -- Tab reference -----------------------------------------------------------


class TabReference(WireModel):
    """The addressable target of a bookmark (URL, file, or terminal session)."""

    type: TabType = TabType.OTHER
    title: str = ""
    url: str | None = None
    file_path: str | None = None
    favicon_cache_key: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_unknown_type(cls, value: Any) -> Any:
        """Map tab types written by newer hosts onto ``other``."""
        if not isinstance(value, str):
            return value
        try:
            return TabType(value)
        except ValueError:
            return TabType.OTHER

    def same_target(self, other: TabReference) -> bool:
        """Structural match used for deduplication: type, title, url and file path.

        Bookmark ids and favicon keys are deliberately not compared.
        """
        return (
            self.type == other.type
            and self.title == other.title
            and self.url == other.url
            and self.file_path == other.file_path
        )


# -- Bookmark ----------------------------------------------------------------


class Bookmark(WireModel):
    id: str = Field(default_factory=_new_id)
    tab_config: TabReference
    tags: frozenset[str] = frozenset()
    notes: str = ""
    created_at: Timestamp = Field(default_factory=utc_now)
    last_accessed_at: Timestamp | None = None

    @field_serializer("tags")
    def _serialize_tags(self, tags: frozenset[str]) -> list[str]:
        return sorted(tags)

    @classmethod
    def create(cls, tab: TabReference, *, tags: Iterable[str] = (), notes: str = "") -> Bookmark:
        """Build a new bookmark for *tab* with a fresh id and creation time."""
        return cls(tab_config=tab, tags=frozenset(tags), notes=notes)

    def mark_as_accessed(self) -> Bookmark:
        return self.model_copy(update={"last_accessed_at": utc_now()})

    def with_new_id(self, new_id: str | None = None) -> Bookmark:
        return self.model_copy(update={"id": new_id or _new_id()})


# -- Collection --------------------------------------------------------------


class BookmarkCollection(WireModel):
    """Named, ordered group of bookmarks.

    Exactly one collection in the manager's state has ``is_favorite=True``.
    """

    id: str = Field(default_factory=_new_id)
    name: str = ""
    is_favorite: bool = False
    bookmarks: tuple[Bookmark, ...] = ()

    @classmethod
    def favorites(cls) -> BookmarkCollection:
        return cls(name=FAVORITES_NAME, is_favorite=True)

    def find_bookmark(self, bookmark_id: str) -> Bookmark | None:
        for bookmark in self.bookmarks:
            if bookmark.id == bookmark_id:
                return bookmark
        return None

    def add_bookmark(self, bookmark: Bookmark) -> BookmarkCollection:
        return self.model_copy(update={"bookmarks": (*self.bookmarks, bookmark)})

    def remove_bookmark(self, bookmark_id: str) -> BookmarkCollection:
        kept = tuple(b for b in self.bookmarks if b.id != bookmark_id)
        return self.model_copy(update={"bookmarks": kept})

    def update_bookmark(self, bookmark: Bookmark) -> BookmarkCollection:
        """Replace the bookmark with the same id, keeping its position."""
        replaced = tuple(bookmark if b.id == bookmark.id else b for b in self.bookmarks)
        return self.model_copy(update={"bookmarks": replaced})


# -- Favorite workspace ------------------------------------------------------


class FavoriteWorkspace(WireModel):
    workspace_id: str
    workspace_name: str = ""
    favorited_at: Timestamp = Field(default_factory=utc_now)

    @classmethod
    def create(cls, workspace_id: str, workspace_name: str) -> FavoriteWorkspace:
        return cls(workspace_id=workspace_id, workspace_name=workspace_name)
