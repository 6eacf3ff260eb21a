"""Search result models handed to the global search host.

Icons and actions are tagged unions keyed on ``kind`` so a host can render
or dispatch them without knowing about bookmarks.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from boss_bookmarks.models.enums import ActionKind, IconKind


class SearchMatchRange(BaseModel):
    """Half-open ``[start, end)`` character range to highlight in the title."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int


# -- Icons -------------------------------------------------------------------


class FaviconIcon(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[IconKind.FAVICON] = IconKind.FAVICON
    cache_key: str


class MaterialIcon(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[IconKind.MATERIAL] = IconKind.MATERIAL
    name: str


SearchResultIcon = Annotated[FaviconIcon | MaterialIcon, Field(discriminator="kind")]


# -- Actions -----------------------------------------------------------------


class OpenUrlAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[ActionKind.OPEN_URL] = ActionKind.OPEN_URL
    url: str


class OpenFileAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[ActionKind.OPEN_FILE] = ActionKind.OPEN_FILE
    path: str


class CustomAction(BaseModel):
    """Provider-defined action; the host routes it back to the provider."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[ActionKind.CUSTOM] = ActionKind.CUSTOM
    action_id: str
    payload: dict[str, str] = Field(default_factory=dict)


SearchResultAction = Annotated[OpenUrlAction | OpenFileAction | CustomAction, Field(discriminator="kind")]


# -- Result ------------------------------------------------------------------


class SearchResult(BaseModel):
    """A ranked, ready-to-render search entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    subtitle: str
    icon: SearchResultIcon
    category: str
    provider_id: str
    action: SearchResultAction
    score: int
    match_ranges: tuple[SearchMatchRange, ...] = ()
    metadata: dict[str, str] = Field(default_factory=dict)
