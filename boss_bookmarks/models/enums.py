"""Shared enumerations used across the bookmarks engine."""

from __future__ import annotations

from enum import StrEnum

# -- Tabs --------------------------------------------------------------------


class TabType(StrEnum):
    """Kind of host tab a bookmark points at."""

    BROWSER = "browser"
    EDITOR = "editor"
    TERMINAL = "terminal"
    OTHER = "other"


# -- Search ------------------------------------------------------------------


class IconKind(StrEnum):
    FAVICON = "favicon"
    MATERIAL = "material"


class ActionKind(StrEnum):
    """How the search host should act on a selected result."""

    OPEN_URL = "open_url"
    OPEN_FILE = "open_file"
    CUSTOM = "custom"
