"""Opening bookmarks through the host's split view.

The engine only supplies tab references; the host performs the actual
navigation via ``SplitViewOperations``.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from loguru import logger

from boss_bookmarks.models.enums import TabType

if TYPE_CHECKING:
    from boss_bookmarks.collaborators import BookmarkDataProvider, SplitViewOperations
    from boss_bookmarks.models.bookmark import Bookmark, TabReference


def open_tab(tab: TabReference, split_view: SplitViewOperations) -> bool:
    """Open *tab* as a new tab of the matching kind.  Returns whether anything was opened."""
    match tab.type:
        case TabType.BROWSER:
            split_view.open_url_in_active_panel(tab.url or "about:blank", tab.title, force_new_tab=True)
            return True
        case TabType.EDITOR:
            if not tab.file_path:
                return False
            file_name = tab.file_path.rsplit("/", 1)[-1]
            split_view.open_file_in_active_panel(tab.file_path, file_name)
            return True
        case TabType.TERMINAL:
            split_view.add_terminal_tab(f"terminal-{random.getrandbits(63)}", tab.title)
            return True
        case _:
            return False


class BookmarkNavigator:
    """Opens bookmarks and records the access on the owning collection."""

    def __init__(self, bookmarks: BookmarkDataProvider, split_view: SplitViewOperations | None) -> None:
        self._bookmarks = bookmarks
        self._split_view = split_view

    def open_bookmark(self, bookmark: Bookmark) -> bool:
        """Mark *bookmark* as accessed and open it.  No-op without a split view."""
        if self._split_view is None:
            return False

        for collection in self._bookmarks.collections.value:
            if any(b.id == bookmark.id for b in collection.bookmarks):
                self._bookmarks.mark_bookmark_as_accessed(collection.id, bookmark.id)
                break

        opened = open_tab(bookmark.tab_config, self._split_view)
        if not opened:
            logger.debug("Nothing to open for bookmark {} (type={})", bookmark.id, bookmark.tab_config.type)
        return opened
