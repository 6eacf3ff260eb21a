"""State owners for the bookmarks engine.

``BookmarkManager`` holds the authoritative in-memory snapshots and is the
only component that mutates them.  Invalid ids or names are silent no-ops,
never exceptions -- user-facing feedback belongs to the calling layer.
"""

from boss_bookmarks.managers.bookmarks import BookmarkManager
from boss_bookmarks.managers.writer import CoalescingWriter

__all__ = ["BookmarkManager", "CoalescingWriter"]
