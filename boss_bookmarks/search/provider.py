"""Global-search provider over the manager's current bookmark snapshot.

Each query reads ``collections.value`` once and works on that point-in-time
tuple; the provider keeps no state and mutates nothing.

Scoring (additive across fields):

- title contains the query: +100, +50 more if at index 0, plus up to +30
  scaled by ``len(query) / len(title)`` (truncated);
- URL contains the query: +50, +20 more if at index 0;
- notes contain the query: +20.

Results are sorted by descending score.  Python's sort is stable, so ties
keep collection order, then bookmark insertion order.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from boss_bookmarks.models.bookmark import Bookmark, BookmarkCollection
from boss_bookmarks.models.enums import TabType
from boss_bookmarks.models.search import (
    CustomAction,
    FaviconIcon,
    MaterialIcon,
    OpenFileAction,
    OpenUrlAction,
    SearchMatchRange,
    SearchResult,
)

if TYPE_CHECKING:
    from boss_bookmarks.state import StateFlow

PROVIDER_ID = "bookmarks"
CATEGORY = "Bookmarks"
OPEN_BOOKMARK_ACTION = "open-bookmark"

_TYPE_ICONS = {
    TabType.BROWSER: "Language",
    TabType.EDITOR: "Code",
    TabType.TERMINAL: "Terminal",
}


def calculate_score(
    *,
    title_match: int,
    url_match: int,
    notes_match: int,
    query_length: int,
    title_length: int,
) -> int:
    """Relevance score from match positions (``-1`` means no match)."""
    score = 0

    if title_match >= 0:
        score += 100
        if title_match == 0:
            score += 50
        if title_length > 0:
            score += int(query_length / title_length * 30)

    if url_match >= 0:
        score += 50
        if url_match == 0:
            score += 20

    if notes_match >= 0:
        score += 20

    return score


def _icon_for(bookmark: Bookmark) -> FaviconIcon | MaterialIcon:
    tab = bookmark.tab_config
    if tab.favicon_cache_key is not None:
        return FaviconIcon(cache_key=tab.favicon_cache_key)
    return MaterialIcon(name=_TYPE_ICONS.get(tab.type, "Bookmark"))


def _subtitle_for(bookmark: Bookmark, collection: BookmarkCollection) -> str:
    tab = bookmark.tab_config
    if tab.url is not None:
        return tab.url
    if tab.file_path is not None:
        return tab.file_path
    return collection.name


def _action_for(bookmark: Bookmark, collection: BookmarkCollection) -> OpenUrlAction | OpenFileAction | CustomAction:
    tab = bookmark.tab_config
    match tab.type:
        case TabType.BROWSER:
            return OpenUrlAction(url=tab.url or "about:blank")
        case TabType.EDITOR if tab.file_path is not None:
            return OpenFileAction(path=tab.file_path)
        case _:
            return CustomAction(
                action_id=OPEN_BOOKMARK_ACTION,
                payload={"bookmarkId": bookmark.id, "collectionId": collection.id},
            )


class BookmarkSearchProvider:
    """Makes bookmarks searchable from the host's global search."""

    provider_id = PROVIDER_ID
    display_name = "Bookmarks"

    def __init__(self, collections: StateFlow[Sequence[BookmarkCollection]]) -> None:
        self._collections = collections

    async def search(self, query: str, limit: int) -> list[SearchResult]:
        return self.search_snapshot(self._collections.value, query, limit)

    def search_snapshot(
        self, collections: Sequence[BookmarkCollection], query: str, limit: int
    ) -> list[SearchResult]:
        """Rank bookmarks in *collections* against *query*.  Blank queries match nothing."""
        if not query.strip() or limit <= 0:
            return []

        needle = query.lower()
        results: list[SearchResult] = []
        for collection in collections:
            for bookmark in collection.bookmarks:
                result = self._match(bookmark, collection, needle)
                if result is not None:
                    results.append(result)

        results.sort(key=lambda r: r.score, reverse=True)
        return results[:limit]

    def _match(self, bookmark: Bookmark, collection: BookmarkCollection, needle: str) -> SearchResult | None:
        tab = bookmark.tab_config
        title_match = tab.title.lower().find(needle)
        url_match = tab.url.lower().find(needle) if tab.url is not None else -1
        notes_match = bookmark.notes.lower().find(needle)
        if title_match < 0 and url_match < 0 and notes_match < 0:
            return None

        score = calculate_score(
            title_match=title_match,
            url_match=url_match,
            notes_match=notes_match,
            query_length=len(needle),
            title_length=len(tab.title),
        )
        ranges = (SearchMatchRange(start=title_match, end=title_match + len(needle)),) if title_match >= 0 else ()

        return SearchResult(
            id=bookmark.id,
            title=tab.title,
            subtitle=_subtitle_for(bookmark, collection),
            icon=_icon_for(bookmark),
            category=CATEGORY,
            provider_id=self.provider_id,
            action=_action_for(bookmark, collection),
            score=score,
            match_ranges=ranges,
            metadata={
                "collectionId": collection.id,
                "collectionName": collection.name,
                "tabType": str(tab.type),
            },
        )
