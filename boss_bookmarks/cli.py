import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import click

from boss_bookmarks.log import setup_logging
from boss_bookmarks.managers.bookmarks import BookmarkManager
from boss_bookmarks.models.bookmark import Bookmark, BookmarkCollection, TabReference
from boss_bookmarks.models.enums import TabType
from boss_bookmarks.search.provider import BookmarkSearchProvider
from boss_bookmarks.settings import get_settings
from boss_bookmarks.store.local import LocalBookmarkStore

T = TypeVar("T")


def _run(data_dir: Path, operation: Callable[[BookmarkManager], Awaitable[T]]) -> T:
    """Load the manager, run *operation*, and wait for its saves to land."""

    async def _main() -> T:
        manager = BookmarkManager(LocalBookmarkStore(data_dir))
        await manager.wait_loaded()
        try:
            return await operation(manager)
        finally:
            await manager.aclose()

    return asyncio.run(_main())


def _format_collection(collection: BookmarkCollection) -> str:
    marker = " *" if collection.is_favorite else ""
    return f"{collection.id}  {collection.name}{marker} ({len(collection.bookmarks)})"


def _format_bookmark(bookmark: Bookmark) -> str:
    tab = bookmark.tab_config
    target = tab.url or tab.file_path or ""
    tags = f"  [{', '.join(sorted(bookmark.tags))}]" if bookmark.tags else ""
    return f"  {bookmark.id}  {tab.type:<8} {tab.title}  {target}{tags}".rstrip()


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Bookmarks directory (default: from BOSS_BOOKMARKS_DATA_DIR or ~/Documents/BOSS/bookmarks).",
)
@click.option("--log-level", default=None, help="Log level (default: from BOSS_BOOKMARKS_LOG_LEVEL or INFO).")
@click.pass_context
def main(ctx: click.Context, data_dir: Path | None, log_level: str | None) -> None:
    """BOSS bookmarks - manage bookmark collections and favorite workspaces."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level, settings.log_file)
    ctx.obj = {"data_dir": data_dir or settings.bookmarks_dir, "settings": settings}


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


@main.command("collections")
@click.pass_obj
def list_collections(obj: dict) -> None:
    """List collections with their bookmark counts (* marks Favorites)."""

    async def op(manager: BookmarkManager) -> None:
        for collection in manager.collections.value:
            click.echo(_format_collection(collection))

    _run(obj["data_dir"], op)


@main.command("create-collection")
@click.argument("name")
@click.pass_obj
def create_collection(obj: dict, name: str) -> None:
    """Create an empty collection."""

    async def op(manager: BookmarkManager) -> None:
        collection = manager.create_collection(name)
        click.echo(f"Created collection: {collection.name} ({collection.id})")

    _run(obj["data_dir"], op)


@main.command("delete-collection")
@click.argument("collection_id")
@click.pass_obj
def delete_collection(obj: dict, collection_id: str) -> None:
    """Delete a collection.  The Favorites collection cannot be deleted."""

    async def op(manager: BookmarkManager) -> None:
        collection = manager.find_collection(collection_id)
        if collection is None:
            msg = f"No collection with id '{collection_id}'"
            raise click.ClickException(msg)
        if collection.is_favorite:
            msg = f"The '{collection.name}' collection cannot be deleted"
            raise click.ClickException(msg)
        manager.delete_collection(collection_id)
        click.echo(f"Deleted collection: {collection.name}")

    _run(obj["data_dir"], op)


@main.command("rename-collection")
@click.argument("collection_id")
@click.argument("new_name")
@click.pass_obj
def rename_collection(obj: dict, collection_id: str, new_name: str) -> None:
    """Rename a collection."""

    async def op(manager: BookmarkManager) -> None:
        if manager.find_collection(collection_id) is None:
            msg = f"No collection with id '{collection_id}'"
            raise click.ClickException(msg)
        manager.rename_collection(collection_id, new_name)
        click.echo(f"Collection renamed to {new_name}")

    _run(obj["data_dir"], op)


# ---------------------------------------------------------------------------
# Bookmarks
# ---------------------------------------------------------------------------


@main.command("list")
@click.argument("collection_name", required=False)
@click.pass_obj
def list_bookmarks(obj: dict, collection_name: str | None) -> None:
    """List bookmarks, optionally only those of COLLECTION_NAME."""

    async def op(manager: BookmarkManager) -> None:
        collections = manager.collections.value
        if collection_name is not None:
            collections = tuple(c for c in collections if c.name == collection_name)
            if not collections:
                msg = f"No collection named '{collection_name}'"
                raise click.ClickException(msg)
        for collection in collections:
            click.echo(_format_collection(collection))
            for bookmark in collection.bookmarks:
                click.echo(_format_bookmark(bookmark))

    _run(obj["data_dir"], op)


@main.command("add")
@click.argument("collection_name")
@click.argument("title")
@click.option("--url", default=None, help="Page URL (browser bookmarks).")
@click.option("--file", "file_path", default=None, help="File path (editor bookmarks).")
@click.option(
    "--type",
    "tab_type",
    type=click.Choice([t.value for t in TabType]),
    default=None,
    help="Tab type (default: browser with --url, editor with --file, else other).",
)
@click.option("--tag", "tags", multiple=True, help="Tag; may be repeated.")
@click.option("--notes", default="", help="Free-form notes.")
@click.pass_obj
def add_bookmark(
    obj: dict,
    collection_name: str,
    title: str,
    url: str | None,
    file_path: str | None,
    tab_type: str | None,
    tags: tuple[str, ...],
    notes: str,
) -> None:
    """Bookmark a tab into COLLECTION_NAME."""
    if tab_type is None:
        tab_type = TabType.BROWSER if url else TabType.EDITOR if file_path else TabType.OTHER
    tab = TabReference(type=TabType(tab_type), title=title, url=url, file_path=file_path)

    async def op(manager: BookmarkManager) -> None:
        if manager.find_collection_by_name(collection_name) is None:
            msg = f"No collection named '{collection_name}'"
            raise click.ClickException(msg)
        existing = manager.find_bookmark_for_tab(tab)
        if existing is not None:
            click.echo(f"Already bookmarked ({existing[1]})")
            return
        bookmark = Bookmark.create(tab, tags=tags, notes=notes)
        manager.add_bookmark(collection_name, bookmark)
        click.echo(f"Bookmark added to {collection_name} ({bookmark.id})")

    _run(obj["data_dir"], op)


@main.command("remove")
@click.argument("collection_id")
@click.argument("bookmark_id")
@click.pass_obj
def remove_bookmark(obj: dict, collection_id: str, bookmark_id: str) -> None:
    """Remove a bookmark from a collection."""

    async def op(manager: BookmarkManager) -> None:
        collection = manager.find_collection(collection_id)
        if collection is None or collection.find_bookmark(bookmark_id) is None:
            msg = f"No bookmark '{bookmark_id}' in collection '{collection_id}'"
            raise click.ClickException(msg)
        manager.remove_bookmark(collection_id, bookmark_id)
        click.echo("Bookmark removed")

    _run(obj["data_dir"], op)


@main.command("move")
@click.argument("bookmark_id")
@click.argument("from_collection_id")
@click.argument("to_collection_id")
@click.option("--copy", "copy_only", is_flag=True, default=False, help="Copy instead of moving.")
@click.pass_obj
def move_bookmark(obj: dict, bookmark_id: str, from_collection_id: str, to_collection_id: str, copy_only: bool) -> None:
    """Move (or copy) a bookmark between collections."""

    async def op(manager: BookmarkManager) -> None:
        source = manager.find_collection(from_collection_id)
        if source is None or source.find_bookmark(bookmark_id) is None:
            msg = f"No bookmark '{bookmark_id}' in collection '{from_collection_id}'"
            raise click.ClickException(msg)
        if manager.find_collection(to_collection_id) is None:
            msg = f"No collection with id '{to_collection_id}'"
            raise click.ClickException(msg)
        if copy_only:
            copy = manager.copy_bookmark(bookmark_id, from_collection_id, to_collection_id)
            click.echo(f"Bookmark copied ({copy.id if copy else bookmark_id})")
        else:
            manager.move_bookmark(bookmark_id, from_collection_id, to_collection_id)
            click.echo("Bookmark moved")

    _run(obj["data_dir"], op)


@main.command("search")
@click.argument("query")
@click.option("--limit", default=None, type=int, help="Maximum results (default: from BOSS_BOOKMARKS_SEARCH_LIMIT).")
@click.pass_obj
def search(obj: dict, query: str, limit: int | None) -> None:
    """Search bookmark titles, URLs and notes."""
    limit = limit if limit is not None else obj["settings"].search_limit

    async def op(manager: BookmarkManager) -> None:
        provider = BookmarkSearchProvider(manager.collections)
        results = await provider.search(query, limit)
        if not results:
            click.echo("No matches")
            return
        for result in results:
            click.echo(f"{result.score:>4}  {result.title}  {result.subtitle}")

    _run(obj["data_dir"], op)


# ---------------------------------------------------------------------------
# Favorite workspaces
# ---------------------------------------------------------------------------


@main.command("favorites")
@click.pass_obj
def list_favorites(obj: dict) -> None:
    """List favorite workspaces."""

    async def op(manager: BookmarkManager) -> None:
        for favorite in manager.favorite_workspaces.value:
            click.echo(f"{favorite.workspace_id}  {favorite.workspace_name}")

    _run(obj["data_dir"], op)


@main.command("favorite")
@click.argument("workspace_id")
@click.argument("workspace_name")
@click.pass_obj
def add_favorite(obj: dict, workspace_id: str, workspace_name: str) -> None:
    """Add a workspace to favorites."""

    async def op(manager: BookmarkManager) -> None:
        manager.add_favorite_workspace(workspace_id, workspace_name)
        click.echo(f"Added to favorites: {workspace_name}")

    _run(obj["data_dir"], op)


@main.command("unfavorite")
@click.argument("workspace_id")
@click.pass_obj
def remove_favorite(obj: dict, workspace_id: str) -> None:
    """Remove a workspace from favorites."""

    async def op(manager: BookmarkManager) -> None:
        manager.remove_favorite_workspace(workspace_id)
        click.echo("Removed from favorites")

    _run(obj["data_dir"], op)


if __name__ == "__main__":
    main()
