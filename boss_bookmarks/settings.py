"""Engine configuration loaded from BOSS_BOOKMARKS_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BookmarkSettings(BaseSettings):
    """Bookmarks engine settings.

    All fields are read from environment variables with the ``BOSS_BOOKMARKS_``
    prefix.  For example, ``BOSS_BOOKMARKS_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOSS_BOOKMARKS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    log_file: Path | None = None
    """Optional rotating log file used by the CLI in addition to stderr."""

    # -- Data storage ----------------------------------------------------------
    documents_dir: Path = Field(default_factory=lambda: Path.home() / "Documents")
    """Well-known user documents location."""

    app_dir: str = "BOSS"
    """Application folder under ``documents_dir``."""

    data_dir: Path | None = None
    """Explicit bookmarks directory.  Overrides ``documents_dir``/``app_dir`` when set."""

    # -- Search ----------------------------------------------------------------
    search_limit: int = 20

    # -- Helpers ---------------------------------------------------------------

    @property
    def bookmarks_dir(self) -> Path:
        """Directory holding ``collections.json`` and ``favorite-workspaces.json``."""
        if self.data_dir is not None:
            return self.data_dir.expanduser()
        return self.documents_dir.expanduser() / self.app_dir / "bookmarks"


def get_settings() -> BookmarkSettings:
    """Return a cached settings instance.

    Call ``_get_settings_cached.cache_clear()`` in tests to force a re-read
    after overriding env vars.
    """
    return _get_settings_cached()


@lru_cache(maxsize=1)
def _get_settings_cached() -> BookmarkSettings:
    return BookmarkSettings()
