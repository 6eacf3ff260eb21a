"""Background save queue for a single document.

Every mutation of the manager's state calls ``trigger()``.  The writer runs
at most one save task at a time; triggers that arrive while a save is in
flight only mark the document dirty, and the running task loops to write
again.  Each save reads the *current* snapshot when it starts, so the last
write to disk always carries the latest in-memory state and saves to the
same file never interleave.

Failures are logged by the store and not retried.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from loguru import logger

T = TypeVar("T")


class CoalescingWriter(Generic[T]):
    """Serialises background saves of one document on an asyncio loop."""

    def __init__(self, name: str, snapshot: Callable[[], T], save: Callable[[T], Awaitable[bool]]) -> None:
        self.name = name
        self._snapshot = snapshot
        self._save = save
        self._dirty = False
        self._task: asyncio.Task[None] | None = None
        self._idle = asyncio.Event()
        self._idle.set()  # Starts idle (nothing to write).
        self.saves = 0
        self.failures = 0

    @property
    def pending(self) -> bool:
        return self._task is not None

    def trigger(self) -> None:
        """Request a save.  Must be called on the owning event loop."""
        self._dirty = True
        if self._task is None:
            self._idle.clear()
            self._task = asyncio.get_running_loop().create_task(self._run(), name=f"save-{self.name}")

    async def wait_idle(self) -> None:
        """Wait until no save is pending or running."""
        await self._idle.wait()

    async def _run(self) -> None:
        try:
            while self._dirty:
                self._dirty = False
                try:
                    ok = await self._save(self._snapshot())
                except Exception:
                    logger.exception("Writer {}: save raised", self.name)
                    ok = False
                self.saves += 1
                if not ok:
                    self.failures += 1
                    logger.warning("Writer {}: save failed, keeping in-memory state only", self.name)
        finally:
            self._task = None
            self._idle.set()
