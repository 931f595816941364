"""Background eviction of expired pastes.

The Reaper periodically asks the store to purge expired entries so memory is
reclaimed even for pastes that are never read again. Reads do not depend on
it: the store checks expiry itself on every lookup.
"""

from __future__ import annotations

import asyncio
import logging

from cipherdrop.services.store import EphemeralStore

logger = logging.getLogger(__name__)

MIN_INTERVAL_SECONDS = 0.01


class Reaper:
    """Runs ``EphemeralStore.purge_expired`` on a fixed interval.

    A failed sweep is logged and retried on the next tick; it never stops the
    loop or propagates into the server.
    """

    def __init__(self, store: EphemeralStore, interval_seconds: float) -> None:
        """Initialize the Reaper.

        Args:
            store: Store to sweep
            interval_seconds: Delay between sweeps
        """
        self.store = store
        self.interval = max(MIN_INTERVAL_SECONDS, float(interval_seconds))
        self.sweeps = 0
        self.removed_total = 0
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background sweep loop."""

        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background sweep loop and wait for it to finish."""

        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def sweep_once(self) -> int:
        """Purge expired entries off the event loop and return how many were removed."""
        removed = await asyncio.to_thread(self.store.purge_expired)
        self.sweeps += 1
        self.removed_total += removed
        logger.info(
            "Reaper sweep finished: removed %d expired pastes, %d remain",
            removed,
            len(self.store),
        )
        return removed

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval)
            except TimeoutError:
                pass
            else:
                return

            try:
                await self.sweep_once()
            except Exception:
                logger.exception("Reaper sweep failed; retrying on next tick")
