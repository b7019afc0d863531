"""
Expiry Sweeper Worker

Periodically deletes expired URL records from the store.

Expired records are already invisible to public lookups, so sweeping only
reclaims space; running it late, or never, does not change what users see.
The store's DELETE is guarded by expires_at <= now, so a sweep can run
alongside lookups and click increments without touching live records.

Usage:
    python -m quickurl.workers.sweeper
"""

import asyncio
import logging
import signal
import sys

from quickurl.config import settings
from quickurl.exceptions import StorageUnavailableError
from quickurl.store.strategies import URLStoreStrategy

logger = logging.getLogger(__name__)


class SweepWorker:
    """
    Periodic expiry sweeper.

    Store calls are synchronous, so each sweep runs in a worker thread
    to keep the event loop (e.g. the API's) responsive.
    """

    def __init__(self, store: URLStoreStrategy, interval: float = 60):
        """
        Initialize worker with dependencies.

        Args:
            store: URL record store to sweep
            interval: Seconds between sweeps
        """
        if interval <= 0:
            raise ValueError(f"Sweep interval must be positive, got {interval}")
        self.store = store
        self.interval = interval
        self.running = False
        self.removed_count = 0
        self._stop_event = asyncio.Event()

    async def run_once(self) -> int:
        """Run a single sweep and return the number of removed records"""
        removed = await asyncio.to_thread(self.store.sweep)
        self.removed_count += removed
        if removed:
            logger.info("Swept %d expired records (total %d)", removed, self.removed_count)
        return removed

    async def start(self, handle_signals: bool = False):
        """
        Sweep every `interval` seconds until stop() is called.

        Args:
            handle_signals: Install SIGINT/SIGTERM handlers (standalone process only)
        """
        # A stop() issued before the task got scheduled still counts
        self.running = not self._stop_event.is_set()
        logger.info("Sweep worker started (interval %ss)", self.interval)

        if handle_signals:
            loop = asyncio.get_running_loop()
            for signum in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(signum, self._signal_handler, signum)

        while self.running:
            try:
                await self.run_once()
            except StorageUnavailableError as e:
                # Next tick retries
                logger.warning("Sweep skipped, storage unavailable: %s", e)

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

        logger.info("Sweep worker stopped")

    def _signal_handler(self, signum):
        """Handle signals for graceful shutdown"""
        logger.info("Received signal %s, shutting down", signum)
        self.stop()

    def stop(self):
        """Stop the worker after the current sweep"""
        self.running = False
        self._stop_event.set()


async def main():
    """Main entry point for the standalone sweeper."""
    from quickurl.store.factory import URLStoreFactory, URLStoreBackend
    from quickurl.utils.logging import setup_logging

    setup_logging()
    interval = settings.sweep_interval_seconds or 60
    logger.info(
        "QuickURL sweeper: environment=%s store=%s interval=%ss",
        settings.environment, settings.store_backend, interval
    )

    store = URLStoreFactory.create(URLStoreBackend(settings.store_backend))
    worker = SweepWorker(store=store, interval=interval)

    try:
        await worker.start(handle_signals=True)
    except Exception:
        logger.exception("Fatal error in sweep worker")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
