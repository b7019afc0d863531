"""
Tests for the expiry sweep worker.
"""
import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from quickurl.exceptions import StorageUnavailableError
from quickurl.store.strategies import InMemoryURLStore
from quickurl.workers.sweeper import SweepWorker


class FlakyStore(InMemoryURLStore):
    """Store whose first sweep fails as if the database were unreachable"""

    def __init__(self):
        super().__init__()
        self.sweeps = 0

    def sweep(self, now=None):
        self.sweeps += 1
        if self.sweeps == 1:
            raise StorageUnavailableError("database is locked")
        return super().sweep(now)


def add_expired(store, count):
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    for index in range(count):
        store.create(f"old{index}", "https://example.com", ttl=60, now=past)


class TestSweepWorker:
    """Test the periodic sweeper"""

    def test_run_once(self, url_store):
        add_expired(url_store, 3)
        live = url_store.create("live", "https://example.com", ttl=3600)
        worker = SweepWorker(store=url_store, interval=1)

        assert asyncio.run(worker.run_once()) == 3
        assert asyncio.run(worker.run_once()) == 0
        assert worker.removed_count == 3
        assert url_store.lookup_by_token("live") == live

    def test_start_until_stopped(self, memory_store):
        add_expired(memory_store, 2)
        worker = SweepWorker(store=memory_store, interval=0.01)

        async def run():
            task = asyncio.create_task(worker.start())
            await asyncio.sleep(0.05)
            worker.stop()
            await asyncio.wait_for(task, timeout=1)

        asyncio.run(run())

        assert worker.running is False
        assert worker.removed_count == 2

    def test_stop_before_first_sweep(self, memory_store):
        """stop() right after scheduling the task ends the worker without sweeping"""
        add_expired(memory_store, 1)
        worker = SweepWorker(store=memory_store, interval=0.01)

        async def run():
            task = asyncio.create_task(worker.start())
            worker.stop()
            await asyncio.wait_for(task, timeout=1)

        asyncio.run(run())

        assert worker.running is False
        assert worker.removed_count == 0

    def test_survives_storage_errors(self):
        store = FlakyStore()
        add_expired(store, 1)
        worker = SweepWorker(store=store, interval=0.01)

        async def run():
            task = asyncio.create_task(worker.start())
            while store.sweeps < 2:
                await asyncio.sleep(0.01)
            worker.stop()
            await asyncio.wait_for(task, timeout=1)

        asyncio.run(run())

        assert worker.removed_count == 1

    def test_rejects_non_positive_interval(self, memory_store):
        with pytest.raises(ValueError):
            SweepWorker(store=memory_store, interval=0)
