"""
Tests for pacing primitives.
"""

import asyncio
import time

import pytest

from ratebatch.core.concurrency.pacing import compute_progress, delay_per_item, pause


class TestProgressArithmetic:
    """Progress is the floored integer percentage."""

    def test_compute_progress(self):
        assert compute_progress(1, 3) == 33
        assert compute_progress(2, 3) == 66
        assert compute_progress(3, 3) == 100
        assert compute_progress(1, 7) == 14
        assert compute_progress(0, 5) == 0

    def test_compute_progress_without_items(self):
        assert compute_progress(0, 0) == 0

    def test_delay_per_item(self):
        assert delay_per_item(1000, 4) == 250
        assert delay_per_item(1000, 3) == 333
        assert delay_per_item(5, 10) == 0


class TestPause:
    """Pause suspends the task and can be interrupted."""

    @pytest.mark.asyncio
    async def test_pause_waits(self):
        start = time.monotonic()
        await pause(30)
        assert time.monotonic() - start >= 0.025

    @pytest.mark.asyncio
    async def test_zero_pause_returns(self):
        await asyncio.wait_for(pause(0), timeout=1)

    @pytest.mark.asyncio
    async def test_pause_is_cancellable(self):
        task = asyncio.ensure_future(pause(10_000))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert task.cancelled()
