"""
Shared Test Configuration and Fixtures

Fixtures for observing pacing pauses and building processing requests
without waiting on real cycles.
"""

import asyncio
from typing import Any, Callable, List, Tuple

import pytest

from ratebatch.core.concurrency import pacing
from ratebatch.core.concurrency.processor import ProcessingRequest


@pytest.fixture
def event_log() -> List[Tuple[str, Any]]:
    """Ordered record of actions and pauses in a run."""
    return []


@pytest.fixture
def recorded_pauses(monkeypatch, event_log):
    """Replace the pacing pause with one that records its duration and yields once."""
    pauses: List[int] = []

    async def fake_pause(milliseconds: int) -> None:
        pauses.append(milliseconds)
        event_log.append(("pause", milliseconds))
        await asyncio.sleep(0)

    monkeypatch.setattr(pacing, "pause", fake_pause)
    return pauses


@pytest.fixture
def recording_action(event_log) -> Callable[[Any], Any]:
    """Coroutine action that logs every item it receives."""
    async def action(item):
        event_log.append(("action", item))

    return action


@pytest.fixture
def make_request(recording_action):
    """Factory for requests with sensible defaults."""
    def _make(items, max_operations_per_cycle=3, cycle_duration_ms=100, **kwargs):
        kwargs.setdefault('action', recording_action)
        return ProcessingRequest(
            max_operations_per_cycle=max_operations_per_cycle,
            cycle_duration_ms=cycle_duration_ms,
            items=items,
            **kwargs
        )

    return _make


@pytest.fixture
def wait_until():
    """Poll the event loop until a predicate holds."""
    async def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        async def _poll():
            while not predicate():
                await asyncio.sleep(0.001)

        await asyncio.wait_for(_poll(), timeout)

    return _wait_until
