"""
Pacing Primitives

Interruptible sleep and progress arithmetic shared by both executors.
"""

import asyncio
import logging


logger = logging.getLogger(__name__)


async def pause(milliseconds: int) -> None:
    """
    Suspend the current task for the given number of milliseconds.

    This is the only intentional suspension point of a run. Cancelling
    the task while it waits raises ``asyncio.CancelledError`` here.
    """
    if milliseconds <= 0:
        # Still yield so a pending cancellation is delivered
        await asyncio.sleep(0)
        return
    logger.debug(f"Pacing pause of {milliseconds}ms")
    await asyncio.sleep(milliseconds / 1000)


def delay_per_item(cycle_duration_ms: int, max_operations_per_cycle: int) -> int:
    """Delay inserted after every item in fixed-delay mode (floor division)."""
    return cycle_duration_ms // max_operations_per_cycle


def compute_progress(processed: int, total: int) -> int:
    """Integer percentage of processed items, floored, in [0, 100]."""
    if total <= 0:
        return 0
    return processed * 100 // total
