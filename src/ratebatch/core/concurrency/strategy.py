"""
Pacing Strategy Selection

Chooses between burst-then-idle batching and evenly spaced processing
based on how many items must fit under the per-cycle limit.
"""

from ratebatch.core.config.models import PacingStrategy


def select_strategy(item_count: int, max_operations_per_cycle: int) -> PacingStrategy:
    """
    Pick the pacing strategy for a run.

    A workload that fits in a single cycle is processed as one batch;
    anything larger is spread evenly across the cycle.

    Args:
        item_count: Number of items in the run
        max_operations_per_cycle: Maximum operations allowed per cycle

    Returns:
        The strategy to execute the run with
    """
    if item_count <= max_operations_per_cycle:
        return PacingStrategy.BATCH_LIMIT
    return PacingStrategy.FIXED_DELAY
