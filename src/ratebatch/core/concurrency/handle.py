"""
Execution Handles

Caller-side view of a rate-limited run: lifecycle state, counters,
recorded item failures and the final result.
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generator, List, Optional

from ratebatch.core.config.models import PacingStrategy
from ratebatch.core.exceptions import RunCancelledError, ErrorContext


class RunState(str, Enum):
    """Lifecycle states of a run."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.COMPLETED, RunState.CANCELLED, RunState.FAILED)


@dataclass
class ItemFailure:
    """An action failure recorded while the run kept going."""
    index: int
    item: Any
    error: BaseException

    def to_dict(self) -> dict:
        return {
            'index': self.index,
            'item': repr(self.item),
            'error_type': type(self.error).__name__,
            'error': str(self.error),
        }


@dataclass
class RunResult:
    """Final statistics of a finished run."""
    run_id: str
    strategy: PacingStrategy
    state: RunState
    total_items: int = 0
    processed_items: int = 0
    failures: List[ItemFailure] = field(default_factory=list)
    started_at: Optional[float] = None
    finished_at: Optional[float] = None

    @property
    def failed_items(self) -> int:
        return len(self.failures)

    @property
    def succeeded_items(self) -> int:
        return self.processed_items - len(self.failures)

    @property
    def elapsed(self) -> float:
        if self.started_at is None or self.finished_at is None:
            return 0.0
        return self.finished_at - self.started_at

    @property
    def throughput_items_per_sec(self) -> float:
        elapsed = self.elapsed
        return self.processed_items / elapsed if elapsed > 0 else 0.0


class ExecutionHandle:
    """
    Handle to an in-flight or finished run.

    Returned immediately on submission. Counters and state are only
    written by the run's own task, so reading them from the same event
    loop never observes a partial update. Await the handle (or call
    ``wait()``) to get the ``RunResult``; a cancelled run raises
    ``RunCancelledError`` and a failed run re-raises its error.
    """

    def __init__(self, run_id: str, strategy: PacingStrategy, total_items: int):
        self.run_id = run_id
        self.strategy = strategy
        self.total_items = total_items

        self.state = RunState.PENDING
        self.processed_count = 0
        self.progress: Optional[int] = None
        self.failures: List[ItemFailure] = []
        self.started_at: Optional[float] = None
        self.finished_at: Optional[float] = None

        self._task: Optional[asyncio.Task] = None

    def __repr__(self) -> str:
        return (
            f"ExecutionHandle(run_id={self.run_id!r}, strategy={self.strategy.value}, "
            f"state={self.state.value}, processed={self.processed_count}/{self.total_items})"
        )

    def __await__(self) -> Generator[Any, None, RunResult]:
        return self.wait().__await__()

    # Run-side transitions (called from the run task only)

    def _attach(self, task: asyncio.Task) -> None:
        self._task = task
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        # Cancelled before the run body started or while an action was running
        if task.cancelled() and not self.state.is_terminal:
            self._finish(RunState.CANCELLED)

    def _mark_running(self) -> None:
        self.state = RunState.RUNNING
        self.started_at = time.time()

    def _finish(self, state: RunState) -> None:
        self.state = state
        self.finished_at = time.time()

    # Caller-side API

    @property
    def task(self) -> Optional[asyncio.Task]:
        """The background task executing this run."""
        return self._task

    def done(self) -> bool:
        """Whether the run reached a terminal state."""
        return self._task is not None and self._task.done()

    def cancel(self, msg: Optional[str] = None) -> bool:
        """
        Request cancellation of the run.

        Returns:
            False if the run already finished, True otherwise
        """
        if self._task is None or self._task.done():
            return False
        return self._task.cancel(msg)

    def snapshot(self) -> RunResult:
        """Current counters packaged as a ``RunResult``."""
        return RunResult(
            run_id=self.run_id,
            strategy=self.strategy,
            state=self.state,
            total_items=self.total_items,
            processed_items=self.processed_count,
            failures=list(self.failures),
            started_at=self.started_at,
            finished_at=self.finished_at,
        )

    async def wait(self) -> RunResult:
        """
        Wait for the run to finish.

        Cancelling the waiting task propagates ``asyncio.CancelledError``
        as usual; it does not cancel the run.
        """
        if self._task is None:
            raise RuntimeError(f"Run {self.run_id} was never started")
        await asyncio.wait({self._task})
        return self.result()

    def result(self) -> RunResult:
        """
        Result of a finished run.

        Raises:
            asyncio.InvalidStateError: If the run is still in flight
            RunCancelledError: If the run was cancelled
            Exception: The error that failed the run
        """
        if not self.done():
            raise asyncio.InvalidStateError(f"Run {self.run_id} has not finished")
        if self._task.cancelled():
            raise RunCancelledError(
                f"Run {self.run_id} was cancelled after "
                f"{self.processed_count}/{self.total_items} items",
                processed_count=self.processed_count,
                context=ErrorContext(operation="run", run_id=self.run_id),
            )
        error = self._task.exception()
        if error is not None:
            raise error
        return self.snapshot()

    def exception(self) -> Optional[BaseException]:
        """Error that ended the run, a ``RunCancelledError`` if cancelled, else None."""
        try:
            self.result()
        except asyncio.InvalidStateError:
            raise
        except Exception as e:
            return e
        return None
