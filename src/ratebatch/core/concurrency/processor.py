"""
Rate-Limited Processor

Applies a per-item action to every item of a finite collection on a
background asyncio task while keeping throughput under a ceiling of
N operations per cycle, reporting progress and signalling completion.
"""

import asyncio
import inspect
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Iterable, Optional, Sequence, TypeVar, Union

from pydantic import ValidationError

from ratebatch.core.concurrency import pacing
from ratebatch.core.concurrency.handle import ExecutionHandle, ItemFailure, RunResult, RunState
from ratebatch.core.concurrency.strategy import select_strategy
from ratebatch.core.config.models import FailurePolicy, PacingConfig, PacingStrategy
from ratebatch.core.exceptions import ErrorCode, action_error, config_error


T = TypeVar('T')
logger = logging.getLogger(__name__)

Action = Callable[[T], Union[Any, Awaitable[Any]]]
ProgressCallback = Callable[[int], Any]
CompletionCallback = Callable[[], Any]


@dataclass(frozen=True)
class ProcessingRequest(Generic[T]):
    """
    Immutable description of one rate-limited run.

    ``items`` is materialized into a tuple on creation so its size is
    fixed before the run starts. ``action`` may be a plain callable
    (run in a worker thread) or a coroutine function.
    """
    max_operations_per_cycle: int
    cycle_duration_ms: int
    items: Sequence[T]
    action: Action
    on_progress: Optional[ProgressCallback] = None
    on_complete: Optional[CompletionCallback] = None
    failure_policy: FailurePolicy = FailurePolicy.CONTINUE

    def __post_init__(self):
        object.__setattr__(self, 'items', tuple(self.items))

    @classmethod
    def from_config(cls,
                    config: PacingConfig,
                    items: Iterable[T],
                    action: Action,
                    on_progress: Optional[ProgressCallback] = None,
                    on_complete: Optional[CompletionCallback] = None) -> 'ProcessingRequest[T]':
        """Build a request from a pacing profile."""
        return cls(
            max_operations_per_cycle=config.max_operations_per_cycle,
            cycle_duration_ms=config.cycle_duration_ms,
            items=items,
            action=action,
            on_progress=on_progress,
            on_complete=on_complete,
            failure_policy=config.failure_policy,
        )

    @property
    def total_items(self) -> int:
        return len(self.items)

    def validate(self) -> PacingConfig:
        """
        Check the pacing parameters.

        Returns:
            The validated parameters as a PacingConfig

        Raises:
            ConfigurationError: If any parameter is invalid
        """
        if not callable(self.action):
            raise config_error(
                f"action must be callable, got {type(self.action).__name__}",
                key="action",
                value=repr(self.action)
            )
        for name in ('on_progress', 'on_complete'):
            observer = getattr(self, name)
            if observer is not None and not callable(observer):
                raise config_error(f"{name} must be callable or None", key=name, value=repr(observer))

        try:
            return PacingConfig(
                max_operations_per_cycle=self.max_operations_per_cycle,
                cycle_duration_ms=self.cycle_duration_ms,
                failure_policy=self.failure_policy,
            )
        except ValidationError as e:
            first = e.errors()[0]
            key = str(first['loc'][0]) if first.get('loc') else None
            raise config_error(
                f"Invalid pacing parameter {key}: {first['msg']}",
                key=key,
                value=getattr(self, key, None) if key else None,
                error_code=ErrorCode.CONFIG_INVALID_VALUE,
                cause=e
            ) from e


class RateLimitedProcessor:
    """
    Stateless entry point for rate-limited runs.

    Two pacing strategies are available:
    - batch limit: run up to N actions back to back, then pause a full cycle
    - fixed delay: pause cycle/N milliseconds after every action

    ``run`` picks the strategy from the item count; the executor entry
    points force one. All of them validate synchronously, schedule the
    run on the running event loop and return an ``ExecutionHandle``
    without waiting for any item.
    """

    def run(self,
            request: ProcessingRequest[T],
            strategy: Optional[PacingStrategy] = None) -> ExecutionHandle:
        """
        Submit a run, selecting the pacing strategy automatically.

        Args:
            request: The run to execute
            strategy: Force a strategy instead of selecting one

        Returns:
            Handle to the scheduled run

        Raises:
            ConfigurationError: If the request is invalid
            RuntimeError: If no event loop is running
        """
        request.validate()
        if strategy is None:
            strategy = select_strategy(request.total_items, request.max_operations_per_cycle)
        return self._submit(request, PacingStrategy(strategy))

    def process_with_batch_limit(self, request: ProcessingRequest[T]) -> ExecutionHandle:
        """Submit a run that bursts up to the limit, then pauses a full cycle."""
        request.validate()
        return self._submit(request, PacingStrategy.BATCH_LIMIT)

    def process_with_fixed_delay(self, request: ProcessingRequest[T]) -> ExecutionHandle:
        """Submit a run that pauses cycle/N milliseconds after every item."""
        request.validate()
        return self._submit(request, PacingStrategy.FIXED_DELAY)

    def run_blocking(self,
                     request: ProcessingRequest[T],
                     strategy: Optional[PacingStrategy] = None) -> RunResult:
        """Run to completion from synchronous code using a fresh event loop."""
        async def _main() -> RunResult:
            return await self.run(request, strategy)

        return asyncio.run(_main())

    def _submit(self, request: ProcessingRequest[T], strategy: PacingStrategy) -> ExecutionHandle:
        loop = asyncio.get_running_loop()
        handle = ExecutionHandle(
            run_id=str(uuid.uuid4())[:8],
            strategy=strategy,
            total_items=request.total_items,
        )

        if strategy is PacingStrategy.BATCH_LIMIT:
            body = self._run_batch_limit
        else:
            body = self._run_fixed_delay

        task = loop.create_task(
            self._execute(request, handle, body),
            name=f"ratebatch-{handle.run_id}"
        )
        handle._attach(task)
        return handle

    async def _execute(self, request: ProcessingRequest[T], handle: ExecutionHandle, body) -> RunResult:
        handle._mark_running()
        logger.info(
            f"Run {handle.run_id} started: {handle.total_items} items, "
            f"strategy={handle.strategy.value}, "
            f"limit={request.max_operations_per_cycle}/{request.cycle_duration_ms}ms"
        )

        try:
            await body(request, handle)
            if request.on_complete is not None:
                request.on_complete()
        except asyncio.CancelledError:
            handle._finish(RunState.CANCELLED)
            logger.info(
                f"Run {handle.run_id} cancelled after "
                f"{handle.processed_count}/{handle.total_items} items"
            )
            raise
        except Exception as e:
            handle._finish(RunState.FAILED)
            logger.error(
                f"Run {handle.run_id} failed after "
                f"{handle.processed_count}/{handle.total_items} items: {e}"
            )
            raise

        handle._finish(RunState.COMPLETED)
        result = handle.snapshot()
        logger.info(
            f"Run {handle.run_id} completed: {result.processed_items}/{result.total_items} items "
            f"({result.failed_items} failed) in {result.elapsed:.2f}s. "
            f"Throughput: {result.throughput_items_per_sec:.1f} items/sec"
        )
        return result

    async def _run_batch_limit(self, request: ProcessingRequest[T], handle: ExecutionHandle) -> None:
        cycle_count = 0

        for index, item in enumerate(request.items):
            if cycle_count >= request.max_operations_per_cycle:
                await pacing.pause(request.cycle_duration_ms)
                cycle_count = 0

            await self._apply(request, handle, index, item)
            cycle_count += 1
            self._advance(request, handle)

    async def _run_fixed_delay(self, request: ProcessingRequest[T], handle: ExecutionHandle) -> None:
        delay = pacing.delay_per_item(request.cycle_duration_ms, request.max_operations_per_cycle)

        for index, item in enumerate(request.items):
            await self._apply(request, handle, index, item)
            await pacing.pause(delay)
            self._advance(request, handle)

    async def _apply(self, request: ProcessingRequest[T], handle: ExecutionHandle,
                     index: int, item: T) -> None:
        """Invoke the action on one item and apply the failure policy."""
        try:
            await self._invoke(request.action, item)
        except Exception as e:
            if request.failure_policy == FailurePolicy.FAIL_FAST:
                # The failing item still counts as processed
                handle.processed_count += 1
                raise action_error(item, index, handle.processed_count, e, handle.run_id) from e

            logger.warning(f"Run {handle.run_id}: action failed for item #{index} ({item!r}): {e}")
            handle.failures.append(ItemFailure(index=index, item=item, error=e))

    async def _invoke(self, action: Action, item: T) -> Any:
        if inspect.iscoroutinefunction(action):
            return await action(item)

        result = await asyncio.to_thread(action, item)
        if inspect.isawaitable(result):
            result = await result
        return result

    def _advance(self, request: ProcessingRequest[T], handle: ExecutionHandle) -> None:
        handle.processed_count += 1
        progress = pacing.compute_progress(handle.processed_count, handle.total_items)
        handle.progress = progress
        if request.on_progress is not None:
            request.on_progress(progress)


# Global processor instance
_default_processor = RateLimitedProcessor()


def get_processor() -> RateLimitedProcessor:
    """Get the shared (stateless) processor instance."""
    return _default_processor


def process_auto(max_operations_per_cycle: int,
                 cycle_duration_ms: int,
                 items: Iterable[T],
                 action: Action,
                 on_progress: Optional[ProgressCallback] = None,
                 on_complete: Optional[CompletionCallback] = None,
                 failure_policy: FailurePolicy = FailurePolicy.CONTINUE) -> ExecutionHandle:
    """
    Convenience function for submitting a run with automatic strategy selection.

    Args:
        max_operations_per_cycle: Maximum number of actions per cycle
        cycle_duration_ms: Length of one cycle in milliseconds
        items: Finite collection of items to process
        action: Callable applied to every item
        on_progress: Called with the integer percentage after every item
        on_complete: Called once after the last item
        failure_policy: Behaviour when the action raises

    Returns:
        Handle to the scheduled run
    """
    request = ProcessingRequest(
        max_operations_per_cycle=max_operations_per_cycle,
        cycle_duration_ms=cycle_duration_ms,
        items=items,
        action=action,
        on_progress=on_progress,
        on_complete=on_complete,
        failure_policy=failure_policy,
    )
    return _default_processor.run(request)
