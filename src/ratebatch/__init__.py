"""
RateBatch - rate-limited asynchronous batch processing.

Apply an action to every item of a collection without exceeding
N operations per cycle, with progress reporting and cancellation.
"""

__version__ = "1.0.0"

from ratebatch.core.config.models import FailurePolicy, PacingConfig, PacingStrategy
from ratebatch.core.concurrency import (
    ExecutionHandle,
    ItemFailure,
    ProcessingRequest,
    RateLimitedProcessor,
    RunResult,
    RunState,
    get_processor,
    process_auto,
    select_strategy,
)
from ratebatch.core.exceptions import (
    ActionError,
    ConfigurationError,
    RateBatchError,
    RunCancelledError,
)

__all__ = [
    "__version__",
    "ActionError",
    "ConfigurationError",
    "ExecutionHandle",
    "FailurePolicy",
    "ItemFailure",
    "PacingConfig",
    "PacingStrategy",
    "ProcessingRequest",
    "RateBatchError",
    "RateLimitedProcessor",
    "RunCancelledError",
    "RunResult",
    "RunState",
    "get_processor",
    "process_auto",
    "select_strategy",
]
