"""
Core Concurrency Module

Rate-limited asynchronous batch processing for RateBatch:
- Strategy selection between batch-limit and fixed-delay pacing
- Background execution with progress and completion notifications
- Cooperative cancellation during pacing pauses
"""

from .strategy import select_strategy
from .handle import ExecutionHandle, RunState, RunResult, ItemFailure
from .processor import ProcessingRequest, RateLimitedProcessor, get_processor, process_auto

__all__ = [
    'select_strategy',
    'ExecutionHandle',
    'RunState',
    'RunResult',
    'ItemFailure',
    'ProcessingRequest',
    'RateLimitedProcessor',
    'get_processor',
    'process_auto',
]
