"""
Core Exception Hierarchy for RateBatch

Provides error classification with error codes, recovery suggestions,
and context information for configuration problems, per-item action
failures and cancelled runs.
"""

import sys
import time
import traceback
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(Enum):
    """Standard error codes for different error categories."""

    # Configuration errors (3000-3999)
    CONFIG_INVALID_FORMAT = 3001
    CONFIG_MISSING_REQUIRED = 3002
    CONFIG_INVALID_VALUE = 3003
    CONFIG_FILE_NOT_FOUND = 3004
    CONFIG_SCHEMA_VALIDATION = 3006

    # Processing errors (4000-4999)
    PROCESSING_ACTION_FAILED = 4006

    # Generic/unknown errors (9000-9999)
    UNKNOWN_ERROR = 9000
    OPERATION_CANCELLED = 9002


@dataclass
class ErrorContext:
    """Contextual information about an error occurrence."""

    operation: str = ""
    run_id: Optional[str] = None
    item_index: Optional[int] = None
    correlation_id: Optional[str] = None
    timestamp: float = field(default_factory=time.time)
    system_info: Dict[str, Any] = field(default_factory=dict)
    user_context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary for serialization."""
        return {
            'operation': self.operation,
            'run_id': self.run_id,
            'item_index': self.item_index,
            'correlation_id': self.correlation_id,
            'timestamp': self.timestamp,
            'system_info': self.system_info,
            'user_context': self.user_context
        }


@dataclass
class RecoverySuggestion:
    """Structured recovery suggestion for error resolution."""

    action: str  # Brief action description
    description: str  # Detailed explanation
    command: Optional[str] = None
    priority: int = 1  # 1=highest

    def to_dict(self) -> Dict[str, Any]:
        """Convert suggestion to dictionary."""
        return {
            'action': self.action,
            'description': self.description,
            'command': self.command,
            'priority': self.priority
        }


class RateBatchError(Exception):
    """
    Base exception for all RateBatch errors.

    Carries an error code, recovery suggestions and context so callers
    can present a useful message or inspect the failure programmatically.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        context: Optional[ErrorContext] = None,
        cause: Optional[BaseException] = None,
        recoverable: bool = True,
        suggestions: Optional[List[RecoverySuggestion]] = None
    ):
        """
        Initialize RateBatch error.

        Args:
            message: Human-readable error description
            error_code: Standardized error code
            context: Contextual information about the error
            cause: Original exception that caused this error
            recoverable: Whether the error can potentially be recovered
            suggestions: List of recovery suggestions
        """
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self.recoverable = recoverable
        self.suggestions = suggestions or []
        self.stack_trace = traceback.format_exc()

        if not self.context.correlation_id:
            self.context.correlation_id = str(uuid.uuid4())[:8]

        if not self.context.system_info:
            self.context.system_info = {
                'platform': sys.platform,
                'python_version': sys.version,
            }

    def add_suggestion(self, suggestion: RecoverySuggestion) -> None:
        """Add a recovery suggestion to the error."""
        self.suggestions.append(suggestion)
        self.suggestions.sort(key=lambda s: s.priority)

    def get_user_message(self) -> str:
        """Get user-friendly error message with suggestions."""
        lines = [f"Error: {self.message}"]

        if self.error_code != ErrorCode.UNKNOWN_ERROR:
            lines.append(f"Error Code: {self.error_code.value}")

        if self.context.correlation_id:
            lines.append(f"Correlation ID: {self.context.correlation_id}")

        if self.suggestions:
            lines.append("\nSuggested solutions:")
            for i, suggestion in enumerate(self.suggestions[:3], 1):
                lines.append(f"  {i}. {suggestion.action}")
                lines.append(f"     {suggestion.description}")
                if suggestion.command:
                    lines.append(f"     Command: {suggestion.command}")

        return "\n".join(lines)

    def get_debug_info(self) -> Dict[str, Any]:
        """Get comprehensive debug information."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code.value,
            'recoverable': self.recoverable,
            'context': self.context.to_dict(),
            'cause': {
                'type': type(self.cause).__name__ if self.cause else None,
                'message': str(self.cause) if self.cause else None
            },
            'suggestions': [s.to_dict() for s in self.suggestions],
            'stack_trace': self.stack_trace
        }


class ConfigurationError(RateBatchError):
    """Raised for invalid pacing parameters or configuration files."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIG_INVALID_VALUE,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs
    ):
        context = kwargs.get('context') or ErrorContext()
        if config_key:
            context.user_context['config_key'] = config_key
            context.user_context['config_value'] = config_value

        kwargs['context'] = context
        kwargs['error_code'] = error_code
        kwargs.setdefault('recoverable', False)

        super().__init__(message, **kwargs)

        if error_code == ErrorCode.CONFIG_FILE_NOT_FOUND:
            self.add_suggestion(RecoverySuggestion(
                action="Create configuration file",
                description="Create ratebatch.yaml in the working directory or pass --config.",
                priority=1
            ))
        elif error_code == ErrorCode.CONFIG_INVALID_VALUE:
            self.add_suggestion(RecoverySuggestion(
                action="Check pacing values",
                description=(
                    "max_operations_per_cycle must be at least 1 and "
                    "cycle_duration_ms must not be negative."
                ),
                command="ratebatch profiles",
                priority=1
            ))


class ActionError(RateBatchError):
    """Raised when the per-item action fails and the run stops on it."""

    def __init__(
        self,
        message: str,
        item: Any = None,
        index: Optional[int] = None,
        processed_count: int = 0,
        **kwargs
    ):
        context = kwargs.get('context') or ErrorContext()
        context.item_index = index
        context.user_context['processed_count'] = processed_count

        kwargs['context'] = context
        kwargs.setdefault('error_code', ErrorCode.PROCESSING_ACTION_FAILED)

        super().__init__(message, **kwargs)

        self.item = item
        self.index = index
        self.processed_count = processed_count

        self.add_suggestion(RecoverySuggestion(
            action="Continue past failures",
            description="Use the 'continue' failure policy to record failures and finish the run.",
            command="ratebatch run ITEMS --exec CMD",
            priority=2
        ))


class RunCancelledError(RateBatchError):
    """Raised to callers awaiting a run that was cancelled during pacing."""

    def __init__(self, message: str, processed_count: int = 0, **kwargs):
        context = kwargs.get('context') or ErrorContext()
        context.user_context['processed_count'] = processed_count

        kwargs['context'] = context
        kwargs['error_code'] = ErrorCode.OPERATION_CANCELLED
        kwargs.setdefault('recoverable', False)

        super().__init__(message, **kwargs)
        self.processed_count = processed_count


# Convenience functions for creating common errors
def config_error(message: str, key: Optional[str] = None,
                 value: Optional[Any] = None, **kwargs) -> ConfigurationError:
    """Create a configuration error with standard suggestions."""
    return ConfigurationError(message, config_key=key, config_value=value, **kwargs)


def action_error(item: Any, index: int, processed_count: int,
                 cause: BaseException, run_id: Optional[str] = None) -> ActionError:
    """Create an action error describing the failing item."""
    context = ErrorContext(operation="process_item", run_id=run_id)
    return ActionError(
        f"Action failed for item #{index} ({item!r}): {cause}",
        item=item,
        index=index,
        processed_count=processed_count,
        cause=cause,
        context=context
    )
