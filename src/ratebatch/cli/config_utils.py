"""
CLI Configuration Utilities

Resolves the pacing profile for a command from the configuration file
and command-line overrides.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ratebatch.core.config import AppConfig, ConfigManager, FailurePolicy, PacingConfig
from ratebatch.core.exceptions import ErrorCode, config_error


def load_app_config(config_file: Optional[Path] = None) -> AppConfig:
    """Load the application configuration from file or defaults."""
    return ConfigManager(config_file).load_config()


def build_pacing_overrides(
    max_ops: Optional[int] = None,
    cycle_ms: Optional[int] = None,
    strategy: Optional[str] = None,
    fail_fast: bool = False
) -> Dict[str, Any]:
    """Collect only the pacing options given on the command line."""
    overrides: Dict[str, Any] = {}
    if max_ops is not None:
        overrides['max_operations_per_cycle'] = max_ops
    if cycle_ms is not None:
        overrides['cycle_duration_ms'] = cycle_ms
    if strategy is not None:
        overrides['strategy'] = strategy
    if fail_fast:
        overrides['failure_policy'] = FailurePolicy.FAIL_FAST
    return overrides


def resolve_pacing(
    config: AppConfig,
    profile: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> PacingConfig:
    """
    Apply command-line overrides on top of a named profile.

    Raises:
        ConfigurationError: If the profile is unknown or a value is invalid
    """
    try:
        base = config.get_profile(profile)
    except KeyError as e:
        raise config_error(
            str(e.args[0]),
            key="profile",
            value=profile,
            error_code=ErrorCode.CONFIG_MISSING_REQUIRED
        ) from e

    if not overrides:
        return base

    try:
        return PacingConfig(**{**base.model_dump(), **overrides})
    except ValidationError as e:
        first = e.errors()[0]
        key = str(first['loc'][0]) if first.get('loc') else None
        raise config_error(
            f"Invalid value for {key}: {first['msg']}",
            key=key,
            value=overrides.get(key) if key else None,
            cause=e
        ) from e
