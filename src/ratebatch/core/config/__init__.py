"""
Configuration Management Package

Provides Pydantic-based pacing profiles and file loading for RateBatch.
"""

from ratebatch.core.config.models import AppConfig, PacingConfig, PacingStrategy, FailurePolicy
from ratebatch.core.config.manager import ConfigManager

__all__ = [
    "AppConfig",
    "PacingConfig",
    "PacingStrategy",
    "FailurePolicy",
    "ConfigManager",
]
