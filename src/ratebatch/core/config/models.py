"""
Configuration Models

Pydantic models for pacing profiles and application settings with
validation, defaults and field documentation.
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PacingStrategy(str, Enum):
    """Pacing strategies available to the rate-limited processor."""
    BATCH_LIMIT = "batch_limit"    # Burst up to the limit, then idle a full cycle
    FIXED_DELAY = "fixed_delay"    # Constant delay after every item


class FailurePolicy(str, Enum):
    """What a run does when the per-item action raises."""
    CONTINUE = "continue"     # Record the failure and keep processing
    FAIL_FAST = "fail_fast"   # Stop the run and raise ActionError


class PacingConfig(BaseModel):
    """Throughput ceiling and policies for a single run."""

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    max_operations_per_cycle: int = Field(
        default=60,
        ge=1,
        strict=True,
        description="Maximum number of actions started within one cycle"
    )
    cycle_duration_ms: int = Field(
        default=60_000,
        ge=0,
        strict=True,
        description="Length of one cycle in milliseconds"
    )
    strategy: Optional[PacingStrategy] = Field(
        default=None,
        description="Force a pacing strategy; None selects automatically"
    )
    failure_policy: FailurePolicy = Field(
        default=FailurePolicy.CONTINUE,
        description="Behaviour when the per-item action fails"
    )

    @field_validator('strategy', mode='before')
    @classmethod
    def normalize_strategy(cls, v):
        """Accept 'auto' as an alias for automatic selection."""
        if isinstance(v, str) and v.strip().lower() in ('', 'auto'):
            return None
        return v

    @property
    def delay_per_item_ms(self) -> int:
        """Delay used in fixed-delay mode."""
        return self.cycle_duration_ms // self.max_operations_per_cycle


DEFAULT_PROFILE_NAME = "default"


class AppConfig(BaseModel):
    """Main application configuration holding named pacing profiles."""

    model_config = ConfigDict(validate_assignment=True)

    profiles: Dict[str, PacingConfig] = Field(
        default_factory=dict,
        description="Named pacing profiles"
    )
    default_profile: str = Field(
        default=DEFAULT_PROFILE_NAME,
        description="Profile used when none is requested"
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level for the command-line tool"
    )
    show_progress: bool = Field(
        default=True,
        description="Render a progress bar while running"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure the log level is one the logging module knows."""
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode='after')
    def ensure_default_profile(self):
        """Always provide the built-in profile and check the default exists."""
        if DEFAULT_PROFILE_NAME not in self.profiles:
            self.profiles[DEFAULT_PROFILE_NAME] = PacingConfig()
        if self.default_profile not in self.profiles:
            raise ValueError(
                f"default_profile '{self.default_profile}' is not defined in profiles"
            )
        return self

    def get_profile(self, name: Optional[str] = None) -> PacingConfig:
        """Look up a profile, falling back to the default one."""
        profile_name = name or self.default_profile
        try:
            return self.profiles[profile_name]
        except KeyError:
            raise KeyError(f"Unknown profile: {profile_name}") from None
