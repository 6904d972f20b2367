"""
Tests for configuration models.
"""

import pytest
from pydantic import ValidationError

from ratebatch.core.config.models import (
    AppConfig, DEFAULT_PROFILE_NAME, FailurePolicy, PacingConfig, PacingStrategy
)


class TestPacingConfig:
    """Validation of pacing parameters."""

    def test_defaults(self):
        config = PacingConfig()
        assert config.max_operations_per_cycle == 60
        assert config.cycle_duration_ms == 60_000
        assert config.strategy is None
        assert config.failure_policy == FailurePolicy.CONTINUE
        assert config.delay_per_item_ms == 1000

    def test_rejects_zero_limit(self):
        with pytest.raises(ValidationError):
            PacingConfig(max_operations_per_cycle=0)

    def test_rejects_negative_cycle(self):
        with pytest.raises(ValidationError):
            PacingConfig(cycle_duration_ms=-1)

    @pytest.mark.parametrize("field,value", [
        ("max_operations_per_cycle", "3"),
        ("max_operations_per_cycle", 2.0),
        ("cycle_duration_ms", "100"),
        ("cycle_duration_ms", True),
    ])
    def test_numeric_fields_are_not_coerced(self, field, value):
        with pytest.raises(ValidationError):
            PacingConfig(**{field: value})

    def test_zero_cycle_allowed(self):
        assert PacingConfig(cycle_duration_ms=0).delay_per_item_ms == 0

    def test_strategy_parsing(self):
        assert PacingConfig(strategy="auto").strategy is None
        assert PacingConfig(strategy="fixed_delay").strategy == PacingStrategy.FIXED_DELAY
        with pytest.raises(ValidationError):
            PacingConfig(strategy="round_robin")

    def test_frozen(self):
        config = PacingConfig()
        with pytest.raises(ValidationError):
            config.max_operations_per_cycle = 5


class TestAppConfig:
    """Profiles and application settings."""

    def test_builtin_default_profile(self):
        config = AppConfig()
        assert DEFAULT_PROFILE_NAME in config.profiles
        assert config.get_profile() == PacingConfig()

    def test_named_profile(self):
        config = AppConfig(
            profiles={"api": {"max_operations_per_cycle": 10, "cycle_duration_ms": 1000}},
            default_profile="api"
        )
        assert config.get_profile().max_operations_per_cycle == 10
        assert config.get_profile("default").max_operations_per_cycle == 60

    def test_unknown_default_profile(self):
        with pytest.raises(ValidationError):
            AppConfig(default_profile="missing")

    def test_unknown_profile_lookup(self):
        with pytest.raises(KeyError):
            AppConfig().get_profile("missing")

    def test_log_level_normalized(self):
        assert AppConfig(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            AppConfig(log_level="loud")
