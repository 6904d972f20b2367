"""
Tests for the CLI progress observer and configuration helpers.
"""

import pytest
from rich.console import Console

from ratebatch.cli.config_utils import build_pacing_overrides, resolve_pacing
from ratebatch.cli.observers import CLIProgressObserver
from ratebatch.core.concurrency import ProcessingRequest, RateLimitedProcessor
from ratebatch.core.config import AppConfig, FailurePolicy, PacingStrategy
from ratebatch.core.exceptions import ConfigurationError


class TestCLIProgressObserver:
    """Observer callbacks record and render progress."""

    def test_quiet_observer_records(self):
        observer = CLIProgressObserver(quiet=True)
        observer.start()
        observer.on_progress(50)
        observer.on_progress(100)
        observer.on_complete()
        observer.stop()

        assert observer.history == [50, 100]
        assert observer.completed is True

    def test_rendering_observer(self):
        console = Console(file=None, force_terminal=False, width=80)
        with CLIProgressObserver(console) as observer:
            observer.start("Testing")
            observer.on_progress(25)
            observer.on_complete()

        assert observer.history == [25]
        assert observer._progress is None

    @pytest.mark.asyncio
    async def test_observer_as_run_callbacks(self, recorded_pauses):
        observer = CLIProgressObserver(quiet=True)

        async def action(item):
            pass

        request = ProcessingRequest(
            max_operations_per_cycle=2,
            cycle_duration_ms=10,
            items=[1, 2, 3, 4],
            action=action,
            on_progress=observer.on_progress,
            on_complete=observer.on_complete
        )
        await RateLimitedProcessor().run(request)

        assert observer.history == [25, 50, 75, 100]
        assert observer.completed is True


class TestPacingResolution:
    """CLI overrides are applied on top of profiles."""

    def test_no_overrides_returns_profile(self):
        config = AppConfig()
        assert resolve_pacing(config) is config.get_profile()

    def test_overrides_applied(self):
        overrides = build_pacing_overrides(max_ops=5, cycle_ms=500, strategy="batch_limit", fail_fast=True)
        pacing = resolve_pacing(AppConfig(), overrides=overrides)

        assert pacing.max_operations_per_cycle == 5
        assert pacing.cycle_duration_ms == 500
        assert pacing.strategy == PacingStrategy.BATCH_LIMIT
        assert pacing.failure_policy == FailurePolicy.FAIL_FAST

    def test_auto_strategy_override(self):
        pacing = resolve_pacing(AppConfig(), overrides=build_pacing_overrides(strategy="auto"))
        assert pacing.strategy is None

    def test_invalid_override(self):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_pacing(AppConfig(), overrides={'max_operations_per_cycle': 0})
        assert exc_info.value.context.user_context['config_key'] == 'max_operations_per_cycle'

    def test_unknown_profile(self):
        with pytest.raises(ConfigurationError):
            resolve_pacing(AppConfig(), profile="missing")
