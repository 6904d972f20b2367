"""
Tests for CLI Commands

Tests the run and profiles commands end to end with real shell commands.
"""

import pytest
import yaml
from typer.testing import CliRunner

from ratebatch import __version__
from ratebatch.cli.commands.run import CommandFailedError, make_shell_action, render_command
from ratebatch.cli.main import app as main_app


@pytest.fixture
def items_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    path = tmp_path / "items.txt"
    path.write_text("alpha\n\nbeta\ngamma\n", encoding='utf-8')
    return path


class TestRenderCommand:
    """Command templates receive the quoted item."""

    def test_placeholder_replaced(self):
        assert render_command("echo {}", "a b") == "echo 'a b'"

    def test_item_appended_without_placeholder(self):
        assert render_command("echo", "x") == "echo x"

    @pytest.mark.asyncio
    async def test_failing_command_raises(self):
        action = make_shell_action("exit 3")
        with pytest.raises(CommandFailedError) as exc_info:
            await action("item")
        assert exc_info.value.returncode == 3

    @pytest.mark.asyncio
    async def test_successful_command(self, tmp_path):
        target = tmp_path / "out.txt"
        action = make_shell_action(f"echo {{}} >> {target}")
        await action("hello")
        assert target.read_text().strip() == "hello"


@pytest.mark.cli
class TestRunCommand:
    """The run command."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_run_success(self, items_file, tmp_path):
        out = tmp_path / "seen.txt"
        result = self.runner.invoke(main_app, [
            'run', str(items_file), '--exec', f"echo {{}} >> {out}",
            '--max-ops', '10', '--cycle-ms', '0'
        ])

        assert result.exit_code == 0, result.output
        assert out.read_text().split() == ["alpha", "beta", "gamma"]
        assert "Run Summary" in result.output

    def test_run_fixed_delay(self, items_file):
        result = self.runner.invoke(main_app, [
            'run', str(items_file), '--exec', 'true',
            '-n', '1', '-c', '0', '--strategy', 'fixed_delay', '--quiet'
        ])
        assert result.exit_code == 0, result.output

    def test_run_with_failures_exits_nonzero(self, items_file):
        result = self.runner.invoke(main_app, [
            'run', str(items_file), '--exec', 'false', '-n', '10', '-c', '0'
        ])

        assert result.exit_code == 1
        assert "Failures" in result.output

    def test_fail_fast(self, items_file):
        result = self.runner.invoke(main_app, [
            'run', str(items_file), '--exec', 'false', '-n', '10', '-c', '0', '--fail-fast'
        ])
        assert result.exit_code == 1
        assert "ActionError" in result.output

    def test_invalid_limit(self, items_file):
        result = self.runner.invoke(main_app, [
            'run', str(items_file), '--exec', 'true', '--max-ops', '0'
        ])
        assert result.exit_code == 1
        assert "ConfigurationError" in result.output

    def test_profile_from_config_file(self, items_file, tmp_path):
        config = tmp_path / "custom.yaml"
        config.write_text(yaml.safe_dump({
            "profiles": {"fast": {"max_operations_per_cycle": 100, "cycle_duration_ms": 0}}
        }), encoding='utf-8')

        result = self.runner.invoke(main_app, [
            'run', str(items_file), '--exec', 'true',
            '--config', str(config), '--profile', 'fast', '--quiet'
        ])
        assert result.exit_code == 0, result.output

    def test_unknown_profile(self, items_file):
        result = self.runner.invoke(main_app, [
            'run', str(items_file), '--exec', 'true', '--profile', 'nope'
        ])
        assert result.exit_code == 1

    def test_missing_items_file(self, tmp_path):
        result = self.runner.invoke(main_app, [
            'run', str(tmp_path / "missing.txt"), '--exec', 'true'
        ])
        assert result.exit_code != 0


@pytest.mark.cli
class TestProfilesAndVersion:
    """Informational commands."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_profiles_lists_default(self, items_file):
        result = self.runner.invoke(main_app, ['profiles'])
        assert result.exit_code == 0
        assert "default" in result.output

    def test_profiles_from_file(self, tmp_path, items_file):
        config = tmp_path / "custom.yaml"
        config.write_text(yaml.safe_dump({
            "profiles": {"api": {"max_operations_per_cycle": 5, "cycle_duration_ms": 1000}}
        }), encoding='utf-8')
        result = self.runner.invoke(main_app, ['profiles', '--config', str(config)])
        assert result.exit_code == 0
        assert "api" in result.output

    def test_version(self):
        result = self.runner.invoke(main_app, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output
