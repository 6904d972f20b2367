"""
Run Command

Runs a shell command once per item of a file, keeping the number of
commands started per cycle under the configured limit.
"""

import asyncio
import logging
import shlex
from enum import Enum
from pathlib import Path
from typing import Annotated, Awaitable, Callable, List, Optional

import typer
from rich.table import Table

from ratebatch.cli.config_utils import build_pacing_overrides, load_app_config, resolve_pacing
from ratebatch.cli.error_handling import handle_error
from ratebatch.cli.observers import CLIProgressObserver
from ratebatch.cli.utils import console, print_header, read_items, setup_logging
from ratebatch.core.concurrency import ProcessingRequest, RunResult, get_processor
from ratebatch.core.config import PacingConfig
from ratebatch.core.exceptions import RateBatchError


logger = logging.getLogger(__name__)

PLACEHOLDER = "{}"


class StrategyChoice(str, Enum):
    """Strategy names accepted on the command line."""
    AUTO = "auto"
    BATCH_LIMIT = "batch_limit"
    FIXED_DELAY = "fixed_delay"


class CommandFailedError(Exception):
    """A per-item shell command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"'{command}' exited with status {returncode}{detail}")


def render_command(template: str, item: str) -> str:
    """Substitute the shell-quoted item for every placeholder, or append it."""
    quoted = shlex.quote(item)
    if PLACEHOLDER in template:
        return template.replace(PLACEHOLDER, quoted)
    return f"{template} {quoted}"


def make_shell_action(template: str) -> Callable[[str], Awaitable[None]]:
    """Build the per-item action running the command template."""
    async def run_shell(item: str) -> None:
        command = render_command(template, item)
        logger.debug(f"Running: {command}")
        proc = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE
        )
        _, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise CommandFailedError(command, proc.returncode, stderr.decode(errors='replace'))

    return run_shell


async def _run_items(items: List[str], template: str, pacing: PacingConfig,
                     observer: CLIProgressObserver) -> RunResult:
    request = ProcessingRequest.from_config(
        pacing,
        items=items,
        action=make_shell_action(template),
        on_progress=observer.on_progress,
        on_complete=observer.on_complete
    )
    handle = get_processor().run(request, strategy=pacing.strategy)
    observer.start(f"{handle.strategy.value} run {handle.run_id}")
    return await handle


def print_result(result: RunResult) -> None:
    """Print the run summary and any recorded failures."""
    table = Table(title="Run Summary", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Run ID", result.run_id)
    table.add_row("Strategy", result.strategy.value)
    table.add_row("State", result.state.value)
    table.add_row("Processed", f"{result.processed_items}/{result.total_items}")
    table.add_row("Failed", str(result.failed_items))
    table.add_row("Elapsed", f"{result.elapsed:.2f}s")
    console.print(table)

    if result.failures:
        failures = Table(title="Failures")
        failures.add_column("#", justify="right")
        failures.add_column("Item")
        failures.add_column("Error", style="red")
        for failure in result.failures[:20]:
            failures.add_row(str(failure.index), str(failure.item), str(failure.error))
        if len(result.failures) > 20:
            failures.caption = f"... and {len(result.failures) - 20} more"
        console.print(failures)


def run_command(
    items_file: Annotated[Path, typer.Argument(
        exists=True, dir_okay=False, readable=True,
        help="File with one item per line"
    )],
    exec_template: Annotated[str, typer.Option(
        "--exec", "-e",
        help="Shell command to run per item; {} is replaced by the item"
    )],
    max_ops: Annotated[Optional[int], typer.Option(
        "--max-ops", "-n", help="Maximum operations per cycle"
    )] = None,
    cycle_ms: Annotated[Optional[int], typer.Option(
        "--cycle-ms", "-c", help="Cycle duration in milliseconds"
    )] = None,
    strategy: Annotated[Optional[StrategyChoice], typer.Option(
        "--strategy", "-s", help="Pacing strategy (default: from profile, else auto)"
    )] = None,
    fail_fast: Annotated[bool, typer.Option(
        "--fail-fast", help="Stop at the first failing item"
    )] = False,
    profile: Annotated[Optional[str], typer.Option(
        "--profile", "-p", help="Pacing profile from the configuration file"
    )] = None,
    config_file: Annotated[Optional[Path], typer.Option(
        "--config", help="Configuration file (YAML or JSON)"
    )] = None,
    quiet: Annotated[bool, typer.Option(
        "--quiet", "-q", help="Hide the progress bar and summary"
    )] = False,
    log_level: Annotated[Optional[str], typer.Option(
        "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )] = None,
):
    """
    Run a shell command for every line of ITEMS_FILE under a rate limit.

    [bold]Examples:[/bold]

    • [cyan]ratebatch run urls.txt --exec "curl -sO {}" -n 10 -c 1000[/cyan]
    • [cyan]ratebatch run ids.txt --exec "./sync.sh {}" --profile api[/cyan]
    """
    try:
        app_config = load_app_config(config_file)
        setup_logging(log_level or app_config.log_level)
        pacing = resolve_pacing(
            app_config,
            profile,
            build_pacing_overrides(
                max_ops=max_ops,
                cycle_ms=cycle_ms,
                strategy=strategy.value if strategy else None,
                fail_fast=fail_fast
            )
        )
        items = read_items(items_file)

        if not quiet:
            print_header(
                f"Processing {len(items)} items from {items_file.name}",
                f"{pacing.max_operations_per_cycle} ops per {pacing.cycle_duration_ms}ms, "
                f"failure policy: {pacing.failure_policy.value}"
            )

        with CLIProgressObserver(console, quiet=quiet or not app_config.show_progress) as observer:
            result = asyncio.run(_run_items(items, exec_template, pacing, observer))
    except RateBatchError as e:
        handle_error(e)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(code=1)

    if not quiet:
        print_result(result)
    if result.failures:
        raise typer.Exit(code=1)
