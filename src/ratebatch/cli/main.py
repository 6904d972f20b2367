#!/usr/bin/env python3
"""
RateBatch CLI Main Application

Typer-based command-line interface for rate-limited batch runs.
"""

import sys
from typing import Optional

import typer
from rich.console import Console

from ratebatch.cli import __version__
from ratebatch.cli.commands import profiles, run

console = Console()

app = typer.Typer(
    name="ratebatch",
    help="Rate-limited batch runner: apply a command to many items without exceeding N per cycle",
    context_settings={"help_option_names": ["-h", "--help"]},
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.command("run")(run.run_command)
app.command("profiles")(profiles.list_profiles)


def version_callback(value: bool):
    """Show version information."""
    if value:
        console.print(f"[bold cyan]RateBatch[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def app_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version information and exit"
    ),
):
    """
    RateBatch - rate-limited batch processing

    [bold]Quick Start:[/bold]

    • Run a command per line: [cyan]ratebatch run items.txt --exec "echo {}"[/cyan]
    • Limit throughput: [cyan]ratebatch run items.txt --exec "echo {}" -n 5 -c 1000[/cyan]
    • List profiles: [cyan]ratebatch profiles[/cyan]
    """
    pass


def main():
    """Entry point for the ratebatch console script."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
