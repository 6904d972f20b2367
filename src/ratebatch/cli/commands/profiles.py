"""
Profiles Command

Lists the pacing profiles available from the configuration file.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from ratebatch.cli.config_utils import load_app_config
from ratebatch.cli.error_handling import handle_error
from ratebatch.cli.utils import console
from ratebatch.core.exceptions import RateBatchError


def list_profiles(
    config_file: Annotated[Optional[Path], typer.Option(
        "--config", help="Configuration file (YAML or JSON)"
    )] = None,
):
    """Show configured pacing profiles."""
    try:
        app_config = load_app_config(config_file)
    except RateBatchError as e:
        handle_error(e)

    table = Table(title="Pacing Profiles")
    table.add_column("Name", style="cyan")
    table.add_column("Max ops/cycle", justify="right")
    table.add_column("Cycle (ms)", justify="right")
    table.add_column("Delay/item (ms)", justify="right")
    table.add_column("Strategy")
    table.add_column("On failure")

    for name, profile in sorted(app_config.profiles.items()):
        marker = " *" if name == app_config.default_profile else ""
        table.add_row(
            f"{name}{marker}",
            str(profile.max_operations_per_cycle),
            str(profile.cycle_duration_ms),
            str(profile.delay_per_item_ms),
            profile.strategy.value if profile.strategy else "auto",
            profile.failure_policy.value
        )

    console.print(table)
    console.print("[dim]* default profile[/dim]")
