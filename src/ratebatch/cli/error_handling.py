"""
CLI Error Rendering

Formats RateBatchError instances as rich panels with recovery
suggestions and exits with a non-zero status.
"""

import typer
from rich.console import Console
from rich.padding import Padding
from rich.panel import Panel
from rich.text import Text

from ratebatch.core.exceptions import RateBatchError

console = Console(stderr=True)


def handle_error(err: RateBatchError) -> None:
    """Print a RateBatchError with its suggestions and exit with code 1."""
    console.print()
    console.print(Panel(
        Text(err.message, justify="full"),
        title=f"[bold red]Error: {err.__class__.__name__}[/bold red]",
        border_style="red",
        expand=False
    ))

    if err.suggestions:
        console.print("\n[bold green]Suggested solutions:[/bold green]")
        for i, suggestion in enumerate(err.suggestions, 1):
            suggestion_text = Text(f"{i}. {suggestion.action}: {suggestion.description}\n")
            if suggestion.command:
                suggestion_text.append("   Run: ", style="bold")
                suggestion_text.append(suggestion.command, style="cyan")
            console.print(Padding(suggestion_text, (0, 1)))

    if err.context.correlation_id:
        console.print(Padding(f"Trace ID: [yellow]{err.context.correlation_id}[/yellow]", (1, 0, 0, 0)))

    raise typer.Exit(code=1)
