"""
CLI Utilities

Shared console, logging setup and input helpers for CLI commands.
"""

import logging
from pathlib import Path
from typing import List

from rich.console import Console
from rich.panel import Panel

console = Console()


def setup_logging(level: str = "WARNING") -> None:
    """Set up logging configuration for the command-line tool."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        force=True
    )


def read_items(path: Path) -> List[str]:
    """Read one item per non-blank line, keeping file order."""
    with open(path, 'r', encoding='utf-8') as f:
        return [line.strip() for line in f if line.strip()]


def print_header(title: str, subtitle: str = "") -> None:
    """Print a formatted header panel."""
    content = f"[bold cyan]{title}[/bold cyan]"
    if subtitle:
        content += f"\n[dim]{subtitle}[/dim]"
    console.print(Panel(content, expand=False))
