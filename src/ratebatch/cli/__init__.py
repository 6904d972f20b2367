"""
RateBatch Command-Line Interface

Typer-based commands for running shell commands over a list of items
under a rate limit.
"""

from ratebatch import __version__

__all__ = ["__version__"]
