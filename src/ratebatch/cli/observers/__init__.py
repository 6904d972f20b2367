"""
CLI Observers Module for RateBatch

Observer implementations that turn run callbacks into terminal output.
"""

from .progress import CLIProgressObserver

__all__ = ['CLIProgressObserver']
