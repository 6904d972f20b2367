"""
CLI Progress Observer for RateBatch

Renders run progress as a rich progress bar. The observer's
``on_progress`` and ``on_complete`` methods are passed straight to a
ProcessingRequest as its callbacks.
"""

from typing import List, Optional

from rich.console import Console
from rich.progress import (
    BarColumn, Progress, SpinnerColumn, TaskID, TaskProgressColumn,
    TextColumn, TimeElapsedColumn
)


class CLIProgressObserver:
    """
    Progress bar driven by a run's percentage callbacks.

    Features:
    - Percentage bar with elapsed time
    - Quiet mode that records values without rendering
    - History of received values for summaries and tests
    """

    def __init__(self, console: Optional[Console] = None, quiet: bool = False):
        """
        Initialize CLI progress observer.

        Args:
            console: Console to render on
            quiet: Record progress without drawing anything
        """
        self.console = console or Console()
        self.quiet = quiet
        self.history: List[int] = []
        self.completed = False

        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None

    def __enter__(self) -> 'CLIProgressObserver':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self, description: str = "Processing") -> None:
        """Start rendering the progress bar."""
        if self.quiet or self._progress is not None:
            return
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=False
        )
        self._progress.start()
        self._task_id = self._progress.add_task(f"[cyan]{description}", total=100)

    def on_progress(self, percentage: int) -> None:
        """Record and display a progress value."""
        self.history.append(percentage)
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, completed=percentage)

    def on_complete(self) -> None:
        """Mark the run as finished."""
        self.completed = True
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, completed=100)

    def stop(self) -> None:
        """Stop rendering and release the terminal."""
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task_id = None
