"""Progress display for directory runs."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)


class AnalysisProgress:
    """Progress bar fed by the engine's ``(completed, total, path)`` callback."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None

    def start(self) -> None:
        """Start the progress display."""
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.description}"),
            BarColumn(bar_width=40, complete_style="cyan", finished_style="green"),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
        self._progress.start()
        self._task_id = self._progress.add_task("Discovering files...", total=None)

    def update(self, completed: int, total: int, path: str) -> None:
        if not self._progress or self._task_id is None:
            return
        self._progress.update(
            self._task_id,
            completed=completed,
            total=total,
            description=f"Analyzing {Path(path).name}",
        )

    def stop(self) -> None:
        if self._progress:
            self._progress.stop()
            self._progress = None
            self._task_id = None

    def __enter__(self) -> AnalysisProgress:
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
