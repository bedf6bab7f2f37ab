#!/usr/bin/env python3
from __future__ import annotations
import time
from typing import Optional, Callable
from contextlib import contextmanager
from dataclasses import dataclass
from rich.progress import Progress, TaskID, BarColumn, TextColumn, TimeRemainingColumn, SpinnerColumn
from rich.console import Console


@dataclass
class StageMetrics:
    """Container for per-stage timing."""
    start_time: float
    end_time: Optional[float] = None

    @property
    def duration(self) -> float:
        """Get duration in seconds."""
        if self.end_time is None:
            return time.time() - self.start_time
        return self.end_time - self.start_time


class ProgressTracker:
    """Progress display for evaluation stages, with per-stage timing."""

    def __init__(self, console: Optional[Console] = None, enabled: bool = True):
        self.console = console or Console(stderr=True)
        self.enabled = enabled
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeRemainingColumn(),
            console=self.console,
            disable=not enabled,
            transient=True,
        )
        self.metrics: dict[str, StageMetrics] = {}

    def start(self) -> None:
        """Start the progress display."""
        self.progress.start()

    def stop(self) -> None:
        """Stop the progress display."""
        self.progress.stop()

    def add_task(
        self,
        description: str,
        total: Optional[int] = None,
        stage: str = "processing"
    ) -> TaskID:
        """Add a new progress task."""
        task_id = self.progress.add_task(description, total=total)
        self.metrics[stage] = StageMetrics(start_time=time.time())
        return task_id

    def update(
        self,
        task_id: TaskID,
        advance: int = 1,
        description: Optional[str] = None
    ) -> None:
        """Update progress for a task."""
        self.progress.update(task_id, advance=advance, description=description)

    def complete_task(self, task_id: TaskID, stage: Optional[str] = None) -> None:
        """Mark a task as complete and hide it from the display."""
        total = next((task.total for task in self.progress.tasks if task.id == task_id), None)
        if total is not None:
            self.progress.update(task_id, completed=total)
        self.progress.stop_task(task_id)
        self.progress.update(task_id, visible=False)
        self.progress.refresh()
        if stage and stage in self.metrics:
            self.metrics[stage].end_time = time.time()

    @contextmanager
    def task_context(
        self,
        description: str,
        total: Optional[int] = None,
        stage: str = "processing"
    ):
        """Context manager for automatic task lifecycle management."""
        task_id = self.add_task(description, total=total, stage=stage)
        try:
            yield task_id
        finally:
            self.complete_task(task_id, stage)

    def advance_callback(self, task_id: TaskID) -> Callable[[], None]:
        """Return a zero-argument callable that advances ``task_id`` by one step."""
        def advance() -> None:
            self.update(task_id, advance=1)
        return advance

    def get_metrics(self, stage: str) -> Optional[StageMetrics]:
        """Get timing metrics for a specific stage."""
        return self.metrics.get(stage)

    def print_summary(self) -> None:
        """Print a summary of per-stage timings."""
        if not self.enabled:
            return
        self.console.print("\n[bold]Stage Timings:[/bold]")

        for stage, metrics in self.metrics.items():
            duration = metrics.duration
            if duration < 0.01:
                duration_str = "< 0.01s"
            else:
                duration_str = f"{duration:.2f}s"
            self.console.print(f"  {stage}: {duration_str}")
