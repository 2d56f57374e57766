"""Terminal progress for the per-source fetch fan-out."""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock

from rich.console import Console
from rich.errors import LiveError
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)


@dataclass
class ProgressState:
    total: int
    success: int = 0
    failed: int = 0
    current_url: str | None = None

    @property
    def completed(self) -> int:
        return self.success + self.failed


class ProgressReporter:
    """Render fetch progress and keep success/failure counters.

    Counters are kept even when rendering is disabled or the console is not
    a terminal, so callers can always read :attr:`state`.
    """

    def __init__(self, enabled: bool = True, console: Console | None = None) -> None:
        self.enabled = enabled
        self._console = console
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None
        self._lock = Lock()
        self.state: ProgressState | None = None

    def start(self, total: int) -> None:
        self.state = ProgressState(total=total)
        if not self.enabled:
            return
        console = self._console or Console()
        if not console.is_terminal:
            self.enabled = False
            return
        self._progress = Progress(
            SpinnerColumn(style="cyan"),
            TextColumn("[bold blue]sources"),
            BarColumn(bar_width=None, complete_style="green", finished_style="green"),
            TaskProgressColumn(show_speed=False),
            TimeElapsedColumn(),
            TextColumn("[green]✓{task.fields[success]:>3}", justify="right"),
            TextColumn("[red]✗{task.fields[failed]:>3}", justify="right"),
            TextColumn("[dim]{task.fields[current_url]}", justify="left"),
            transient=True,
            console=console,
        )
        try:
            self._progress.start()
        except LiveError:
            # Another live display owns the console.
            self.enabled = False
            self._progress = None
            return
        self._task_id = self._progress.add_task(
            "fetch", total=total, success=0, failed=0, current_url="waiting…"
        )

    def advance(self, success: bool, current_url: str | None = None) -> None:
        if self.state is None:
            raise RuntimeError("ProgressReporter.start must be called before advance")
        with self._lock:
            if success:
                self.state.success += 1
            else:
                self.state.failed += 1
            if current_url:
                self.state.current_url = current_url
            if self._progress is not None and self._task_id is not None:
                display_url = self.state.current_url or ""
                if len(display_url) > 60:
                    display_url = display_url[:57] + "..."
                self._progress.update(
                    self._task_id,
                    advance=1,
                    success=self.state.success,
                    failed=self.state.failed,
                    current_url=display_url,
                )

    def close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
        self._task_id = None


__all__ = ["ProgressReporter", "ProgressState"]
