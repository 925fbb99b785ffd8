"""Bundle build progress bar and loading spinner."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.errors import LiveError
from rich.progress import BarColumn, Progress, TaskID, TaskProgressColumn, TextColumn

if TYPE_CHECKING:
    from rich.console import Console
    from rich.status import Status


class BuildProgress:
    """Determinate 0–100 progress bar for one JavaScript bundle build.

    ``curr`` never decreases: ticks of zero or less are ignored and the
    counter is clamped to ``total``.
    """

    total = 100

    def __init__(self, console: Console) -> None:
        self.curr = 0
        self._progress = Progress(
            TextColumn("Building JavaScript bundle"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        )
        self._task: TaskID | None = None
        self._live = False

    @property
    def complete(self) -> bool:
        return self.curr >= self.total

    def start(self) -> None:
        self._task = self._progress.add_task("bundle", total=self.total)
        try:
            self._progress.start()
        except LiveError:
            # Another live display (e.g. the spinner) owns the console; keep counting.
            return
        self._live = True

    def tick(self, ticks: int) -> None:
        if ticks <= 0 or self.complete:
            return
        self.curr = min(self.total, self.curr + ticks)
        if self._task is not None:
            self._progress.update(self._task, completed=self.curr)

    def finish(self) -> None:
        """Force the bar to 100% if it has not completed."""
        self.tick(self.total - self.curr)

    def refresh(self) -> None:
        """Redraw the bar below anything printed since the last render."""
        if self._live:
            self._progress.refresh()

    def stop(self) -> None:
        self._progress.stop()
        self._live = False


class Spinner:
    """Indeterminate loading spinner; ``start``/``stop`` are idempotent."""

    def __init__(self, console: Console, message: str = "") -> None:
        self._console = console
        self._message = message
        self._status: Status | None = None

    @property
    def active(self) -> bool:
        return self._status is not None

    def start(self) -> None:
        if self._status is not None:
            return
        status = self._console.status(self._message)
        try:
            status.start()
        except LiveError:
            return
        self._status = status

    def stop(self) -> None:
        if self._status is None:
            return
        self._status.stop()
        self._status = None
