"""Rich-backed terminal output for exp commands.

``Terminal`` is the single sink for user-facing text.  In raw output mode
styling is dropped so piped output stays machine-readable.  Warnings and
errors always go to stderr; while a bundle progress bar is live it is
redrawn after each of them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.theme import Theme

if TYPE_CHECKING:
    from expcli.progress import BuildProgress

EXP_THEME = Theme(
    {
        "exp.ok": "bold green",
        "exp.error": "bold red",
        "exp.warning": "yellow",
        "exp.hint": "grey50",
        "exp.trace": "grey50",
        "exp.url": "underline",
        "exp.advisory": "green",
    }
)


class Terminal:
    """User-facing output with pretty and raw modes."""

    def __init__(
        self,
        *,
        raw: bool = False,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self.raw = raw
        self.console = _themed(console) or Console(
            theme=EXP_THEME, highlight=False, no_color=raw
        )
        self.err_console = _themed(err_console) or Console(
            theme=EXP_THEME, highlight=False, no_color=raw, stderr=True
        )
        self._bundle_progress: BuildProgress | None = None

    def set_bundle_progress(self, bar: BuildProgress | None) -> None:
        """Redraw *bar* after every warning or error while it is live."""
        self._bundle_progress = bar

    @property
    def bundle_progress(self) -> BuildProgress | None:
        return self._bundle_progress

    def info(self, message: str, *, style: str | None = None) -> None:
        if self.raw:
            return
        self._print(self.console, message, style)

    def warn(self, message: str, *, style: str | None = "exp.warning") -> None:
        self._print_err(message, style)

    def error(self, message: str, *, style: str | None = None) -> None:
        self._print_err(message, style)

    def raw_output(self, message: str) -> None:
        """Print *message* only in raw mode (the machine-readable twin of ``info``)."""
        if self.raw:
            self._print(self.console, message, None)

    def newline(self) -> None:
        if not self.raw:
            self.console.print()

    def _print_err(self, message: str, style: str | None) -> None:
        self._print(self.err_console, message, style)
        if self._bundle_progress is not None:
            self._bundle_progress.refresh()

    def _print(self, console: Console, message: str, style: str | None) -> None:
        console.print(
            message,
            style=None if self.raw else style,
            markup=False,
            highlight=False,
            soft_wrap=True,
        )


def _themed(console: Console | None) -> Console | None:
    """Make the exp theme styles resolvable on a caller-supplied *console*."""
    if console is not None:
        console.push_theme(EXP_THEME)
    return console
