"""Routing of collaborator log records to the terminal."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from expcli.xdl import LogLevel, LogRecord, NotificationCode

if TYPE_CHECKING:
    from expcli.output.console import Terminal
    from expcli.progress import Spinner
    from expcli.xdl import Toolkit

logger = logging.getLogger(__name__)


def log_lines(message: str, emit: Callable[[str], None]) -> None:
    for line in message.split("\n"):
        emit(line)


def log_with_level(terminal: Terminal, record: LogRecord) -> None:
    """Print *record* line by line on the sink matching its severity."""
    if not record.msg:
        return
    if record.level <= LogLevel.INFO:
        log_lines(record.msg, terminal.info)
    elif record.level == LogLevel.WARN:
        log_lines(record.msg, terminal.warn)
    else:
        log_lines(record.msg, terminal.error)


class NotificationSink:
    """Process-wide sink: loading notifications drive the spinner."""

    def __init__(self, terminal: Terminal, spinner: Spinner) -> None:
        self._terminal = terminal
        self._spinner = spinner

    def on_message(self, record: LogRecord) -> None:
        match record.code:
            case NotificationCode.START_LOADING:
                self._spinner.start()
                return
            case NotificationCode.STOP_LOADING:
                self._spinner.stop()
                return
            case NotificationCode.DOWNLOAD_CLI_PROGRESS:
                return

        if record.level == LogLevel.INFO:
            self._terminal.info(record.msg)
        elif record.level == LogLevel.WARN:
            self._terminal.warn(record.msg)
        elif record.level >= LogLevel.ERROR:
            self._terminal.error(record.msg)

    def on_complete(self) -> None:
        self._spinner.stop()

    def on_error(self, exc: BaseException) -> None:
        self._spinner.stop()
        logger.debug("Notification stream failed", exc_info=exc)


def register_logs(toolkit: Toolkit, terminal: Terminal, spinner: Spinner) -> NotificationSink:
    """Attach one :class:`NotificationSink` to the notification and global streams."""
    sink = NotificationSink(terminal, spinner)
    toolkit.logs.notifications.add_sink(sink)
    toolkit.logs.global_.add_sink(sink)
    return sink
