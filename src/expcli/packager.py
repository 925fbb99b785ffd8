"""Project log sinks attached by the project-directory action wrapper.

``PackagerLogSink`` turns bundle build notifications into a progress bar
and prints everything else by severity.  ``DeviceLogSink`` only prints
``device``-tagged records.  Each sink handles the records the other one
ignores, so nothing is printed twice.

Progress bar lifecycle: absent -> active -> complete -> absent.  A second
build-start while a bar is active is ignored; the active bar is kept.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from expcli.logs import log_with_level
from expcli.progress import BuildProgress
from expcli.xdl import LogRecord, NotificationCode

if TYPE_CHECKING:
    from pathlib import Path

    from expcli.output.console import Terminal

logger = logging.getLogger(__name__)

DEVICE_TAG = "device"


class PackagerLogSink:
    """Bundle progress and packager logs for one project directory."""

    def __init__(self, project_dir: Path, terminal: Terminal) -> None:
        self.project_dir = project_dir
        self._terminal = terminal
        self.bar: BuildProgress | None = None

    def on_message(self, record: LogRecord) -> None:
        if record.tag == DEVICE_TAG:
            return
        match record.code:
            case NotificationCode.START_BUILD_BUNDLE:
                self.on_start_build_bundle()
            case NotificationCode.BUILD_BUNDLE_PROGRESS:
                self.on_progress_build_bundle(record.percent or 0)
            case NotificationCode.FINISH_BUILD_BUNDLE:
                self.on_finish_build_bundle(record.error, record.start_time, record.end_time)
            case _:
                log_with_level(self._terminal, record)

    def on_complete(self) -> None:
        self._teardown()

    def on_error(self, exc: BaseException) -> None:
        self._teardown()
        self._terminal.error(str(exc))

    def on_start_build_bundle(self) -> None:
        if self.bar is not None:
            logger.debug("Bundle build already in progress for %s; ignoring start", self.project_dir)
            return
        self.bar = BuildProgress(self._terminal.console)
        self.bar.start()
        self._terminal.set_bundle_progress(self.bar)

    def on_progress_build_bundle(self, percent: float) -> None:
        if self.bar is None or self.bar.complete:
            return
        ticks = int(percent) - self.bar.curr
        if ticks > 0:
            self.bar.tick(ticks)

    def on_finish_build_bundle(
        self,
        error: str | None,
        start_time: datetime | None,
        end_time: datetime | None,
    ) -> None:
        if self.bar is None:
            return
        self.bar.finish()
        self._teardown()

        if error:
            self._terminal.info("Failed building JavaScript bundle.", style="exp.error")
        else:
            elapsed = _elapsed_ms(start_time, end_time)
            self._terminal.info(
                f"Finished building JavaScript bundle in {elapsed}ms.", style="exp.ok"
            )

    def _teardown(self) -> None:
        if self.bar is None:
            return
        self.bar.stop()
        self._terminal.set_bundle_progress(None)
        self.bar = None


class DeviceLogSink:
    """Prints ``device``-tagged records; needed for validation logging."""

    def __init__(self, terminal: Terminal) -> None:
        self._terminal = terminal

    def on_message(self, record: LogRecord) -> None:
        if record.tag == DEVICE_TAG:
            log_with_level(self._terminal, record)

    def on_complete(self) -> None:
        pass

    def on_error(self, exc: BaseException) -> None:
        logger.debug("Device log stream failed", exc_info=exc)


def _elapsed_ms(start_time: datetime | None, end_time: datetime | None) -> int:
    if start_time is None or end_time is None:
        return 0
    return int((end_time - start_time).total_seconds() * 1000)
