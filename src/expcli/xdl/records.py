"""Data records exchanged with the project library collaborator."""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum, StrEnum

from pydantic import BaseModel


class LogLevel(IntEnum):
    """Bunyan-compatible log levels used by collaborator log streams."""

    TRACE = 10
    DEBUG = 20
    INFO = 30
    WARN = 40
    ERROR = 50
    FATAL = 60


class NotificationCode(StrEnum):
    START_LOADING = "START_LOADING"
    STOP_LOADING = "STOP_LOADING"
    DOWNLOAD_CLI_PROGRESS = "DOWNLOAD_CLI_PROGRESS"
    START_BUILD_BUNDLE = "START_BUILD_BUNDLE"
    BUILD_BUNDLE_PROGRESS = "BUILD_BUNDLE_PROGRESS"
    FINISH_BUILD_BUNDLE = "FINISH_BUILD_BUNDLE"


class ProjectStatus(StrEnum):
    RUNNING = "running"
    ILL = "ill"
    EXITED = "exited"


class Severity(IntEnum):
    """Doctor validation outcome, ordered by seriousness."""

    NO_ISSUES = 0
    WARNING = 1
    ERROR = 2
    FATAL = 3


class UpdateState(StrEnum):
    UP_TO_DATE = "up-to-date"
    OUT_OF_DATE = "out-of-date"
    AHEAD_OF_PUBLISHED = "ahead-of-published"


class LogRecord(BaseModel):
    """One leveled message from a collaborator log stream.

    Bundle build notifications carry their payload in the optional fields:
    ``percent`` for ``BUILD_BUNDLE_PROGRESS``; ``error``, ``start_time`` and
    ``end_time`` for ``FINISH_BUILD_BUNDLE``.
    """

    model_config = {"frozen": True}

    level: int = LogLevel.INFO
    msg: str = ""
    code: NotificationCode | None = None
    tag: str | None = None
    percent: float | None = None
    error: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None


class VersionInfo(BaseModel):
    """Result of a version check.  ``state`` is kept as a plain string so
    unknown states reported by a collaborator still validate."""

    model_config = {"frozen": True}

    state: str
    current: str
    latest: str | None = None


class User(BaseModel):
    model_config = {"frozen": True}

    username: str
    token: str | None = None


class PublishResult(BaseModel):
    model_config = {"frozen": True}

    url: str
