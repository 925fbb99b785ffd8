"""Collaborator interfaces consumed by the exp CLI.

The project library owns the bundler, the publish pipeline, the
authentication backend and project validation.  This module only pins
down the shape exp relies on; implementations are provided through the
``exp_toolkit`` plugin hook (see :mod:`expcli.plugins`).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from expcli.xdl.records import (
    LogRecord,
    ProjectStatus,
    PublishResult,
    Severity,
    User,
    VersionInfo,
)

Detach = Callable[[], None]


class LogSink(Protocol):
    """Observer for one collaborator log stream."""

    def on_message(self, record: LogRecord) -> None: ...

    def on_complete(self) -> None: ...

    def on_error(self, exc: BaseException) -> None: ...


class LogStream(Protocol):
    def add_sink(self, sink: LogSink) -> Detach: ...


class LogHub(Protocol):
    """Log streams: process-wide ``notifications``/``global_`` plus per-project."""

    notifications: LogStream
    global_: LogStream

    def attach(self, project_dir: Path, sink: LogSink) -> Detach: ...


class ProjectManager(Protocol):
    async def current_status(self, project_dir: Path) -> ProjectStatus: ...

    async def start(self, project_dir: Path, *, verbose: bool = True, **options: object) -> None: ...

    async def stop(self, project_dir: Path) -> None: ...

    async def publish(self, project_dir: Path) -> PublishResult: ...

    async def send_url(self, url: str, recipient: str) -> None: ...


class UserManager(Protocol):
    async def current_user(self) -> User | None: ...

    async def ensure_logged_in(self) -> User: ...

    async def login(
        self,
        username: str | None = None,
        password: str | None = None,
        token: str | None = None,
        github: bool = False,
    ) -> User: ...

    async def logout(self) -> None: ...


class Doctor(Protocol):
    async def validate_low_latency(self, project_dir: Path) -> Severity: ...


class VersionChecker(Protocol):
    async def check(self) -> VersionInfo: ...


class Analytics(Protocol):
    def flush(self) -> None: ...


class Binaries(Protocol):
    async def write_path_to_user_settings(self) -> None: ...


@dataclass(frozen=True)
class Toolkit:
    """Bundle of collaborators handed to every command."""

    projects: ProjectManager
    users: UserManager
    doctor: Doctor
    logs: LogHub
    versions: VersionChecker
    analytics: Analytics
    binaries: Binaries
