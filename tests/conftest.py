"""Shared pytest fixtures and collaborator fakes for exp tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from expcli.errors import XDLError
from expcli.xdl import (
    LogRecord,
    LogSink,
    ProjectStatus,
    PublishResult,
    Severity,
    Toolkit,
    UpdateState,
    User,
    VersionInfo,
)


class FakeLogStream:
    def __init__(self) -> None:
        self.sinks: list[LogSink] = []

    def add_sink(self, sink: LogSink) -> Callable[[], None]:
        self.sinks.append(sink)
        return lambda: self.sinks.remove(sink) if sink in self.sinks else None

    def emit(self, record: LogRecord) -> None:
        for sink in list(self.sinks):
            sink.on_message(record)


class FakeLogHub:
    def __init__(self) -> None:
        self.notifications = FakeLogStream()
        self.global_ = FakeLogStream()
        self.projects: dict[Path, FakeLogStream] = {}

    def attach(self, project_dir: Path, sink: LogSink) -> Callable[[], None]:
        return self.projects.setdefault(project_dir, FakeLogStream()).add_sink(sink)

    def emit(self, project_dir: Path, record: LogRecord) -> None:
        self.projects.setdefault(project_dir, FakeLogStream()).emit(record)


class FakeProjects:
    def __init__(self) -> None:
        self.status = ProjectStatus.EXITED
        self.url = "exp://exp.host/@alice/demo"
        self.calls: list[tuple[Any, ...]] = []
        self.verbose: list[bool] = []

    async def current_status(self, project_dir: Path) -> ProjectStatus:
        self.calls.append(("status", project_dir))
        return self.status

    async def start(self, project_dir: Path, *, verbose: bool = True, **options: object) -> None:
        self.verbose.append(verbose)
        self.calls.append(("start", project_dir, options))

    async def stop(self, project_dir: Path) -> None:
        self.calls.append(("stop", project_dir))

    async def publish(self, project_dir: Path) -> PublishResult:
        self.calls.append(("publish", project_dir))
        return PublishResult(url=self.url)

    async def send_url(self, url: str, recipient: str) -> None:
        self.calls.append(("send_url", url, recipient))

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeUsers:
    def __init__(self, user: User | None = None) -> None:
        self.user = user
        self.logins: list[dict[str, Any]] = []

    async def current_user(self) -> User | None:
        return self.user

    async def ensure_logged_in(self) -> User:
        if self.user is None:
            raise XDLError("Not logged in.", code="NOT_LOGGED_IN")
        return self.user

    async def login(
        self,
        username: str | None = None,
        password: str | None = None,
        token: str | None = None,
        github: bool = False,
    ) -> User:
        self.logins.append(
            {"username": username, "password": password, "token": token, "github": github}
        )
        self.user = User(username=username or "github-user", token=token)
        return self.user

    async def logout(self) -> None:
        self.user = None


class FakeDoctor:
    def __init__(self) -> None:
        self.severity = Severity.NO_ISSUES
        self.validated: list[Path] = []

    async def validate_low_latency(self, project_dir: Path) -> Severity:
        self.validated.append(project_dir)
        return self.severity


class FakeVersions:
    def __init__(self) -> None:
        self.info = VersionInfo(state=UpdateState.UP_TO_DATE, current="1.0.0", latest="1.0.0")
        self.error: Exception | None = None
        self.checks = 0

    async def check(self) -> VersionInfo:
        self.checks += 1
        if self.error is not None:
            raise self.error
        return self.info


class FakeAnalytics:
    def __init__(self) -> None:
        self.flushes = 0

    def flush(self) -> None:
        self.flushes += 1


class FakeBinaries:
    def __init__(self) -> None:
        self.writes = 0

    async def write_path_to_user_settings(self) -> None:
        self.writes += 1


@dataclass
class Fakes:
    """All collaborator fakes plus the :class:`Toolkit` bundling them."""

    projects: FakeProjects = field(default_factory=FakeProjects)
    users: FakeUsers = field(default_factory=lambda: FakeUsers(User(username="alice")))
    doctor: FakeDoctor = field(default_factory=FakeDoctor)
    logs: FakeLogHub = field(default_factory=FakeLogHub)
    versions: FakeVersions = field(default_factory=FakeVersions)
    analytics: FakeAnalytics = field(default_factory=FakeAnalytics)
    binaries: FakeBinaries = field(default_factory=FakeBinaries)

    @property
    def toolkit(self) -> Toolkit:
        return Toolkit(
            projects=self.projects,
            users=self.users,
            doctor=self.doctor,
            logs=self.logs,
            versions=self.versions,
            analytics=self.analytics,
            binaries=self.binaries,
        )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fakes() -> Fakes:
    return Fakes()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user state in a temp home and clear env vars that change behaviour."""
    monkeypatch.setenv("EXP_HOME", str(tmp_path / "exp-home"))
    for name in ("EXPO_DEBUG", "SERVER_URL", "EXP_OFFLINE", "EXP_OUTPUT", "EXP_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    exp = logging.getLogger("expcli")
    exp_level = exp.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    exp.setLevel(exp_level)


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A temp project directory that is also the CWD."""
    root = tmp_path / "app"
    root.mkdir()
    monkeypatch.chdir(root)
    return root
