"""Tests for the built-in local collaborators."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path

import pytest

from expcli.config.settings import ExpSettings
from expcli.errors import ApiError, XDLError
from expcli.plugins.builtins.local import (
    LocalBinaries,
    LocalDoctor,
    LocalLogHub,
    LocalProjectManager,
    LocalUserManager,
    LocalVersionChecker,
    build_local_toolkit,
)
from expcli.xdl import LogLevel, LogRecord, ProjectStatus, Severity, UpdateState


class _Recorder:
    def __init__(self) -> None:
        self.records: list[LogRecord] = []
        self.completed = False
        self.errors: list[Exception] = []

    def on_message(self, record: LogRecord) -> None:
        self.records.append(record)

    def on_complete(self) -> None:
        self.completed = True

    def on_error(self, exc: Exception) -> None:
        self.errors.append(exc)


class TestLogHub:
    def test_attach_and_detach(self, tmp_path: Path) -> None:
        hub = LocalLogHub()
        sink = _Recorder()
        detach = hub.attach(tmp_path, sink)
        hub.emit(tmp_path, LogRecord(msg="one"))
        detach()
        hub.emit(tmp_path, LogRecord(msg="two"))
        assert [r.msg for r in sink.records] == ["one"]

    def test_streams_are_keyed_by_resolved_path(self, tmp_path: Path) -> None:
        hub = LocalLogHub()
        sink = _Recorder()
        hub.attach(tmp_path / "app" / ".." / "app", sink)
        hub.emit(tmp_path / "app", LogRecord(msg="hello"))
        assert len(sink.records) == 1

    def test_failing_sink_gets_on_error(self) -> None:
        hub = LocalLogHub()

        class Broken(_Recorder):
            def on_message(self, record: LogRecord) -> None:
                raise RuntimeError("render failed")

        sink = Broken()
        hub.notifications.add_sink(sink)
        hub.notifications.emit(LogRecord(msg="x"))
        hub.notifications.close()
        assert str(sink.errors[0]) == "render failed"
        assert sink.completed is True


class TestUserManager:
    def test_login_persists_session(self, tmp_path: Path) -> None:
        users = LocalUserManager(tmp_path)
        user = asyncio.run(users.login(username="alice", password="pw"))
        assert user.username == "alice"
        assert asyncio.run(LocalUserManager(tmp_path).current_user()) == user
        state = json.loads((tmp_path / "state.json").read_text())
        assert "password" not in state["auth"]

    def test_logout_clears_session(self, tmp_path: Path) -> None:
        users = LocalUserManager(tmp_path)
        asyncio.run(users.login(username="alice", token="tok"))
        asyncio.run(users.logout())
        assert asyncio.run(users.current_user()) is None

    def test_ensure_logged_in(self, tmp_path: Path) -> None:
        with pytest.raises(XDLError) as exc_info:
            asyncio.run(LocalUserManager(tmp_path).ensure_logged_in())
        assert exc_info.value.code == "NOT_LOGGED_IN"

    def test_missing_credentials(self, tmp_path: Path) -> None:
        with pytest.raises(ApiError):
            asyncio.run(LocalUserManager(tmp_path).login(username="alice"))

    def test_github_not_supported(self, tmp_path: Path) -> None:
        with pytest.raises(XDLError):
            asyncio.run(LocalUserManager(tmp_path).login(github=True))


class TestProjectManager:
    def test_status(self, tmp_path: Path) -> None:
        projects = LocalProjectManager()
        assert asyncio.run(projects.current_status(tmp_path)) == ProjectStatus.EXITED
        info = tmp_path / ".expo" / "packager-info.json"
        info.parent.mkdir()
        info.write_text(json.dumps({"packagerPid": 4242}))
        assert asyncio.run(projects.current_status(tmp_path)) == ProjectStatus.RUNNING

    def test_start_needs_a_library(self, tmp_path: Path) -> None:
        with pytest.raises(XDLError, match="project library"):
            asyncio.run(LocalProjectManager().start(tmp_path))


class TestDoctor:
    def _validate(self, project_dir: Path) -> tuple[Severity, list[LogRecord]]:
        hub = LocalLogHub()
        sink = _Recorder()
        hub.attach(project_dir, sink)
        severity = asyncio.run(LocalDoctor(hub).validate_low_latency(project_dir))
        return severity, sink.records

    def test_missing_app_json_is_fatal(self, tmp_path: Path) -> None:
        severity, records = self._validate(tmp_path)
        assert severity == Severity.FATAL
        assert records[0].level == LogLevel.ERROR

    def test_invalid_json_is_fatal(self, tmp_path: Path) -> None:
        (tmp_path / "app.json").write_text("{not json")
        assert self._validate(tmp_path)[0] == Severity.FATAL

    def test_missing_sdk_version_warns(self, tmp_path: Path) -> None:
        (tmp_path / "app.json").write_text(json.dumps({"expo": {"name": "demo"}}))
        severity, records = self._validate(tmp_path)
        assert severity == Severity.WARNING
        assert records[0].level == LogLevel.WARN

    def test_valid_project(self, tmp_path: Path) -> None:
        (tmp_path / "app.json").write_text(json.dumps({"expo": {"sdkVersion": "17.0.0"}}))
        assert self._validate(tmp_path) == (Severity.NO_ISSUES, [])


class TestVersionChecker:
    @pytest.mark.parametrize(
        ("current", "latest", "state"),
        [
            ("1.2.0", "1.10.0", UpdateState.OUT_OF_DATE),
            ("2.0.0", "1.9.9", UpdateState.AHEAD_OF_PUBLISHED),
            ("1.2.0", "1.2.0", UpdateState.UP_TO_DATE),
            ("1.0", "1.0.0", UpdateState.UP_TO_DATE),
            ("1.1.0rc1", "1.1.0", UpdateState.OUT_OF_DATE),
            ("1.1.0", "1.1.0rc1", UpdateState.AHEAD_OF_PUBLISHED),
        ],
    )
    def test_states(
        self, monkeypatch: pytest.MonkeyPatch, current: str, latest: str, state: UpdateState
    ) -> None:
        checker = LocalVersionChecker()
        monkeypatch.setattr(checker, "installed_version", lambda: current)
        monkeypatch.setattr(checker, "fetch_latest", lambda: latest)
        info = asyncio.run(checker.check())
        assert info.state == state
        assert (info.current, info.latest) == (current, latest)

    def test_unparseable_version_is_a_library_error(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        checker = LocalVersionChecker()
        monkeypatch.setattr(checker, "installed_version", lambda: "1.0.0")
        monkeypatch.setattr(checker, "fetch_latest", lambda: "not a version")
        with pytest.raises(XDLError) as exc_info:
            asyncio.run(checker.check())
        assert exc_info.value.code == "UPDATE_CHECK"


class TestBinaries:
    def test_writes_path_once(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PATH", "/usr/local/bin:/usr/bin")
        binaries = LocalBinaries(tmp_path)
        asyncio.run(binaries.write_path_to_user_settings())
        settings_file = tmp_path / "settings.json"
        first = settings_file.stat().st_mtime_ns
        asyncio.run(binaries.write_path_to_user_settings())
        assert json.loads(settings_file.read_text())["PATH"] == os.environ["PATH"]
        assert settings_file.stat().st_mtime_ns == first


def test_build_local_toolkit_uses_home(tmp_path: Path) -> None:
    toolkit = build_local_toolkit(ExpSettings.from_cli(home=tmp_path))
    asyncio.run(toolkit.users.login(username="alice", password="pw"))
    assert (tmp_path / "state.json").is_file()
