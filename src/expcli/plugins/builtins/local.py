"""Built-in local collaborators.

Used when no project library is installed.  Session and settings state is
kept as JSON under the exp home directory; the bundler, publishing and
device tooling are not available locally and raise :class:`XDLError`.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import urllib.error
import urllib.request
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import TYPE_CHECKING, Any

from packaging.version import InvalidVersion, Version

from expcli import __version__
from expcli.errors import ApiError, XDLError
from expcli.plugins.hookspecs import hookimpl
from expcli.xdl import (
    LogLevel,
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

if TYPE_CHECKING:
    from expcli.config.settings import ExpSettings
    from expcli.xdl import Detach

logger = logging.getLogger(__name__)

DISTRIBUTION = "exp-cli"
PYPI_JSON = "https://pypi.org/pypi/{name}/json"
STATE_FILE = "state.json"
SETTINGS_FILE = "settings.json"
PACKAGER_INFO = Path(".expo") / "packager-info.json"

_NO_LIBRARY = "requires a project library; install one that provides the exp_toolkit hook"


def _read_json(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.warning("Ignoring unreadable state file %s", path, exc_info=True)
        return {}
    return data if isinstance(data, dict) else {}


def _write_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


# ── Logs ─────────────────────────────────────────────────────────────


class LocalLogStream:
    """In-process fan-out of log records to attached sinks."""

    def __init__(self) -> None:
        self._sinks: list[LogSink] = []

    def add_sink(self, sink: LogSink) -> Detach:
        self._sinks.append(sink)

        def detach() -> None:
            if sink in self._sinks:
                self._sinks.remove(sink)

        return detach

    def emit(self, record: LogRecord) -> None:
        for sink in list(self._sinks):
            try:
                sink.on_message(record)
            except Exception as exc:
                sink.on_error(exc)

    def close(self) -> None:
        for sink in list(self._sinks):
            sink.on_complete()
        self._sinks.clear()


class LocalLogHub:
    def __init__(self) -> None:
        self.notifications = LocalLogStream()
        self.global_ = LocalLogStream()
        self._projects: dict[Path, LocalLogStream] = {}

    def stream_for(self, project_dir: Path) -> LocalLogStream:
        return self._projects.setdefault(project_dir.resolve(), LocalLogStream())

    def attach(self, project_dir: Path, sink: LogSink) -> Detach:
        return self.stream_for(project_dir).add_sink(sink)

    def emit(self, project_dir: Path, record: LogRecord) -> None:
        self.stream_for(project_dir).emit(record)


# ── Users ────────────────────────────────────────────────────────────


class LocalUserManager:
    """Session store backed by ``<home>/state.json``."""

    def __init__(self, home: Path) -> None:
        self._path = home / STATE_FILE

    async def current_user(self) -> User | None:
        auth = _read_json(self._path).get("auth")
        if not isinstance(auth, dict) or not auth.get("username"):
            return None
        return User.model_validate(auth)

    async def ensure_logged_in(self) -> User:
        user = await self.current_user()
        if user is None:
            raise XDLError("Not logged in. Run `exp login` first.", code="NOT_LOGGED_IN")
        return user

    async def login(
        self,
        username: str | None = None,
        password: str | None = None,
        token: str | None = None,
        github: bool = False,
    ) -> User:
        if github:
            raise XDLError(f"GitHub login {_NO_LIBRARY}.", code="NOT_SUPPORTED")
        if not username:
            raise ApiError("A username is required to log in.", code="INVALID_USERNAME")
        if not password and not token:
            raise ApiError("A password or token is required to log in.", code="INVALID_PASSWORD")
        user = User(username=username, token=token)
        state = _read_json(self._path)
        state["auth"] = user.model_dump(exclude_none=True)
        _write_json(self._path, state)
        logger.debug("Stored session for %s in %s", username, self._path)
        return user

    async def logout(self) -> None:
        state = _read_json(self._path)
        if state.pop("auth", None) is not None:
            _write_json(self._path, state)


# ── Projects ─────────────────────────────────────────────────────────


class LocalProjectManager:
    """Reads packager state; everything that needs the bundler is unavailable."""

    async def current_status(self, project_dir: Path) -> ProjectStatus:
        info = _read_json(project_dir / PACKAGER_INFO)
        if info.get("packagerPid"):
            return ProjectStatus.RUNNING
        return ProjectStatus.EXITED

    async def start(self, project_dir: Path, *, verbose: bool = True, **options: object) -> None:
        raise XDLError(f"Starting a project {_NO_LIBRARY}.", code="NOT_SUPPORTED")

    async def stop(self, project_dir: Path) -> None:
        raise XDLError(f"Stopping a project {_NO_LIBRARY}.", code="NOT_SUPPORTED")

    async def publish(self, project_dir: Path) -> PublishResult:
        raise XDLError(f"Publishing {_NO_LIBRARY}.", code="NOT_SUPPORTED")

    async def send_url(self, url: str, recipient: str) -> None:
        raise XDLError(f"Sending links {_NO_LIBRARY}.", code="NOT_SUPPORTED")


class LocalDoctor:
    """Checks that the project has a readable ``app.json``.

    Findings are logged on the project's stream so attached sinks show them.
    """

    def __init__(self, hub: LocalLogHub) -> None:
        self._hub = hub

    async def validate_low_latency(self, project_dir: Path) -> Severity:
        app_json = project_dir / "app.json"
        if not app_json.is_file():
            self._report(project_dir, LogLevel.ERROR, f"No app.json found in {project_dir}.")
            return Severity.FATAL
        try:
            config = json.loads(app_json.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            self._report(project_dir, LogLevel.ERROR, f"app.json is not valid JSON: {exc}")
            return Severity.FATAL

        expo = config.get("expo", config) if isinstance(config, dict) else {}
        if not isinstance(expo, dict) or not expo.get("sdkVersion"):
            self._report(
                project_dir, LogLevel.WARN, "No sdkVersion specified in app.json; using the default."
            )
            return Severity.WARNING
        return Severity.NO_ISSUES

    def _report(self, project_dir: Path, level: LogLevel, msg: str) -> None:
        self._hub.emit(project_dir, LogRecord(level=level, msg=msg, tag="expo"))


# ── Versions, analytics, binaries ────────────────────────────────────


def _parse_version(value: str) -> Version:
    try:
        return Version(value)
    except InvalidVersion as exc:
        raise XDLError(f"Unrecognized version string: {value!r}", code="UPDATE_CHECK") from exc


class LocalVersionChecker:
    """Compares the installed version with the latest release on PyPI."""

    def __init__(self, distribution: str = DISTRIBUTION, *, timeout: float = 5.0) -> None:
        self._distribution = distribution
        self._timeout = timeout

    def installed_version(self) -> str:
        try:
            return version(self._distribution)
        except PackageNotFoundError:
            return __version__

    def fetch_latest(self) -> str:
        url = PYPI_JSON.format(name=self._distribution)
        try:
            with urllib.request.urlopen(url, timeout=self._timeout) as response:  # noqa: S310
                data = json.load(response)
        except (urllib.error.URLError, TimeoutError, json.JSONDecodeError) as exc:
            raise XDLError(f"Could not check for updates: {exc}", code="UPDATE_CHECK") from exc
        return str(data["info"]["version"])

    async def check(self) -> VersionInfo:
        current = self.installed_version()
        latest = await asyncio.to_thread(self.fetch_latest)
        installed, published = _parse_version(current), _parse_version(latest)
        if installed < published:
            state = UpdateState.OUT_OF_DATE
        elif installed > published:
            state = UpdateState.AHEAD_OF_PUBLISHED
        else:
            state = UpdateState.UP_TO_DATE
        return VersionInfo(state=state, current=current, latest=latest)


class LocalAnalytics:
    """Buffers events in memory; ``flush`` drops them."""

    def __init__(self, version_name: str = __version__) -> None:
        self.version_name = version_name
        self.events: list[dict[str, Any]] = []

    def track(self, event: str, **properties: Any) -> None:
        self.events.append({"event": event, **properties})

    def flush(self) -> None:
        if self.events:
            logger.debug("Dropping %d buffered analytics events", len(self.events))
        self.events.clear()


class LocalBinaries:
    """Persists the executable search path for IDE-launched build scripts."""

    def __init__(self, home: Path) -> None:
        self._path = home / SETTINGS_FILE

    async def write_path_to_user_settings(self) -> None:
        search_path = os.environ.get("PATH", "")
        settings = _read_json(self._path)
        if settings.get("PATH") == search_path:
            return
        settings["PATH"] = search_path
        _write_json(self._path, settings)


def build_local_toolkit(settings: ExpSettings) -> Toolkit:
    hub = LocalLogHub()
    endpoint = settings.api_endpoint()
    if endpoint is not None:
        logger.debug("Using API endpoint %s:%s", endpoint.host, endpoint.port)
    return Toolkit(
        projects=LocalProjectManager(),
        users=LocalUserManager(settings.home),
        doctor=LocalDoctor(hub),
        logs=hub,
        versions=LocalVersionChecker(),
        analytics=LocalAnalytics(),
        binaries=LocalBinaries(settings.home),
    )


class LocalPlugin:
    """Fallback ``exp_toolkit`` provider."""

    @hookimpl
    def exp_toolkit(self, settings: ExpSettings) -> Toolkit:
        return build_local_toolkit(settings)
