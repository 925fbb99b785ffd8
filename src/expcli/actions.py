"""Action wrappers — the uniform boundary around every command handler.

``async_action`` checks for updates, builds the per-invocation
:class:`CommandConfig`, runs the handler, flushes analytics and turns any
failure into one error summary plus ``SystemExit(1)``.  No command exits
the process on its own.

``async_action_project_dir`` adds, in order: project directory resolution,
the login gate, project log sinks, and project validation.
"""

from __future__ import annotations

import functools
import logging
import os
import traceback
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from expcli.accounts import login_or_register_if_logged_out
from expcli.commands._context import AppContext
from expcli.config.settings import ExpSettings
from expcli.errors import CommandError, ErrorKind, classify
from expcli.packager import DeviceLogSink, PackagerLogSink
from expcli.update import check_for_update
from expcli.xdl import ProjectStatus, Severity

if TYPE_CHECKING:
    from expcli.config.models import CommandConfig
    from expcli.output.console import Terminal
    from expcli.progress import Spinner
    from expcli.xdl import Detach, Toolkit

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[Any]]

STACK_TRACE_HINT = "Set EXPO_DEBUG=true in your env to view the stack trace."


@dataclass(frozen=True)
class ActionContext:
    """Everything a command handler receives besides its own options."""

    app: AppContext
    config: CommandConfig

    @property
    def toolkit(self) -> Toolkit:
        return self.app.toolkit

    @property
    def terminal(self) -> Terminal:
        return self.app.terminal

    @property
    def spinner(self) -> Spinner:
        return self.app.spinner


def render_failure(terminal: Terminal, exc: BaseException, *, debug: bool) -> None:
    """Print the error summary for *exc* according to its :class:`ErrorKind`."""
    match classify(exc):
        case ErrorKind.COMMAND | ErrorKind.LIBRARY:
            terminal.error(str(exc))
        case ErrorKind.API:
            terminal.error(str(exc), style="exp.error")
        case ErrorKind.UNCATEGORIZED:
            terminal.error(str(exc) or exc.__class__.__name__)
            if debug:
                trace = "".join(traceback.format_exception(exc)).rstrip()
                terminal.error(trace, style="exp.trace")
            else:
                terminal.error(STACK_TRACE_HINT, style="exp.hint")


async def run_action(
    app: AppContext,
    handler: Handler,
    options: dict[str, Any],
    *,
    skip_update_check: bool = False,
) -> Any:
    """Run *handler* inside the error boundary."""
    if not skip_update_check:
        try:
            await check_for_update(app.toolkit, app.terminal)
        except Exception:
            logger.debug("Update check failed", exc_info=True)

    try:
        action = ActionContext(app=app, config=app.command_config(options))
        result = await handler(action, **options)
    except (click.exceptions.Exit, click.exceptions.Abort):
        raise
    except Exception as exc:
        app.spinner.stop()
        render_failure(app.terminal, exc, debug=app.settings.debug)
        raise SystemExit(1) from exc

    try:
        app.toolkit.analytics.flush()
    except Exception:
        logger.debug("Analytics flush failed", exc_info=True)
    return result


def async_action(
    handler: Handler | None = None, *, skip_update_check: bool = False
) -> Any:
    """Wrap an async command handler as a click callback.

    The handler is called as ``handler(action, **options)``.  Usable bare
    (``@async_action``) or with arguments
    (``@async_action(skip_update_check=True)``).
    """
    if handler is None:
        return functools.partial(async_action, skip_update_check=skip_update_check)

    @functools.wraps(handler)
    def callback(**options: Any) -> Awaitable[Any]:
        ctx = click.get_current_context()
        app = ctx.find_object(AppContext) or AppContext(ExpSettings())
        return run_action(app, handler, options, skip_update_check=skip_update_check)

    return callback


def resolve_project_dir(project_dir: str | None, cwd: Path | None = None) -> Path:
    """Resolve *project_dir* against *cwd* (default: the current directory)."""
    base = cwd or Path.cwd()
    if not project_dir:
        return base
    return Path(os.path.normpath(os.path.join(base, project_dir)))


def attach_project_logs(action: ActionContext, project_dir: Path) -> list[Detach]:
    """Attach the packager and device sinks to *project_dir*'s log stream."""
    hub = action.toolkit.logs
    return [
        hub.attach(project_dir, PackagerLogSink(project_dir, action.terminal)),
        hub.attach(project_dir, DeviceLogSink(action.terminal)),
    ]


async def validate_project(action: ActionContext, project_dir: Path) -> None:
    """Run the doctor unless the project is already running."""
    toolkit = action.toolkit
    if await toolkit.projects.current_status(project_dir) == ProjectStatus.RUNNING:
        return

    action.terminal.info("Making sure project is set up correctly...")
    action.spinner.start()
    try:
        severity = await toolkit.doctor.validate_low_latency(project_dir)
    finally:
        action.spinner.stop()
    if severity == Severity.FATAL:
        raise CommandError(
            "There is an error with your project. See above logs for information.",
            code="INVALID_PROJECT",
        )
    action.terminal.info("Your project looks good!")


def async_action_project_dir(
    handler: Handler | None = None,
    *,
    skip_project_validation: bool = False,
    skip_auth_check: bool = False,
) -> Any:
    """Wrap a handler that operates on a project directory.

    The handler is called as ``handler(action, project_dir, **options)``
    where *project_dir* is an absolute :class:`~pathlib.Path`.
    """
    if handler is None:
        return functools.partial(
            async_action_project_dir,
            skip_project_validation=skip_project_validation,
            skip_auth_check=skip_auth_check,
        )

    @functools.wraps(handler)
    async def with_project_dir(
        action: ActionContext, project_dir: str | None = None, **options: Any
    ) -> Any:
        resolved = resolve_project_dir(project_dir)

        if not skip_auth_check:
            if not action.config.non_interactive and not action.config.offline:
                await login_or_register_if_logged_out(action.toolkit, action.config, action.terminal)
            await action.toolkit.users.ensure_logged_in()

        detach = attach_project_logs(action, resolved)
        try:
            if not skip_project_validation:
                await validate_project(action, resolved)
            return await handler(action, resolved, **options)
        finally:
            for undo in detach:
                undo()

    return async_action(with_project_dir)
