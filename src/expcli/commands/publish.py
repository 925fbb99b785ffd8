"""Command: publish a project."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from expcli.actions import async_action_project_dir
from expcli.commands._base import ExpCommand, allow_non_interactive
from expcli.exit_hooks import stop_project_on_interrupt
from expcli.xdl import ProjectStatus

if TYPE_CHECKING:
    from pathlib import Path

    from expcli.actions import ActionContext
    from expcli.xdl import PublishResult


async def publish_project(
    action: ActionContext,
    project_dir: Path,
    *,
    quiet: bool = False,
    send_to: str | None = None,
) -> PublishResult:
    """Publish *project_dir*, starting (and afterwards stopping) a server if none is running."""
    projects = action.toolkit.projects
    if await projects.current_status(project_dir) == ProjectStatus.RUNNING:
        return await _publish(action, project_dir, quiet=quiet, send_to=send_to)

    action.terminal.info(
        "Unable to find an existing exp instance for this directory, starting a new one..."
    )
    async with stop_project_on_interrupt(projects, project_dir, action.terminal):
        await projects.start(project_dir, verbose=not quiet, offline=action.config.offline)
        try:
            result = await _publish(action, project_dir, quiet=quiet, send_to=send_to)
        except Exception:
            await projects.stop(project_dir)
            raise
    await projects.stop(project_dir)
    return result


async def _publish(
    action: ActionContext, project_dir: Path, *, quiet: bool, send_to: str | None
) -> PublishResult:
    projects = action.toolkit.projects
    terminal = action.terminal

    terminal.info("Publishing...")
    if quiet:
        action.spinner.start()
    try:
        result = await projects.publish(project_dir)
    finally:
        if quiet:
            action.spinner.stop()

    terminal.info("Published")
    terminal.info("Your URL is")
    terminal.newline()
    terminal.info(result.url, style="exp.url")
    terminal.newline()
    terminal.raw_output(result.url)

    if send_to:
        await projects.send_url(result.url, send_to)
    return result


@click.command(cls=ExpCommand, aliases=["p"])
@click.argument("project_dir", metavar="[PROJECT_DIR]", required=False)
@click.option("-q", "--quiet", is_flag=True, help="Suppress verbose output from the packager.")
@click.option(
    "-s", "--send-to", default=None, help="A phone number or e-mail address to send a link to."
)
@allow_non_interactive
@async_action_project_dir(skip_project_validation=True)
async def publish(
    action: ActionContext,
    project_dir: Path,
    quiet: bool,
    send_to: str | None,
    **_flags: object,
) -> PublishResult:
    """Publishes your project to exp.host."""
    return await publish_project(action, project_dir, quiet=quiet, send_to=send_to)


def register(cli: click.Group) -> None:
    cli.add_command(publish)
