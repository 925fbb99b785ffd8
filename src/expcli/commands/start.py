"""Command: start a local development server for a project."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from expcli.actions import async_action_project_dir
from expcli.commands._base import (
    ExpCommand,
    allow_non_interactive,
    allow_offline,
    url_opts,
    url_settings,
)
from expcli.exit_hooks import stop_project_on_interrupt

if TYPE_CHECKING:
    from pathlib import Path

    from expcli.actions import ActionContext


@click.command(cls=ExpCommand, aliases=["r"])
@click.argument("project_dir", metavar="[PROJECT_DIR]", required=False)
@click.option("-c", "--clear", is_flag=True, help="Clear the packager cache.")
@url_opts
@allow_offline
@allow_non_interactive
@async_action_project_dir
async def start(
    action: ActionContext, project_dir: Path, clear: bool, **options: Any
) -> None:
    """Starts or restarts a local server for your app and gives you a URL to it."""
    settings = url_settings(options)
    projects = action.toolkit.projects
    terminal = action.terminal

    terminal.info("Starting project...")
    async with stop_project_on_interrupt(projects, project_dir, terminal):
        await projects.start(
            project_dir,
            reset_cache=clear,
            offline=action.config.offline,
            **settings,
        )
    status = await projects.current_status(project_dir)
    terminal.info(f"Project is {status}.", style="exp.ok")
    terminal.raw_output(str(status))


def register(cli: click.Group) -> None:
    cli.add_command(start)
