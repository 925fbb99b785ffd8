"""Command: stop the local development server for a project."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from expcli.actions import async_action_project_dir
from expcli.commands._base import ExpCommand, allow_offline

if TYPE_CHECKING:
    from pathlib import Path

    from expcli.actions import ActionContext


@click.command(cls=ExpCommand)
@click.argument("project_dir", metavar="[PROJECT_DIR]", required=False)
@allow_offline
@async_action_project_dir(skip_project_validation=True, skip_auth_check=True)
async def stop(action: ActionContext, project_dir: Path, **_flags: object) -> None:
    """Stop the server processes for this project."""
    action.terminal.info("Stopping packager...")
    await action.toolkit.projects.stop(project_dir)
    action.terminal.info("Packager stopped.", style="exp.ok")


def register(cli: click.Group) -> None:
    cli.add_command(stop)
