"""Debug command: print the packager status of a project directory."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from expcli.actions import async_action_project_dir
from expcli.commands._base import ExpCommand

if TYPE_CHECKING:
    from pathlib import Path

    from expcli.actions import ActionContext
    from expcli.xdl import ProjectStatus


@click.command("debug-status", cls=ExpCommand)
@click.argument("project_dir", metavar="[PROJECT_DIR]", required=False)
@async_action_project_dir(skip_project_validation=True, skip_auth_check=True)
async def debug_status(action: ActionContext, project_dir: Path) -> ProjectStatus:
    """Print the status of the project's packager."""
    status = await action.toolkit.projects.current_status(project_dir)
    action.terminal.info(f"{project_dir}: {status}")
    action.terminal.raw_output(str(status))
    return status


def register(cli: click.Group) -> None:
    cli.add_command(debug_status)
