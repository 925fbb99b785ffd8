"""Command: end the current session."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from expcli.actions import async_action
from expcli.commands._base import ExpCommand

if TYPE_CHECKING:
    from expcli.actions import ActionContext


@click.command(cls=ExpCommand)
@async_action
async def logout(action: ActionContext) -> None:
    """Logout from Expo."""
    await action.toolkit.users.logout()
    action.terminal.info("Logged out.", style="exp.ok")


def register(cli: click.Group) -> None:
    cli.add_command(logout)
