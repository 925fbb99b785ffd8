"""Command: show the logged-in user."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from expcli.actions import async_action
from expcli.commands._base import ExpCommand

if TYPE_CHECKING:
    from expcli.actions import ActionContext


@click.command(cls=ExpCommand, aliases=["w"])
@async_action
async def whoami(action: ActionContext) -> str | None:
    """Checks with the server and then says who you are logged in as."""
    user = await action.toolkit.users.current_user()
    if user is None:
        action.terminal.info("Not logged in")
        return None
    action.terminal.info(f"Logged in as {user.username}")
    action.terminal.raw_output(user.username)
    return user.username


def register(cli: click.Group) -> None:
    cli.add_command(whoami)
