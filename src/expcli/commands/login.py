"""Command: log in to an Expo account."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from expcli import accounts
from expcli.actions import async_action
from expcli.commands._base import ExpCommand, allow_non_interactive

if TYPE_CHECKING:
    from expcli.actions import ActionContext
    from expcli.xdl import User


@click.command(cls=ExpCommand, aliases=["signin"])
@click.option("-u", "--username", default=None, help="Username")
@click.option("-p", "--password", default=None, help="Password")
@click.option("-t", "--token", default=None, help="Token")
@click.option("--github", is_flag=True, help="Login with Github")
@allow_non_interactive
@async_action
async def login(
    action: ActionContext,
    username: str | None,
    password: str | None,
    token: str | None,
    github: bool,
    **_flags: object,
) -> User:
    """Login to Expo."""
    return await accounts.login(
        action.toolkit,
        action.config,
        action.terminal,
        username=username,
        password=password,
        token=token,
        github=github,
    )


def register(cli: click.Group) -> None:
    cli.add_command(login)
