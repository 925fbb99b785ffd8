"""Login flows shared by ``exp login`` and the project-directory wrapper."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from expcli.errors import CommandError

if TYPE_CHECKING:
    from expcli.config.models import CommandConfig
    from expcli.output.console import Terminal
    from expcli.xdl import Toolkit, User

logger = logging.getLogger(__name__)


async def login_or_register_if_logged_out(
    toolkit: Toolkit, config: CommandConfig, terminal: Terminal
) -> None:
    """Prompt for credentials when there is no active session."""
    if await toolkit.users.current_user() is not None:
        return
    if config.non_interactive:
        raise CommandError(
            "Not logged in. Run `exp login` or pass credentials with `exp login -u -p`.",
            code="NOT_LOGGED_IN",
        )
    terminal.info("An Expo user account is required to proceed.")
    await login(toolkit, config, terminal)


async def login(
    toolkit: Toolkit,
    config: CommandConfig,
    terminal: Terminal,
    *,
    username: str | None = None,
    password: str | None = None,
    token: str | None = None,
    github: bool = False,
) -> User:
    """Log in with the given credentials, prompting for whatever is missing."""
    if not github and not token:
        if not username:
            username = _prompt(config, "Username or email")
        if not password:
            password = _prompt(config, "Password", hide_input=True)

    user = await toolkit.users.login(
        username=username, password=password, token=token, github=github
    )
    logger.debug("Logged in as %s", user.username)
    terminal.info(f"Success. You are now logged in as {user.username}.", style="exp.ok")
    return user


def _prompt(config: CommandConfig, text: str, *, hide_input: bool = False) -> str:
    if config.non_interactive:
        field = text.split()[0].lower()
        raise CommandError(
            f"{text} is required in non-interactive mode (pass --{field}).",
            code="NON_INTERACTIVE",
        )
    return click.prompt(text, hide_input=hide_input)
