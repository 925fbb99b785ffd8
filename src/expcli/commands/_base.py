"""Custom Click base classes and reusable option groups.

``ExpCommand`` runs the coroutine returned by an async action when no event
loop is running (e.g. under ``CliRunner``); inside :func:`expcli.main.run`
the coroutine is handed back to the caller and awaited there.

``ExpGroup`` resolves command aliases and turns an unknown sub-command into
a hint instead of a usage error.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

import click

from expcli.errors import CommandError

F = TypeVar("F", bound=Callable[..., Any])

HOST_TYPES = ("tunnel", "lan", "localhost")


class ExpCommand(click.Command):
    """Click Command subclass with aliases and coroutine callbacks."""

    def __init__(self, *args: Any, aliases: list[str] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.aliases = list(aliases or [])

    def invoke(self, ctx: click.Context) -> Any:
        rv = super().invoke(ctx)
        if inspect.iscoroutine(rv):
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                return asyncio.run(rv)
        return rv


class ExpGroup(click.Group):
    """Click Group subclass for the root ``exp`` command.

    Sets ``command_class = ExpCommand`` so subcommands accept ``aliases``
    without explicit ``cls=`` each time.
    """

    command_class = ExpCommand

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd
        for candidate in self.commands.values():
            if cmd_name in getattr(candidate, "aliases", ()):
                return candidate
        return None

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        cmd_name = args[0]
        if (
            not cmd_name.startswith("-")
            and not ctx.resilient_parsing
            and self.get_command(ctx, cmd_name) is None
        ):
            click.echo(
                f'"{cmd_name}" is not an exp command. '
                'See "exp --help" for the full list of commands.'
            )
            ctx.exit(0)
        cmd_name, cmd, rest = super().resolve_command(ctx, args)
        # Report the canonical name when invoked through an alias.
        return (cmd.name if cmd is not None else cmd_name), cmd, rest

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        rows: list[tuple[str, str]] = []
        for name in self.list_commands(ctx):
            cmd = self.get_command(ctx, name)
            if cmd is None or cmd.hidden:
                continue
            aliases = getattr(cmd, "aliases", [])
            label = f"{name} ({', '.join(aliases)})" if aliases else name
            rows.append((label, cmd.get_short_help_str(limit=formatter.width - 6)))
        if rows:
            with formatter.section("Commands"):
                formatter.write_dl(rows)


# --- Reusable option groups ---


def allow_offline(f: F) -> F:
    """Add ``--offline``."""
    return click.option(
        "--offline", is_flag=True, help="Allows this command to run while offline."
    )(f)


def allow_non_interactive(f: F) -> F:
    """Add ``--non-interactive``."""
    return click.option(
        "--non-interactive",
        is_flag=True,
        help="Fails if an interactive prompt would be required to continue.",
    )(f)


def url_opts(f: F) -> F:
    """Add the options that control the URL a project is served on."""
    options = [
        click.option(
            "--host",
            type=click.Choice(HOST_TYPES),
            default=None,
            help="Type of host to use. 'tunnel' allows access outside your network.",
        ),
        click.option("--tunnel", is_flag=True, help="Same as --host tunnel."),
        click.option("--lan", is_flag=True, help="Same as --host lan."),
        click.option("--localhost", is_flag=True, help="Same as --host localhost."),
        click.option("--dev/--no-dev", default=None, help="Turns dev flag on or off."),
        click.option("--minify/--no-minify", default=None, help="Turns minify flag on or off."),
        click.option("--https/--no-https", default=None, help="Serve over https."),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def url_settings(options: dict[str, Any]) -> dict[str, Any]:
    """Validate url options and return the project settings they select.

    Only settings that were given on the command line are returned.
    """
    shortcuts = [name for name in HOST_TYPES if options.get(name)]
    if len(shortcuts) > 1:
        raise CommandError(
            "Specify at most one of --tunnel, --lan, and --localhost", code="BAD_ARGS"
        )
    host = options.get("host")
    if host and shortcuts:
        raise CommandError(
            "Specify either --host or one of --tunnel, --lan, or --localhost", code="BAD_ARGS"
        )

    settings: dict[str, Any] = {}
    if host or shortcuts:
        settings["host_type"] = host or shortcuts[0]
    for key in ("dev", "minify", "https"):
        if options.get(key) is not None:
            settings[key] = options[key]
    return settings
