"""Process entry point for the ``exp`` console script.

Path registration and command dispatch run concurrently on one event loop;
neither depends on the other's result.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import sys
from typing import TYPE_CHECKING

import click

from expcli.cli import cli
from expcli.commands import debug_commands, register_commands
from expcli.config.settings import ExpSettings
from expcli.plugins import load_toolkit

if TYPE_CHECKING:
    from expcli.xdl import Toolkit

logger = logging.getLogger(__name__)

# Invoked by IDE build scripts, which must not rewrite the user's PATH setting.
PATH_EXEMPT_COMMAND = "prepare-detached-build"


async def write_path_async(args: list[str], toolkit: Toolkit) -> None:
    """Record the executable search path in the user settings."""
    if args and args[0] == PATH_EXEMPT_COMMAND:
        return
    await toolkit.binaries.write_path_to_user_settings()


async def run_async(args: list[str], settings: ExpSettings, toolkit: Toolkit) -> None:
    """Parse *args*, dispatch the matched command and await its action."""
    if settings.debug:
        register_commands(cli, debug_commands())

    try:
        rv = cli.main(args=args, prog_name="exp", standalone_mode=False, obj=toolkit)
        if inspect.isawaitable(rv):
            await rv
    except click.ClickException as exc:
        exc.show()
        raise SystemExit(exc.exit_code) from exc
    except click.exceptions.Exit as exc:
        raise SystemExit(exc.exit_code) from exc
    except (click.exceptions.Abort, KeyboardInterrupt) as exc:
        click.echo("Aborted!", err=True)
        raise SystemExit(1) from exc


async def main_async(argv: list[str] | None = None, toolkit: Toolkit | None = None) -> None:
    args = sys.argv[1:] if argv is None else list(argv)
    settings = ExpSettings()
    if toolkit is None:
        toolkit = load_toolkit(settings)
    await asyncio.gather(write_path_async(args, toolkit), run_async(args, settings, toolkit))


def run(argv: list[str] | None = None, toolkit: Toolkit | None = None) -> None:
    """Console script entry point."""
    try:
        asyncio.run(main_async(argv, toolkit))
    except KeyboardInterrupt as exc:
        click.echo("Aborted!", err=True)
        raise SystemExit(1) from exc
    except Exception as exc:
        logger.debug("Uncaught error", exc_info=True)
        click.echo(f"Uncaught Error {exc}", err=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    run()
