"""Root CLI group for exp with global flags and command registration."""

from __future__ import annotations

import click

from expcli import __version__
from expcli.commands import register_commands
from expcli.commands._base import ExpGroup
from expcli.commands._context import AppContext
from expcli.config.settings import ExpSettings
from expcli.xdl import Toolkit


@click.group("exp", cls=ExpGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="exp")
@click.option(
    "-o",
    "--output",
    type=click.Choice(["pretty", "raw"]),
    default=None,
    help="Output format. pretty (default), raw",
)
@click.pass_context
def cli(ctx: click.Context, output: str | None) -> None:
    """exp — develop, serve and publish mobile app projects."""
    toolkit = ctx.obj if isinstance(ctx.obj, Toolkit) else None
    settings = ExpSettings.from_cli(output=output)
    ctx.obj = AppContext(settings, toolkit)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
