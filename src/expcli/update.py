"""Update advisory for the exp CLI itself."""

from __future__ import annotations

from typing import TYPE_CHECKING

from expcli.xdl import UpdateState

if TYPE_CHECKING:
    from expcli.output.console import Terminal
    from expcli.xdl import Toolkit

UPGRADE_COMMAND = "pip install -U exp-cli"


async def check_for_update(toolkit: Toolkit, terminal: Terminal) -> None:
    """Print an advisory when a newer exp is published.

    Collaborator failures propagate; callers treat the check as best-effort.
    """
    info = await toolkit.versions.check()
    match info.state:
        case UpdateState.UP_TO_DATE:
            pass
        case UpdateState.OUT_OF_DATE:
            terminal.error(
                f"There is a new version of exp available ({info.latest}).\n"
                f"You are currently using exp {info.current}\n"
                f"Run `{UPGRADE_COMMAND}` to get the latest version",
                style="exp.advisory",
            )
        case UpdateState.AHEAD_OF_PUBLISHED:
            # Local build is newer than the published one.
            pass
        case _:
            terminal.error("Confused about what version of exp you have?")
