"""Pluggy hook specifications for exp collaborator providers.

A project library plugs into exp by implementing ``exp_toolkit`` and
registering under the ``exp.plugins`` entry-point group.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from expcli.config.settings import ExpSettings
    from expcli.xdl import Toolkit

hookspec = pluggy.HookspecMarker("exp")
hookimpl = pluggy.HookimplMarker("exp")


class ExpHookSpec:
    """Hook specifications for the exp plugin system."""

    @hookspec(firstresult=True)
    def exp_toolkit(self, settings: ExpSettings) -> Toolkit | None:
        """Return the collaborator bundle, or None to defer to another plugin."""
