"""Subcommand modules for exp.

The registry is an explicit mapping from command name to a registration
entry: either a callable taking the root group, or a module exposing a
callable ``register``.  Imports are deferred so ``exp --help`` stays fast.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click

logger = logging.getLogger(__name__)


def builtin_commands() -> dict[str, object]:
    """Return the registry of commands available in every session."""
    from expcli.commands import login, logout, publish, start, stop, whoami

    return {
        "login": login,
        "logout": logout,
        "publish": publish,
        "start": start,
        "stop": stop,
        "whoami": whoami,
    }


def debug_commands() -> dict[str, object]:
    """Return the registry of commands only loaded when ``EXPO_DEBUG`` is set."""
    from expcli.commands import debug_status

    return {"debug-status": debug_status}


def register_commands(cli: click.Group, registry: Mapping[str, object] | None = None) -> None:
    """Register every entry of *registry* (default: builtin commands) on *cli*.

    A malformed entry is logged and skipped; it never stops the remaining
    registrations.
    """
    entries = builtin_commands() if registry is None else registry
    for name, entry in entries.items():
        register = entry if callable(entry) else getattr(entry, "register", None)
        if not callable(register):
            logger.error("'%s' is not a properly formatted command.", name)
            continue
        register(cli)
