"""Plugin discovery and toolkit resolution.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
The built-in local plugin is registered first so pluggy calls it last;
any installed project library therefore wins.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

import pluggy

from expcli.plugins.hookspecs import ExpHookSpec

if TYPE_CHECKING:
    from expcli.config.settings import ExpSettings
    from expcli.xdl import Toolkit

PROJECT_NAME = "exp"
ENTRY_POINT_GROUP = "exp.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery and the ``exp_toolkit`` hook."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ExpHookSpec)
        self._loaded: bool = False

    def discover_and_load(self) -> list[str]:
        """Register the built-in plugin, then entry-point plugins.

        Returns a list of loaded plugin names.  A broken entry point is
        logged as a warning and never prevents startup.
        """
        from expcli.plugins.builtins.local import LocalPlugin

        self.register_plugin(LocalPlugin(), name="local")
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception:
            logger.warning("Failed to load %s entry points", ENTRY_POINT_GROUP, exc_info=True)
        self._instantiate_class_plugins()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def toolkit(self, settings: ExpSettings) -> Toolkit:
        """Resolve the collaborator bundle from the first plugin that provides one."""
        if not self._loaded:
            self.discover_and_load()
        result = self._pm.hook.exp_toolkit(settings=settings)
        if result is None:
            from expcli.errors import XDLError

            raise XDLError("No project library is installed.", code="NO_TOOLKIT")
        return result

    def _instantiate_class_plugins(self) -> None:
        """Swap plugin classes loaded from entry points for instances.

        Hook implementations take ``self``; calling them on the class fails.
        A class that cannot be instantiated is dropped with a warning.
        """
        for plugin in [p for p in self._pm.get_plugins() if inspect.isclass(p)]:
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                self._pm.register(plugin(), name=name)
            except Exception:
                logger.warning(
                    "Dropping plugin %s: it could not be instantiated", name, exc_info=True
                )
                continue
            logger.debug("Instantiated plugin class: %s", name)


def load_toolkit(settings: ExpSettings) -> Toolkit:
    """Discover plugins and return the active collaborator bundle."""
    return PluginManager().toolkit(settings)
