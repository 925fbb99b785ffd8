"""Collaborator discovery via pluggy.

Discovery: entry_points (pip-installed) under ``exp.plugins``.
INVARIANT: Plugin load failures are warnings, never errors.
"""

from expcli.plugins.manager import PluginManager, load_toolkit

__all__ = ["PluginManager", "load_toolkit"]
