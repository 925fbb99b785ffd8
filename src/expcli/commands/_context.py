"""AppContext — shared Click context for all commands.

Created once by the root CLI group and found by the action wrappers via
``click.Context.find_object``.  The collaborator toolkit is resolved
lazily so ``--help`` and ``--version`` never load the project library.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from expcli.config.models import CommandConfig
from expcli.output.console import Terminal
from expcli.progress import Spinner

if TYPE_CHECKING:
    from expcli.config.settings import ExpSettings
    from expcli.xdl import Toolkit


class AppContext:
    """Settings, terminal and collaborators shared by one exp process."""

    def __init__(
        self,
        settings: ExpSettings,
        toolkit: Toolkit | None = None,
        *,
        terminal: Terminal | None = None,
    ) -> None:
        self.settings = settings
        self.terminal = terminal or Terminal(raw=settings.output == "raw")
        self.spinner = Spinner(self.terminal.console)
        self._toolkit = toolkit
        self._logs_registered = False

        from expcli.config.logging import configure_logging

        configure_logging(debug=settings.debug, log_json=settings.log_json)

    @property
    def toolkit(self) -> Toolkit:
        """The collaborator bundle (resolved and wired to the terminal on first access)."""
        if self._toolkit is None:
            from expcli.plugins import load_toolkit

            self._toolkit = load_toolkit(self.settings)
        if not self._logs_registered:
            from expcli.logs import register_logs

            register_logs(self._toolkit, self.terminal, self.spinner)
            self._logs_registered = True
        return self._toolkit

    def command_config(self, options: dict[str, Any]) -> CommandConfig:
        """Build the per-invocation configuration from parsed command options."""
        return CommandConfig(
            offline=self.settings.offline or bool(options.get("offline")),
            non_interactive=bool(options.get("non_interactive")),
            raw=self.terminal.raw,
            debug=self.settings.debug,
        )
