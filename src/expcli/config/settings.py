"""Unified settings — CLI flags and environment variables in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``EXPO_DEBUG``, ``SERVER_URL`` and the ``EXP_*`` prefix
  3. Code defaults
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from pydantic import Field
from pydantic_settings import BaseSettings

from expcli.config.models import ApiEndpoint, OutputFormat


def _default_home() -> Path:
    return Path.home() / ".expo"


class ExpSettings(BaseSettings):
    """Process-wide settings for the exp CLI.

    Frozen after construction and stored on the root click context.

    Attributes:
        debug: Enables stack traces, debug logging and debug-only commands.
        server_url: Backend service override handed to collaborators.
        home: Directory holding user-level state (session, settings).
        output: Global output format, ``pretty`` or ``raw``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "EXP_",
        "populate_by_name": True,
    }

    debug: bool = Field(default=False, validation_alias="EXPO_DEBUG")
    server_url: str | None = Field(default=None, validation_alias="SERVER_URL")
    home: Path = Field(default_factory=_default_home)
    offline: bool = False
    log_json: bool = False
    output: OutputFormat = "pretty"

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> ExpSettings:
        """Construct settings, letting non-None CLI flags override the environment."""
        overrides = {key: value for key, value in cli_flags.items() if value is not None}
        return cls(**overrides)

    def api_endpoint(self) -> ApiEndpoint | None:
        """Parse ``server_url`` into an :class:`ApiEndpoint`.

        A bare ``host:port`` is treated as ``http://host:port``.
        """
        if not self.server_url:
            return None
        url = self.server_url
        if not url.startswith("http"):
            url = f"http://{url}"
        parts = urlsplit(url)
        if not parts.hostname:
            return None
        return ApiEndpoint(scheme=parts.scheme, host=parts.hostname, port=parts.port)
