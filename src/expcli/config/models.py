"""Pydantic configuration models shared across commands."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

OutputFormat = Literal["pretty", "raw"]


class ApiEndpoint(BaseModel):
    """Backend service host/port override parsed from ``SERVER_URL``."""

    model_config = {"frozen": True}

    scheme: str = "http"
    host: str
    port: int | None = None


class CommandConfig(BaseModel):
    """Per-invocation configuration handed to every command handler.

    Built once by the action wrapper from global settings and the parsed
    command options, then passed explicitly to every downstream call.
    """

    model_config = {"frozen": True}

    offline: bool = False
    non_interactive: bool = False
    raw: bool = False
    debug: bool = False
