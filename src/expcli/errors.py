"""Error taxonomy for exp commands.

Every failure that reaches the action wrapper is classified into exactly one
:class:`ErrorKind`.  Collaborators raise :class:`XDLError`, remote service
failures raise :class:`ApiError`, and user-facing command failures raise
:class:`CommandError`.  Anything else is ``UNCATEGORIZED``.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Tag carried by every classified failure."""

    COMMAND = "command"
    API = "api"
    LIBRARY = "library"
    UNCATEGORIZED = "uncategorized"


class ExpError(Exception):
    """Base class for tagged exp failures.

    Attributes:
        message: Human-readable message shown to the user.
        code: Optional machine-readable code (e.g. ``"NOT_LOGGED_IN"``).
    """

    kind: ErrorKind = ErrorKind.UNCATEGORIZED

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class CommandError(ExpError):
    """A user-facing failure raised by a command itself."""

    kind = ErrorKind.COMMAND


class ApiError(ExpError):
    """A failure reported by the remote service."""

    kind = ErrorKind.API


class XDLError(ExpError):
    """A failure raised by the project library collaborator."""

    kind = ErrorKind.LIBRARY


def classify(exc: BaseException) -> ErrorKind:
    """Return the :class:`ErrorKind` tag for *exc*."""
    if isinstance(exc, ExpError):
        return exc.kind
    return ErrorKind.UNCATEGORIZED
