"""Diagnostic logging for exp, rendered by structlog on stderr.

Only the ``expcli`` logger is raised to DEBUG under ``EXPO_DEBUG``; third
party libraries stay at WARNING.  ``EXP_LOG_JSON`` switches the renderer to
one JSON object per line.  Terminal output for users goes through
:class:`expcli.output.console.Terminal`, never through here.
"""

from __future__ import annotations

import logging
import sys

import structlog

EXP_LOGGER = "expcli"


def _pre_chain() -> list[structlog.types.Processor]:
    # Applied to structlog events and to foreign stdlib records alike.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _stderr_handler(*, log_json: bool) -> logging.Handler:
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(*, debug: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib records to a single stderr handler.

    Safe to call repeatedly: the root handler is replaced, not stacked.
    """
    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers[:] = [_stderr_handler(log_json=log_json)]
    root.setLevel(logging.WARNING)
    logging.getLogger(EXP_LOGGER).setLevel(logging.DEBUG if debug else logging.WARNING)
