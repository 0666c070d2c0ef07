"""structlog rendering for the ``headerlines`` logger tree.

The library logs through stdlib loggers under ``headerlines``. This module
attaches one handler to that logger whose formatter is structlog's
``ProcessorFormatter``, so records come out as console lines or JSON lines
depending on settings. The root logger and the global structlog
configuration of the host application are left alone.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LOGGER_NAME = "headerlines"
HANDLER_NAME = "headerlines.structlog"


def build_formatter(*, log_json: bool = False, colors: bool = False) -> logging.Formatter:
    """Formatter rendering stdlib records through structlog processors.

    ``extra=`` fields passed to the stdlib logger become top-level keys.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
    ]
    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Route ``headerlines`` records to *stream* (stderr by default).

    Args:
        verbose: Enable DEBUG-level output. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        stream: Destination for rendered records.

    Returns:
        The configured ``headerlines`` logger.
    """
    stream = stream if stream is not None else sys.stderr
    logger = logging.getLogger(LOGGER_NAME)

    # Reconfiguring replaces our handler instead of stacking another one.
    for existing in list(logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream)
    handler.set_name(HANDLER_NAME)
    colors = not log_json and hasattr(stream, "isatty") and stream.isatty()
    handler.setFormatter(build_formatter(log_json=log_json, colors=colors))

    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger
