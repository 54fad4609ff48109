"""Route structlog events through the stdlib root logger.

Library modules only call ``structlog.get_logger()``.  Nothing is configured
until a host process (the ``aumai-cryptostatus`` CLI, or an application that
embeds the package) calls :func:`setup_logging` once at start-up.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

_PRE_CHAIN: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
)


def _renderer(json: bool) -> structlog.types.Processor:
    if json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(
    *, json: bool = True, level: str = "INFO", stream: TextIO | None = None
) -> None:
    """Install a single root handler that renders structlog events.

    Args:
        json: One JSON object per line when true, aligned ``key=value``
            console output otherwise.
        level: Root level name, any case (``"debug"``, ``"INFO"``).
        stream: Where records go.  Defaults to ``sys.stderr`` so that
            command output on stdout stays machine-readable.
    """
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # module-level loggers must pick up later reconfiguration
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())
