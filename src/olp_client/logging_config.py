"""Opt-in structlog output for the ``olp_client`` logger namespace.

Library modules log through ``structlog.get_logger(__name__)`` and configure
nothing on import. Hosts that route structlog themselves need nothing from
here; hosts that don't can call ``configure_logging`` to see the client's
events as JSON (production) or console lines (development).
"""

import logging
import sys
from typing import Optional, TextIO

import structlog
from structlog.types import EventDict, Processor, WrappedLogger


LOGGER_NAMESPACE = "olp_client"

# Handler installed by the last configure_logging call
_handler: Optional[logging.Handler] = None


def add_library_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every log event with the emitting library."""
    event_dict.setdefault("library", "olp-client")
    return event_dict


def _build_formatter(environment: str) -> structlog.stdlib.ProcessorFormatter:
    pre_chain: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_library_context,
    ]
    render: list[Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if environment.lower() == "production":
        render += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        render.append(structlog.dev.ConsoleRenderer())
    return structlog.stdlib.ProcessorFormatter(processors=render, foreign_pre_chain=pre_chain)


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Give the ``olp_client`` logger its own handler.

    structlog is switched to stdlib loggers so the client's events reach
    ``logging.getLogger("olp_client")``. Only that logger gets a handler and
    a level; it stops propagating, so host handlers don't print the events a
    second time. The root logger and other libraries' loggers are untouched.
    Repeated calls replace the handler installed by the previous one.

    Args:
        log_level: Level name for the ``olp_client`` logger
        environment: "production" renders JSON, anything else console lines
        stream: Output stream (default: stderr)

    Returns:
        The installed handler
    """
    global _handler

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            add_library_context,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(_build_formatter(environment))

    library_logger = logging.getLogger(LOGGER_NAMESPACE)
    if _handler is not None:
        library_logger.removeHandler(_handler)
    library_logger.addHandler(handler)
    library_logger.setLevel(level)
    library_logger.propagate = False
    _handler = handler

    structlog.get_logger(__name__).debug(
        "Logging configured", log_level=log_level, environment=environment
    )
    return handler
