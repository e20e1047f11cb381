"""
Structured logging for the provider, built on structlog.

Log lines go to stderr: stdout carries the state documents the CLI prints.
Production runs render JSON; everywhere else a colored console renderer is
used. Credentials never reach a renderer, see ``redact_secrets``.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from imgixyz.config.settings import get_settings

REDACTED = "[redacted]"

# Event keys whose values are credentials
SECRET_KEYS = frozenset({"token", "authorization", "s3_secret_key"})


def redact_secrets(_logger: Any, _method: str, event_dict: EventDict) -> EventDict:
    """Mask credential values bound to a log event."""
    for key in SECRET_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def setup_logging(level: str | None = None) -> None:
    """
    Configure structlog and route stdlib logging through stderr.

    Args:
        level: Log level overriding IMGIXYZ_LOG_LEVEL (the CLI passes
            DEBUG for --debug).

    Usage:
        setup_logging()
        logger = structlog.get_logger(__name__)
        logger.info("Updating source", source_id="42", action="enable_then_update")
    """
    settings = get_settings()
    level = level or settings.log_level

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
    ]

    if settings.is_production:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=getattr(logging, level))
    logging.getLogger().setLevel(getattr(logging, level))

    # Request lines are already counted in metrics
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def bind_context(**kwargs: Any) -> None:
    """Bind fields (e.g. the CLI command) to every later log event."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
