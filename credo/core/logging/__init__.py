"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
It provides JSON output for production and human-readable console output for
development. Request-scoped context (such as the correlation id bound by the
request middleware) is merged into every event through contextvars, and
values under sensitive keys are redacted before rendering.
"""

import logging
from typing import Any, MutableMapping

import structlog

SENSITIVE_KEY_FRAGMENTS = ("password", "token", "secret", "otp", "code_hash", "authorization")
REDACTED = "[REDACTED]"


def redact_sensitive_fields(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Replaces the value of any key that looks like a credential."""
    for key in list(event_dict.keys()):
        if key == "event":
            continue
        lowered = key.lower()
        if any(fragment in lowered for fragment in SENSITIVE_KEY_FRAGMENTS):
            event_dict[key] = REDACTED
    return event_dict


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configures the application's logging system.

    Sets up structlog with contextvars merging, log level, ISO timestamps,
    credential redaction and either JSON or console rendering. The standard
    library root logger is aligned to the same level so third-party output
    (uvicorn, SQLAlchemy) is filtered consistently.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("passlib").setLevel(logging.ERROR)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        redact_sensitive_fields,
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()
