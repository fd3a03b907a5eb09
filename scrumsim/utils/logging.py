"""
Structured logging setup.

All application loggers are structlog loggers. Output is JSON by default and
switches to the console renderer when ``JSON_LOGS`` is off.
"""

import logging
import sys
from typing import Any, Optional

import structlog

from scrumsim.config import get_settings


def configure_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        level: Log level name; defaults to ``LOG_LEVEL``
        json_format: Render JSON lines; defaults to ``JSON_LOGS``
    """
    settings = get_settings().logging

    level_name = (level or settings.level).upper()
    use_json = settings.json_format if json_format is None else json_format
    numeric_level = getattr(logging, level_name)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if use_json:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def bind_request_context(request_id: str, method: str, path: str) -> None:
    """Attach request fields to every log line emitted while handling the request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def log_request(
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """Log a finished HTTP request at a level matching its status."""
    logger = structlog.get_logger("http")

    if status_code >= 500:
        log = logger.error
    elif status_code >= 400:
        log = logger.warning
    else:
        log = logger.info

    log(
        "request_completed",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
        **kwargs,
    )
