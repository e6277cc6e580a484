"""Logging setup shared by the domain and the HTTP app.

Domain code logs through ``structlog.get_logger(__name__)``. Events are
rendered by structlog and written through the stdlib root logger, so Protean
and uvicorn output lands in the same place.

Environment variables:

- ``LOG_LEVEL`` overrides the level picked from ``PROTEAN_ENV``.
- ``LOG_DIR`` adds a rotating ``fooddash.log`` in that directory.
"""

import logging
import logging.handlers
import os
from pathlib import Path

import structlog

_DEFAULT_LEVELS = {"production": "INFO", "test": "WARNING"}


def _environment() -> str:
    return os.getenv("PROTEAN_ENV", "development").lower()


def _handlers(level):
    handlers = [logging.StreamHandler()]
    log_dir = os.getenv("LOG_DIR")
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                Path(log_dir) / "fooddash.log", maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
        )
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def configure_logging() -> None:
    env = _environment()
    level = os.getenv("LOG_LEVEL", _DEFAULT_LEVELS.get(env, "DEBUG")).upper()

    logging.basicConfig(format="%(message)s", level=level, handlers=_handlers(level), force=True)
    logging.getLogger("protean").setLevel(logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if env == "production":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # The console renderer formats exceptions itself, via rich
        processors.append(
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.RichTracebackFormatter(max_frames=3))
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(**values) -> None:
    """Attach values to every log line emitted while handling the current request."""
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
