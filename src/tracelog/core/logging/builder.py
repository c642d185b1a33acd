"""
Logging builder: create and apply the dictConfig for the sink, and own the
process-wide ContextLogger.

This module:
 - builds a dictConfig-compatible mapping from a LoggerConfig
 - applies it to a dedicated logger (`tracelog.records`) that backs LoggingSink,
   leaving the root logger and other libraries' loggers alone
 - silences `uvicorn.access`, since AccessLogMiddleware replaces it
 - exposes initialize() / get_logger() / finalize(), guarded by a lock so the
   logger is built exactly once per process

Output selection:
 - no PROJECT_ID              -> plain-text ColorFormatter on stdout
 - PROJECT_ID + DEVELOPMENT   -> indented Cloud Logging JSON
 - PROJECT_ID, production     -> one-line Cloud Logging JSON
 - LOG_TO_STDOUT=False and LOG_DIR set -> additionally a rotating JSON file
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config
import threading
from typing import TYPE_CHECKING, Any, Callable, Optional

from pydantic import ValidationError

from tracelog.exceptions import LoggingInitError, LoggingNotInitializedError
from tracelog.utils.logging import get_project_version

from .correlation import TraceProvider
from .formatters import ColorFormatter, JsonFormatter
from .filters import FieldsFilter, RedactFilter
from .handlers import get_console_handler, get_file_handler
from .pipeline import ContextLogger
from .sink import LoggingSink

if TYPE_CHECKING:
    from tracelog.config.settings import LoggerConfig

SINK_LOGGER_NAME = "tracelog.records"

_LOGGER: Optional[ContextLogger] = None
_LOGGER_LOCK = threading.Lock()


def _writes_files(config: LoggerConfig) -> bool:
    return (not config.LOG_TO_STDOUT) and bool(config.LOG_DIR)


def make_dict_config(config: LoggerConfig) -> dict:
    """
    Build the dictConfig mapping for the given configuration.

    The returned mapping includes:
      - formatters: "text" (ColorFormatter) and "json" (JsonFormatter)
      - filters: "fields", "redact"
      - handlers: console, plus file when writing to LOG_DIR
      - loggers: tracelog.records, uvicorn.error, uvicorn.access
    """
    formatters = {
        "text": {
            "()": ColorFormatter,
            "use_color": config.ENV == "development",
        },
        "json": {
            "()": JsonFormatter,
            "service": config.SERVICE_NAME,
            "env": config.ENV,
            "version": get_project_version(),
            "indent": 2 if config.DEVELOPMENT else None,
        },
    }

    filters = {
        "fields": {"()": FieldsFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(config)}
    if _writes_files(config):
        handlers["file"] = get_file_handler(config)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            SINK_LOGGER_NAME: {
                "handlers": list(handlers.keys()),
                "level": "DEBUG",
                "propagate": False,
            },
            "uvicorn.error": {
                "handlers": list(handlers.keys()),
                "level": "INFO",
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "WARNING",
            },
        },
    }


def build_sink(config: LoggerConfig) -> LoggingSink:
    """
    Apply the logging configuration and return a sink bound to it.

    Raises:
        LoggingInitError: the log directory or the handlers could not be created.
    """
    try:
        if _writes_files(config):
            Path(config.LOG_DIR).mkdir(parents=True, exist_ok=True)
        logging.config.dictConfig(make_dict_config(config))
    except (OSError, ValueError, TypeError) as exc:
        raise LoggingInitError(f"could not configure log sink: {exc}") from exc
    return LoggingSink(logging.getLogger(SINK_LOGGER_NAME))


def initialize(
    config: LoggerConfig | None = None,
    *,
    trace_provider: TraceProvider | None = None,
    exit_hook: Callable[[int], Any] | None = None,
) -> ContextLogger:
    """
    Build the process-wide ContextLogger once and return it.

    `config=None` loads LoggerConfig from the environment (and `.env`). Later
    calls return the existing logger unchanged until finalize() is called.
    """
    global _LOGGER

    with _LOGGER_LOCK:
        if _LOGGER is not None:
            return _LOGGER

        if config is None:
            from tracelog.config.settings import get_config

            try:
                config = get_config()
            except ValidationError as exc:
                raise LoggingInitError(f"invalid logging configuration: {exc}") from exc

        sink = build_sink(config)
        options: dict[str, Any] = {"trace_provider": trace_provider}
        if exit_hook is not None:
            options["exit_hook"] = exit_hook
        _LOGGER = ContextLogger(config, sink, **options)
        return _LOGGER


def get_logger() -> ContextLogger:
    logger = _LOGGER
    if logger is None:
        raise LoggingNotInitializedError()
    return logger


def finalize() -> None:
    """
    Flush the sink and drop the process-wide logger.

    Call at shutdown (e.g. from a FastAPI lifespan). Safe to call twice.
    """
    global _LOGGER

    with _LOGGER_LOCK:
        logger = _LOGGER
        _LOGGER = None
    if logger is not None:
        logger.flush()
