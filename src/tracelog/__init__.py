"""Correlated structured logging for server processes."""

from .core.logging import (
    AccessLogMiddleware,
    ContextLogger,
    LogLevel,
    bind_correlation,
    finalize,
    get_logger,
    initialize,
    set_scope,
    set_user_id,
)
from .core.logging.shortcuts import critical, debug, error, errorw, info, infow, warn
from .config import LoggerConfig

__all__ = [
    "AccessLogMiddleware",
    "ContextLogger",
    "LogLevel",
    "LoggerConfig",
    "bind_correlation",
    "finalize",
    "get_logger",
    "initialize",
    "set_scope",
    "set_user_id",
    "critical",
    "error",
    "errorw",
    "warn",
    "info",
    "infow",
    "debug",
]
