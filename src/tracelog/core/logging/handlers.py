# src/tracelog/core/logging/handlers.py
"""
Handler factories for logging.dictConfig.

Each helper returns a handler configuration dict for the "handlers" section of
`builder.make_dict_config()`. Formatter and filter names refer to the entries
the builder declares ("json"/"text", "fields"/"redact").

Handler levels are left at NOTSET: the pipeline already decides which records
are emitted, and access logs must pass even when the application threshold is
stricter than INFO.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tracelog.config.settings import LoggerConfig


def get_console_handler(config: LoggerConfig) -> dict:
    """
    Return a StreamHandler configuration.

    Records go to stdout, where container runtimes and the Cloud Logging agent
    pick them up.
    """
    return {
        "class": "logging.StreamHandler",
        "formatter": config.LOG_FORMAT,
        "level": "NOTSET",
        "filters": ["fields", "redact"],
        "stream": "ext://sys.stdout",
    }


def get_file_handler(config: LoggerConfig) -> dict:
    """
    Return a RotatingFileHandler configuration writing `<LOG_DIR>/app.log`.

    Always JSON: files are meant for ingestion, not for reading in a terminal.
    """
    file_path = str(Path(config.LOG_DIR) / "app.log")
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",
        "level": "NOTSET",
        "filename": file_path,
        "maxBytes": config.LOG_MAX_BYTES,
        "backupCount": config.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": ["fields", "redact"],
    }
