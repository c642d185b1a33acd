# src/tracelog/core/logging/formatters.py

"""
Formatters for pipeline records.

  - JsonFormatter: one Cloud Logging structured entry per record. The
    well-known keys (`severity`, `message`, `logging.googleapis.com/trace`,
    `logging.googleapis.com/spanId`, `logging.googleapis.com/sourceLocation`,
    `httpRequest`, ...) are understood by the Cloud Logging agent and by most
    collectors that ingest JSON from stdout. Labels are grouped under
    `logging.googleapis.com/labels`.

  - ColorFormatter: a single human-readable line per record for local
    development consoles: timestamp, coloured level, call site, message, and
    the labels as compact JSON.

Which one is used follows the configuration (see builder.make_dict_config):
no project id -> ColorFormatter; project id -> JsonFormatter, indented when
the development flag is set.

Both formatters work with any record: records that did not come through the
pipeline simply have no fields (FieldsFilter sets an empty list).
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any
from logging import LogRecord

from .fields import LABELS_KEY, SOURCE_LOCATION_KEY, Field


def split_fields(fields: list[Field]) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Separate label fields from top-level payload fields.

    Labels keep their order and stay string to string, as Cloud Logging
    requires. A key seen more than once keeps every value: the first under the
    key itself, later ones under `key_1`, `key_2`, ... (skipping suffixes that
    are already taken).
    """
    labels: dict[str, Any] = {}
    payload: dict[str, Any] = {}
    for f in fields:
        if not isinstance(f, Field):
            continue
        if not f.label:
            payload[f.key] = f.rendered()
            continue
        labels[_free_key(labels, f.key)] = f.value
    return labels, payload


def _free_key(labels: dict[str, Any], key: str) -> str:
    if key not in labels:
        return key
    n = 1
    while f"{key}_{n}" in labels:
        n += 1
    return f"{key}_{n}"


class JsonFormatter(logging.Formatter):
    """
    Cloud Logging structured JSON formatter.

    Construction:
      - service: logical service name, emitted under `serviceContext`.
      - env: environment name ("development", "production", ...); optional.
      - version: service version; optional.
      - indent: pretty-print indentation (development mode); None for one line.

    The formatter never raises on odd values: `json.dumps(..., default=str)`
    stringifies anything that is not JSON-serializable.
    """

    def __init__(
        self,
        *,
        service: str = "tracelog",
        env: str | None = None,
        version: str | None = None,
        indent: int | None = None,
        datefmt: str | None = None,
    ):
        super().__init__(datefmt=datefmt)
        self.service = service
        self.env = env
        self.version = version
        self.indent = indent

    def format(self, record: LogRecord) -> str:
        labels, payload = split_fields(getattr(record, "fields", None) or [])

        entry: dict[str, Any] = {
            "severity": record.levelname,
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(payload)
        if labels:
            entry[LABELS_KEY] = labels

        service_context = {"service": self.service}
        if self.version:
            service_context["version"] = self.version
        entry["serviceContext"] = service_context
        if self.env:
            entry["env"] = self.env

        if record.exc_info:
            entry["stack_trace"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, ensure_ascii=False, default=str, indent=self.indent)


class ColorFormatter(logging.Formatter):
    """
    Development-friendly coloured formatter.

    Line layout:
        TIMESTAMP | LEVEL | file:line | MESSAGE | {"label": "value", ...}

    ANSI codes may show up as escape sequences on terminals that do not
    support them; use the JSON formatter (set a project id) for files and
    collectors.
    """

    COLOR_CODES = {
        "DEBUG": "\033[1;36;47m",   # bold cyan on white
        "INFO": "\033[32m",         # green
        "WARNING": "\033[33m",      # yellow
        "ERROR": "\033[31m",        # red
        "CRITICAL": "\033[1;41m",   # bold on red
        "RESET": "\033[0m",
    }

    def __init__(self, fmt: str | None = None, datefmt: str | None = None, use_color: bool = True) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: LogRecord) -> str:
        if self.use_color:
            color = self.COLOR_CODES.get(record.levelname, "")
            reset = self.COLOR_CODES["RESET"]
        else:
            color = reset = ""

        timestamp = self.formatTime(record, self.datefmt)
        labels, payload = split_fields(getattr(record, "fields", None) or [])

        base = (
            f"{timestamp} | {color}{record.levelname:<8}{reset} | "
            f"{record.filename}:{record.lineno} | "
            f"{record.getMessage()}"
        )
        # source location is already on the line; other payloads (httpRequest, trace) are appended
        payload.pop(SOURCE_LOCATION_KEY, None)
        if payload:
            labels = {**labels, **payload}
        if labels:
            base += " | " + json.dumps(labels, ensure_ascii=False, default=str)

        if record.exc_info:
            base = base + "\n" + self.formatException(record.exc_info)

        return base


__all__ = ["JsonFormatter", "ColorFormatter", "split_fields"]
