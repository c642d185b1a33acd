# src/tracelog/core/logging/sink.py
"""
Sink: where finished records go.

The pipeline decides *whether* and *what* to log; the sink decides *how* the
record reaches its destination. `LoggingSink` hands records to a stdlib
`logging.Logger` whose handlers and formatters are installed by
`builder.make_dict_config()`, so transport (stream, rotating file, ...) and
rendering (JSON, coloured text) stay in standard logging configuration.

Records are built with `Logger.makeRecord()` and passed to `Logger.handle()`:
the pipeline has already applied its own severity rule, so the logger's level
check is skipped on purpose, while handler levels and filters still apply. The
record's pathname/lineno/funcName are stamped from the source-location field
so `%(pathname)s:%(lineno)d` point at the application call site rather than at
this module.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from .fields import SOURCE_LOCATION_KEY, Field, SourceLocation
from .levels import LogLevel


class Sink(Protocol):
    def write(self, level: LogLevel, message: str, fields: Sequence[Field]) -> None:
        ...

    def flush(self) -> None:
        ...


class LoggingSink:
    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def write(self, level: LogLevel, message: str, fields: Sequence[Field]) -> None:
        source = next(
            (f.value for f in fields if f.key == SOURCE_LOCATION_KEY and isinstance(f.value, SourceLocation)),
            None,
        )
        record = self.logger.makeRecord(
            self.logger.name,
            level.stdlib_level,
            source.file if source else "(unknown file)",
            source.line if source else 0,
            message,
            (),
            None,
            func=source.function if source else None,
            extra={"fields": list(fields)},
        )
        self.logger.handle(record)

    def flush(self) -> None:
        """
        Flush every handler the logger's records can reach.

        A handler that fails to flush (closed stream, full disk, ...) is
        reported through its own `handleError()`, like a failed emit, and the
        remaining handlers are still flushed.
        """
        logger: logging.Logger | None = self.logger
        while logger is not None:
            for handler in logger.handlers:
                try:
                    handler.flush()
                except (OSError, ValueError):
                    handler.handleError(self._flush_record())
            logger = logger.parent if logger.propagate else None

    def _flush_record(self) -> logging.LogRecord:
        # handleError() expects the record that failed; a flush has none of its own
        return self.logger.makeRecord(self.logger.name, logging.ERROR, __file__, 0, "handler flush failed", (), None)
