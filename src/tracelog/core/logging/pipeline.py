# src/tracelog/core/logging/pipeline.py
"""
ContextLogger: leveled, correlated logging.

Purpose
-------
Every record written through this module carries the same correlation fields,
in the same order, so log lines can be joined to traces and to each other:

  1. request id label (the active trace id),
  2. source location of the application call site,
  3. trace context (only when a project id is configured),
  4. user id and scope labels (when bound for the current request),
  5. caller-supplied fields (structured calls only).

Two call shapes
---------------
- Formatted: `log.info("user %s logged in", user)`; `%`-style formatting,
  as in stdlib logging.
- Structured: `log.infow("user logged in", "user", user, "attempts", 3)`;
  the alternating key/values (and any keyword arguments) go through
  `encode_fields()`.

Both accept a keyword-only `ctx` (a `contextvars.Context` snapshot to read the
correlation from) and `stacklevel` (raise it by one per wrapper function so
the source location still names the real caller).

Severity
--------
A call below the configured threshold returns before anything else happens:
no formatting, no correlation lookup, no frame inspection. CRITICAL is fatal:
the record is written, the sink flushed, and the exit hook called with status 1.

Access logs go through `http()`, which always logs at INFO regardless of the
threshold.
"""

from __future__ import annotations

import contextvars
import os
import sys
from typing import TYPE_CHECKING, Any, Callable, Sequence

from .correlation import CorrelationContext, CorrelationExtractor, TraceProvider
from .fields import Field, SourceLocation, encode_fields, label, source_location, trace_context
from .http import HTTPRecord, http_request
from .levels import LogLevel, should_emit
from .sink import Sink

if TYPE_CHECKING:
    from tracelog.config.settings import LoggerConfig

# Frames between _log() and the application: _log <- public method <- caller.
_CALLER_DEPTH = 2


def _format_message(msg: str, args: Sequence[Any]) -> str:
    if not args:
        return msg
    try:
        return msg % tuple(args)
    except (TypeError, ValueError, KeyError):
        # a bad format string must not turn a log call into a crash
        return f"{msg} {tuple(args)!r}"


def _caller_site(depth: int) -> SourceLocation | None:
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return None
    code = frame.f_code
    return SourceLocation(file=code.co_filename, line=frame.f_lineno, function=code.co_name)


class ContextLogger:
    """
    Leveled logger that attaches correlation fields and writes to a Sink.

    Holds no mutable state; one instance is shared by the whole process.
    """

    def __init__(
        self,
        config: LoggerConfig,
        sink: Sink,
        *,
        trace_provider: TraceProvider | None = None,
        exit_hook: Callable[[int], Any] = os._exit,
    ):
        self.config = config
        self.sink = sink
        self.extractor = CorrelationExtractor(trace_provider)
        self.exit_hook = exit_hook

    # --- formatted ---
    def critical(self, msg: str, *args: Any, ctx: contextvars.Context | None = None, stacklevel: int = 1) -> None:
        self._log(LogLevel.CRITICAL, msg, args, None, None, ctx, stacklevel)

    def error(self, msg: str, *args: Any, ctx: contextvars.Context | None = None, stacklevel: int = 1) -> None:
        self._log(LogLevel.ERROR, msg, args, None, None, ctx, stacklevel)

    def warn(self, msg: str, *args: Any, ctx: contextvars.Context | None = None, stacklevel: int = 1) -> None:
        self._log(LogLevel.WARN, msg, args, None, None, ctx, stacklevel)

    def info(self, msg: str, *args: Any, ctx: contextvars.Context | None = None, stacklevel: int = 1) -> None:
        self._log(LogLevel.INFO, msg, args, None, None, ctx, stacklevel)

    def debug(self, msg: str, *args: Any, ctx: contextvars.Context | None = None, stacklevel: int = 1) -> None:
        self._log(LogLevel.DEBUG, msg, args, None, None, ctx, stacklevel)

    # --- structured ---
    def criticalw(
        self, msg: str, *keys_and_values: Any, ctx: contextvars.Context | None = None, stacklevel: int = 1, **fields: Any
    ) -> None:
        self._log(LogLevel.CRITICAL, msg, (), keys_and_values, fields, ctx, stacklevel)

    def errorw(
        self, msg: str, *keys_and_values: Any, ctx: contextvars.Context | None = None, stacklevel: int = 1, **fields: Any
    ) -> None:
        self._log(LogLevel.ERROR, msg, (), keys_and_values, fields, ctx, stacklevel)

    def warnw(
        self, msg: str, *keys_and_values: Any, ctx: contextvars.Context | None = None, stacklevel: int = 1, **fields: Any
    ) -> None:
        self._log(LogLevel.WARN, msg, (), keys_and_values, fields, ctx, stacklevel)

    def infow(
        self, msg: str, *keys_and_values: Any, ctx: contextvars.Context | None = None, stacklevel: int = 1, **fields: Any
    ) -> None:
        self._log(LogLevel.INFO, msg, (), keys_and_values, fields, ctx, stacklevel)

    def debugw(
        self, msg: str, *keys_and_values: Any, ctx: contextvars.Context | None = None, stacklevel: int = 1, **fields: Any
    ) -> None:
        self._log(LogLevel.DEBUG, msg, (), keys_and_values, fields, ctx, stacklevel)

    def log(self, level: LogLevel, msg: str, *args: Any, ctx: contextvars.Context | None = None, stacklevel: int = 1) -> None:
        """Formatted log at an explicit level; out-of-range levels are ignored."""
        self._log(level, msg, args, None, None, ctx, stacklevel)

    # --- access log ---
    def http(self, record: HTTPRecord, *, ctx: contextvars.Context | None = None) -> None:
        """Write one access-log entry at INFO. Not subject to the level threshold."""
        corr = self.extractor.extract(ctx)
        fields = [
            http_request(record),
            label(self.config.KEY_REQUEST_ID, corr.trace_id),
            label(self.config.KEY_REMOTE_IP, record.remote_ip),
            label(self.config.KEY_ROUTE, record.route),
        ]
        fields.extend(self._correlation_fields(corr))
        self.sink.write(LogLevel.INFO, "request log", fields)

    def flush(self) -> None:
        self.sink.flush()

    # --- internals ---
    def _correlation_fields(self, corr: CorrelationContext) -> list[Field]:
        fields: list[Field] = []
        if self.config.PROJECT_ID:
            fields.extend(trace_context(corr.trace_id, corr.span_id, True, self.config.PROJECT_ID))
        if corr.user_id is not None:
            fields.append(label(self.config.KEY_USER_ID, corr.user_id))
        if corr.scope is not None:
            fields.append(label(self.config.KEY_SCOPE, corr.scope))
        return fields

    def _log(
        self,
        level: LogLevel,
        msg: str,
        args: Sequence[Any],
        keys_and_values: Sequence[Any] | None,
        extra: dict[str, Any] | None,
        ctx: contextvars.Context | None,
        stacklevel: int,
    ) -> None:
        if not should_emit(level, self.config.LOG_LEVEL):
            return

        level = LogLevel(level)
        message = _format_message(msg, args)
        corr = self.extractor.extract(ctx)

        fields = [label(self.config.KEY_REQUEST_ID, corr.trace_id)]
        site = _caller_site(_CALLER_DEPTH + stacklevel - 1)
        if site is not None:
            fields.append(source_location(site))
        fields.extend(self._correlation_fields(corr))
        if keys_and_values or extra:
            fields.extend(encode_fields(keys_and_values or (), self.config.KEY_ERROR, extra))

        if level != LogLevel.CRITICAL:
            self.sink.write(level, message, fields)
            return

        try:
            self.sink.write(level, message, fields)
        finally:
            try:
                self.sink.flush()
            finally:
                self.exit_hook(1)


__all__ = ["ContextLogger"]
