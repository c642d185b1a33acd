# src/tracelog/core/logging/correlation.py
"""
Correlation context: trace id, span id, user id and scope.

Trace and span ids come from the active OpenTelemetry span. This module does
not create or propagate traces; it only reads whatever span the host
application (or its instrumentation) has made current. Without an active span
both ids render as all-zero hex strings, so every record still carries them.

User id and scope are request-scoped values set by the host pipeline (for
example an auth dependency) through `set_user_id()` / `set_scope()` or the
`bind_correlation()` context manager. They live in `contextvars.ContextVar`s so
they follow asyncio tasks across `await` boundaries and never leak between
concurrent requests.

Extraction is read-only. Passing a `contextvars.Context` snapshot (for example
from `contextvars.copy_context()`) reads the values as they were in that
snapshot instead of the current context.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Protocol

from opentelemetry import trace

ZERO_TRACE_ID = "0" * 32
ZERO_SPAN_ID = "0" * 16

_user_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar("user_id", default=None)
_scope_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar("scope", default=None)


def set_user_id(user_id: str | None) -> contextvars.Token:
    """
    Set the user id for the current context.

    Returns:
        token: pass it to reset_user_id(token) to restore the previous value
    """
    return _user_id_ctx.set(user_id)


def reset_user_id(token: contextvars.Token) -> None:
    _user_id_ctx.reset(token)


def get_user_id() -> str | None:
    return _user_id_ctx.get()


def set_scope(scope: str | None) -> contextvars.Token:
    """
    Set the scope (tenant, workspace, OAuth scope, ...) for the current context.
    """
    return _scope_ctx.set(scope)


def reset_scope(token: contextvars.Token) -> None:
    _scope_ctx.reset(token)


def get_scope() -> str | None:
    return _scope_ctx.get()


@contextmanager
def bind_correlation(*, user_id: str | None = None, scope: str | None = None) -> Iterator[None]:
    """
    Attach a user id and/or scope for the duration of the block.

    Example:
        with bind_correlation(user_id="u-42", scope="billing"):
            log.info("charging card")
    """
    user_token = set_user_id(user_id) if user_id is not None else None
    scope_token = set_scope(scope) if scope is not None else None
    try:
        yield
    finally:
        if scope_token is not None:
            reset_scope(scope_token)
        if user_token is not None:
            reset_user_id(user_token)


class TraceProvider(Protocol):
    def current_ids(self) -> tuple[str, str]:
        """Return (trace_id, span_id) of the active span in the current context."""
        ...


class OtelTraceProvider:
    """Reads the current span through the OpenTelemetry API."""

    def current_ids(self) -> tuple[str, str]:
        span_context = trace.get_current_span().get_span_context()
        # INVALID_SPAN_CONTEXT has zero ids, which format to the zero strings
        return format(span_context.trace_id, "032x"), format(span_context.span_id, "016x")


@dataclass(frozen=True)
class CorrelationContext:
    trace_id: str = ZERO_TRACE_ID
    span_id: str = ZERO_SPAN_ID
    user_id: str | None = None
    scope: str | None = None


class CorrelationExtractor:
    def __init__(self, provider: TraceProvider | None = None):
        self.provider = provider or OtelTraceProvider()

    def extract(self, ctx: contextvars.Context | None = None) -> CorrelationContext:
        if ctx is not None:
            # a copy can be entered even while the snapshot itself is running
            return ctx.copy().run(self._read)
        return self._read()

    def _read(self) -> CorrelationContext:
        trace_id, span_id = self.provider.current_ids()
        user_id = _user_id_ctx.get()
        scope = _scope_ctx.get()
        return CorrelationContext(
            trace_id=trace_id or ZERO_TRACE_ID,
            span_id=span_id or ZERO_SPAN_ID,
            user_id=user_id if isinstance(user_id, str) else None,
            scope=scope if isinstance(scope, str) else None,
        )


__all__ = [
    "ZERO_TRACE_ID",
    "ZERO_SPAN_ID",
    "set_user_id",
    "reset_user_id",
    "get_user_id",
    "set_scope",
    "reset_scope",
    "get_scope",
    "bind_correlation",
    "TraceProvider",
    "OtelTraceProvider",
    "CorrelationContext",
    "CorrelationExtractor",
]
