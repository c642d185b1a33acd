# src/tracelog/core/logging/middleware.py
"""
Access-log middleware for FastAPI / Starlette.

Purpose
-------
Writes exactly one "request log" entry per HTTP request, correlated with the
active trace like every other record, and normalizes the client address that
downstream handlers see.

How it works (high level)
-------------------------
1. If the escaped request path is in the exclusion set (health checks,
   metrics scrapes, ...), nothing is timed, rewritten or logged.
2. The client IP is the first entry of `X-Forwarded-For`; without that header
   it is the host of the connection peer (port dropped).
3. The IP is appended to the inbound headers as `x-forwarded-for` and
   `true-client-ip`, so handlers read one consistent value.
4. The request is forwarded via `call_next(request)` and timed.
5. An HTTPRecord (status, method, URL, matched route template, latency,
   user agent, ...) is handed to `ContextLogger.http()`, which logs it at INFO
   whatever the application log threshold is.

Excluded paths
--------------
By default an excluded path short-circuits: the wrapped application is not
called and an empty 200 response is returned. Pass `forward_excluded=True` to
serve excluded paths normally and only skip the access log.

Integration notes
-----------------
- Register after initialize():
      log = initialize(config)
      app.add_middleware(AccessLogMiddleware, logger=log, excludes=["/healthz"])
  Without `logger`, the process-wide logger from get_logger() is used. Until
  initialize() has run, requests are served but not logged, and one warning
  is written through stdlib logging.
- The route template comes from `scope["route"]`, which FastAPI sets when a
  route matches. On plain Starlette, or when nothing matched, it is empty.
- `X-Forwarded-For` is client-controlled unless a trusted proxy rewrites it.
  Deploy behind one if the logged address matters.
"""

from __future__ import annotations

import logging
import time
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from tracelog.exceptions import LoggingNotInitializedError

from .builder import get_logger
from .http import HTTPRecord
from .pipeline import ContextLogger

_stdlib_logger = logging.getLogger(__name__)


def client_ip(request: Request) -> str:
    """
    First `X-Forwarded-For` hop, else the peer host without its port.
    """
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    if request.client is not None and request.client.host:
        return request.client.host
    return ""


def escaped_path(request: Request) -> str:
    """Percent-encoded request path as sent by the client, without the query string."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.split(b"?", 1)[0].decode("latin-1")
    return request.url.path


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", "") or ""


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    Starlette / FastAPI middleware that writes one access-log entry per request.

    Notes:
      - Adds the derived client IP as `x-forwarded-for` and `true-client-ip`
        request headers before the request reaches the application.
      - Requests whose escaped path is in `excludes` are never logged.
    """

    def __init__(
        self,
        app: ASGIApp,
        logger: ContextLogger | None = None,
        excludes: Iterable[str] | None = None,
        forward_excluded: bool = False,
    ) -> None:
        super().__init__(app)
        self.logger = logger
        self.excludes = frozenset(excludes) if excludes is not None else None
        self.forward_excluded = forward_excluded
        self._warned_uninitialized = False

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        logger = self._resolve_logger()
        if logger is None:
            return await call_next(request)

        # 1) Excluded paths skip everything below.
        excludes = self.excludes if self.excludes is not None else logger.config.ACCESS_LOG_EXCLUDES
        if escaped_path(request) in excludes:
            if self.forward_excluded:
                return await call_next(request)
            return Response(status_code=200)

        # 2) Normalize the client address for everything downstream.
        remote_ip = client_ip(request)
        encoded_ip = remote_ip.encode("latin-1")
        request.scope["headers"] = [
            *request.scope["headers"],
            (b"x-forwarded-for", encoded_ip),
            (b"true-client-ip", encoded_ip),
        ]

        # 3) Forward and time. A handler exception is logged as a 500 and re-raised.
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._log(logger, request, 500, remote_ip, time.perf_counter() - start)
            raise
        self._log(logger, request, response.status_code, remote_ip, time.perf_counter() - start)
        return response

    def _resolve_logger(self) -> ContextLogger | None:
        if self.logger is not None:
            return self.logger
        try:
            return get_logger()
        except LoggingNotInitializedError:
            # serve the request unlogged rather than fail it
            if not self._warned_uninitialized:
                self._warned_uninitialized = True
                _stdlib_logger.warning("tracelog is not initialized; access logging is disabled until initialize() runs")
            return None

    def _log(self, logger: ContextLogger, request: Request, status: int, remote_ip: str, latency: float) -> None:
        headers = request.headers
        http_version = request.scope.get("http_version")
        record = HTTPRecord(
            method=request.method,
            url=str(request.url),
            path=request.url.path,
            status=status,
            remote_ip=remote_ip,
            route=route_template(request),
            latency=latency,
            user_agent=headers.get("user-agent", ""),
            referer=headers.get("referer", ""),
            protocol=f"HTTP/{http_version}" if http_version else "",
            request_size=headers.get("content-length", ""),
        )
        logger.http(record)


__all__ = ["AccessLogMiddleware", "client_ip", "escaped_path", "route_template"]
