# src/tracelog/core/logging/http.py
"""HTTP access-log record and latency rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .fields import HTTP_REQUEST_KEY, Field

_NANOSECOND = 1
_MICROSECOND = 1_000 * _NANOSECOND
_MILLISECOND = 1_000 * _MICROSECOND
_SECOND = 1_000 * _MILLISECOND
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE


def _decimal(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    text = str(whole)
    if frac:
        digits = len(str(unit)) - 1
        text += "." + str(frac).zfill(digits).rstrip("0")
    return text


def format_duration(seconds: float) -> str:
    """
    Render a duration the way humans read it: "0s", "850ns", "1.5ms", "2m3.5s", "1h0m0s".

    Sub-second values use the largest unit that keeps the integer part non-zero.
    """
    ns = round(seconds * _SECOND)
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns < _MICROSECOND:
        return f"{sign}{ns}ns"
    if ns < _MILLISECOND:
        return f"{sign}{_decimal(ns, _MICROSECOND)}µs"
    if ns < _SECOND:
        return f"{sign}{_decimal(ns, _MILLISECOND)}ms"

    hours, rest = divmod(ns, _HOUR)
    minutes, rest = divmod(rest, _MINUTE)
    secs = _decimal(rest, _SECOND)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


@dataclass(frozen=True)
class HTTPRecord:
    """
    One completed request, as seen by the access-log middleware.

    `route` is the matched route template ("/users/{user_id}"), empty when no
    route matched. `latency` is in seconds.
    """

    method: str
    url: str
    path: str
    status: int
    remote_ip: str
    route: str
    latency: float
    user_agent: str = ""
    referer: str = ""
    protocol: str = ""
    request_size: str = ""

    def to_dict(self) -> dict[str, Any]:
        """`httpRequest` payload in Cloud Logging field names; empty values are omitted."""
        payload: dict[str, Any] = {
            "requestMethod": self.method,
            "requestUrl": self.url,
            "requestSize": self.request_size,
            "status": self.status,
            "userAgent": self.user_agent,
            "remoteIp": self.remote_ip,
            "referer": self.referer,
            "protocol": self.protocol,
            "latency": format_duration(self.latency),
        }
        return {k: v for k, v in payload.items() if v not in ("", None)}


def http_request(record: HTTPRecord) -> Field:
    return Field(HTTP_REQUEST_KEY, record, label=False)


__all__ = ["HTTPRecord", "format_duration", "http_request"]
