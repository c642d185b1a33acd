# src/tracelog/core/logging/fields.py
"""
Structured fields and the key/value encoder.

A Field is one key/value unit attached to a log record. Most fields are
*labels*: plain strings that formatters group under the Cloud Logging
`logging.googleapis.com/labels` map. A few well-known keys carry pre-rendered
payloads instead (trace context, source location, HTTP request) and are
written at the top level of the entry.

`encode_fields()` turns the loose `key, value, key, value, ...` arguments of
the structured log calls into labels. The rules are type-directed on the value:

| Kind      | Python values                         | Rendering                     |
| --------- | ------------------------------------- | ----------------------------- |
| STRING    | `str`                                 | unchanged                     |
| NONE      | `None`                                | dropped                       |
| BYTES     | `bytes`, `bytearray`, `memoryview`    | UTF-8 decoded (replacement)   |
| INTEGER   | integral numbers except `bool`        | base-10 string                |
| ERROR     | exceptions                            | `str(exc)`                    |
| OTHER     | anything else                         | `repr(value)`                 |

The error key is special: under `"error"` (or the configured error key) only
exceptions are accepted, and they are emitted under the configured key. Any
other value under that key is dropped.

Encoding never raises. A trailing unpaired key and pairs with a non-string key
are dropped silently.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

# Top-level Cloud Logging keys (everything else is a label).
LABELS_KEY = "logging.googleapis.com/labels"
TRACE_KEY = "logging.googleapis.com/trace"
SPAN_ID_KEY = "logging.googleapis.com/spanId"
TRACE_SAMPLED_KEY = "logging.googleapis.com/trace_sampled"
SOURCE_LOCATION_KEY = "logging.googleapis.com/sourceLocation"
HTTP_REQUEST_KEY = "httpRequest"

DEFAULT_ERROR_KEY = "err"


@dataclass(frozen=True)
class Field:
    key: str
    value: Any
    label: bool = True

    def rendered(self) -> Any:
        """Value ready for JSON output (payload objects expose `to_dict()`)."""
        to_dict = getattr(self.value, "to_dict", None)
        return to_dict() if callable(to_dict) else self.value


@dataclass(frozen=True)
class SourceLocation:
    file: str
    line: int
    function: str = ""

    def to_dict(self) -> dict[str, str]:
        # Cloud Logging expects the line number as a string
        return {"file": self.file, "line": str(self.line), "function": self.function}


def source_location(location: SourceLocation) -> Field:
    return Field(SOURCE_LOCATION_KEY, location, label=False)


def trace_context(trace_id: str, span_id: str, sampled: bool, project_id: str) -> list[Field]:
    """Cloud Logging trace fields linking the entry to a trace in `project_id`."""
    return [
        Field(TRACE_KEY, f"projects/{project_id}/traces/{trace_id}", label=False),
        Field(SPAN_ID_KEY, span_id, label=False),
        Field(TRACE_SAMPLED_KEY, sampled, label=False),
    ]


class ValueKind(Enum):
    STRING = "string"
    NONE = "none"
    BYTES = "bytes"
    INTEGER = "integer"
    ERROR = "error"
    OTHER = "other"


def classify(value: Any) -> ValueKind:
    if value is None:
        return ValueKind.NONE
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ValueKind.BYTES
    if isinstance(value, BaseException):
        return ValueKind.ERROR
    # bool is an Integral too, but "True" reads better than "1"
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        return ValueKind.INTEGER
    return ValueKind.OTHER


def render_value(value: Any) -> str | None:
    """Render a label value, or return None when it must be dropped."""
    kind = classify(value)
    if kind is ValueKind.NONE:
        return None
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.BYTES:
        return bytes(value).decode("utf-8", errors="replace")
    if kind is ValueKind.INTEGER:
        return str(int(value))
    if kind is ValueKind.ERROR:
        return str(value)
    return repr(value)


def label(key: str, value: str) -> Field:
    return Field(key, value)


def encode_fields(
    keys_and_values: Sequence[Any],
    error_key: str = DEFAULT_ERROR_KEY,
    extra: Mapping[str, Any] | None = None,
) -> list[Field]:
    """
    Encode alternating key/value arguments (then `extra`) into label fields.

    Output order follows input order; duplicate keys are all kept.
    """
    fields: list[Field] = []
    # zip over the same iterator pairs items and drops an odd trailing key
    items = iter(keys_and_values)
    pairs: Iterable[tuple[Any, Any]] = zip(items, items)
    if extra:
        pairs = [*pairs, *extra.items()]

    for key, value in pairs:
        if not isinstance(key, str):
            continue
        if key in ("error", error_key):
            if isinstance(value, BaseException):
                fields.append(label(error_key, str(value)))
            continue
        rendered = render_value(value)
        if rendered is not None:
            fields.append(label(key, rendered))
    return fields


__all__ = [
    "Field",
    "SourceLocation",
    "source_location",
    "trace_context",
    "ValueKind",
    "classify",
    "render_value",
    "label",
    "encode_fields",
    "LABELS_KEY",
    "TRACE_KEY",
    "SPAN_ID_KEY",
    "TRACE_SAMPLED_KEY",
    "SOURCE_LOCATION_KEY",
    "HTTP_REQUEST_KEY",
]
