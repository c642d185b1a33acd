# src/tracelog/core/logging/filters.py
"""
Logging filters

Field defaults and redaction for log records.

Records produced by `LoggingSink` carry a `fields` attribute: the ordered list
of structured fields built by the pipeline. Records from anywhere else (a
third-party library, uvicorn, a plain `logging.getLogger(__name__)` call) do
not. Both pass through the same handlers and formatters, so:

- `FieldsFilter` guarantees every record has a `fields` list. Records that
  arrive without one get an empty list, and formatters can rely on it
  without `getattr` dances.
- `RedactFilter` masks label values whose key names a secret ("password",
  "token", ...). It returns a new list; the pipeline's list is never mutated
  in place because other handlers may see the same record.

Both filters return True: they annotate records, they never drop them.

Installed through dictConfig by `builder.make_dict_config()`:

    "filters": {
        "fields": {"()": FieldsFilter},
        "redact": {"()": RedactFilter},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "filters": ["fields", "redact"], ...}
    }
"""

import logging
from dataclasses import replace
from logging import LogRecord

from .fields import Field

REDACTED = "***REDACTED***"


class FieldsFilter(logging.Filter):
    """
    Logging filter that guarantees every LogRecord has a `fields` attribute.
    """

    def filter(self, record: LogRecord) -> bool:
        fields = getattr(record, "fields", None)
        record.fields = list(fields) if isinstance(fields, (list, tuple)) else []
        return True


# Redact sensitive information
class RedactFilter(logging.Filter):
    SENSITIVE = {"password", "secret", "token", "access_token", "refresh_token", "ssn", "authorization"}

    def filter(self, record: LogRecord) -> bool:
        fields = getattr(record, "fields", None)
        if not fields:
            return True
        record.fields = [
            replace(f, value=REDACTED) if isinstance(f, Field) and f.label and f.key.lower() in self.SENSITIVE else f
            for f in fields
        ]
        return True


__all__ = ["FieldsFilter", "RedactFilter", "REDACTED"]
