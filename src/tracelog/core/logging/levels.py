# src/tracelog/core/logging/levels.py
"""
Severity levels and the emission rule.

Levels are ordered from most to least severe. A smaller value means a more
severe record, so a threshold of INFO lets CRITICAL, ERROR, WARN and INFO
through and suppresses DEBUG. FIRST and LAST only bracket the valid range.
"""

import logging
from enum import IntEnum


class LogLevel(IntEnum):
    FIRST = 0
    CRITICAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5
    LAST = 6

    @property
    def is_valid(self) -> bool:
        return LogLevel.FIRST < self < LogLevel.LAST

    @property
    def stdlib_level(self) -> int:
        """Matching stdlib `logging` level (NOTSET for the sentinels)."""
        return _STDLIB_LEVELS.get(self, logging.NOTSET)

    @classmethod
    def parse(cls, value: "int | str | LogLevel") -> "LogLevel":
        """
        Accept a LogLevel, an int, a digit string or a case-insensitive name.

        Raises:
            ValueError: the value does not name a level.
        """
        if isinstance(value, LogLevel):
            return value
        if isinstance(value, bool):
            raise ValueError(f"invalid log level: {value!r}")
        if isinstance(value, int):
            return cls(value)
        name = str(value).strip().upper()
        if name.isdigit():
            return cls(int(name))
        name = _ALIASES.get(name, name)
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"invalid log level: {value!r}") from None


_ALIASES = {"WARNING": "WARN", "FATAL": "CRITICAL"}

_STDLIB_LEVELS = {
    LogLevel.CRITICAL: logging.CRITICAL,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


def should_emit(level: int, threshold: int) -> bool:
    """
    Return True when `level` is a real level at or above the threshold severity.

    Values outside the sentinel range are never emitted.
    """
    return LogLevel.FIRST < level < LogLevel.LAST and level <= threshold


__all__ = ["LogLevel", "should_emit"]
