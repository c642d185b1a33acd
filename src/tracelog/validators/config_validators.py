from tracelog.core.logging.levels import LogLevel


def to_lowercase(value: str | None) -> str | None:
    """
    Converts a string to lowercase if it's not None.
    """
    if value is None:
        return None
    return value.lower()


def blank_to_none(value: str | None) -> str | None:
    """
    Treat an empty or whitespace-only string as "not set".
    """
    if value is None:
        return None
    value = value.strip()
    return value or None


def to_log_level(value: int | str | LogLevel) -> LogLevel:
    """
    Parse a level name ("debug", "WARNING", ...) or number into a LogLevel.

    The sentinels FIRST/LAST are accepted here; they simply suppress all
    output when used as a threshold.
    """
    return LogLevel.parse(value)
