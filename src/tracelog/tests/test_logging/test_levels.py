# src/tracelog/tests/test_logging/test_levels.py
import logging

import pytest

from tracelog.core.logging.levels import LogLevel, should_emit

REAL_LEVELS = [LogLevel.CRITICAL, LogLevel.ERROR, LogLevel.WARN, LogLevel.INFO, LogLevel.DEBUG]


@pytest.mark.parametrize("threshold", REAL_LEVELS)
@pytest.mark.parametrize("level", REAL_LEVELS)
def test_real_levels_emit_at_or_above_threshold(level, threshold):
    assert should_emit(level, threshold) == (level <= threshold)


@pytest.mark.parametrize("level", [LogLevel.FIRST, LogLevel.LAST, -1, 7, 100])
def test_out_of_range_levels_never_emit(level):
    for threshold in [*REAL_LEVELS, LogLevel.LAST, 100]:
        assert should_emit(level, threshold) is False


def test_sentinel_threshold_suppresses_everything():
    assert not any(should_emit(level, LogLevel.FIRST) for level in REAL_LEVELS)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("debug", LogLevel.DEBUG),
        ("Warning", LogLevel.WARN),
        ("WARN", LogLevel.WARN),
        (" info ", LogLevel.INFO),
        ("fatal", LogLevel.CRITICAL),
        ("2", LogLevel.ERROR),
        (1, LogLevel.CRITICAL),
        (LogLevel.INFO, LogLevel.INFO),
    ],
)
def test_parse_accepts_names_and_numbers(raw, expected):
    assert LogLevel.parse(raw) is expected


@pytest.mark.parametrize("raw", ["verbose", "", 42, True])
def test_parse_rejects_unknown_values(raw):
    with pytest.raises(ValueError):
        LogLevel.parse(raw)


def test_stdlib_level_mapping():
    assert LogLevel.CRITICAL.stdlib_level == logging.CRITICAL
    assert LogLevel.ERROR.stdlib_level == logging.ERROR
    assert LogLevel.WARN.stdlib_level == logging.WARNING
    assert LogLevel.INFO.stdlib_level == logging.INFO
    assert LogLevel.DEBUG.stdlib_level == logging.DEBUG
    assert LogLevel.FIRST.stdlib_level == logging.NOTSET
    assert not LogLevel.LAST.is_valid
    assert LogLevel.WARN.is_valid
