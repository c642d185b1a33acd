"""
Core pytest configuration for the tracelog test suite.

Provides test doubles for the pipeline's collaborators:

- RecordingSink: keeps every write and counts flushes.
- CountingTraceProvider: returns fixed trace/span ids and counts lookups, so
  tests can assert that filtered calls never touch the correlation context.
- make_config(): a LoggerConfig that ignores any `.env` file on the machine.

The process-wide logger is finalized after every test so tests that call
initialize() never see each other's configuration.
"""

from __future__ import annotations

import logging

# Keep Faker quiet during collection.
logging.getLogger("faker").setLevel(logging.WARNING)

import pytest
from faker import Faker

from tracelog.config.settings import LoggerConfig
from tracelog.core.logging.builder import finalize
from tracelog.core.logging.pipeline import ContextLogger

TRACE_ID = "4bf92f3577b34da6a3ce929d0e0e4736"
SPAN_ID = "00f067aa0ba902b7"


class RecordingSink:
    def __init__(self, events: list | None = None):
        self.records: list[tuple] = []
        self.flushes = 0
        # shared event log, so tests can check write/flush/exit ordering
        self.events = events if events is not None else []

    def write(self, level, message, fields):
        self.records.append((level, message, list(fields)))
        self.events.append("write")

    def flush(self):
        self.flushes += 1
        self.events.append("flush")


class CountingTraceProvider:
    def __init__(self, trace_id: str = TRACE_ID, span_id: str = SPAN_ID):
        self.trace_id = trace_id
        self.span_id = span_id
        self.calls = 0

    def current_ids(self) -> tuple[str, str]:
        self.calls += 1
        return self.trace_id, self.span_id


def make_config(**overrides) -> LoggerConfig:
    return LoggerConfig(_env_file=None, **overrides)


@pytest.fixture(autouse=True)
def reset_process_logger():
    yield
    finalize()


@pytest.fixture(scope="session")
def fake() -> Faker:
    Faker.seed(1234)
    return Faker()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def provider() -> CountingTraceProvider:
    return CountingTraceProvider()


@pytest.fixture
def exits() -> list[int]:
    return []


@pytest.fixture
def log(sink, provider, exits) -> ContextLogger:
    """ContextLogger with DEBUG threshold, no project id, and a non-exiting exit hook."""
    return ContextLogger(make_config(LOG_LEVEL="debug"), sink, trace_provider=provider, exit_hook=exits.append)


@pytest.fixture(name="make_config")
def make_config_fixture():
    """Factory for LoggerConfig instances: make_config(LOG_LEVEL="info", PROJECT_ID="p")."""
    return make_config


@pytest.fixture
def sink_factory():
    return RecordingSink
