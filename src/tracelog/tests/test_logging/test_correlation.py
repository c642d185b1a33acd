# src/tracelog/tests/test_logging/test_correlation.py
import contextvars
import threading

from opentelemetry import trace

from tracelog.core.logging.correlation import (
    ZERO_SPAN_ID,
    ZERO_TRACE_ID,
    CorrelationExtractor,
    OtelTraceProvider,
    bind_correlation,
    get_scope,
    get_user_id,
    reset_user_id,
    set_user_id,
)


def make_span(trace_id: int, span_id: int) -> trace.Span:
    return trace.NonRecordingSpan(trace.SpanContext(trace_id=trace_id, span_id=span_id, is_remote=False))


def test_no_active_span_gives_zero_ids():
    corr = CorrelationExtractor().extract()
    assert corr.trace_id == ZERO_TRACE_ID == "0" * 32
    assert corr.span_id == ZERO_SPAN_ID == "0" * 16
    assert corr.user_id is None
    assert corr.scope is None


def test_active_span_ids_are_lower_hex():
    span = make_span(0x4BF92F3577B34DA6A3CE929D0E0E4736, 0x00F067AA0BA902B7)
    with trace.use_span(span):
        trace_id, span_id = OtelTraceProvider().current_ids()
    assert trace_id == "4bf92f3577b34da6a3ce929d0e0e4736"
    assert span_id == "00f067aa0ba902b7"


def test_user_id_and_scope_are_surfaced_when_bound(fake):
    user = fake.uuid4()
    with bind_correlation(user_id=user, scope="billing"):
        corr = CorrelationExtractor().extract()
    assert corr.user_id == user
    assert corr.scope == "billing"
    # values are restored after the block
    assert get_user_id() is None
    assert get_scope() is None


def test_non_string_user_id_is_omitted():
    token = set_user_id(12345)  # type: ignore[arg-type]
    try:
        assert CorrelationExtractor().extract().user_id is None
    finally:
        reset_user_id(token)


def test_snapshot_context_is_read_instead_of_current():
    with bind_correlation(user_id="snap-user"):
        snapshot = contextvars.copy_context()
    assert get_user_id() is None

    corr = CorrelationExtractor().extract(snapshot)
    assert corr.user_id == "snap-user"
    assert get_user_id() is None


def test_empty_ids_from_provider_degrade_to_zero(provider):
    provider.trace_id = ""
    provider.span_id = ""
    corr = CorrelationExtractor(provider).extract()
    assert (corr.trace_id, corr.span_id) == (ZERO_TRACE_ID, ZERO_SPAN_ID)
    assert provider.calls == 1


def test_snapshot_can_be_read_while_it_is_running(log, sink):
    with bind_correlation(user_id="inside-user"):
        snapshot = contextvars.copy_context()

    snapshot.run(lambda: log.info("inside", ctx=snapshot))

    [(_, message, fields)] = sink.records
    assert message == "inside"
    assert ("user_id", "inside-user") in [(f.key, f.value) for f in fields]


def test_same_snapshot_shared_by_threads(log, sink):
    with bind_correlation(scope="batch"):
        snapshot = contextvars.copy_context()
    errors = []
    barrier = threading.Barrier(4)

    def worker():
        barrier.wait()
        try:
            for _ in range(20):
                log.info("tick", ctx=snapshot)
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(sink.records) == 80
    assert all(("scope", "batch") in [(f.key, f.value) for f in fields] for _, _, fields in sink.records)
