# src/tracelog/tests/test_logging/test_http.py
import pytest

from tracelog.core.logging.http import HTTPRecord, format_duration


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "0s"),
        (850e-9, "850ns"),
        (1.5e-6, "1.5µs"),
        (0.0015, "1.5ms"),
        (0.25, "250ms"),
        (1.5, "1.5s"),
        (2, "2s"),
        (62.5, "1m2.5s"),
        (3600, "1h0m0s"),
        (3723.25, "1h2m3.25s"),
        (-0.002, "-2ms"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_http_payload_uses_cloud_logging_names_and_omits_empty_values():
    record = HTTPRecord(
        method="POST",
        url="http://api.local/orders?dry=1",
        path="/orders",
        status=201,
        remote_ip="10.0.0.8",
        route="/orders",
        latency=0.0123,
        user_agent="curl/8.0",
        protocol="HTTP/1.1",
    )
    assert record.to_dict() == {
        "requestMethod": "POST",
        "requestUrl": "http://api.local/orders?dry=1",
        "status": 201,
        "userAgent": "curl/8.0",
        "remoteIp": "10.0.0.8",
        "protocol": "HTTP/1.1",
        "latency": "12.3ms",
    }
