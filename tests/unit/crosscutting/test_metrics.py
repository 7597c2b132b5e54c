"""
Name: Prometheus Metrics Tests

Responsibilities:
  - Low-cardinality labels (route templates, status buckets)
  - Exposition format contains recorded series
"""

from types import SimpleNamespace

import pytest

from postboard.crosscutting.metrics import (
    UNMATCHED_ENDPOINT,
    _registry,
    _status_bucket,
    get_metrics_response,
    record_auth_outcome,
    record_request_metrics,
    route_label,
)

pytestmark = pytest.mark.unit


def _sample(name, labels):
    return _registry.get_sample_value(name, labels) or 0.0


def test_route_label_uses_matched_template():
    scope = {"route": SimpleNamespace(path="/posts/{post_id}")}
    assert route_label(scope) == "/posts/{post_id}"


def test_route_label_without_route_is_unmatched():
    assert route_label({"path": "/wp-admin/xyz"}) == UNMATCHED_ENDPOINT


@pytest.mark.parametrize(
    "code, bucket", [(200, "2xx"), (201, "2xx"), (302, "3xx"), (404, "4xx"), (503, "5xx")]
)
def test_status_bucket(code, bucket):
    assert _status_bucket(code) == bucket


def test_request_is_counted_per_label_set():
    labels = {"endpoint": "/posts/{post_id}", "method": "GET", "status": "2xx"}
    before = _sample("postboard_requests_total", labels)

    record_request_metrics("/posts/{post_id}", "GET", 200, 0.01)

    assert _sample("postboard_requests_total", labels) == before + 1


def test_auth_outcome_is_counted_per_label_pair():
    labels = {"stage": "login", "outcome": "denied"}
    before = _sample("postboard_auth_outcomes_total", labels)

    record_auth_outcome("login", "denied")

    assert _sample("postboard_auth_outcomes_total", labels) == before + 1


def test_exposition_contains_recorded_series():
    record_request_metrics("/user/stats", "GET", 200, 0.01)
    record_auth_outcome("login", "ok")

    body, content_type = get_metrics_response()
    text = body.decode()

    assert content_type.startswith("text/plain")
    assert "postboard_requests_total" in text
    assert "postboard_auth_outcomes_total" in text
