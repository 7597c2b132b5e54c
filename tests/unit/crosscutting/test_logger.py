"""
Name: Structured Logger Tests

Responsibilities:
  - Credentials never reach the log output
  - JSON lines include request context and exception info
"""

import json
import logging
import sys

import pytest

from postboard.context import clear_context, set_request_context
from postboard.crosscutting.logger import MASK, JsonLineFormatter, scrub

pytestmark = pytest.mark.unit


class TestScrub:
    def test_masks_sensitive_keys_recursively(self):
        clean = scrub(
            {
                "email": "a@x.com",
                "password": "secret1",
                "nested": {"access_token": "abc", "password_hash": "$argon2id$..."},
            }
        )
        assert clean == {
            "email": "a@x.com",
            "password": MASK,
            "nested": {"access_token": MASK, "password_hash": MASK},
        }

    def test_truncates_long_strings(self):
        out = scrub("x" * 5000)
        assert out.endswith("[5000 chars]")
        assert len(out) < 5000

    def test_bytes_are_summarized(self):
        assert scrub(b"1234") == "<4 bytes>"

    def test_unknown_objects_become_strings(self):
        assert scrub(object()).startswith("<object object")


def _record(msg="hola", exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord("postboard-api", logging.INFO, __file__, 1, msg, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_masks_extra_and_adds_context():
    set_request_context(request_id="req-1", method="GET", path="/posts")
    try:
        entry = json.loads(JsonLineFormatter().format(_record(password="secret1", post_id="p1")))
    finally:
        clear_context()

    assert entry["message"] == "hola"
    assert entry["password"] == MASK
    assert entry["post_id"] == "p1"
    assert entry["request_id"] == "req-1"
    assert entry["path"] == "/posts"


def test_json_line_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("falló", exc_info=sys.exc_info())

    entry = json.loads(JsonLineFormatter().format(record))

    assert entry["error"]["type"] == "ValueError"
    assert entry["error"]["message"] == "boom"
    assert "Traceback" in entry["error"]["trace"]
