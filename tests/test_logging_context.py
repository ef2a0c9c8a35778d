"""Tests for logging context propagation."""

import threading

import pytest

from notifier.logging.context import (
    get_log_context,
    log_context,
    new_request_id,
    pop_log_context,
    push_log_context,
)


def test_empty_context():
    assert get_log_context() == {}


def test_push_and_pop():
    token = push_log_context(request_id="abc123", email_type="bulk-email")
    assert get_log_context() == {"request_id": "abc123", "email_type": "bulk-email"}
    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_context():
    token1 = push_log_context(request_id="abc123")
    token2 = push_log_context(email_type="contact-form")
    assert get_log_context() == {"request_id": "abc123", "email_type": "contact-form"}

    pop_log_context(token2)
    assert get_log_context() == {"request_id": "abc123"}
    pop_log_context(token1)
    assert get_log_context() == {}


def test_inner_value_overrides_outer():
    with log_context(email_type="single-email"):
        with log_context(email_type="emergency-alert", alert_level="critical"):
            assert get_log_context() == {
                "email_type": "emergency-alert",
                "alert_level": "critical",
            }
        assert get_log_context() == {"email_type": "single-email"}


def test_context_manager_restores_on_exception():
    with pytest.raises(RuntimeError):
        with log_context(request_id="abc123"):
            raise RuntimeError("boom")

    assert get_log_context() == {}


def test_get_log_context_returns_copy():
    with log_context(request_id="abc123"):
        snapshot = get_log_context()
        snapshot["request_id"] = "changed"
        assert get_log_context()["request_id"] == "abc123"


def test_context_isolated_between_threads():
    seen = {}

    def worker():
        seen["worker"] = get_log_context()

    with log_context(request_id="main-thread"):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

    assert seen["worker"] == {}


def test_new_request_id_is_short_and_unique():
    first, second = new_request_id(), new_request_id()

    assert len(first) == 12
    assert first != second
