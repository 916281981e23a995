import logging
from unittest.mock import patch

from infrastructure import observability
from infrastructure.observability import _scrub_sensitive_data, mask_string, scrub

def test_mask_string_redacts_bearer_and_jwt():
    text = "Authorization: Bearer abc.def-123 and eyJhbGciOi.eyJzdWIiOiIxIn0.c2lnbmF0dXJl"
    masked = mask_string(text)
    assert "abc.def-123" not in masked
    assert "eyJ" not in masked
    assert masked.count("[REDACTED]") == 2

def test_scrub_redacts_sensitive_keys_recursively():
    data = {"email": "npd@example.com", "password": "hunter2", "nested": [{"refreshToken": "r"}]}

    assert scrub(data) == {
        "email": "npd@example.com",
        "password": "[REDACTED]",
        "nested": [{"refreshToken": "[REDACTED]"}],
    }

def test_before_send_scrubs_request_breadcrumbs_and_frames():
    event = {
        "request": {"headers": {"Authorization": "Bearer secret"}},
        "breadcrumbs": {"values": [{"message": "login with Bearer secret"}]},
        "exception": {"values": [{"stacktrace": {"frames": [{"vars": {"token": "abc"}}]}}]},
    }

    scrubbed = _scrub_sensitive_data(event, {})

    assert scrubbed["request"]["headers"]["Authorization"] == "[REDACTED]"
    assert scrubbed["breadcrumbs"]["values"][0]["message"] == "login with [REDACTED]"
    assert scrubbed["exception"]["values"][0]["stacktrace"]["frames"][0]["vars"]["token"] == "[REDACTED]"

def test_setup_observability_without_dsn(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    with patch.object(observability.logging, "basicConfig") as mock_basic:
        observability.setup_observability()
    assert mock_basic.call_args.kwargs["level"] == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.WARNING
