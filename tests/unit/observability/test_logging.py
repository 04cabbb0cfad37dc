"""Unit tests for structured logging and PII redaction."""

import json

import pytest
import structlog

from memmachine_node.observability.logging import PIIRedactor, get_logger, setup_logging


class TestPIIRedactor:
    """Tests for the redaction processor."""

    @pytest.fixture
    def redactor(self) -> PIIRedactor:
        return PIIRedactor()

    def test_sensitive_keys_replaced(self, redactor: PIIRedactor) -> None:
        """Values under sensitive keys are replaced outright."""
        event = redactor(None, "info", {"event": "x", "api_key": "sk-1", "Authorization": "abc"})
        assert event["api_key"] == "[REDACTED]"
        assert event["Authorization"] == "[REDACTED]"
        assert event["event"] == "x"

    def test_email_in_string_redacted(self, redactor: PIIRedactor) -> None:
        """Emails inside free text are scrubbed."""
        event = redactor(None, "info", {"event": "contact ada@example.com now"})
        assert event["event"] == "contact [EMAIL] now"

    def test_bearer_token_redacted(self, redactor: PIIRedactor) -> None:
        """Bearer tokens inside free text are scrubbed."""
        event = redactor(None, "info", {"header": "Bearer abc.def-123"})
        assert event["header"] == "Bearer [REDACTED]"

    def test_nested_values_redacted(self, redactor: PIIRedactor) -> None:
        """Redaction recurses into dicts and lists."""
        event = redactor(
            None,
            "info",
            {"event": "x", "payload": {"token": "t", "notes": ["mail ada@example.com"]}},
        )
        assert event["payload"] == {"token": "[REDACTED]", "notes": ["mail [EMAIL]"]}

    def test_non_string_values_untouched(self, redactor: PIIRedactor) -> None:
        """Numbers and booleans pass through."""
        assert redactor.redact({"count": 3, "ok": True}) == {"count": 3, "ok": True}


class TestSetupLogging:
    """Tests for logging configuration."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """JSON format renders one JSON object per event."""
        setup_logging(level="INFO", format="json")
        get_logger("test").info("memory_stored", project_id="support")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        data = json.loads(line)
        assert data["event"] == "memory_stored"
        assert data["project_id"] == "support"
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_level_filtering(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Events below the configured level are dropped."""
        setup_logging(level="WARNING", format="json")
        get_logger("test").info("quiet")

        assert capsys.readouterr().err == ""

    def test_redaction_applied(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Redaction runs before rendering when enabled."""
        setup_logging(level="INFO", format="json", redact_pii=True)
        get_logger("test").info("request", api_key="sk-secret")

        data = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert data["api_key"] == "[REDACTED]"

    def test_timestamp_survives_redaction(self, capsys: pytest.CaptureFixture[str]) -> None:
        """ISO timestamps are not mistaken for phone numbers."""
        setup_logging(level="INFO", format="json", redact_pii=True)
        get_logger("test").info("tick")

        data = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert "[PHONE]" not in data["timestamp"]
