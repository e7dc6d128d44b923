"""
Tests for logging configuration and its filters.

The dictConfig is inspected rather than applied, so the global logging
state of the test session is left alone.
"""

import logging
import sys

from twentyi_mcp.logging_config import (
    REDACTED,
    CredentialRedactionFilter,
    HealthCheckFilter,
    get_logging_config,
)


def make_record(name, msg, args=None):
    return logging.LogRecord(name, logging.INFO, __file__, 1, msg, args, None)


class TestHealthCheckFilter:
    """Tests for access log suppression."""

    def test_drops_health_requests(self):
        record = make_record("uvicorn.access", '127.0.0.1 - "GET /healthz HTTP/1.1" 200')
        assert HealthCheckFilter().filter(record) is False

    def test_keeps_other_requests(self):
        record = make_record("uvicorn.access", '127.0.0.1 - "POST /capabilities/invoke HTTP/1.1" 200')
        assert HealthCheckFilter().filter(record) is True

    def test_ignores_other_loggers(self):
        record = make_record("twentyi_mcp", "GET /health")
        assert HealthCheckFilter().filter(record) is True


class TestCredentialRedactionFilter:
    """Tests for secret redaction."""

    def test_redacts_formatted_args(self):
        record = make_record("twentyi_mcp", "token=%s", ("general-secret",))
        assert CredentialRedactionFilter(["general-secret"]).filter(record) is True
        assert record.getMessage() == f"token={REDACTED}"

    def test_longer_secret_redacted_first(self):
        record = make_record("twentyi_mcp", "combined=abc+def")
        CredentialRedactionFilter(["abc", "abc+def"]).filter(record)
        assert record.getMessage() == f"combined={REDACTED}"

    def test_redacts_exception_text(self):
        try:
            raise RuntimeError("upstream rejected key general-secret")
        except RuntimeError:
            record = logging.LogRecord(
                "twentyi_mcp", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        CredentialRedactionFilter(["general-secret"]).filter(record)
        rendered = logging.Formatter().format(record)

        assert "general-secret" not in rendered
        assert f"upstream rejected key {REDACTED}" in rendered

    def test_untouched_without_secrets(self):
        record = make_record("twentyi_mcp", "plain %s", ("text",))
        CredentialRedactionFilter().filter(record)
        assert record.args == ("text",)


class TestGetLoggingConfig:
    """Tests for the dictConfig structure."""

    def test_stream_and_level(self):
        config = get_logging_config(level="DEBUG", stream="ext://sys.stderr")
        assert config["handlers"]["default"]["stream"] == "ext://sys.stderr"
        assert config["loggers"]["twentyi_mcp"]["level"] == "DEBUG"

    def test_secrets_passed_to_filter(self):
        config = get_logging_config(secrets=["s1"])
        assert config["filters"]["credential_filter"]["secrets"] == ["s1"]
        assert "credential_filter" in config["handlers"]["default"]["filters"]
        assert "health_check_filter" in config["handlers"]["access"]["filters"]
