"""
Logging configuration: health check suppression and credential redaction.
"""

import logging
import logging.config
from typing import Any, Dict, Iterable, Optional

REDACTED = "***"


class HealthCheckFilter(logging.Filter):
    """Filter to suppress health check endpoint logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter out health check requests from uvicorn access logs."""
        if record.name == "uvicorn.access":
            message = record.getMessage()
            if "/health" in message and "GET" in message:
                return False
        return True


class CredentialRedactionFilter(logging.Filter):
    """
    Replace configured secret values in log records with a placeholder.

    The filter renders the record message once, redacts it, and stores the
    result back with no args so handlers never see the raw secret. Exception
    text is rendered into the exc_text cache and redacted the same way.
    """

    def __init__(self, secrets: Optional[Iterable[str]] = None):
        super().__init__()
        self._secrets = sorted({s for s in (secrets or []) if s}, key=len, reverse=True)

    def _redact(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        redacted = self._redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = self._redact(record.exc_text)
        if record.stack_info:
            record.stack_info = self._redact(record.stack_info)
        return True


def get_logging_config(
    level: str = "INFO",
    stream: str = "ext://sys.stdout",
    secrets: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """
    Get logging configuration.

    Args:
        level: Root level for twentyi_mcp and uvicorn loggers
        stream: Handler stream; stdio transport must log to stderr
        secrets: Credential values to redact from every record
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "health_check_filter": {
                "()": HealthCheckFilter
            },
            "credential_filter": {
                "()": CredentialRedactionFilter,
                "secrets": list(secrets or []),
            },
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "access": {
                "format": "%(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": stream,
                "filters": ["credential_filter"],
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": stream,
                "filters": ["health_check_filter", "credential_filter"],
            }
        },
        "loggers": {
            "uvicorn": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            "uvicorn.error": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            "uvicorn.access": {
                "handlers": ["access"],
                "level": level,
                "propagate": False
            },
            "twentyi_mcp": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            }
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }


def configure_logging(
    level: str = "INFO",
    stream: str = "ext://sys.stdout",
    secrets: Optional[Iterable[str]] = None,
) -> None:
    """Apply get_logging_config() with dictConfig."""
    logging.config.dictConfig(get_logging_config(level=level, stream=stream, secrets=secrets))
