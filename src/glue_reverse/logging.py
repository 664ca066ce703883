"""Structured logging with secret redaction and catalog progress events."""

import json
import logging
import re
from typing import Any, Dict, Iterable, Optional

LOGGER_NAME = "glue_reverse"

# Connection fields that must never reach the logs in clear text
HIDDEN_KEYS = (
    "secret_access_key",
    "session_token",
    "client_key_password",
    "secretAccessKey",
    "sessionToken",
    "clientKeyPassword",
)

MASK = "********"


class StructuredJSONFormatter(logging.Formatter):
    """JSON formatter for structured logging with secret redaction."""

    def __init__(self, redact_secrets: bool = False):
        super().__init__()
        self.redact_secrets = redact_secrets
        # Patterns for common secret fields
        self.secret_patterns = [
            r'(secret[_a-z]*["\']?\s*[:=]\s*["\']?)([^"\',\s]+)',
            r'(token["\']?\s*[:=]\s*["\']?)([^"\',\s]+)',
            r'(password["\']?\s*[:=]\s*["\']?)([^"\',\s]+)',
        ]

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON with optional secret redaction."""
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "event_type"):
            log_data["event_type"] = record.event_type

        # Catalog object the record refers to
        if hasattr(record, "container_name"):
            log_data["container_name"] = record.container_name
        if hasattr(record, "entity_name"):
            log_data["entity_name"] = record.entity_name

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["stack"] = self.formatException(record.exc_info)

        log_str = json.dumps(log_data, default=str)
        if self.redact_secrets:
            for pattern in self.secret_patterns:
                log_str = re.sub(
                    pattern, rf"\g<1>{MASK}", log_str, flags=re.IGNORECASE
                )
        return log_str


def setup_logging(
    level: str = "INFO",
    redact_secrets: bool = False,
) -> logging.Logger:
    """Set up structured JSON logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        redact_secrets: Whether to redact secrets in logs

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJSONFormatter(redact_secrets=redact_secrets))
    logger.addHandler(handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Optional logger name (defaults to 'glue_reverse')

    Returns:
        Logger instance
    """
    return logging.getLogger(name or LOGGER_NAME)


def mask_hidden_keys(
    data: Dict[str, Any], hidden_keys: Iterable[str] = HIDDEN_KEYS
) -> Dict[str, Any]:
    """Return a copy of ``data`` with hidden keys masked.

    Empty values stay empty so the log still shows which fields were unset.
    """
    hidden = set(hidden_keys)
    return {
        key: (MASK if key in hidden and value else value)
        for key, value in data.items()
    }


def log_connection_info(
    logger: logging.Logger, step: str, connection_info: Dict[str, Any]
) -> None:
    """Log the start of a catalog step together with masked connection info."""
    logger.info(
        step,
        extra={
            "event_type": "step",
            "extra_data": {"connection_info": mask_hidden_keys(connection_info)},
        },
    )


def log_progress(
    logger: logging.Logger,
    message: str,
    container_name: str,
    entity_name: Optional[str] = None,
) -> None:
    """Log a progress event for a database or table being processed."""
    extra: Dict[str, Any] = {
        "event_type": "progress",
        "container_name": container_name,
    }
    if entity_name is not None:
        extra["entity_name"] = entity_name
    logger.info(message, extra=extra)
