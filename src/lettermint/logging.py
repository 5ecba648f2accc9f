"""Logging setup for applications using the Lettermint client.

The client logs through module loggers under ``lettermint`` and attaches
request details as ``extra`` fields (``method``, ``url``, ``status_code``,
``elapsed_ms``, ``timeout_ms``, ``message_id``, ``status``). Nothing is
printed unless the application configures handlers, for example with
:func:`setup_logging`.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import LoggingConfig

REQUEST_FIELDS = ("method", "url", "status_code", "elapsed_ms", "timeout_ms")
MESSAGE_FIELDS = ("message_id", "status")


class StructuredFormatter(logging.Formatter):
    """Render records as one JSON object per line.

    Request details are grouped under ``request`` and send results under
    ``email``; absent fields are left out.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request = _collect(record, REQUEST_FIELDS)
        if request:
            log_data["request"] = request

        email = _collect(record, MESSAGE_FIELDS)
        if email:
            log_data["email"] = email

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Plain text formatter that appends request details when present."""

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        details = _collect(record, REQUEST_FIELDS + MESSAGE_FIELDS)
        if not details:
            return formatted
        return formatted + " " + " ".join(f"{key}={value}" for key, value in details.items())


def _collect(record: logging.LogRecord, fields) -> dict:
    return {key: getattr(record, key) for key in fields if hasattr(record, key)}


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """
    Attach handlers to the ``lettermint`` logger.

    Args:
        config: Logging configuration (defaults to LoggingConfig(), which
            reads ``LETTERMINT_LOG_*`` environment variables)
    """
    if config is None:
        config = LoggingConfig()

    logger = logging.getLogger("lettermint")
    logger.setLevel(getattr(logging, config.level.upper()))
    logger.handlers.clear()

    if config.console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(ConsoleFormatter(config.format))
        logger.addHandler(console_handler)

    if config.file_path:
        log_file = Path(config.file_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    # Per-connection chatter from the HTTP stack
    logging.getLogger("urllib3").setLevel(logging.WARNING)
