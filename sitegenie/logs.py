"""Structured log formatting."""
import json
import logging
from datetime import datetime, timezone


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    One JSON object per line so the hosting platform can pick up levels
    and tracebacks without parsing free text.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)
