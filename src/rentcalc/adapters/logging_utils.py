# src/rentcalc/adapters/logging_utils.py
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .config import config


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line on stderr; stdout is reserved for reports."""

    def format(self, record):
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            "env": config.ENV,
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            payload.update(ctx)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        # dates and Decimals from the sources end up in the context
        return json.dumps(payload, default=str)


def log_context(**fields: Any) -> dict:
    """Shorthand for logger.info("event", extra=log_context(url=..., rows=...))."""
    return {"context": fields}


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel(config.LOG_LEVEL)
        logger.propagate = False
    return logger
