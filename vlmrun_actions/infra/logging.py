"""Logging setup for the ``vlmrun_actions`` logger namespace."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

LOGGER_NAME = "vlmrun_actions"


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Structured extras can be attached as ``extra={"vlmrun_data": {...}}``
    and are emitted under ``data``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data = getattr(record, "vlmrun_data", None)
        if data is not None:
            entry["data"] = data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(
    level: int | str = logging.INFO,
    *,
    json_format: bool = False,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """Attach a handler to the package logger.

    Calling this again with the same *handler* does not add it twice.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if handler is None:
        handler = logging.StreamHandler()
        for existing in list(logger.handlers):
            if type(existing) is logging.StreamHandler:
                logger.removeHandler(existing)

    if json_format:
        handler.setFormatter(JSONFormatter())
    elif handler.formatter is None:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    if handler not in logger.handlers:
        logger.addHandler(handler)
    return logger
