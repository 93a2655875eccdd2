"""
JSON logging helpers for applications embedding the cache.
Why: cache events land in the same machine-readable stream as the host app.
The library itself only calls get_logger; setup_logging is for the host.
"""

import json
import logging
from typing import Any, Dict, Optional, Union

from ..config.settings import Settings

LIBRARY_LOGGER = "mmry"

logging.getLogger(LIBRARY_LOGGER).addHandler(logging.NullHandler())


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: Optional[Union[int, str]] = None) -> None:
    """Install one JSON handler on the root logger.

    With no level, MMRY_LOG_LEVEL (or .env) decides, defaulting to INFO.
    """
    if level is None:
        level = Settings.from_env().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root = logging.getLogger()
    root.setLevel(level)
    if any(isinstance(h.formatter, _JsonFormatter) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
