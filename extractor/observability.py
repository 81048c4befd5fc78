"""Logging setup shared by the collect, extract and notify commands."""

import json
import logging
import os
from datetime import datetime

LOGGING_HELP = (
    "Logging: LOG_LEVEL sets the level (default INFO, --verbose forces DEBUG); "
    "LOG_FORMAT=json writes one JSON object per line instead of text."
)

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED = frozenset((
    "args", "msg", "levelname", "levelno", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno",
    "funcName", "created", "msecs", "relativeCreated", "thread",
    "threadName", "processName", "process", "name", "taskName",
))


class JsonFormatter(logging.Formatter):
    """One JSON object per record, stamped with the record's own RFC 3339 time.

    Values passed through ``extra`` (a feed URL, an article index) become
    top-level keys so pipeline runs can be filtered per article.
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "time": datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        payload.update(
            (k, v) for k, v in record.__dict__.items()
            if not k.startswith("_") and k not in _RESERVED
        )
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging from LOG_LEVEL / LOG_FORMAT (text or json)."""
    fmt = os.getenv("LOG_FORMAT", "text").lower()
    level = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=TEXT_FORMAT)
    root = logging.getLogger()
    if fmt == "json":
        for h in list(root.handlers):
            h.setFormatter(JsonFormatter())
