"""logfmt output on stderr; stdout is reserved for the stdio MCP stream."""

import logging
import sys
from typing import Any

from .context import current_request_id

LOG_EXTRA_FIELDS = (
    "request_id",
    "tool",
    "action",
    "method",
    "path",
    "endpoint",
    "status",
    "duration_ms",
    "error_type",
    "size",
)

_NEEDS_QUOTES = (" ", "=", '"')


class RequestIdFilter(logging.Filter):
    """Stamp records with the bound request id unless the caller set one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = current_request_id()
        return True


def _logfmt_value(val: Any) -> str:
    if isinstance(val, (bool, int, float)):
        return str(val)
    text = str(val)
    if any(ch in text for ch in _NEEDS_QUOTES):
        return '"' + text.replace('"', '\\"') + '"'
    return text


class LogfmtFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        pairs = [("level", record.levelname.lower()), ("logger", record.name)]
        message = record.getMessage()
        if message:
            pairs.append(("event", message))
        pairs.extend(
            (key, getattr(record, key))
            for key in LOG_EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info and record.exc_info[0] is not None:
            pairs.append(("exc_type", record.exc_info[0].__name__))
        return " ".join(f"{key}={_logfmt_value(val)}" for key, val in pairs)


def setup_logging(level: str = "INFO") -> None:
    """Replace root handlers with a single logfmt stderr handler."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(LogfmtFormatter())
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


__all__ = ["setup_logging", "LogfmtFormatter", "RequestIdFilter", "LOG_EXTRA_FIELDS"]
