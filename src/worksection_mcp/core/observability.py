"""Structured events (``ws_call``, ``http_request``, ``tool_failed``)."""

from __future__ import annotations

import logging
from typing import Any, Dict

EVENT_LOGGER = "worksection_mcp.observability"

# Attributes LogRecord already owns; passing them in ``extra`` raises KeyError.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

# Credentials and payload bytes never reach a log record.
SECRET_LOG_KEYS = frozenset({"api_key", "hash", "authorization", "token", "data"})


def _loggable(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: value
        for key, value in fields.items()
        if key not in _RECORD_ATTRS and key.lower() not in SECRET_LOG_KEYS
    }


def log_event(
    event: str,
    logger: logging.Logger | None = None,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit ``event`` as the message with ``fields`` attached as record extras."""
    (logger or logging.getLogger(EVENT_LOGGER)).log(
        level, event, extra={"event": event, **_loggable(fields)}
    )


__all__ = ["log_event", "EVENT_LOGGER", "SECRET_LOG_KEYS"]
