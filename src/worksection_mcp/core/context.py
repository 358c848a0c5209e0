"""Request-scoped values carried through ContextVars."""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from typing import Optional

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


def ensure_request_id(candidate: Optional[str] = None) -> str:
    candidate = (candidate or "").strip()
    return candidate or uuid.uuid4().hex


def bind_request_id(request_id: Optional[str] = None) -> Token:
    """Set the current request id; returns a token for reset_request_id()."""
    return _request_id_var.set(ensure_request_id(request_id))


def reset_request_id(token: Token) -> None:
    _request_id_var.reset(token)


def current_request_id() -> Optional[str]:
    return _request_id_var.get()


__all__ = [
    "ensure_request_id",
    "bind_request_id",
    "reset_request_id",
    "current_request_id",
]
