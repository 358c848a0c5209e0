from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

_TRUE = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE = frozenset({"0", "false", "f", "no", "n", "off"})
TIMEOUT_STATUSES = frozenset({408, 503, 504})

# Error code strings used across middlewares/tests
ERROR_PAYLOAD_TOO_LARGE = "payload_too_large"
ERROR_TIMEOUT = "timeout"


def _env(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = (_env(name) or "").lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return default


def _env_number(name: str, default, cast):
    raw = _env(name)
    if raw is None:
        return default
    try:
        return cast(raw.replace("_", ""))
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_hosts(name: str) -> Tuple[str, ...]:
    return tuple(h.strip() for h in (_env(name) or "").split(",") if h.strip())


@dataclass(frozen=True)
class HttpConfig:
    """Settings for the streamable HTTP transport and its request limits."""

    host: str = "0.0.0.0"
    port: int = 3333
    path: str = "/mcp"
    json_response: bool = True
    stateless_http: bool = True
    allowed_hosts: Tuple[str, ...] = ()
    max_body_bytes: int = 1_000_000
    request_timeout_s: float = 60.0
    timeout_status: int = 504

    def __post_init__(self) -> None:
        if self.timeout_status not in TIMEOUT_STATUSES:
            raise ValueError("MCP_TIMEOUT_STATUS must be one of 408, 503, 504")
        if self.max_body_bytes < 0 or self.request_timeout_s < 0:
            raise ValueError("Negative limits are not allowed")
        if not self.path.startswith("/"):
            object.__setattr__(self, "path", "/" + self.path)

    @classmethod
    def from_env(cls) -> "HttpConfig":
        """WORKSECTION_HTTP_* for the listener, MCP_* for protocol and limits."""
        return cls(
            host=_env("WORKSECTION_HTTP_HOST") or cls.host,
            port=_env_number("WORKSECTION_HTTP_PORT", cls.port, int),
            path=_env("WORKSECTION_HTTP_PATH") or cls.path,
            json_response=_env_bool("MCP_JSON_RESPONSE", cls.json_response),
            stateless_http=_env_bool("MCP_STATELESS_HTTP", cls.stateless_http),
            allowed_hosts=_env_hosts("MCP_ALLOWED_HOSTS"),
            max_body_bytes=_env_number("MCP_MAX_BODY_BYTES", cls.max_body_bytes, int),
            request_timeout_s=_env_number(
                "MCP_REQUEST_TIMEOUT_S", cls.request_timeout_s, float
            ),
            timeout_status=_env_number("MCP_TIMEOUT_STATUS", cls.timeout_status, int),
        )


__all__ = ["HttpConfig", "ERROR_PAYLOAD_TOO_LARGE", "ERROR_TIMEOUT"]
