from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urlsplit, urlunsplit

from dotenv import load_dotenv

from .errors import WorksectionConfigError

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_ATTACHMENT_TIMEOUT_SECONDS = 30.0


def normalize_account_url(raw_url: str) -> str:
    """Validate an absolute http(s) URL and make sure it ends with '/'."""
    raw = (raw_url or "").strip()
    parts = urlsplit(raw)
    if parts.scheme.lower() not in {"http", "https"} or not parts.netloc:
        raise WorksectionConfigError(
            "WORKSECTION_ACCOUNT_URL must be a valid https:// URL of your "
            f"workspace, e.g. https://company.worksection.com (got {raw_url!r})"
        )
    path = parts.path if parts.path.endswith("/") else parts.path + "/"
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc, path, parts.query, parts.fragment)
    )


@dataclass(frozen=True)
class WorksectionConfig:
    """Endpoint configuration shared by every call of one client."""

    account_url: str
    api_key: str
    attachment_bearer_token: Optional[str] = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    attachment_timeout_seconds: float = DEFAULT_ATTACHMENT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        api_key = (self.api_key or "").strip()
        if not api_key:
            raise WorksectionConfigError(
                "WORKSECTION_ADMIN_API_KEY is required to authenticate with "
                "Worksection"
            )
        # frozen: assign normalized values through object.__setattr__
        object.__setattr__(self, "api_key", api_key)
        object.__setattr__(
            self, "account_url", normalize_account_url(self.account_url)
        )
        object.__setattr__(
            self, "attachment_bearer_token", self.attachment_bearer_token or None
        )
        for name in ("timeout_seconds", "attachment_timeout_seconds"):
            if getattr(self, name) <= 0:
                raise WorksectionConfigError(f"{name} must be greater than zero")

    def __repr__(self) -> str:
        return (
            f"WorksectionConfig(account_url={self.account_url!r}, api_key='***', "
            f"attachment_bearer_token={'***' if self.attachment_bearer_token else None}, "  # noqa: E501
            f"timeout_seconds={self.timeout_seconds}, "
            f"attachment_timeout_seconds={self.attachment_timeout_seconds})"
        )


def _read_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise WorksectionConfigError(f"{name} must be a number, got {raw!r}") from exc


def load_env_config(*, use_dotenv: bool = True) -> Tuple[str, str]:
    """Load Worksection account URL and API key from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    account_url = os.getenv("WORKSECTION_ACCOUNT_URL", "").strip()
    api_key = os.getenv("WORKSECTION_ADMIN_API_KEY", "").strip()
    return account_url, api_key


def config_from_env(*, use_dotenv: bool = True) -> WorksectionConfig:
    """Build a validated WorksectionConfig from environment variables."""
    account_url, api_key = load_env_config(use_dotenv=use_dotenv)
    if not account_url:
        raise WorksectionConfigError(
            "Set WORKSECTION_ACCOUNT_URL to your Worksection workspace url, "
            "e.g. https://company.worksection.com"
        )
    if not api_key:
        raise WorksectionConfigError(
            "Set WORKSECTION_ADMIN_API_KEY to authenticate the MCP server."
        )

    token = (
        os.getenv("WORKSECTION_ATTACHMENT_TOKEN")
        or os.getenv("SLACK_BOT_TOKEN")
        or ""
    ).strip()

    return WorksectionConfig(
        account_url=account_url,
        api_key=api_key,
        attachment_bearer_token=token or None,
        timeout_seconds=_read_float_env(
            "WORKSECTION_TIMEOUT_S", DEFAULT_TIMEOUT_SECONDS
        ),
        attachment_timeout_seconds=_read_float_env(
            "WORKSECTION_ATTACHMENT_TIMEOUT_S", DEFAULT_ATTACHMENT_TIMEOUT_SECONDS
        ),
    )


__all__ = [
    "WorksectionConfig",
    "normalize_account_url",
    "load_env_config",
    "config_from_env",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_ATTACHMENT_TIMEOUT_SECONDS",
]
