from __future__ import annotations

from typing import Any, Dict, Optional


class WorksectionClientError(Exception):
    """Base error for client failures."""


class WorksectionConfigError(WorksectionClientError, ValueError):
    """Endpoint configuration is missing or malformed."""


class WorksectionInputError(WorksectionClientError, ValueError):
    """Caller supplied parameters or attachments that cannot be sent."""


class WorksectionAttachmentError(WorksectionClientError):
    def __init__(
        self,
        message: str,
        *,
        filename: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.filename = filename
        self.url = url
        self.status_code = status_code


class WorksectionTransportError(WorksectionClientError):
    """The remote host could not be reached; there is no HTTP status."""

    def __init__(self, message: str, *, method: str, url: str):
        super().__init__(message)
        self.method = method
        self.url = url


class WorksectionHTTPError(WorksectionClientError):
    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        reason: str,
        response_text: Optional[str] = None,
    ):
        super().__init__(f"Worksection API HTTP {status_code}: {reason}")
        self.status_code = status_code
        self.method = method
        self.url = url
        self.reason = reason
        self.response_text = response_text


class WorksectionApiError(WorksectionClientError):
    """HTTP succeeded but the envelope status is not ``ok``."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[int] = None,
        details: Optional[str] = None,
        expected_format: Optional[str] = None,
        envelope: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.expected_format = expected_format
        self.envelope = envelope


class WorksectionParseError(WorksectionClientError):
    pass


__all__ = [
    "WorksectionClientError",
    "WorksectionConfigError",
    "WorksectionInputError",
    "WorksectionAttachmentError",
    "WorksectionTransportError",
    "WorksectionHTTPError",
    "WorksectionApiError",
    "WorksectionParseError",
]
