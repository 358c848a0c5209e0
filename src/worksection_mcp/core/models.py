from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUCCESS_STATUS = "ok"
DEFAULT_ERROR_MESSAGE = "Worksection API returned an error"


class ApiEnvelope(BaseModel):
    """
    Top-level reply of the admin API.
    Only ``status == "ok"`` means success; everything else (including a
    missing status) is a failure. Unknown keys are preserved.
    """

    status: Optional[str] = None
    message: Optional[str] = None
    status_code: Optional[int] = None
    message_details: Optional[str] = None
    test: Optional[str] = None
    data: Any = None

    model_config = ConfigDict(extra="allow")

    @field_validator("message", "message_details", "test", "status", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("status_code", mode="before")
    @classmethod
    def _int_or_none(cls, value: Any) -> Optional[int]:
        try:
            return int(value) if value is not None else None
        except (TypeError, ValueError):
            return None

    @property
    def is_ok(self) -> bool:
        return self.status == SUCCESS_STATUS

    def error_message(self) -> str:
        """Message, then field detail, then the expected-format hint."""
        text = self.message or DEFAULT_ERROR_MESSAGE
        if self.message_details:
            text += f" (field: {self.message_details})"
        if self.test and self.test.strip():
            text += f". Expected format: {self.test.strip()}"
        return text


# --- Tool input models ---


class TaskAttachment(BaseModel):
    """File to upload with a new task: inline base64 ``data`` or ``source_url``."""

    filename: str = Field(min_length=1, description="File name shown in Worksection")
    data: Optional[str] = Field(default=None, description="Base64-encoded content")
    source_url: Optional[str] = Field(
        default=None, description="URL to download the content from instead of data"
    )
    content_type: Optional[str] = Field(
        default=None, description="MIME type; application/octet-stream if omitted"
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


__all__ = [
    "ApiEnvelope",
    "TaskAttachment",
    "SUCCESS_STATUS",
    "DEFAULT_ERROR_MESSAGE",
]
