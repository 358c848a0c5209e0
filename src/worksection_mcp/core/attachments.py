from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

import httpx

from .errors import WorksectionAttachmentError, WorksectionInputError

DEFAULT_CONTENT_TYPE = "application/octet-stream"

log = logging.getLogger("worksection_mcp.core.attachments")


@dataclass(frozen=True)
class InlineSource:
    data: Union[str, bytes]


@dataclass(frozen=True)
class RemoteSource:
    url: str


AttachmentSource = Union[InlineSource, RemoteSource]


@dataclass(frozen=True)
class AttachmentInput:
    """
    Attachment as described by the caller.
    Exactly one of ``data`` (base64 text or raw bytes) or ``source_url`` is set.
    """

    field: str
    filename: str
    content_type: Optional[str] = None
    data: Optional[Union[str, bytes]] = None
    source_url: Optional[str] = None

    def source(self) -> AttachmentSource:
        if self.data is not None and self.source_url is not None:
            raise WorksectionInputError(
                f'Attachment "{self.filename}" cannot define both data and '
                "source_url."
            )
        if self.data is not None:
            return InlineSource(self.data)
        if self.source_url:
            return RemoteSource(self.source_url)
        raise WorksectionInputError(
            f'Attachment "{self.filename}" must include base64 data or a '
            "download URL (source_url)."
        )


@dataclass(frozen=True)
class AttachmentPayload:
    field: str
    filename: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def resolved_content_type(self) -> str:
        return self.content_type or DEFAULT_CONTENT_TYPE


def validate_sources(attachments: Iterable[AttachmentInput]) -> None:
    """Raise WorksectionInputError for the first attachment with a bad source."""
    for attachment in attachments:
        attachment.source()


def _decode_inline(attachment: AttachmentInput, data: Union[str, bytes]) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        decoded = bytes(data)
    else:
        try:
            decoded = base64.b64decode("".join(data.split()), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise WorksectionAttachmentError(
                f'Attachment "{attachment.filename}" data must be valid base64.',
                filename=attachment.filename,
            ) from exc

    if not decoded:
        raise WorksectionAttachmentError(
            f'Attachment "{attachment.filename}" is empty or not valid base64 data.',
            filename=attachment.filename,
        )
    return decoded


async def fetch_remote_attachment(
    http: httpx.AsyncClient,
    url: str,
    *,
    filename: Optional[str] = None,
    bearer_token: Optional[str] = None,
    timeout_seconds: Optional[float] = None,
) -> bytes:
    """
    Download attachment bytes with a single GET (no retry, no cache).
    Redirects are followed; only the final response is judged.
    """
    headers = {"Accept": "*/*"}
    if bearer_token:
        headers["Authorization"] = f"Bearer {bearer_token}"

    kwargs = {} if timeout_seconds is None else {"timeout": timeout_seconds}
    try:
        resp = await http.get(
            url, headers=headers, follow_redirects=True, **kwargs
        )
    except httpx.HTTPError as exc:
        raise WorksectionAttachmentError(
            f"Failed to download attachment from {url}: {exc}",
            filename=filename,
            url=url,
        ) from exc

    if resp.status_code < 200 or resp.status_code >= 300:
        raise WorksectionAttachmentError(
            f"Downloading attachment from {url} failed "
            f"({resp.status_code}): {resp.reason_phrase}",
            filename=filename,
            url=url,
            status_code=resp.status_code,
        )

    if not resp.content:
        raise WorksectionAttachmentError(
            f"Attachment at {url} is empty.",
            filename=filename,
            url=url,
            status_code=resp.status_code,
        )

    log.debug(
        "attachment.fetched",
        extra={"status": resp.status_code, "size": len(resp.content)},
    )
    return resp.content


async def resolve_attachments(
    attachments: Optional[Iterable[AttachmentInput]],
    *,
    http: httpx.AsyncClient,
    bearer_token: Optional[str] = None,
    timeout_seconds: Optional[float] = None,
) -> List[AttachmentPayload]:
    """
    Turn attachment descriptors into in-memory payloads.
    - Sources are validated for every attachment before anything is fetched.
    - Resolution is sequential; the first failure aborts the whole batch.
    """
    items = list(attachments or [])
    if not items:
        return []

    validate_sources(items)

    payloads: List[AttachmentPayload] = []
    for attachment in items:
        source = attachment.source()
        if isinstance(source, InlineSource):
            data = _decode_inline(attachment, source.data)
        else:
            data = await fetch_remote_attachment(
                http,
                source.url,
                filename=attachment.filename,
                bearer_token=bearer_token,
                timeout_seconds=timeout_seconds,
            )
        payloads.append(
            AttachmentPayload(
                field=attachment.field,
                filename=attachment.filename,
                data=data,
                content_type=attachment.content_type,
            )
        )
    return payloads


__all__ = [
    "AttachmentInput",
    "AttachmentPayload",
    "AttachmentSource",
    "InlineSource",
    "RemoteSource",
    "DEFAULT_CONTENT_TYPE",
    "validate_sources",
    "fetch_remote_attachment",
    "resolve_attachments",
]
