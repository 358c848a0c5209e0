"""Canonical query encoding, request signing and request assembly."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)
from urllib.parse import urlencode, urljoin

from .attachments import AttachmentPayload
from .config import WorksectionConfig
from .errors import WorksectionInputError

ADMIN_PATH = "api/admin/v2"
RESERVED_KEYS = frozenset({"action", "hash"})
ALLOWED_METHODS = frozenset({"GET", "POST"})
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

Scalar = Union[str, int, float, bool]
ParamValue = Union[Scalar, None, Sequence[Optional[Scalar]]]
RequestParams = Mapping[str, ParamValue]
QueryPairs = List[Tuple[str, str]]


def coerce_to_string(value: Scalar) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _append_param(pairs: QueryPairs, key: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            if isinstance(item, (list, tuple, dict)):
                raise WorksectionInputError(
                    f"Parameter {key!r} must be a list of scalars; "
                    "nested structures are not supported."
                )
            _append_param(pairs, f"{key}[{index}]", item)
        return
    if not isinstance(value, (str, int, float, bool)):
        raise WorksectionInputError(
            f"Parameter {key!r} has unsupported type {type(value).__name__}."
        )
    pairs.append((key, coerce_to_string(value)))


def encode_params(action: str, params: Optional[RequestParams] = None) -> QueryPairs:
    """
    Build the ordered (key, value) pairs that make up the canonical query.
    ``action`` always comes first; parameters follow in insertion order.
    """
    if not action:
        raise WorksectionInputError("action must be provided.")

    pairs: QueryPairs = [("action", action)]
    for key, value in (params or {}).items():
        if key in RESERVED_KEYS:
            raise WorksectionInputError(f"Parameter name {key!r} is reserved.")
        _append_param(pairs, key, value)

    seen = set()
    for key, _ in pairs:
        if key in seen:
            raise WorksectionInputError(
                f"Parameter {key!r} is given more than once after list expansion."
            )
        seen.add(key)
    return pairs


def canonical_query(pairs: QueryPairs) -> str:
    # The signed string must be the exact bytes sent: quote_plus keeps "~" and
    # escapes "*", unlike a browser URLSearchParams.
    return urlencode(pairs)


def sign(query: str, api_key: str) -> str:
    """MD5 over the canonical query followed by the API key (hex digest)."""
    return hashlib.md5((query + api_key).encode("utf-8")).hexdigest()


def admin_endpoint(config: WorksectionConfig) -> str:
    return urljoin(config.account_url, ADMIN_PATH)


@dataclass(frozen=True)
class PreparedRequest:
    """Everything the transport needs to send one signed request."""

    method: str
    url: str
    headers: Dict[str, str]
    content: Optional[bytes] = None
    form: Optional[QueryPairs] = None
    attachments: Tuple[AttachmentPayload, ...] = field(default_factory=tuple)

    @property
    def is_multipart(self) -> bool:
        return bool(self.attachments)

    def httpx_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"headers": dict(self.headers)}
        if self.content is not None:
            kwargs["content"] = self.content
        if self.is_multipart:
            kwargs["data"] = dict(self.form or [])
            kwargs["files"] = [
                (a.field, (a.filename, a.data, a.resolved_content_type))
                for a in self.attachments
            ]
        return kwargs


def normalize_method(method: Optional[str]) -> str:
    normalized = (method or "GET").upper()
    if normalized not in ALLOWED_METHODS:
        raise WorksectionInputError(
            f"Unsupported method {method!r}; use GET or POST."
        )
    return normalized


def build_request(
    config: WorksectionConfig,
    action: str,
    *,
    method: Optional[str] = "GET",
    params: Optional[RequestParams] = None,
    attachments: Sequence[AttachmentPayload] = (),
) -> PreparedRequest:
    """
    Encode, sign and lay out a request for the admin API.
    - GET: signed query in the URL, no body.
    - POST without attachments: signed query as a form-urlencoded body.
    - Any attachment forces a multipart POST; signed pairs become form fields
      (and are mirrored in the URL query), files follow in the given order.
    """
    method = normalize_method(method)
    payloads = tuple(attachments)

    pairs = encode_params(action, params)
    query = canonical_query(pairs)
    signed = pairs + [("hash", sign(query, config.api_key))]
    signed_query = canonical_query(signed)

    endpoint = admin_endpoint(config)
    headers = {"Accept": "application/json"}

    if payloads:
        return PreparedRequest(
            method="POST",
            url=f"{endpoint}?{signed_query}",
            headers=headers,
            form=signed,
            attachments=payloads,
        )

    if method == "GET":
        return PreparedRequest(
            method="GET", url=f"{endpoint}?{signed_query}", headers=headers
        )

    headers["Content-Type"] = FORM_CONTENT_TYPE
    return PreparedRequest(
        method=method,
        url=endpoint,
        headers=headers,
        content=signed_query.encode("utf-8"),
    )


__all__ = [
    "ADMIN_PATH",
    "RESERVED_KEYS",
    "FORM_CONTENT_TYPE",
    "ParamValue",
    "RequestParams",
    "PreparedRequest",
    "coerce_to_string",
    "encode_params",
    "canonical_query",
    "sign",
    "admin_endpoint",
    "normalize_method",
    "build_request",
]
