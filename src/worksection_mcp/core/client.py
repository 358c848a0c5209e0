import logging
import time
from typing import Any, Dict, Optional, Sequence

import httpx

from .attachments import AttachmentInput, resolve_attachments, validate_sources
from .config import WorksectionConfig, config_from_env
from .context import current_request_id
from .errors import (
    WorksectionApiError,
    WorksectionClientError,
    WorksectionHTTPError,
    WorksectionParseError,
    WorksectionTransportError,
)
from .models import ApiEnvelope
from .observability import log_event
from .request import (
    ADMIN_PATH,
    PreparedRequest,
    RequestParams,
    build_request,
    encode_params,
    normalize_method,
)


class WorksectionClient:
    """
    Shared HTTP client for the Worksection admin API.
    - Signs every call with the account API key (md5 over the query string)
    - Issues exactly one request per call; no retries
    - Returns the raw envelope dict on success, typed errors otherwise
    - No business logic; tools own parameter mapping
    """

    def __init__(
        self,
        config: WorksectionConfig,
        *,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        if not isinstance(config, WorksectionConfig):
            raise TypeError("config must be a WorksectionConfig")

        self.config = config
        self.log = logger or logging.getLogger("worksection_mcp.client")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=config.timeout_seconds,
        )

    @classmethod
    def from_env(cls, *, use_dotenv: bool = True, **kwargs) -> "WorksectionClient":
        return cls(config_from_env(use_dotenv=use_dotenv), **kwargs)

    @property
    def account_url(self) -> str:
        return self.config.account_url

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "WorksectionClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def call(
        self,
        action: str,
        *,
        method: Optional[str] = "GET",
        params: Optional[RequestParams] = None,
        attachments: Optional[Sequence[AttachmentInput]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Core request method.
        - Raises WorksectionInputError for bad parameters/attachment sources
          before any network I/O
        - Raises WorksectionAttachmentError if an attachment cannot be resolved
        - Raises WorksectionTransportError on network/timeout errors
        - Raises WorksectionHTTPError on non-2xx HTTP responses
        - Raises WorksectionApiError if the envelope status is not "ok"
        - Returns the parsed envelope dict on success
        """
        items = list(attachments or [])
        normalize_method(method)
        encode_params(action, params)
        validate_sources(items)

        payloads = await resolve_attachments(
            items,
            http=self.http,
            bearer_token=self.config.attachment_bearer_token,
            timeout_seconds=self.config.attachment_timeout_seconds,
        )
        prepared = build_request(
            self.config, action, method=method, params=params, attachments=payloads
        )
        return await self.send(prepared, action=action, tool=tool)

    async def send(
        self,
        prepared: PreparedRequest,
        *,
        action: Optional[str] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Execute an already signed request and interpret the envelope."""
        start = time.perf_counter()
        fields = {
            "request_id": current_request_id(),
            "tool": tool,
            "action": action,
            "method": prepared.method,
            "endpoint": f"/{ADMIN_PATH}",
        }

        try:
            resp = await self.http.request(
                prepared.method,
                prepared.url,
                timeout=self.config.timeout_seconds,
                **prepared.httpx_kwargs(),
            )
        except httpx.HTTPError as exc:
            log_event(
                "ws_call",
                level=logging.WARNING,
                status="exception",
                error_type=type(exc).__name__,
                duration_ms=int((time.perf_counter() - start) * 1000),
                **fields,
            )
            raise WorksectionTransportError(
                f"Failed to reach Worksection API: {exc}",
                method=prepared.method,
                url=self._safe_url(prepared),
            ) from exc

        log_event(
            "ws_call",
            status=resp.status_code,
            duration_ms=int((time.perf_counter() - start) * 1000),
            **fields,
        )

        # HTTP status first, envelope second; neither implies the other.
        if resp.status_code < 200 or resp.status_code >= 300:
            raise self._to_http_error(resp, prepared)

        payload = self._safe_json(resp)
        envelope = ApiEnvelope.model_validate(payload)
        if not envelope.is_ok:
            self.log.warning(
                "ws.api_error",
                extra={"action": action, "tool": tool, "status": envelope.status},
            )
            raise WorksectionApiError(
                envelope.error_message(),
                code=envelope.status_code,
                details=envelope.message_details,
                expected_format=(envelope.test or "").strip() or None,
                envelope=payload,
            )

        return payload

    @staticmethod
    def _safe_url(prepared: PreparedRequest) -> str:
        # strip the signed query so errors never echo the digest
        return prepared.url.split("?", 1)[0]

    def _safe_json(self, resp: httpx.Response) -> Dict[str, Any]:
        if not resp.content:
            raise WorksectionParseError(
                "Expected JSON envelope from Worksection API, got an empty body."
            )

        try:
            data = resp.json()
        except ValueError as exc:
            snippet = (resp.text or "")[:500]
            raise WorksectionParseError(
                "Expected JSON envelope from Worksection API, got non-JSON body "
                f"snippet: {snippet!r}"
            ) from exc

        if not isinstance(data, dict):
            raise WorksectionParseError(
                "Expected top-level JSON object from Worksection API, "
                f"got {type(data).__name__}"
            )
        return data

    def _to_http_error(
        self, resp: httpx.Response, prepared: PreparedRequest
    ) -> WorksectionHTTPError:
        response_text = (resp.text or "")[:500]
        self.log.error(
            "ws.http_error",
            extra={"status": resp.status_code, "method": prepared.method},
        )
        return WorksectionHTTPError(
            status_code=resp.status_code,
            method=prepared.method,
            url=self._safe_url(prepared),
            reason=resp.reason_phrase or "request failed",
            response_text=response_text or None,
        )


__all__ = ["WorksectionClient", "WorksectionClientError"]
