"""Body-size and wall-clock limits for POST requests to the MCP endpoint."""

from __future__ import annotations

import json
from typing import Callable

import anyio
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from worksection_mcp.transports.http.config import (
    ERROR_PAYLOAD_TOO_LARGE,
    ERROR_TIMEOUT,
    HttpConfig,
)


def _error_response(status: int, code: str, message: str, request: Request):
    rid = getattr(request.state, "request_id", "") or ""
    return Response(
        json.dumps({"error": code, "message": message, "request_id": rid}),
        status_code=status,
        media_type="application/json",
        headers={"X-Request-Id": rid} if rid else None,
    )


class _McpPostMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, cfg: HttpConfig):
        super().__init__(app)
        self.cfg = cfg

    def _applies(self, request: Request) -> bool:
        return request.method.upper() == "POST" and request.url.path == self.cfg.path


class MaxBodyMiddleware(_McpPostMiddleware):
    """Reject bodies above cfg.max_body_bytes (0 disables) before parsing."""

    async def dispatch(self, request: Request, call_next: Callable):
        limit = self.cfg.max_body_bytes
        if not self._applies(request) or limit == 0:
            return await call_next(request)

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > limit:
            return self._too_large(request)

        total = 0
        chunks: list[bytes] = []
        async for chunk in request.stream():
            total += len(chunk)
            if total > limit:
                return self._too_large(request)
            chunks.append(chunk)

        # Cache body so downstream Request.body() returns the buffered content
        request._body = b"".join(chunks)  # type: ignore[attr-defined]
        request._stream_consumed = True  # type: ignore[attr-defined]
        return await call_next(request)

    @staticmethod
    def _too_large(request: Request) -> Response:
        return _error_response(
            413, ERROR_PAYLOAD_TOO_LARGE, "Body exceeds limit", request
        )


class TimeoutMiddleware(_McpPostMiddleware):
    """Bound total handling time (cfg.request_timeout_s, 0 disables)."""

    async def dispatch(self, request: Request, call_next: Callable):
        if not self._applies(request) or self.cfg.request_timeout_s == 0:
            return await call_next(request)

        try:
            with anyio.fail_after(self.cfg.request_timeout_s):
                return await call_next(request)
        except TimeoutError:
            return _error_response(
                self.cfg.timeout_status, ERROR_TIMEOUT, "Request timed out", request
            )


__all__ = ["MaxBodyMiddleware", "TimeoutMiddleware"]
