from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from worksection_mcp.core.context import (
    bind_request_id,
    ensure_request_id,
    reset_request_id,
)
from worksection_mcp.core.observability import log_event

REQUEST_ID_HEADER = "X-Request-Id"
CORRELATION_ID_HEADER = "X-Correlation-Id"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Give every inbound request an id before any early-return middleware runs.
    - Accepts X-Request-Id or X-Correlation-Id, else generates a UUID4 hex.
    - Binds it for outbound Worksection call logs and echoes it back.
    - Logs one http_request event per request, even on unhandled errors.
    """

    async def dispatch(self, request: Request, call_next):
        rid = ensure_request_id(
            request.headers.get(REQUEST_ID_HEADER)
            or request.headers.get(CORRELATION_ID_HEADER)
        )
        request.state.request_id = rid
        token = bind_request_id(rid)

        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            reset_request_id(token)
            duration_ms = int((time.perf_counter() - start) * 1000)
            if response is not None:
                response.headers.setdefault(REQUEST_ID_HEADER, rid)

            log_event(
                "http_request",
                request_id=rid,
                method=request.method.upper(),
                path=request.url.path,
                status=response.status_code if response is not None else "exception",
                duration_ms=duration_ms,
            )


__all__ = ["RequestIdMiddleware", "REQUEST_ID_HEADER", "CORRELATION_ID_HEADER"]
