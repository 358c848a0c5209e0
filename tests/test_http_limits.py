import json

import anyio
import httpx
import pytest
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import JSONResponse
from starlette.routing import Route
from worksection_mcp.transports.http import HttpConfig, build_http_app
from worksection_mcp.transports.http.config import (
    ERROR_PAYLOAD_TOO_LARGE,
    ERROR_TIMEOUT,
)
from worksection_mcp.transports.http.limits_middleware import TimeoutMiddleware
from worksection_mcp.transports.http.request_id_middleware import RequestIdMiddleware

INIT_PAYLOAD = {
    "jsonrpc": "2.0",
    "id": "1",
    "method": "initialize",
    "params": {
        "protocolVersion": "2025-06-18",
        "capabilities": {},
        "clientInfo": {"name": "test-client", "version": "0.0.0"},
    },
}

HEADERS = {
    "accept": "application/json, text/event-stream",
    "content-type": "application/json",
}


def _client(app, headers=None):
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(
        transport=transport, base_url="http://testserver", headers=headers or {}
    )


@pytest.fixture(autouse=True)
def seed_env(monkeypatch):
    monkeypatch.setenv("WORKSECTION_ACCOUNT_URL", "https://acme.worksection.com")
    monkeypatch.setenv("WORKSECTION_ADMIN_API_KEY", "dummy")


@pytest.mark.asyncio
async def test_content_length_over_limit_returns_413():
    cfg = HttpConfig(max_body_bytes=10)
    app = build_http_app(cfg)

    async with app.router.lifespan_context(app):
        body = json.dumps(INIT_PAYLOAD)
        async with _client(app, HEADERS) as client:
            resp = await client.post(
                cfg.path, content=body, headers={"X-Request-Id": "big-1"}
            )

    assert resp.status_code == 413
    payload = resp.json()
    assert payload["error"] == ERROR_PAYLOAD_TOO_LARGE
    assert payload["request_id"] == "big-1"
    assert resp.headers["X-Request-Id"] == "big-1"


@pytest.mark.asyncio
async def test_chunked_body_over_limit_returns_413():
    cfg = HttpConfig(max_body_bytes=5)
    app = build_http_app(cfg)

    async def gen():
        yield b"1234"
        yield b"56"

    async with app.router.lifespan_context(app):
        async with _client(app, HEADERS) as client:
            resp = await client.post(cfg.path, content=gen())

    assert resp.status_code == 413
    assert resp.json()["error"] == ERROR_PAYLOAD_TOO_LARGE


@pytest.mark.asyncio
async def test_body_under_limit_reaches_mcp():
    cfg = HttpConfig(max_body_bytes=10_000)
    app = build_http_app(cfg)

    async with app.router.lifespan_context(app):
        async with _client(app, HEADERS) as client:
            resp = await client.post(cfg.path, json=INIT_PAYLOAD)

    assert resp.status_code == 200
    assert "result" in resp.json()


def _slow_app(cfg: HttpConfig):
    async def handler(request):
        await anyio.sleep(1)
        return JSONResponse({"ok": True})

    return Starlette(
        routes=[Route(cfg.path, handler, methods=["POST"])],
        middleware=[
            Middleware(RequestIdMiddleware),
            Middleware(TimeoutMiddleware, cfg=cfg),
        ],
    )


@pytest.mark.asyncio
async def test_timeout_returns_configured_status():
    cfg = HttpConfig(request_timeout_s=0.05, timeout_status=504)

    async with _client(_slow_app(cfg)) as client:
        resp = await client.post(cfg.path, json={})

    assert resp.status_code == 504
    assert resp.json()["error"] == ERROR_TIMEOUT
    assert resp.headers["X-Request-Id"]


@pytest.mark.asyncio
async def test_timeout_disabled_with_zero():
    cfg = HttpConfig(request_timeout_s=0)

    async def handler(request):
        return JSONResponse({"ok": True})

    app = Starlette(
        routes=[Route(cfg.path, handler, methods=["POST"])],
        middleware=[Middleware(TimeoutMiddleware, cfg=cfg)],
    )
    async with _client(app) as client:
        resp = await client.post(cfg.path, json={})

    assert resp.status_code == 200
