from __future__ import annotations

import logging
from typing import Dict

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from worksection_mcp.core.client import WorksectionClient
from worksection_mcp.core.config import config_from_env, load_env_config
from worksection_mcp.core.errors import WorksectionConfigError
from worksection_mcp.core.registry import ClientProvider, register_discovered_tools
from worksection_mcp.core.resources import register_resources
from worksection_mcp.transports.http.config import HttpConfig
from worksection_mcp.transports.http.limits_middleware import (
    MaxBodyMiddleware,
    TimeoutMiddleware,
)
from worksection_mcp.transports.http.request_id_middleware import RequestIdMiddleware

log = logging.getLogger(__name__)

SERVER_NAME = "worksection-mcp"
OPS_PATHS = frozenset({"/healthz", "/readyz"})


def env_client_provider() -> ClientProvider:
    """Provider that builds one client from the environment on first use."""
    holder: Dict[str, WorksectionClient] = {}

    def provider() -> WorksectionClient:
        if "client" not in holder:
            holder["client"] = WorksectionClient.from_env(use_dotenv=False)
        return holder["client"]

    return provider


def build_fastmcp(
    cfg: HttpConfig | None = None,
    client_provider: ClientProvider | WorksectionClient | None = None,
) -> FastMCP:
    """Create and configure a FastMCP instance with registered tools/resources."""
    cfg = cfg or HttpConfig.from_env()
    provider = client_provider or env_client_provider()

    transport_security = TransportSecuritySettings(
        enable_dns_rebinding_protection=bool(cfg.allowed_hosts),
        allowed_hosts=list(cfg.allowed_hosts),
    )

    fastmcp = FastMCP(
        SERVER_NAME,
        json_response=cfg.json_response,
        stateless_http=cfg.stateless_http,
        streamable_http_path=cfg.path,
        host=cfg.host,
        port=cfg.port,
        transport_security=transport_security,
    )

    register_discovered_tools(fastmcp, provider)
    register_resources(fastmcp, provider)

    log.info(
        "Built FastMCP (json_response=%s, stateless_http=%s, path=%s, host=%s, port=%s)",  # noqa: E501
        cfg.json_response,
        cfg.stateless_http,
        cfg.path,
        cfg.host,
        cfg.port,
    )
    return fastmcp


READINESS_CHECKS = ("account_url_present", "api_key_present", "config_valid")
NO_STORE = {"Cache-Control": "no-store"}


def compute_readiness_state() -> Dict[str, bool]:
    """Evaluate the environment the server would use to reach Worksection."""
    account_url, api_key = load_env_config(use_dotenv=False)
    try:
        config_from_env(use_dotenv=False)
    except WorksectionConfigError:
        config_valid = False
    else:
        config_valid = True
    return dict(zip(READINESS_CHECKS, (bool(account_url), bool(api_key), config_valid)))


async def healthz(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"}, headers=NO_STORE)


async def readyz(request: Request) -> JSONResponse:
    checks = request.app.state.readiness
    failed = [name for name in READINESS_CHECKS if not checks.get(name)]
    return JSONResponse(
        {"status": "fail" if failed else "ok", "checks": checks, "failed": failed},
        status_code=503 if failed else 200,
        headers=NO_STORE,
    )


def _build_ops_app(readiness_state: Dict[str, bool]) -> Starlette:
    ops_app = Starlette(
        routes=[
            Route("/healthz", healthz, methods=["GET"]),
            Route("/readyz", readyz, methods=["GET"]),
        ]
    )
    ops_app.state.readiness = readiness_state
    return ops_app


class OpsDispatcher:
    """
    Send /healthz and /readyz to the ops app, everything else (lifespan
    included) to the MCP app. router and state mirror the MCP app so
    ``app.router.lifespan_context(app)`` works on the dispatcher.
    """

    def __init__(self, ops_app, main_app):
        self.ops_app = ops_app
        self.main_app = main_app
        self.router = main_app.router
        self.state = main_app.state

    async def __call__(self, scope, receive, send):
        if scope.get("path", "") in OPS_PATHS:
            await self.ops_app(scope, receive, send)
            return
        await self.main_app(scope, receive, send)


def build_http_app(
    cfg: HttpConfig | None = None,
    client_provider: ClientProvider | WorksectionClient | None = None,
):
    """Return an ASGI app that serves ops endpoints and the MCP endpoint."""
    cfg = cfg or HttpConfig.from_env()
    fastmcp = build_fastmcp(cfg, client_provider)
    main_app = fastmcp.streamable_http_app()
    # Starlette inserts at front; execution order: RequestId -> Timeout -> MaxBody
    main_app.add_middleware(MaxBodyMiddleware, cfg=cfg)
    main_app.add_middleware(TimeoutMiddleware, cfg=cfg)
    main_app.add_middleware(RequestIdMiddleware)

    readiness_state = compute_readiness_state()
    main_app.state.readiness = readiness_state

    return OpsDispatcher(_build_ops_app(readiness_state), main_app)


__all__ = ["HttpConfig", "build_http_app", "build_fastmcp", "env_client_provider"]
