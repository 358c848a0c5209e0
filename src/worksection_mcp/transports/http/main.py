from __future__ import annotations

import asyncio
import os

import uvicorn

from worksection_mcp.core.client import WorksectionClient
from worksection_mcp.core.logging import setup_logging

from .app import build_http_app
from .config import HttpConfig


async def serve_http(client: WorksectionClient, cfg: HttpConfig | None = None) -> None:
    """Serve the MCP endpoint (plus /healthz, /readyz) until shutdown."""
    cfg = cfg or HttpConfig.from_env()
    app = build_http_app(cfg, client)
    server = uvicorn.Server(
        uvicorn.Config(app, host=cfg.host, port=cfg.port, log_config=None)
    )
    await server.serve()


async def main() -> None:
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))
    async with WorksectionClient.from_env() as client:
        await serve_http(client)


if __name__ == "__main__":
    asyncio.run(main())
