from __future__ import annotations

import asyncio
import os

from mcp.server.fastmcp import FastMCP

from worksection_mcp.core.client import WorksectionClient
from worksection_mcp.core.logging import setup_logging
from worksection_mcp.core.registry import register_discovered_tools
from worksection_mcp.core.resources import register_resources

SERVER_NAME = "worksection-mcp"


def build_stdio_app(client: WorksectionClient) -> FastMCP:
    app = FastMCP(SERVER_NAME)
    register_discovered_tools(app, client)
    register_resources(app, client)
    return app


async def serve_stdio(client: WorksectionClient) -> None:
    await build_stdio_app(client).run_stdio_async()


async def main() -> None:
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))
    async with WorksectionClient.from_env() as client:
        await serve_stdio(client)


if __name__ == "__main__":
    asyncio.run(main())
