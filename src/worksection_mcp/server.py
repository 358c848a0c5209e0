"""Process entry point: pick a transport from the environment and serve."""

from __future__ import annotations

import logging
import os
import sys

import anyio

from worksection_mcp.core.client import WorksectionClient
from worksection_mcp.core.errors import WorksectionConfigError
from worksection_mcp.core.logging import setup_logging
from worksection_mcp.transports.http.config import HttpConfig
from worksection_mcp.transports.http.main import serve_http
from worksection_mcp.transports.stdio.main import serve_stdio

log = logging.getLogger("worksection_mcp.server")

TRANSPORTS = ("http", "stdio", "both")
DEFAULT_TRANSPORT = "http"


def selected_transport() -> str:
    raw = os.getenv("WORKSECTION_TRANSPORT") or DEFAULT_TRANSPORT
    transport = raw.strip().lower()
    if transport not in TRANSPORTS:
        raise WorksectionConfigError(
            f"WORKSECTION_TRANSPORT must be one of {', '.join(TRANSPORTS)}; "
            f"got {transport!r}."
        )
    return transport


async def main() -> None:
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))
    transport = selected_transport()
    http_cfg = HttpConfig.from_env() if transport in ("http", "both") else None

    async with WorksectionClient.from_env() as client:
        log.info("Starting worksection-mcp (transport=%s)", transport)
        if transport == "stdio":
            await serve_stdio(client)
        elif transport == "http":
            await serve_http(client, http_cfg)
        else:
            async with anyio.create_task_group() as tg:
                tg.start_soon(serve_http, client, http_cfg)
                tg.start_soon(serve_stdio, client)


def run() -> None:
    """Console-script wrapper; configuration problems exit with status 1."""
    try:
        anyio.run(main)
    except (WorksectionConfigError, ValueError) as exc:
        logging.getLogger("worksection_mcp.server").error("Startup failed: %s", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
