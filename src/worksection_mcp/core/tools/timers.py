from __future__ import annotations

from typing import Any, Dict

from worksection_mcp.core.client import WorksectionClient
from worksection_mcp.core.tools._envelope import data_list


async def get_timers(client: WorksectionClient) -> Dict[str, Any]:
    """List running timers with their IDs, start times and owners (get_timers)."""
    payload = await client.call("get_timers", tool="get_timers")
    timers = data_list(payload)
    return {"count": len(timers), "timers": timers}
