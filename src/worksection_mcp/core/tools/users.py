from __future__ import annotations

from typing import Any, Dict

from worksection_mcp.core.client import WorksectionClient
from worksection_mcp.core.tools._envelope import data_list


async def get_users(client: WorksectionClient) -> Dict[str, Any]:
    """List Worksection account users (get_users)."""
    payload = await client.call("get_users", tool="get_users")
    users = data_list(payload)
    return {"count": len(users), "users": users}
