from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from worksection_mcp.core.client import WorksectionClient
from worksection_mcp.core.errors import WorksectionInputError
from worksection_mcp.core.request import ParamValue
from worksection_mcp.core.tools._envelope import data_list, data_record
from worksection_mcp.core.tools._params import join_extras, require_id

PROJECT_EXTRAS = ("text", "options", "users")
PROJECT_FILTERS = ("active", "pending", "archive")

ProjectExtra = Literal["text", "options", "users"]
ProjectFilter = Literal["active", "pending", "archive"]


async def get_projects(
    client: WorksectionClient,
    *,
    filter: Optional[ProjectFilter] = None,
    include: Optional[List[ProjectExtra]] = None,
) -> Dict[str, Any]:
    """
    List projects, optionally filtered by state and enriched with extra fields.

    Returns:
        {
            "count": int,
            "projects": [...],
            "applied_filter": str | None,
            "requested_extras": [str, ...],
        }
    """
    if filter is not None and filter not in PROJECT_FILTERS:
        raise WorksectionInputError(
            f"filter must be one of {', '.join(PROJECT_FILTERS)}"
        )

    params: Dict[str, ParamValue] = {}
    if filter:
        params["filter"] = filter
    extra = join_extras(include, PROJECT_EXTRAS)
    if extra:
        params["extra"] = extra

    payload = await client.call("get_projects", params=params, tool="get_projects")
    projects = data_list(payload)
    return {
        "count": len(projects),
        "projects": projects,
        "applied_filter": filter,
        "requested_extras": list(include or []),
    }


async def get_project(
    client: WorksectionClient,
    project_id: str,
    *,
    include: Optional[List[ProjectExtra]] = None,
) -> Dict[str, Any]:
    """Fetch a single project with optional extra fields (get_project)."""
    params: Dict[str, ParamValue] = {
        "id_project": require_id(project_id, "Project ID")
    }
    extra = join_extras(include, PROJECT_EXTRAS)
    if extra:
        params["extra"] = extra

    payload = await client.call("get_project", params=params, tool="get_project")
    return {"project": data_record(payload)}
