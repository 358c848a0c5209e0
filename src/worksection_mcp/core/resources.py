"""Read-only MCP resources backed by Worksection API snapshots."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from mcp.types import Completion, ResourceTemplateReference

from .client import WorksectionClient
from .errors import WorksectionClientError, WorksectionInputError
from .registry import ClientProvider, as_client_provider
from .tools._envelope import data_list
from .tools.projects import PROJECT_EXTRAS
from .tools.tasks import TASK_EXTRAS

log = logging.getLogger("worksection_mcp.core.resources")

PROJECTS_URI = "worksection://projects"
USERS_URI = "worksection://users"
PROJECT_TASKS_URI = "worksection://projects/{project_id}/tasks"
TASK_URI = "worksection://tasks/{task_id}"

JSON_MIME = "application/json"
MAX_COMPLETIONS = 25


def _dump(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


async def projects_snapshot(client: WorksectionClient) -> str:
    payload = await client.call(
        "get_projects",
        params={"extra": ", ".join(PROJECT_EXTRAS)},
        tool="resource:projects",
    )
    return _dump(payload)


async def users_snapshot(client: WorksectionClient) -> str:
    payload = await client.call("get_users", tool="resource:users")
    return _dump(payload)


async def project_tasks_snapshot(client: WorksectionClient, project_id: str) -> str:
    if not project_id:
        raise WorksectionInputError("project_id must be supplied in the resource URI")
    payload = await client.call(
        "get_tasks",
        params={"id_project": project_id, "extra": ", ".join(TASK_EXTRAS)},
        tool="resource:project_tasks",
    )
    return _dump(payload)


async def task_snapshot(client: WorksectionClient, task_id: str) -> str:
    if not task_id:
        raise WorksectionInputError("task_id must be provided in the resource URI")
    payload = await client.call(
        "get_task",
        params={"id_task": task_id, "extra": ", ".join(TASK_EXTRAS)},
        tool="resource:task",
    )
    return _dump(payload)


async def complete_project_ids(
    client: WorksectionClient, value: Optional[str]
) -> List[str]:
    """Project ids starting with value (max 25); lookup failures yield none."""
    try:
        payload = await client.call("get_projects", tool="completion:project_id")
    except WorksectionClientError as exc:
        log.warning("Project id completion failed: %s", exc)
        return []

    ids = [
        str(project["id"])
        for project in data_list(payload)
        if isinstance(project, dict) and project.get("id") not in (None, "")
    ]
    prefix = value or ""
    if prefix:
        ids = [i for i in ids if i.startswith(prefix)]
    return ids[:MAX_COMPLETIONS]


def register_resources(
    app, client_provider: ClientProvider | WorksectionClient
) -> None:
    """Register resources, resource templates and id completion on a FastMCP app."""
    provider = as_client_provider(client_provider)

    @app.resource(
        PROJECTS_URI,
        name="worksection-projects-resource",
        title="Worksection projects snapshot",
        description="Full list of projects with text, options and users helpers.",
        mime_type=JSON_MIME,
    )
    async def projects_resource() -> str:
        return await projects_snapshot(provider())

    @app.resource(
        USERS_URI,
        name="worksection-users-resource",
        title="Worksection users",
        description="Returns the same payload as the get_users tool.",
        mime_type=JSON_MIME,
    )
    async def users_resource() -> str:
        return await users_snapshot(provider())

    @app.resource(
        PROJECT_TASKS_URI,
        name="worksection-project-tasks-resource",
        title="Project tasks resource",
        description="Reads tasks (with comments/subscribers) for a given project ID.",
        mime_type=JSON_MIME,
    )
    async def project_tasks_resource(project_id: str) -> str:
        return await project_tasks_snapshot(provider(), project_id)

    @app.resource(
        TASK_URI,
        name="worksection-task-resource",
        title="Single task resource",
        description="Fetches a single task with full context for chat references.",
        mime_type=JSON_MIME,
    )
    async def task_resource(task_id: str) -> str:
        return await task_snapshot(provider(), task_id)

    @app.completion()
    async def handle_completion(ref, argument, context) -> Optional[Completion]:
        if (
            isinstance(ref, ResourceTemplateReference)
            and ref.uri == PROJECT_TASKS_URI
            and argument.name == "project_id"
        ):
            values = await complete_project_ids(provider(), argument.value)
            return Completion(values=values, hasMore=False)
        return None

    log.info(
        "Registered resources: %s",
        ", ".join([PROJECTS_URI, USERS_URI, PROJECT_TASKS_URI, TASK_URI]),
    )


__all__ = [
    "PROJECTS_URI",
    "USERS_URI",
    "PROJECT_TASKS_URI",
    "TASK_URI",
    "projects_snapshot",
    "users_snapshot",
    "project_tasks_snapshot",
    "task_snapshot",
    "complete_project_ids",
    "register_resources",
]
