from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from worksection_mcp.core.attachments import AttachmentInput
from worksection_mcp.core.client import WorksectionClient
from worksection_mcp.core.errors import WorksectionInputError
from worksection_mcp.core.models import TaskAttachment
from worksection_mcp.core.request import ParamValue
from worksection_mcp.core.tools._envelope import data_list, data_record
from worksection_mcp.core.tools._params import (
    comma_separated,
    format_ws_date,
    join_extras,
    non_empty_list,
    require_id,
)

TASK_EXTRAS = ("text", "files", "comments", "relations", "subtasks", "subscribers")
MIN_PRIORITY = 0
MAX_PRIORITY = 10

TaskExtra = Literal["text", "files", "comments", "relations", "subtasks", "subscribers"]


async def get_tasks(
    client: WorksectionClient,
    project_id: str,
    *,
    active_only: bool = False,
    include: Optional[List[TaskExtra]] = None,
) -> Dict[str, Any]:
    """List tasks of one project (get_tasks); active_only sends filter=active."""
    project_id = require_id(project_id, "Project ID")
    params: Dict[str, ParamValue] = {"id_project": project_id}
    if active_only:
        params["filter"] = "active"
    extra = join_extras(include, TASK_EXTRAS)
    if extra:
        params["extra"] = extra

    payload = await client.call("get_tasks", params=params, tool="get_tasks")
    tasks = data_list(payload)
    return {"project_id": project_id, "count": len(tasks), "tasks": tasks}


async def get_task(
    client: WorksectionClient,
    task_id: str,
    *,
    include: Optional[List[TaskExtra]] = None,
    active_subtasks_only: bool = False,
) -> Dict[str, Any]:
    """Fetch a single task with optional extras (get_task)."""
    params: Dict[str, ParamValue] = {"id_task": require_id(task_id, "Task ID")}
    extra = join_extras(include, TASK_EXTRAS)
    if extra:
        params["extra"] = extra
    if active_subtasks_only:
        params["filter"] = "active"

    payload = await client.call("get_task", params=params, tool="get_task")
    return {"task": data_record(payload)}


def _to_attachment_inputs(
    attachments: List[Union[TaskAttachment, Dict[str, Any]]],
) -> List[AttachmentInput]:
    inputs: List[AttachmentInput] = []
    for index, raw in enumerate(attachments):
        item = (
            raw
            if isinstance(raw, TaskAttachment)
            else TaskAttachment.model_validate(raw)
        )
        inputs.append(
            AttachmentInput(
                field=f"attach[{index}]",
                filename=item.filename,
                content_type=item.content_type,
                data=item.data,
                source_url=item.source_url,
            )
        )
    return inputs


async def post_task(
    client: WorksectionClient,
    project_id: str,
    title: str,
    *,
    description: Optional[str] = None,
    parent_task_id: Optional[str] = None,
    assignee_email: Optional[str] = None,
    priority: Optional[int] = None,
    start_date: Optional[str] = None,
    due_date: Optional[str] = None,
    checklist: Optional[List[str]] = None,
    subscribe_emails: Optional[List[str]] = None,
    visibility_emails: Optional[List[str]] = None,
    mention_emails: Optional[List[str]] = None,
    estimate_hours: Optional[float] = None,
    budget: Optional[float] = None,
    tags: Optional[List[str]] = None,
    attachments: Optional[List[TaskAttachment]] = None,
) -> Dict[str, Any]:
    """
    Create a task or subtask (post_task).
    - Dates accept YYYY-MM-DD and are sent as DD.MM.YYYY
    - Email lists and tags are sent comma-separated
    - checklist items become todo[0], todo[1], ...
    - attachments (inline base64 ``data`` or ``source_url``) are uploaded as
      attach[0], attach[1], ... in a multipart request
    """
    if not title or not title.strip():
        raise WorksectionInputError("Task title is required")
    if priority is not None and not MIN_PRIORITY <= priority <= MAX_PRIORITY:
        raise WorksectionInputError(
            f"priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}"
        )
    for label, value in (("estimate_hours", estimate_hours), ("budget", budget)):
        if value is not None and value < 0:
            raise WorksectionInputError(f"{label} must be >= 0")

    params: Dict[str, ParamValue] = {
        "id_project": require_id(project_id, "Project ID"),
        "title": title,
        "text": description,
        "id_parent": parent_task_id,
        "email_user_to": assignee_email,
        "priority": priority,
        "datestart": format_ws_date(start_date),
        "dateend": format_ws_date(due_date),
        "subscribe": comma_separated(subscribe_emails),
        "hidden": comma_separated(visibility_emails),
        "mention": comma_separated(mention_emails),
        "max_time": estimate_hours,
        "max_money": budget,
        "tags": comma_separated(tags),
        "todo": non_empty_list(checklist),
    }

    payload = await client.call(
        "post_task",
        method="POST",
        params=params,
        attachments=_to_attachment_inputs(list(attachments or [])),
        tool="post_task",
    )
    return {"task": data_record(payload)}
