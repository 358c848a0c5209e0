from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from worksection_mcp.core.client import WorksectionClient
from worksection_mcp.core.errors import WorksectionInputError
from worksection_mcp.core.request import ParamValue
from worksection_mcp.core.tools._envelope import data_list, data_record
from worksection_mcp.core.tools._params import (
    comma_separated,
    join_extras,
    non_empty_list,
    require_id,
)

COMMENT_EXTRAS = ("files",)

CommentExtra = Literal["files"]


async def post_comment(
    client: WorksectionClient,
    task_id: str,
    *,
    text: Optional[str] = None,
    checklist: Optional[List[str]] = None,
    visibility_emails: Optional[List[str]] = None,
    mention_emails: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Add a comment (text and/or checklist items) to a task (post_comment)."""
    if not text and not checklist:
        raise WorksectionInputError(
            "Provide comment text or at least one checklist item."
        )

    params: Dict[str, ParamValue] = {
        "id_task": require_id(task_id, "Task ID"),
        "text": text or None,
        "hidden": comma_separated(visibility_emails),
        "mention": comma_separated(mention_emails),
        "todo": non_empty_list(checklist),
    }

    payload = await client.call(
        "post_comment", method="POST", params=params, tool="post_comment"
    )
    return {"comment": data_record(payload)}


async def get_comments(
    client: WorksectionClient,
    task_id: str,
    *,
    include: Optional[List[CommentExtra]] = None,
) -> Dict[str, Any]:
    """List comments of a task, optionally with attached file details."""
    task_id = require_id(task_id, "Task ID")
    params: Dict[str, ParamValue] = {"id_task": task_id}
    extra = join_extras(include, COMMENT_EXTRAS)
    if extra:
        params["extra"] = extra

    payload = await client.call("get_comments", params=params, tool="get_comments")
    comments = data_list(payload)
    return {"task_id": task_id, "count": len(comments), "comments": comments}
