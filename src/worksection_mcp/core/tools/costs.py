from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from worksection_mcp.core.client import WorksectionClient
from worksection_mcp.core.request import ParamValue
from worksection_mcp.core.tools._envelope import data_list, data_record
from worksection_mcp.core.tools._params import format_ws_date, join_extras

COST_TOTALS_EXTRAS = ("projects",)

CostTotalsExtra = Literal["projects"]


def _cost_params(
    *,
    project_id: Optional[str],
    task_id: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
    is_timer: Optional[bool],
    filter: Optional[str],
) -> Dict[str, ParamValue]:
    params: Dict[str, ParamValue] = {}
    if project_id:
        params["id_project"] = project_id
    if task_id:
        params["id_task"] = task_id
    if start_date:
        params["datestart"] = format_ws_date(start_date)
    if end_date:
        params["dateend"] = format_ws_date(end_date)
    if is_timer is not None:
        params["is_timer"] = is_timer
    if filter:
        params["filter"] = filter
    return params


async def get_costs(
    client: WorksectionClient,
    *,
    project_id: Optional[str] = None,
    task_id: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    is_timer: Optional[bool] = None,
    filter: Optional[str] = None,
) -> Dict[str, Any]:
    """
    List logged time/money entries (get_costs).
    Dates accept YYYY-MM-DD and are sent as DD.MM.YYYY.
    """
    params = _cost_params(
        project_id=project_id,
        task_id=task_id,
        start_date=start_date,
        end_date=end_date,
        is_timer=is_timer,
        filter=filter,
    )
    payload = await client.call("get_costs", params=params, tool="get_costs")
    costs = data_list(payload)
    return {"count": len(costs), "costs": costs}


async def get_costs_total(
    client: WorksectionClient,
    *,
    project_id: Optional[str] = None,
    task_id: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    is_timer: Optional[bool] = None,
    filter: Optional[str] = None,
    include: Optional[List[CostTotalsExtra]] = None,
) -> Dict[str, Any]:
    """Aggregate time/money per project or task, optionally per project."""
    params = _cost_params(
        project_id=project_id,
        task_id=task_id,
        start_date=start_date,
        end_date=end_date,
        is_timer=is_timer,
        filter=filter,
    )
    extra = join_extras(include, COST_TOTALS_EXTRAS)
    if extra:
        params["extra"] = extra

    payload = await client.call(
        "get_costs_total", params=params, tool="get_costs_total"
    )
    return {"totals": data_record(payload)}
