import pytest
import respx
from httpx import Response
from worksection_mcp.core.client import WorksectionClient
from worksection_mcp.core.config import WorksectionConfig
from worksection_mcp.core.errors import WorksectionInputError
from worksection_mcp.core.tools.costs import get_costs, get_costs_total

ENDPOINT = "https://acme.worksection.com/api/admin/v2"


@pytest.fixture
def client():
    return WorksectionClient(
        WorksectionConfig(account_url="https://acme.worksection.com", api_key="key")
    )


@pytest.mark.asyncio
@respx.mock
async def test_get_costs_params(client):
    route = respx.get(ENDPOINT).mock(
        return_value=Response(
            200,
            json={"status": "ok", "data": [{"id": "1", "time": "1:30", "money": 10}]},
        )
    )

    async with client:
        result = await get_costs(
            client,
            project_id="11",
            start_date="2024-01-01",
            end_date="2024-01-31",
            is_timer=False,
        )

    assert result["count"] == 1
    assert result["costs"][0]["time"] == "1:30"
    params = route.calls[0].request.url.params
    assert params["id_project"] == "11"
    assert params["datestart"] == "01.01.2024"
    assert params["dateend"] == "31.01.2024"
    assert params["is_timer"] == "0"
    assert "id_task" not in params


@pytest.mark.asyncio
@respx.mock
async def test_get_costs_total_with_projects_breakdown(client):
    route = respx.get(ENDPOINT).mock(
        return_value=Response(
            200,
            json={"status": "ok", "data": {"time": "10:00", "money": 500}},
        )
    )

    async with client:
        result = await get_costs_total(
            client, task_id="77", is_timer=True, include=["projects"]
        )

    assert result == {"totals": {"time": "10:00", "money": 500}}
    params = route.calls[0].request.url.params
    assert params["action"] == "get_costs_total"
    assert params["id_task"] == "77"
    assert params["is_timer"] == "1"
    assert params["extra"] == "projects"


@pytest.mark.asyncio
async def test_get_costs_total_rejects_unknown_extra(client):
    async with client:
        with pytest.raises(WorksectionInputError):
            await get_costs_total(client, include=["users"])
