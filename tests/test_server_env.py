import logging

import pytest
from worksection_mcp import server
from worksection_mcp.core.errors import WorksectionConfigError


@pytest.mark.parametrize(
    "raw,expected",
    [(None, "http"), ("stdio", "stdio"), (" BOTH ", "both"), ("http", "http")],
)
def test_selected_transport(monkeypatch, raw, expected):
    if raw is None:
        monkeypatch.delenv("WORKSECTION_TRANSPORT", raising=False)
    else:
        monkeypatch.setenv("WORKSECTION_TRANSPORT", raw)
    assert server.selected_transport() == expected


def test_unknown_transport_rejected(monkeypatch):
    monkeypatch.setenv("WORKSECTION_TRANSPORT", "sse")
    with pytest.raises(WorksectionConfigError) as exc:
        server.selected_transport()
    assert "sse" in str(exc.value)


def test_run_exits_on_missing_config(monkeypatch, caplog):
    monkeypatch.setattr("worksection_mcp.core.config.load_dotenv", lambda *a, **k: None)
    monkeypatch.setattr(server, "setup_logging", lambda *a, **k: None)
    monkeypatch.setenv("WORKSECTION_TRANSPORT", "stdio")
    monkeypatch.delenv("WORKSECTION_ACCOUNT_URL", raising=False)
    monkeypatch.delenv("WORKSECTION_ADMIN_API_KEY", raising=False)

    with caplog.at_level(logging.ERROR, logger="worksection_mcp.server"):
        with pytest.raises(SystemExit) as exc:
            server.run()

    assert exc.value.code == 1
    assert any("WORKSECTION_ACCOUNT_URL" in r.getMessage() for r in caplog.records)


def test_run_dispatches_to_selected_transport(monkeypatch):
    calls = []

    async def fake_stdio(client):
        calls.append(("stdio", client.account_url))

    monkeypatch.setattr(server, "serve_stdio", fake_stdio)
    monkeypatch.setattr(server, "setup_logging", lambda *a, **k: None)
    monkeypatch.setattr("worksection_mcp.core.config.load_dotenv", lambda *a, **k: None)
    monkeypatch.setenv("WORKSECTION_TRANSPORT", "stdio")
    monkeypatch.setenv("WORKSECTION_ACCOUNT_URL", "https://acme.worksection.com")
    monkeypatch.setenv("WORKSECTION_ADMIN_API_KEY", "k")

    server.run()

    assert calls == [("stdio", "https://acme.worksection.com/")]


@pytest.mark.asyncio
async def test_stdio_app_registers_tools_and_resources():
    from worksection_mcp.core.client import WorksectionClient
    from worksection_mcp.core.config import WorksectionConfig
    from worksection_mcp.transports.stdio.main import build_stdio_app

    client = WorksectionClient(
        WorksectionConfig(account_url="https://acme.worksection.com", api_key="k")
    )
    app = build_stdio_app(client)

    tools = {t.name for t in await app.list_tools()}
    resources = {str(r.uri) for r in await app.list_resources()}
    assert "post_task" in tools
    assert "worksection://projects" in resources
    await client.aclose()
