import asyncio

from worksection_mcp.core.context import (
    bind_request_id,
    current_request_id,
    ensure_request_id,
    reset_request_id,
)


def test_ensure_request_id_keeps_or_generates():
    assert ensure_request_id("  abc ") == "abc"
    generated = ensure_request_id(None)
    assert len(generated) == 32
    assert generated != ensure_request_id("")


def test_bind_and_reset():
    assert current_request_id() is None
    token = bind_request_id("rid-1")
    assert current_request_id() == "rid-1"
    reset_request_id(token)
    assert current_request_id() is None


async def _worker(rid: str) -> str | None:
    token = bind_request_id(rid)
    try:
        await asyncio.sleep(0)
        return current_request_id()
    finally:
        reset_request_id(token)


def test_request_ids_isolated_between_tasks():
    async def run():
        return await asyncio.gather(_worker("a"), _worker("b"))

    assert asyncio.run(run()) == ["a", "b"]
