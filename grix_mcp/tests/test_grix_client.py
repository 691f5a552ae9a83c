import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as StubServer

from grix_mcp.data.grix_client import GrixClient
from grix_mcp.domain import SignalRequest, TradeAgentConfig, UpstreamFetchError
from grix_mcp.tests.fakes import board_row, completed, signal_row


def _app(seen: list) -> web.Application:
    async def board(req: web.Request) -> web.Response:
        seen.append(("board", req.headers.get("x-api-key"), dict(req.query)))
        if req.query.get("asset") == "ETH":
            return web.json_response({"message": "unexpected"})
        return web.json_response([board_row(1, 30000)])

    async def create(req: web.Request) -> web.Response:
        seen.append(("create", await req.json()))
        return web.json_response({"agent_id": 17})

    async def submit(req: web.Request) -> web.Response:
        seen.append(("submit", req.match_info["agent_id"], await req.json()))
        return web.json_response({"ok": True})

    async def state(req: web.Request) -> web.Response:
        if req.match_info["agent_id"] == "missing":
            return web.Response(status=404, text="no such agent")
        return web.json_response(completed(signal_row()))

    app = web.Application()
    app.router.add_get("/elizatradeboard", board)
    app.router.add_post("/trade-agents", create)
    app.router.add_post("/trade-agents/{agent_id}/signal-requests", submit)
    app.router.add_get("/trade-agents/{agent_id}", state)
    return app


async def _with_client(seen: list, fn):
    async with StubServer(_app(seen)) as server:
        client = GrixClient(api_key="k-123", base_url=f"http://{server.host}:{server.port}")
        try:
            return await fn(client)
        finally:
            await client.close()


def test_fetch_option_board_sends_key_and_params() -> None:
    seen: list = []
    rows = asyncio.run(
        _with_client(seen, lambda c: c.fetch_option_board("BTC", "call", "long", ("derive", "aevo")))
    )
    assert rows[0]["optionId"] == 1
    kind, key, query = seen[0]
    assert key == "k-123"
    assert query == {"asset": "BTC", "optionType": "call", "positionType": "long", "protocols": "derive,aevo"}


def test_non_array_board_raises() -> None:
    with pytest.raises(UpstreamFetchError):
        asyncio.run(_with_client([], lambda c: c.fetch_option_board("ETH", "put", "short", ("derive",))))


def test_signal_endpoints() -> None:
    seen: list = []
    request = SignalRequest.build("5000", ["BTC"], "prompt")

    async def flow(client: GrixClient):
        agent_id = await client.create_agent(TradeAgentConfig(agent_name="t", signal_request=request))
        await client.submit_signal_request(agent_id, request)
        return agent_id, await client.get_agent_state(agent_id)

    agent_id, snapshot = asyncio.run(_with_client(seen, flow))
    assert agent_id == "17"
    assert snapshot.completed
    assert seen[0][1]["is_simulation"] is True
    assert seen[1][1] == "17"
    assert seen[1][2]["budget_usd"] == "5000"


def test_http_error_carries_status_and_body() -> None:
    with pytest.raises(UpstreamFetchError) as err:
        asyncio.run(_with_client([], lambda c: c.get_agent_state("missing")))
    assert err.value.status == 404
    assert err.value.body == "no such agent"


def test_connection_failure() -> None:
    async def go():
        client = GrixClient(api_key="k", base_url="http://127.0.0.1:9", timeout=2.0)
        try:
            await client.fetch_option_board("BTC", "call", "long", ("derive",))
        finally:
            await client.close()

    with pytest.raises(UpstreamFetchError):
        asyncio.run(go())
