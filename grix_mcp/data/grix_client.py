from __future__ import annotations

import asyncio
import json
from typing import Any

import aiohttp

from grix_mcp.domain import AgentSnapshot, SignalRequest, TradeAgentConfig, UpstreamFetchError


DEFAULT_BASE_URL = "https://z61hgkwkn8.execute-api.us-east-1.amazonaws.com/dev"


class GrixClient:
    """Thin async client for the Grix REST API.

    One network call per method, no retries. Every failure surfaces as
    UpstreamFetchError. The API key is forwarded verbatim as ``x-api-key``.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        conn_limit: int = 20,
        log=None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = max(1.0, float(timeout))
        self._conn_limit = max(1, int(conn_limit))
        self._log = log
        self._session: aiohttp.ClientSession | None = None

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session
        connector = aiohttp.TCPConnector(limit=self._conn_limit, enable_cleanup_closed=True)
        self._session = aiohttp.ClientSession(
            connector=connector,
            headers={
                "User-Agent": "grix-mcp/1.1",
                "x-api-key": self._api_key,
            },
        )
        return self._session

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        session = await self._ensure_session()
        url = f"{self._base_url}{path}"
        if self._log is not None:
            self._log.debug("grix request %s %s params=%s", method, path, params)
        try:
            async with session.request(
                method,
                url,
                params=params,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as r:
                body = await r.text()
                if r.status >= 400:
                    raise UpstreamFetchError(
                        f"{method} {path} failed",
                        status=r.status,
                        body=body[:2000],
                        url=url,
                    )
                status = r.status
        except asyncio.TimeoutError as exc:
            raise UpstreamFetchError(f"{method} {path} timed out after {self._timeout:.0f}s", url=url) from exc
        except aiohttp.ClientError as exc:
            raise UpstreamFetchError(f"{method} {path} failed: {exc}", url=url) from exc

        if not body.strip():
            return None
        try:
            return json.loads(body)
        except ValueError as exc:
            raise UpstreamFetchError(
                f"{method} {path} returned non-JSON body",
                status=status,
                body=body[:2000],
                url=url,
            ) from exc

    async def fetch_option_board(
        self,
        asset: str,
        option_type: str,
        position_type: str,
        protocols: tuple[str, ...] | list[str],
    ) -> list[dict[str, Any]]:
        params = {
            "asset": asset,
            "optionType": option_type,
            "positionType": position_type,
            "protocols": ",".join(protocols),
        }
        data = await self._request("GET", "/elizatradeboard", params=params)
        if not isinstance(data, list):
            raise UpstreamFetchError(
                "option board response is not an array",
                body=repr(data)[:2000],
                url=f"{self._base_url}/elizatradeboard",
            )
        return data

    async def create_agent(self, config: TradeAgentConfig) -> str:
        data = await self._request("POST", "/trade-agents", payload=config.as_payload())
        if isinstance(data, dict):
            for key in ("id", "agent_id", "agentId"):
                agent_id = data.get(key)
                if agent_id not in (None, ""):
                    return str(agent_id)
        raise UpstreamFetchError("create agent response has no agent id", body=repr(data)[:2000])

    async def submit_signal_request(self, agent_id: str, request: SignalRequest) -> None:
        await self._request(
            "POST",
            f"/trade-agents/{agent_id}/signal-requests",
            payload=request.as_payload(),
        )

    async def get_agent_state(self, agent_id: str) -> AgentSnapshot:
        data = await self._request("GET", f"/trade-agents/{agent_id}")
        return AgentSnapshot.from_upstream(data)
