from __future__ import annotations

import asyncio

from grix_mcp.config import Settings
from grix_mcp.data import GrixClient, TTLCache
from grix_mcp.infra import RuntimeEventLogger, get_logger
from grix_mcp.options import OptionsService
from grix_mcp.server import ToolDispatcher, build_server
from grix_mcp.signals import PollPolicy, SignalWorkflow


class App:
    """Top-level orchestrator: wires the Grix client, cache and workflow
    behind the MCP server and serves it over stdio."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.log = get_logger("grix-mcp", settings.log_level)
        self.events = RuntimeEventLogger(settings.data_dir or None, log=self.log)
        self.client = GrixClient(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.http_timeout_sec,
            log=self.log,
        )
        self.options = OptionsService(
            self.client,
            TTLCache(settings.cache_ttl_ms),
            log=self.log,
            events=self.events,
        )
        self.workflow = SignalWorkflow(
            self.client,
            policy=PollPolicy(
                max_attempts=settings.poll_max_attempts,
                delay_ms=settings.poll_delay_ms,
            ),
            log=self.log,
            events=self.events,
        )
        self.dispatcher = ToolDispatcher(self.options, self.workflow, log=self.log)
        self.server = build_server(self.dispatcher)

    async def run(self) -> None:
        self.log.info(
            "starting grix mcp base_url=%s cache_ttl_ms=%s poll=%sx%sms",
            self.settings.base_url,
            self.settings.cache_ttl_ms,
            self.settings.poll_max_attempts,
            self.settings.poll_delay_ms,
        )
        self.events.emit("server.start", base_url=self.settings.base_url)
        try:
            await self.server.run_stdio_async()
        finally:
            await self.client.close()
            self.events.emit("server.stop")
            self.log.info("grix mcp stopped")


def run_main(settings: Settings) -> None:
    asyncio.run(App(settings).run())
