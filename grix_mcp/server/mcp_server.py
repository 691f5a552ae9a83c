"""MCP surface: registers the ``options`` / ``generateSignals`` tools and the
``market-analysis`` prompt on a FastMCP server backed by a ToolDispatcher.

Annotations are evaluated eagerly here (no ``from __future__ import
annotations``) because FastMCP builds the tool schemas from them.
"""

from typing import Annotated, List, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from grix_mcp.server.dispatcher import DEFAULT_BUDGET, DEFAULT_USER_PROMPT, ToolDispatcher


SERVER_NAME = "Grix MCP"

MARKET_ANALYSIS_TEMPLATE = """Please analyze the market conditions for {asset} on the {timeframe} timeframe. Consider:

1. Current price action and trend
2. Key support and resistance levels
3. Volume analysis
4. Technical indicators (RSI, MACD, etc.)
5. Market sentiment
6. Potential entry/exit points

Provide a comprehensive analysis with actionable insights."""


def market_analysis_prompt(asset: str, timeframe: str) -> str:
    return MARKET_ANALYSIS_TEMPLATE.format(asset=asset.upper(), timeframe=timeframe)


def build_server(dispatcher: ToolDispatcher) -> FastMCP:
    server = FastMCP(SERVER_NAME)

    @server.tool(name="options", description="Get options data from Grix")
    async def options(
        asset: Annotated[Literal["BTC", "ETH"], Field(description="Underlying asset")] = "BTC",
        optionType: Annotated[Literal["call", "put"], Field(description="Option type")] = "call",
        positionType: Annotated[Literal["long", "short"], Field(description="Position side")] = "long",
    ) -> str:
        return await dispatcher.options(asset, optionType, positionType)

    @server.tool(
        name="generateSignals",
        description="Generate trading signals with a simulated Grix trade agent",
    )
    async def generate_signals(
        budget: Annotated[str, Field(description="Budget in USD")] = DEFAULT_BUDGET,
        assets: Annotated[List[Literal["BTC", "ETH"]], Field(description="Assets to trade")] = ["BTC"],
        userPrompt: Annotated[str, Field(description="Strategy instructions for the agent")] = DEFAULT_USER_PROMPT,
    ) -> str:
        return await dispatcher.generate_signals(budget, list(assets), userPrompt)

    @server.prompt(
        name="market-analysis",
        description="Analyze current market conditions and provide trading insights",
    )
    def market_analysis(asset: str, timeframe: str) -> str:
        return market_analysis_prompt(asset, timeframe)

    return server
