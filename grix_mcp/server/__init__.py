from .dispatcher import ToolDispatcher, parse_tool_error
from .mcp_server import SERVER_NAME, build_server, market_analysis_prompt

__all__ = ["ToolDispatcher", "parse_tool_error", "SERVER_NAME", "build_server", "market_analysis_prompt"]
