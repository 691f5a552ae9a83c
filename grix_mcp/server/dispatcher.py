from __future__ import annotations

import json
from typing import Any

from mcp.server.fastmcp.exceptions import ToolError

from grix_mcp.domain import GrixError, SignalRequest, SignalTimeoutError


DEFAULT_BUDGET = "5000"
DEFAULT_ASSETS = ("BTC",)
DEFAULT_USER_PROMPT = "Generate moderate growth strategies"


def _to_text(payload: Any) -> str:
    return json.dumps(payload, indent=2, default=str)


def parse_tool_error(text: str) -> dict[str, Any] | None:
    """Recover the JSON error payload from a tool error text.

    FastMCP prefixes tool failures with ``Error executing tool <name>: ``;
    the payload is everything from the first ``{``.
    """
    start = text.find("{")
    if start < 0:
        return None
    try:
        payload = json.loads(text[start:])
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


class ToolDispatcher:
    """Routes tool calls to the options service or the signal workflow.

    Results are JSON text. Typed failures become a ToolError whose message is
    a JSON error payload echoing the arguments, so the client gets an error
    result instead of the process going down.
    """

    TOOL_NAMES = ("options", "generateSignals")

    def __init__(self, options, workflow, *, log=None):
        self.options_service = options
        self.workflow = workflow
        self._log = log

    def _fail(self, error: str, exc: Exception, arguments: dict[str, Any]) -> ToolError:
        if self._log is not None:
            self._log.error("%s: %s args=%s", error, exc, arguments)
        payload: dict[str, Any] = {"error": error, "details": str(exc), "arguments": arguments}
        status = getattr(exc, "status", None)
        if status is not None:
            payload["status"] = status
        return ToolError(_to_text(payload))

    async def options(self, asset: str = "BTC", option_type: str = "call", position_type: str = "long") -> str:
        arguments = {"asset": asset, "optionType": option_type, "positionType": position_type}
        try:
            rows = await self.options_service.get_options(asset, option_type, position_type)
        except (GrixError, ValueError) as exc:
            raise self._fail("Failed to fetch options data", exc, arguments) from exc
        return _to_text(rows)

    async def generate_signals(
        self,
        budget: str = DEFAULT_BUDGET,
        assets: list[str] | tuple[str, ...] | None = None,
        user_prompt: str = DEFAULT_USER_PROMPT,
    ) -> str:
        assets = list(assets) if assets else list(DEFAULT_ASSETS)
        arguments = {"budget": budget, "assets": assets, "userPrompt": user_prompt}
        try:
            request = SignalRequest.build(budget, assets, user_prompt)
            signals = await self.workflow.run(request)
        except SignalTimeoutError as exc:
            raise self._fail("Signal generation timed out", exc, arguments) from exc
        except (GrixError, ValueError) as exc:
            raise self._fail("Failed to generate signals", exc, arguments) from exc
        return _to_text([s.as_dict() for s in signals])

    async def dispatch(self, name: str, arguments: dict[str, Any] | None = None) -> str:
        args = arguments or {}
        if name == "options":
            return await self.options(
                asset=args.get("asset") or "BTC",
                option_type=args.get("optionType") or "call",
                position_type=args.get("positionType") or "long",
            )
        if name == "generateSignals":
            return await self.generate_signals(
                budget=args.get("budget") or DEFAULT_BUDGET,
                assets=args.get("assets"),
                user_prompt=args.get("userPrompt") or DEFAULT_USER_PROMPT,
            )
        raise ValueError(f"unknown tool {name!r}; available: {', '.join(self.TOOL_NAMES)}")
