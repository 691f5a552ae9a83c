from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any

from grix_mcp.domain.errors import UpstreamFetchError


ASSETS = ("BTC", "ETH")
OPTION_TYPES = ("call", "put")
POSITION_TYPES = ("long", "short")

DEFAULT_PROTOCOLS = ("derive", "aevo", "premia", "moby", "ithaca", "zomma", "deribit")
DEFAULT_INPUT_DATA = ("marketData",)
DEFAULT_TRADE_WINDOW_MS = 7 * 24 * 60 * 60 * 1000
DEFAULT_CONTEXT_WINDOW_MS = 604800000


def _require(raw: dict[str, Any], key: str, what: str) -> Any:
    if key not in raw or raw[key] is None:
        raise UpstreamFetchError(f"malformed {what}: missing '{key}'", body=repr(raw)[:500])
    return raw[key]


def _text(raw: dict[str, Any], key: str, default: str = "") -> str:
    value = raw.get(key)
    return default if value is None else str(value)


def _as_float(raw: dict[str, Any], key: str, what: str) -> float:
    value = _require(raw, key, what)
    if isinstance(value, bool):
        raise UpstreamFetchError(f"malformed {what}: '{key}' is not numeric", body=repr(raw)[:500])
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise UpstreamFetchError(
            f"malformed {what}: '{key}' is not numeric",
            body=repr(raw)[:500],
        ) from exc
    if not math.isfinite(number):
        raise UpstreamFetchError(f"malformed {what}: '{key}' is not finite", body=repr(raw)[:500])
    return number


@dataclass(frozen=True)
class OptionRecord:
    option_id: int | str
    symbol: str
    option_type: str
    expiry: str | int
    strike: float
    protocol: str
    contract_price: float
    available_amount: str
    market_name: str

    @classmethod
    def from_upstream(cls, raw: Any) -> OptionRecord:
        if not isinstance(raw, dict):
            raise UpstreamFetchError("malformed option record: not an object", body=repr(raw)[:500])
        what = "option record"
        return cls(
            option_id=_require(raw, "optionId", what),
            symbol=str(_require(raw, "symbol", what)),
            option_type=str(_require(raw, "type", what)).lower(),
            expiry=_require(raw, "expiry", what),
            strike=_as_float(raw, "strike", what),
            protocol=str(_require(raw, "protocol", what)),
            contract_price=_as_float(raw, "contractPrice", what),
            available_amount=_text(raw, "availableAmount", "0"),
            market_name=_text(raw, "marketName"),
        )

    def display(self) -> dict[str, Any]:
        return {
            "id": self.option_id,
            "symbol": self.symbol,
            "type": self.option_type,
            "expiry": self.expiry,
            "strike": self.strike,
            "protocol": self.protocol,
            "price": self.contract_price,
            "amount": self.available_amount,
            "market": self.market_name,
        }


@dataclass(frozen=True)
class SignalRequest:
    budget_usd: str
    assets: tuple[str, ...]
    user_prompt: str
    trade_window_ms: int = DEFAULT_TRADE_WINDOW_MS
    context_window_ms: int = DEFAULT_CONTEXT_WINDOW_MS
    input_data: tuple[str, ...] = DEFAULT_INPUT_DATA
    protocols: tuple[str, ...] = DEFAULT_PROTOCOLS

    @classmethod
    def build(cls, budget: str, assets: list[str] | tuple[str, ...], user_prompt: str) -> SignalRequest:
        picked: list[str] = []
        for a in assets:
            sym = str(a).strip().upper()
            if sym not in ASSETS:
                raise ValueError(f"unsupported asset {a!r}; expected one of {', '.join(ASSETS)}")
            if sym not in picked:
                picked.append(sym)
        if not picked:
            raise ValueError("at least one asset is required")
        budget = str(budget).strip()
        try:
            amount = float(budget)
            if not math.isfinite(amount) or amount <= 0:
                raise ValueError
        except ValueError:
            raise ValueError(f"budget must be a positive number, got {budget!r}") from None
        return cls(budget_usd=budget, assets=tuple(picked), user_prompt=user_prompt)

    def as_payload(self) -> dict[str, Any]:
        return {
            "budget_usd": self.budget_usd,
            "assets": list(self.assets),
            "trade_window_ms": self.trade_window_ms,
            "context_window_ms": self.context_window_ms,
            "input_data": list(self.input_data),
            "protocols": list(self.protocols),
            "user_prompt": self.user_prompt,
        }


@dataclass(frozen=True)
class TradeAgentConfig:
    agent_name: str
    signal_request: SignalRequest
    is_simulation: bool = True

    def as_payload(self) -> dict[str, Any]:
        return {
            "agent_name": self.agent_name,
            "is_simulation": self.is_simulation,
            "signal_request_config": self.signal_request.as_payload(),
        }


@dataclass(frozen=True)
class Signal:
    id: str
    action_type: str
    position_type: str
    instrument: str
    instrument_type: str
    size: str
    expected_instrument_price_usd: str
    expected_total_price_usd: str
    reason: str
    created_at: str
    updated_at: str
    target_position_id: str | None = None

    @classmethod
    def from_upstream(cls, raw: Any) -> Signal:
        """Flatten ``{id, created_at, updated_at, signal: {...}}`` into one record."""
        if not isinstance(raw, dict) or not isinstance(raw.get("signal"), dict):
            raise UpstreamFetchError("malformed signal record", body=repr(raw)[:500])
        inner = raw["signal"]
        what = "signal record"
        target = inner.get("target_position_id")
        return cls(
            id=str(_require(raw, "id", what)),
            action_type=str(_require(inner, "action_type", what)),
            position_type=_text(inner, "position_type"),
            instrument=str(_require(inner, "instrument", what)),
            instrument_type=_text(inner, "instrument_type"),
            size=_text(inner, "size"),
            expected_instrument_price_usd=_text(inner, "expected_instrument_price_usd"),
            expected_total_price_usd=_text(inner, "expected_total_price_usd"),
            reason=_text(inner, "reason"),
            created_at=_text(raw, "created_at"),
            updated_at=_text(raw, "updated_at"),
            target_position_id=None if target is None else str(target),
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AgentSnapshot:
    progress: str | None
    signals: tuple[Any, ...] = field(default_factory=tuple)

    @property
    def completed(self) -> bool:
        return self.progress == "completed" and len(self.signals) > 0

    @classmethod
    def from_upstream(cls, raw: Any) -> AgentSnapshot:
        # Only the first personal agent's first signal request is inspected.
        if not isinstance(raw, dict):
            raise UpstreamFetchError("malformed agent state: not an object", body=repr(raw)[:500])
        agents = raw.get("personal_agents", [])
        if not isinstance(agents, list):
            raise UpstreamFetchError("malformed agent state: personal_agents", body=repr(raw)[:500])
        if not agents:
            return cls(progress=None)
        first_agent = agents[0]
        requests = first_agent.get("signal_requests", []) if isinstance(first_agent, dict) else None
        if not isinstance(requests, list):
            raise UpstreamFetchError("malformed agent state: signal_requests", body=repr(raw)[:500])
        if not requests:
            return cls(progress=None)
        first_request = requests[0]
        if not isinstance(first_request, dict):
            raise UpstreamFetchError("malformed agent state: signal request", body=repr(raw)[:500])
        signals = first_request.get("signals") or []
        if not isinstance(signals, list):
            raise UpstreamFetchError("malformed agent state: signals", body=repr(raw)[:500])
        progress = first_request.get("progress")
        return cls(progress=None if progress is None else str(progress), signals=tuple(signals))
