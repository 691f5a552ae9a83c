from __future__ import annotations

from typing import Any, Callable

from grix_mcp.data.ttl_cache import TTLCache, now_ms
from grix_mcp.domain import ASSETS, DEFAULT_PROTOCOLS, OPTION_TYPES, POSITION_TYPES, OptionRecord


def normalize_query(asset: str, option_type: str, position_type: str) -> tuple[str, str, str]:
    asset = str(asset).strip().upper()
    option_type = str(option_type).strip().lower()
    position_type = str(position_type).strip().lower()
    if asset not in ASSETS:
        raise ValueError(f"unsupported asset {asset!r}; expected one of {', '.join(ASSETS)}")
    if option_type not in OPTION_TYPES:
        raise ValueError(f"unsupported optionType {option_type!r}; expected call or put")
    if position_type not in POSITION_TYPES:
        raise ValueError(f"unsupported positionType {position_type!r}; expected long or short")
    return asset, option_type, position_type


def cache_key(asset: str, option_type: str, position_type: str) -> str:
    return f"{asset}:{option_type}:{position_type}"


class OptionsService:
    """Cache-fronted option board reads.

    A stale (or never populated) key triggers exactly one upstream fetch,
    the records are sorted by strike and stored whole, then the cached
    payload is projected into the display shape.
    """

    def __init__(
        self,
        client,
        cache: TTLCache[tuple[OptionRecord, ...]],
        *,
        protocols: tuple[str, ...] = DEFAULT_PROTOCOLS,
        clock: Callable[[], float] = now_ms,
        log=None,
        events=None,
    ):
        self.client = client
        self.cache = cache
        self.protocols = tuple(protocols)
        self._clock = clock
        self._log = log
        self._events = events

    async def refresh(self, asset: str, option_type: str, position_type: str) -> tuple[OptionRecord, ...]:
        raw = await self.client.fetch_option_board(asset, option_type, position_type, self.protocols)
        records = [OptionRecord.from_upstream(r) for r in raw]
        ordered = tuple(sorted(records, key=lambda r: r.strike))
        key = cache_key(asset, option_type, position_type)
        self.cache.store(key, ordered, self._clock())
        if self._log is not None:
            self._log.info("options refresh key=%s records=%d", key, len(ordered))
        if self._events is not None:
            self._events.emit("options.refresh", key=key, records=len(ordered))
        return ordered

    async def get_options(self, asset: str = "BTC", option_type: str = "call", position_type: str = "long") -> list[dict[str, Any]]:
        asset, option_type, position_type = normalize_query(asset, option_type, position_type)
        key = cache_key(asset, option_type, position_type)
        entry = self.cache.get(key)
        if not entry.populated or self.cache.is_stale(key, self._clock()):
            await self.refresh(asset, option_type, position_type)
        elif self._log is not None:
            self._log.debug("options cache hit key=%s", key)
        payload = self.cache.get(key).payload or ()
        return [r.display() for r in payload]
