from __future__ import annotations

import os
from dataclasses import dataclass

from grix_mcp.data.grix_client import DEFAULT_BASE_URL
from grix_mcp.domain.errors import ConfigurationError


def _env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        value = default
    else:
        try:
            value = int(raw)
        except ValueError as exc:
            raise ConfigurationError(f"{name} must be an integer, got {raw!r}", setting=name) from exc
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_float(name: str, default: float, min_value: float | None = None) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        value = default
    else:
        try:
            value = float(raw)
        except ValueError as exc:
            raise ConfigurationError(f"{name} must be a number, got {raw!r}", setting=name) from exc
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class Settings:
    api_key: str
    base_url: str
    cache_ttl_ms: int
    poll_max_attempts: int
    poll_delay_ms: int
    http_timeout_sec: float
    log_level: str
    data_dir: str

    def __repr__(self) -> str:
        return (
            f"Settings(base_url={self.base_url!r}, cache_ttl_ms={self.cache_ttl_ms}, "
            f"poll_max_attempts={self.poll_max_attempts}, poll_delay_ms={self.poll_delay_ms}, "
            f"http_timeout_sec={self.http_timeout_sec}, log_level={self.log_level!r}, "
            f"data_dir={self.data_dir!r})"
        )


def load_settings() -> Settings:
    api_key = os.environ.get("GRIX_API_KEY", "").strip()
    if not api_key:
        raise ConfigurationError(
            "GRIX_API_KEY is not set; the server cannot reach the Grix API without it",
            setting="GRIX_API_KEY",
        )
    return Settings(
        api_key=api_key,
        base_url=os.environ.get("GRIX_API_BASE_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL,
        cache_ttl_ms=_env_int("OPTIONS_CACHE_TTL_MS", 5 * 60 * 1000, min_value=0),
        poll_max_attempts=_env_int("SIGNAL_POLL_MAX_ATTEMPTS", 10, min_value=1),
        poll_delay_ms=_env_int("SIGNAL_POLL_DELAY_MS", 2000, min_value=0),
        http_timeout_sec=_env_float("HTTP_TIMEOUT_SEC", 30.0, min_value=1.0),
        log_level=os.environ.get("LOG_LEVEL", "INFO").strip().upper(),
        data_dir=os.environ.get("DATA_DIR", "").strip(),
    )
