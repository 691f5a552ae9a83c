import pytest

from grix_mcp.config.settings import Settings, load_settings
from grix_mcp.data import DEFAULT_BASE_URL
from grix_mcp.domain import ConfigurationError


ENV_VARS = (
    "GRIX_API_KEY",
    "GRIX_API_BASE_URL",
    "OPTIONS_CACHE_TTL_MS",
    "SIGNAL_POLL_MAX_ATTEMPTS",
    "SIGNAL_POLL_DELAY_MS",
    "HTTP_TIMEOUT_SEC",
    "LOG_LEVEL",
    "DATA_DIR",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_missing_api_key_is_fatal() -> None:
    with pytest.raises(ConfigurationError) as err:
        load_settings()
    assert err.value.setting == "GRIX_API_KEY"


def test_blank_api_key_is_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GRIX_API_KEY", "   ")
    with pytest.raises(ConfigurationError):
        load_settings()


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GRIX_API_KEY", "secret")
    s = load_settings()
    assert isinstance(s, Settings)
    assert s.api_key == "secret"
    assert s.base_url == DEFAULT_BASE_URL
    assert s.cache_ttl_ms == 300_000
    assert s.poll_max_attempts == 10
    assert s.poll_delay_ms == 2000
    assert s.log_level == "INFO"
    assert s.data_dir == ""
    assert "secret" not in repr(s)


def test_overrides_and_floors(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GRIX_API_KEY", "secret")
    monkeypatch.setenv("SIGNAL_POLL_MAX_ATTEMPTS", "0")
    monkeypatch.setenv("SIGNAL_POLL_DELAY_MS", "250")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    s = load_settings()
    assert s.poll_max_attempts == 1
    assert s.poll_delay_ms == 250
    assert s.log_level == "DEBUG"


def test_invalid_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GRIX_API_KEY", "secret")
    monkeypatch.setenv("OPTIONS_CACHE_TTL_MS", "five minutes")
    with pytest.raises(ConfigurationError) as err:
        load_settings()
    assert err.value.setting == "OPTIONS_CACHE_TTL_MS"
