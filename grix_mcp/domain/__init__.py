from .errors import ConfigurationError, GrixError, SignalTimeoutError, UpstreamFetchError
from .models import (
    ASSETS,
    DEFAULT_PROTOCOLS,
    OPTION_TYPES,
    POSITION_TYPES,
    AgentSnapshot,
    OptionRecord,
    Signal,
    SignalRequest,
    TradeAgentConfig,
)

__all__ = [
    "ASSETS",
    "DEFAULT_PROTOCOLS",
    "OPTION_TYPES",
    "POSITION_TYPES",
    "AgentSnapshot",
    "ConfigurationError",
    "GrixError",
    "OptionRecord",
    "Signal",
    "SignalRequest",
    "SignalTimeoutError",
    "TradeAgentConfig",
    "UpstreamFetchError",
]
