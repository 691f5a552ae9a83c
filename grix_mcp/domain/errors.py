from __future__ import annotations

from typing import Any


class GrixError(Exception):
    """Base class for errors surfaced to the tool boundary."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class UpstreamFetchError(GrixError):
    """Network/HTTP failure or malformed response from the Grix API."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        body: str | None = None,
        url: str | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.status = status
        self.body = body
        self.url = url

    def __str__(self) -> str:
        msg = super().__str__()
        if self.status is not None:
            msg = f"{msg} (status={self.status})"
        return msg


class SignalTimeoutError(GrixError):
    """Signal request never reported completion within the poll budget."""

    def __init__(self, agent_id: str, attempts: int, **kwargs):
        super().__init__(
            f"signal request for agent {agent_id} not completed after {attempts} polls",
            **kwargs,
        )
        self.agent_id = agent_id
        self.attempts = attempts


class ConfigurationError(GrixError):
    """Missing or invalid setting; the server must not start."""

    def __init__(self, message: str, setting: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.setting = setting
