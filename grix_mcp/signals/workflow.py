from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from grix_mcp.domain import Signal, SignalRequest, SignalTimeoutError, TradeAgentConfig


AGENT_NAME = "grix-mcp-signals"


class WorkflowState(str, Enum):
    CREATING = "creating"
    SUBMITTING = "submitting"
    POLLING = "polling"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


@dataclass(frozen=True)
class PollPolicy:
    max_attempts: int = 10
    delay_ms: int = 2000

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")

    @property
    def delay_sec(self) -> float:
        return self.delay_ms / 1000.0


class SignalWorkflow:
    """Create agent -> submit signal request -> poll until completed.

    Each ``run`` is independent: a fresh agent, no state kept between runs.
    Upstream errors are terminal and propagate unchanged; exhausting the
    poll budget raises SignalTimeoutError.
    """

    def __init__(
        self,
        client,
        *,
        policy: PollPolicy | None = None,
        agent_name: str = AGENT_NAME,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        log=None,
        events=None,
    ):
        self.client = client
        self.policy = policy or PollPolicy()
        self.agent_name = agent_name
        self._sleep = sleep
        self._log = log
        self._events = events

    def _transition(self, state: WorkflowState, **fields) -> WorkflowState:
        if self._log is not None:
            self._log.info("signals state=%s %s", state.value, " ".join(f"{k}={v}" for k, v in fields.items()))
        if self._events is not None:
            self._events.emit("signals.state", state=state.value, **fields)
        return state

    async def run(self, request: SignalRequest) -> list[Signal]:
        state = self._transition(WorkflowState.CREATING, assets=",".join(request.assets))
        agent_id = ""
        try:
            agent_id = await self.client.create_agent(
                TradeAgentConfig(agent_name=self.agent_name, signal_request=request)
            )

            state = self._transition(WorkflowState.SUBMITTING, agent_id=agent_id)
            await self.client.submit_signal_request(agent_id, request)

            state = self._transition(WorkflowState.POLLING, agent_id=agent_id)
            signals = await self._poll(agent_id)
        except SignalTimeoutError as exc:
            self._transition(WorkflowState.TIMED_OUT, agent_id=agent_id, attempts=exc.attempts)
            raise
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._transition(WorkflowState.FAILED, agent_id=agent_id, stage=state.value, error=str(exc))
            raise

        self._transition(WorkflowState.COMPLETED, agent_id=agent_id, signals=len(signals))
        return signals

    async def _poll(self, agent_id: str) -> list[Signal]:
        attempts = self.policy.max_attempts
        for attempt in range(1, attempts + 1):
            snapshot = await self.client.get_agent_state(agent_id)
            if snapshot.completed:
                return [Signal.from_upstream(s) for s in snapshot.signals]
            if self._log is not None:
                self._log.debug(
                    "signals poll agent=%s attempt=%d/%d progress=%s",
                    agent_id,
                    attempt,
                    attempts,
                    snapshot.progress,
                )
            if attempt < attempts:
                await self._sleep(self.policy.delay_sec)
        raise SignalTimeoutError(agent_id, attempts)
