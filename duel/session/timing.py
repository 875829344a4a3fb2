"""
Timing - Run one decide() call with a hard wait limit.

Each decision runs on its own daemon thread. The caller waits at most
budget + tolerance; after that the thread is abandoned, not killed.
Cancellation is advisory: agents are expected to poll their own deadline
(MinimaxAgent does so at every node). A daemon thread never keeps the
interpreter alive, so an agent that never returns costs one idle thread.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import timedelta
import threading
import time
from typing import Any

from ..engine_core.game import Action, State


@dataclass
class TimedDecision:
    """
    What happened during one decide() call.

    Exactly one of these holds:
    - finished and error is None: action is the agent's answer
    - finished and error is set: decide() raised
    - not finished: the wait limit passed first
    """
    finished: bool
    elapsed: float
    action: Action | None = None
    error: Exception | None = None

    def exceeded(self, limit: timedelta) -> bool:
        return not self.finished or self.elapsed > limit.total_seconds()


class _DecisionThread(threading.Thread):
    def __init__(self, agent: Any, state: State, budget: timedelta, name: str):
        super().__init__(name=name, daemon=True)
        self.agent = agent
        self.state = state
        self.budget = budget
        self.action: Action | None = None
        self.error: Exception | None = None
        self.finished_at: float | None = None

    def run(self):
        try:
            self.action = self.agent.decide(self.state, self.budget)
        except Exception as exc:  # handed back to the runner
            self.error = exc
        finally:
            self.finished_at = time.perf_counter()


def timed_decide(
    agent: Any,
    state: State,
    budget: timedelta,
    limit: timedelta,
    thread_name: str = "decide",
) -> TimedDecision:
    """
    Call agent.decide(state, budget), waiting at most limit.

    Never raises for agent errors; they are returned in TimedDecision.error.
    """
    worker = _DecisionThread(agent, state, budget, thread_name)
    start = time.perf_counter()
    worker.start()
    worker.join(timeout=limit.total_seconds())

    if worker.is_alive():
        return TimedDecision(finished=False, elapsed=time.perf_counter() - start)

    elapsed = (worker.finished_at or time.perf_counter()) - start
    return TimedDecision(
        finished=True,
        elapsed=elapsed,
        action=worker.action,
        error=worker.error,
    )
