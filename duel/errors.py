"""
Errors - Typed failures raised while running a contest.

Kinds:
- IllegalAction: agent returned an action outside the legal set
- Timeout: agent exceeded its time budget
- AgentFailure: the agent's decision call itself raised
- GameAlreadyOver: decide was invoked on a terminal state
- ConfigurationError: invalid contest configuration
- GameModelError: the game model broke its contract

IllegalAction and Timeout may be resolved into a forfeit by the contest
runner (see ContestConfig.forfeit_on_violation). Everything else is fatal.
"""

from __future__ import annotations
from datetime import timedelta
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .engine_core.game import Player
    from .engine_core.history import History


class ContestError(Exception):
    """
    Base class for every failure surfaced by a contest.

    The runner attaches the history accumulated so far before raising,
    so callers can inspect how far the contest got.
    """

    def __init__(
        self,
        message: str,
        player: Player | None = None,
        history: History | None = None,
    ):
        self.player = player
        self.history = history
        super().__init__(message)


class IllegalAction(ContestError):
    """An action that is not in legal_actions(state)."""

    def __init__(
        self,
        action: Any,
        player: Player | None = None,
        history: History | None = None,
        message: str | None = None,
    ):
        self.action = action
        who = f" by {player.name}" if player is not None else ""
        super().__init__(
            message or f"Illegal action{who}: {action!r}",
            player=player,
            history=history,
        )


class Timeout(ContestError):
    """An agent took longer than its budget plus tolerance."""

    def __init__(
        self,
        budget: timedelta,
        elapsed: float | None = None,
        player: Player | None = None,
        history: History | None = None,
    ):
        self.budget = budget
        self.elapsed = elapsed
        who = f"{player.name} " if player is not None else ""
        if elapsed is None:
            detail = "did not return"
        else:
            detail = f"took {elapsed:.3f}s"
        super().__init__(
            f"Agent {who}{detail} (budget {budget.total_seconds():.3f}s)",
            player=player,
            history=history,
        )


class AgentFailure(ContestError):
    """The agent's decide() raised. The original exception is chained."""


class GameAlreadyOver(ContestError):
    """decide() was called on a terminal state."""


class ConfigurationError(ContestError):
    """Raised when a contest configuration is invalid."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            f"Invalid contest configuration: {'; '.join(errors)}"
        )


class GameModelError(ContestError):
    """The game model misbehaved (raised, or broke the zero-sum invariant)."""


class HistoryMismatch(GameModelError):
    """Replaying a history did not reproduce a recorded state."""

    def __init__(self, ply: int, message: str | None = None):
        self.ply = ply
        super().__init__(message or f"Replay diverged from history at ply {ply}")
