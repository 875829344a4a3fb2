"""
Counting Game rules.

With increments 1..k the mover wins by leaving a total whose distance to
the target is a multiple of k + 1. From 0 with target 21 and increments
1-3, the first player wins by opening with 1.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ...engine_core.game import Player
from ...errors import IllegalAction


@dataclass(frozen=True)
class Add:
    """Add amount to the total."""
    amount: int

    def __str__(self) -> str:
        return f"+{self.amount}"


@dataclass(frozen=True)
class CountingState:
    total: int = 0
    to_move: Player = Player.FIRST
    winner: Optional[Player] = None

    def __str__(self) -> str:
        return f"total={self.total} to_move={self.to_move.name}"


class CountingGame:
    """Game model for the counting race."""

    def __init__(self, target: int = 21, increments: Sequence[int] = (1, 2, 3)):
        if target < 1:
            raise ValueError("target must be >= 1")
        if not increments or any(step < 1 for step in increments):
            raise ValueError("increments must be positive")
        self.target = target
        self.increments = tuple(increments)
        self.name = f"counting-{target}"

    def initial_state(self) -> CountingState:
        return CountingState()

    def current_player(self, state: CountingState) -> Player:
        return state.to_move

    def legal_actions(self, state: CountingState) -> list[Add]:
        if self.is_terminal(state):
            return []
        return [Add(step) for step in self.increments]

    def apply(self, state: CountingState, action: Add) -> CountingState:
        if self.is_terminal(state):
            raise IllegalAction(action, message="Game is over - no actions allowed")
        if not isinstance(action, Add) or action.amount not in self.increments:
            raise IllegalAction(action, message=f"Allowed increments are {self.increments}")
        total = state.total + action.amount
        return CountingState(
            total=total,
            to_move=state.to_move.opponent,
            winner=state.to_move if total >= self.target else None,
        )

    def is_terminal(self, state: CountingState) -> bool:
        return state.winner is not None

    def utility(self, state: CountingState, player: Player) -> float:
        if not self.is_terminal(state):
            raise ValueError("utility() is only defined for terminal states")
        return 1.0 if state.winner is player else -1.0

    def winning_increment(self, state: CountingState) -> Optional[int]:
        """The increment that puts the mover in a won position, if there is one."""
        period = max(self.increments) + 1
        for step in self.increments:
            if (self.target - state.total - step) % period == 0:
                return step
        return None

    # Codec (see duel.records)

    def encode_state(self, state: CountingState) -> dict[str, Any]:
        return {
            "total": state.total,
            "to_move": state.to_move.name,
            "winner": state.winner.name if state.winner else None,
        }

    def decode_state(self, data: dict[str, Any]) -> CountingState:
        winner = data.get("winner")
        return CountingState(
            total=data["total"],
            to_move=Player[data["to_move"]],
            winner=Player[winner] if winner else None,
        )

    def encode_action(self, action: Add) -> int:
        return action.amount

    def decode_action(self, data: int) -> Add:
        return Add(int(data))
