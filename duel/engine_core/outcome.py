"""
Outcome - Result of a position or of a finished contest.

An outcome is either non-terminal, or terminal with one utility per
player. Terminal outcomes are always zero-sum. A contest that ended on a
violation records who forfeited and why.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .game import GameModel, Player, State, check_zero_sum


class ViolationKind(Enum):
    """Contract violations that can end a contest by forfeit."""
    ILLEGAL_ACTION = "illegal_action"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class Outcome:
    """
    Utilities for both players, or non-terminal.

    Use the factories rather than the constructor:
        Outcome.non_terminal()
        Outcome.from_state(game, state)
        Outcome.forfeit(offender, ViolationKind.TIMEOUT)
    """
    first: float | None = None
    second: float | None = None

    # Set only when the contest ended by forfeit
    forfeited_by: Player | None = None
    violation: ViolationKind | None = None

    def __post_init__(self):
        if (self.first is None) != (self.second is None):
            raise ValueError("Outcome needs both utilities or neither")
        if self.first is not None and abs(self.first + self.second) > 1e-9:
            raise ValueError(
                f"Outcome utilities must sum to zero: {self.first} + {self.second}"
            )

    @classmethod
    def non_terminal(cls) -> Outcome:
        return cls()

    @classmethod
    def from_state(cls, game: GameModel, state: State) -> Outcome:
        """Outcome of state according to the game (non-terminal if not over)."""
        if not game.is_terminal(state):
            return cls.non_terminal()
        first, second = check_zero_sum(game, state)
        return cls(first=first, second=second)

    @classmethod
    def forfeit(
        cls,
        offender: Player,
        violation: ViolationKind,
        magnitude: float = 1.0,
    ) -> Outcome:
        """Immediate loss for offender."""
        loss, win = -abs(magnitude), abs(magnitude)
        if offender is Player.FIRST:
            return cls(first=loss, second=win, forfeited_by=offender, violation=violation)
        return cls(first=win, second=loss, forfeited_by=offender, violation=violation)

    @property
    def is_terminal(self) -> bool:
        return self.first is not None

    @property
    def is_forfeit(self) -> bool:
        return self.forfeited_by is not None

    def utility(self, player: Player) -> float:
        if not self.is_terminal:
            raise ValueError("Non-terminal outcome has no utilities")
        return self.first if player is Player.FIRST else self.second

    @property
    def winner(self) -> Player | None:
        """Player with the positive utility, None for draws and non-terminal."""
        if not self.is_terminal or self.first == self.second:
            return None
        return Player.FIRST if self.first > self.second else Player.SECOND

    @property
    def is_draw(self) -> bool:
        return self.is_terminal and self.first == self.second

    def __str__(self) -> str:
        if not self.is_terminal:
            return "non-terminal"
        if self.is_forfeit:
            return f"{self.forfeited_by.name} forfeits ({self.violation.value})"
        if self.winner is None:
            return f"draw ({self.first:g}/{self.second:g})"
        return f"{self.winner.name} wins ({self.first:g}/{self.second:g})"
