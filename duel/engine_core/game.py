"""
Game Model - The rules contract every game must satisfy.

A game is any object with these six operations. There is no base class to
inherit from; games implement the protocol structurally.

Design principles:
- States are immutable values: apply() returns a new state
- legal_actions() is the single source of truth for legality
- utility() is zero-sum across the two players
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Protocol, Sequence, runtime_checkable

from ..errors import GameModelError


class Player(Enum):
    """The two sides of a contest."""
    FIRST = 0
    SECOND = 1

    @property
    def opponent(self) -> Player:
        return Player.SECOND if self is Player.FIRST else Player.FIRST


# States and actions are opaque to the engine
State = Any
Action = Any


@runtime_checkable
class GameModel(Protocol):
    """
    Rules of a deterministic, perfect-information, zero-sum two-player game.
    """

    def initial_state(self) -> State:
        """State the game starts from."""
        ...

    def current_player(self, state: State) -> Player:
        """Player to move in state."""
        ...

    def legal_actions(self, state: State) -> Sequence[Action]:
        """
        Actions legal in state.

        Must be non-empty unless is_terminal(state). The order must be
        stable for the same state; search tie-breaks depend on it.
        """
        ...

    def apply(self, state: State, action: Action) -> State:
        """
        Return the state after action.

        Only defined for members of legal_actions(state). Implementations
        may raise IllegalAction otherwise.
        """
        ...

    def is_terminal(self, state: State) -> bool:
        """Whether the game is over."""
        ...

    def utility(self, state: State, player: Player) -> float:
        """Payoff for player in a terminal state."""
        ...


def game_name(game: GameModel) -> str:
    """Display name for a game (its ``name`` attribute or class name)."""
    return getattr(game, "name", None) or game.__class__.__name__


def check_zero_sum(game: GameModel, state: State) -> tuple[float, float]:
    """
    Return (first, second) utilities of a terminal state.

    Raises GameModelError if they don't sum to zero.
    """
    first = game.utility(state, Player.FIRST)
    second = game.utility(state, Player.SECOND)
    if abs(first + second) > 1e-9:
        raise GameModelError(
            f"{game_name(game)} utilities are not zero-sum: {first} + {second}"
        )
    return first, second
