"""
Engine Core - Game-agnostic abstractions for two-player zero-sum games.

The core defines:
1. The GameModel contract (state, action, player, utility)
2. Outcomes (terminal utilities, forfeits)
3. History (append-only record of a contest)
4. Perft (tree node counting, for checking move generation)
"""

from .game import Player, GameModel, State, Action, check_zero_sum, game_name
from .outcome import Outcome, ViolationKind
from .history import History, Transition
from .perft import perft, PerftResult

__all__ = [
    "Player",
    "GameModel",
    "State",
    "Action",
    "check_zero_sum",
    "game_name",
    "Outcome",
    "ViolationKind",
    "History",
    "Transition",
    "perft",
    "PerftResult",
]
