"""
Connect Four - Reference game too large to search exhaustively.

Used to exercise depth limits, heuristics and move deadlines.
"""

from .state import ConnectFourState, Drop, find_winner, from_grid
from .game import ConnectFour, threats, center_discs, connect_four_evaluator

__all__ = [
    "ConnectFourState",
    "Drop",
    "find_winner",
    "from_grid",
    "ConnectFour",
    "threats",
    "center_discs",
    "connect_four_evaluator",
]
