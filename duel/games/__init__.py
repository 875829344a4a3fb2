"""
Games module - Reference game models.

Each game has its own subpackage with its state types, the game model
(rules plus JSON codec) and, where search needs one, a heuristic.
"""

from .connect_four import ConnectFour
from .counting import CountingGame
from .tictactoe import TicTacToe

__all__ = ["ConnectFour", "CountingGame", "TicTacToe"]
