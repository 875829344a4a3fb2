"""
Tic-Tac-Toe - Reference game for the engine.

Small enough to search exhaustively, which makes it the standard check
for minimax: perfect play from the empty 3x3 board is always a draw.
"""

from .state import Cell, TicTacToeState, find_winner
from .game import TicTacToe, open_lines, center_control, tictactoe_evaluator

__all__ = [
    "Cell",
    "TicTacToeState",
    "find_winner",
    "TicTacToe",
    "open_lines",
    "center_control",
    "tictactoe_evaluator",
]
