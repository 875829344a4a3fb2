"""
Tic-Tac-Toe rules on an N x N board.

A line of N marks wins. Win = +1, loss = -1, draw = 0.
Legal actions are the empty cells in row-major order.
"""

from __future__ import annotations
from typing import Any

from ...bots.evaluator import WeightedEvaluator
from ...engine_core.game import Player
from ...errors import IllegalAction
from .state import Cell, TicTacToeState, lines, lines_through


class TicTacToe:
    """Game model for tic-tac-toe."""

    def __init__(self, size: int = 3):
        if size < 1:
            raise ValueError("Board size must be >= 1")
        self.size = size
        self.name = f"tictactoe-{size}x{size}"

    def initial_state(self) -> TicTacToeState:
        return TicTacToeState.empty(self.size)

    def current_player(self, state: TicTacToeState) -> Player:
        return state.to_move

    def legal_actions(self, state: TicTacToeState) -> list[Cell]:
        if self.is_terminal(state):
            return []
        n = state.size
        return [
            Cell(i // n, i % n)
            for i, mark in enumerate(state.board)
            if mark is None
        ]

    def apply(self, state: TicTacToeState, action: Cell) -> TicTacToeState:
        if self.is_terminal(state):
            raise IllegalAction(action, message="Game is over - no actions allowed")
        if not isinstance(action, Cell):
            raise IllegalAction(action, message=f"Not a cell: {action!r}")
        n = state.size
        if not (0 <= action.row < n and 0 <= action.col < n):
            raise IllegalAction(action, message=f"Cell {action} is off the board")
        index = action.row * n + action.col
        if state.board[index] is not None:
            raise IllegalAction(action, message=f"Cell {action} is occupied")

        board = list(state.board)
        board[index] = state.to_move
        board = tuple(board)

        winner = None
        for line in lines_through(n, index):
            if all(board[i] is state.to_move for i in line):
                winner = state.to_move
                break

        return TicTacToeState(
            size=n,
            board=board,
            to_move=state.to_move.opponent,
            winner=winner,
        )

    def is_terminal(self, state: TicTacToeState) -> bool:
        return state.winner is not None or state.is_full

    def utility(self, state: TicTacToeState, player: Player) -> float:
        if not self.is_terminal(state):
            raise ValueError("utility() is only defined for terminal states")
        if state.winner is None:
            return 0.0
        return 1.0 if state.winner is player else -1.0

    # Codec (see duel.records)

    def encode_state(self, state: TicTacToeState) -> dict[str, Any]:
        return {"rows": state.rows(), "to_move": state.to_move.name}

    def decode_state(self, data: dict[str, Any]) -> TicTacToeState:
        return TicTacToeState.from_rows(data["rows"], to_move=Player[data["to_move"]])

    def encode_action(self, action: Cell) -> list[int]:
        return [action.row, action.col]

    def decode_action(self, data: list[int]) -> Cell:
        row, col = data
        return Cell(row, col)


def open_lines(state: TicTacToeState, player: Player) -> float:
    """Lines still winnable by player minus lines still winnable by the opponent."""
    mine = theirs = 0
    for line in lines(state.size):
        marks = {state.board[i] for i in line} - {None}
        if marks == {player}:
            mine += 1
        elif marks == {player.opponent}:
            theirs += 1
    return float(mine - theirs)


def center_control(state: TicTacToeState, player: Player) -> float:
    if state.size % 2 == 0:
        return 0.0
    mid = state.size // 2
    owner = state.at(mid, mid)
    if owner is None:
        return 0.0
    return 1.0 if owner is player else -1.0


def tictactoe_evaluator(open_lines_weight: float = 0.1, center_weight: float = 0.05) -> WeightedEvaluator:
    """
    Heuristic for depth-limited search.

    Weights are kept well below 1 so no heuristic score outranks a win.
    """
    return WeightedEvaluator(
        features={"open_lines": open_lines, "center": center_control},
        weights={"open_lines": open_lines_weight, "center": center_weight},
    )
