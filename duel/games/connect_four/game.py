"""
Connect Four rules.

Legal actions are the non-full columns, left to right. Win = +1,
loss = -1, a full board with no line is a draw.
"""

from __future__ import annotations
from typing import Any

from ...bots.evaluator import WeightedEvaluator
from ...engine_core.game import Player
from ...errors import IllegalAction
from .state import (
    COLUMNS,
    CONNECT,
    DIRECTIONS,
    ROWS,
    ConnectFourState,
    Drop,
    connects,
    from_grid,
)


class ConnectFour:
    """Game model for connect four."""

    def __init__(self, rows: int = ROWS, columns: int = COLUMNS):
        if rows < 1 or columns < 1:
            raise ValueError("Board must have at least one row and one column")
        self.rows = rows
        self.columns = columns
        self.name = "connect-four" if (rows, columns) == (ROWS, COLUMNS) else f"connect-four-{rows}x{columns}"

    def initial_state(self) -> ConnectFourState:
        return ConnectFourState(columns=((),) * self.columns, rows=self.rows)

    def current_player(self, state: ConnectFourState) -> Player:
        return state.to_move

    def legal_actions(self, state: ConnectFourState) -> list[Drop]:
        if self.is_terminal(state):
            return []
        return [
            Drop(col)
            for col in range(len(state.columns))
            if state.height(col) < state.rows
        ]

    def apply(self, state: ConnectFourState, action: Drop) -> ConnectFourState:
        if self.is_terminal(state):
            raise IllegalAction(action, message="Game is over - no actions allowed")
        if not isinstance(action, Drop):
            raise IllegalAction(action, message=f"Not a drop: {action!r}")
        col = action.column
        if not 0 <= col < len(state.columns):
            raise IllegalAction(action, message=f"Column {col} does not exist")
        row = state.height(col)
        if row >= state.rows:
            raise IllegalAction(action, message=f"Column {col} is full")

        columns = list(state.columns)
        columns[col] = columns[col] + (state.to_move,)
        placed = ConnectFourState(
            columns=tuple(columns),
            to_move=state.to_move.opponent,
            rows=state.rows,
        )
        if not connects(placed, row, col):
            return placed
        return ConnectFourState(
            columns=placed.columns,
            to_move=placed.to_move,
            winner=state.to_move,
            rows=state.rows,
        )

    def is_terminal(self, state: ConnectFourState) -> bool:
        return state.winner is not None or state.is_full

    def utility(self, state: ConnectFourState, player: Player) -> float:
        if not self.is_terminal(state):
            raise ValueError("utility() is only defined for terminal states")
        if state.winner is None:
            return 0.0
        return 1.0 if state.winner is player else -1.0

    # Codec (see duel.records)

    def encode_state(self, state: ConnectFourState) -> dict[str, Any]:
        return {"grid": state.grid(), "to_move": state.to_move.name}

    def decode_state(self, data: dict[str, Any]) -> ConnectFourState:
        return from_grid(data["grid"], to_move=Player[data["to_move"]])

    def encode_action(self, action: Drop) -> int:
        return action.column

    def decode_action(self, data: int) -> Drop:
        return Drop(int(data))


def windows(state: ConnectFourState):
    """Every run of CONNECT cells on the board, as lists of discs."""
    width = len(state.columns)
    for row in range(state.rows):
        for col in range(width):
            for dr, dc in DIRECTIONS:
                end_row = row + dr * (CONNECT - 1)
                end_col = col + dc * (CONNECT - 1)
                if not (0 <= end_row < state.rows and 0 <= end_col < width):
                    continue
                yield [state.at(row + dr * k, col + dc * k) for k in range(CONNECT)]


def threats(state: ConnectFourState, player: Player) -> float:
    """
    Score open windows: a window holding only one side's discs counts
    for that side, weighted by how many discs it already has.
    """
    score = 0
    for window in windows(state):
        mine = window.count(player)
        theirs = window.count(player.opponent)
        if mine and not theirs:
            score += mine * mine
        elif theirs and not mine:
            score -= theirs * theirs
    return float(score)


def center_discs(state: ConnectFourState, player: Player) -> float:
    column = state.columns[len(state.columns) // 2]
    return float(column.count(player) - column.count(player.opponent))


def connect_four_evaluator(threat_weight: float = 0.001, center_weight: float = 0.01) -> WeightedEvaluator:
    """
    Heuristic for depth-limited search.

    The weighted sum stays inside (-1, 1) on a standard board.
    """
    return WeightedEvaluator(
        features={"threats": threats, "center": center_discs},
        weights={"threats": threat_weight, "center": center_weight},
    )
