"""
Tic-Tac-Toe State - Board, cells and winner detection.

The board is an N x N tuple in row-major order. Player.FIRST plays X and
moves first. States are frozen so they can be compared and hashed.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from ...engine_core.game import Player

MARKS = {Player.FIRST: "X", Player.SECOND: "O", None: "."}
PLAYERS_BY_MARK = {mark: player for player, mark in MARKS.items()}


@dataclass(frozen=True)
class Cell:
    """Place a mark at (row, col)."""
    row: int
    col: int

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


@dataclass(frozen=True)
class TicTacToeState:
    size: int
    board: tuple[Optional[Player], ...]
    to_move: Player = Player.FIRST
    winner: Optional[Player] = None

    @classmethod
    def empty(cls, size: int = 3) -> TicTacToeState:
        return cls(size=size, board=(None,) * (size * size))

    @classmethod
    def from_rows(cls, rows: list[str], to_move: Player | None = None) -> TicTacToeState:
        """
        Build a state from strings like ["X.O", ".X.", "..O"].

        The mover defaults to whoever has placed fewer marks (X on ties).
        """
        size = len(rows)
        board = tuple(PLAYERS_BY_MARK[mark] for row in rows for mark in row)
        if len(board) != size * size:
            raise ValueError("Rows must form a square board")
        if to_move is None:
            xs = board.count(Player.FIRST)
            os = board.count(Player.SECOND)
            to_move = Player.FIRST if xs <= os else Player.SECOND
        return cls(size=size, board=board, to_move=to_move, winner=find_winner(size, board))

    def at(self, row: int, col: int) -> Optional[Player]:
        return self.board[row * self.size + col]

    @property
    def is_full(self) -> bool:
        return None not in self.board

    def rows(self) -> list[str]:
        return [
            "".join(MARKS[self.at(row, col)] for col in range(self.size))
            for row in range(self.size)
        ]

    def __str__(self) -> str:
        return "\n".join(self.rows())


@lru_cache(maxsize=None)
def lines(size: int) -> tuple[tuple[int, ...], ...]:
    """Index tuples of every row, column and both diagonals."""
    result = []
    for i in range(size):
        result.append(tuple(i * size + j for j in range(size)))
        result.append(tuple(j * size + i for j in range(size)))
    result.append(tuple(i * size + i for i in range(size)))
    result.append(tuple(i * size + (size - 1 - i) for i in range(size)))
    return tuple(result)


@lru_cache(maxsize=None)
def lines_through(size: int, index: int) -> tuple[tuple[int, ...], ...]:
    return tuple(line for line in lines(size) if index in line)


def find_winner(size: int, board: tuple[Optional[Player], ...]) -> Optional[Player]:
    """Owner of a complete line, if any."""
    for line in lines(size):
        first = board[line[0]]
        if first is not None and all(board[i] is first for i in line):
            return first
    return None
