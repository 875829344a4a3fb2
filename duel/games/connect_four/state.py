"""
Connect Four State - Columns, drops and winner detection.

Each column is a tuple of discs from the bottom up. The board is
ROWS x COLUMNS and four in a row (any direction) wins.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ...engine_core.game import Player

ROWS = 6
COLUMNS = 7
CONNECT = 4

DISCS = {Player.FIRST: "X", Player.SECOND: "O", None: "."}
PLAYERS_BY_DISC = {disc: player for player, disc in DISCS.items()}

DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))


@dataclass(frozen=True)
class Drop:
    """Drop a disc into column (0-based, left to right)."""
    column: int

    def __str__(self) -> str:
        return f"col {self.column}"


@dataclass(frozen=True)
class ConnectFourState:
    columns: tuple[tuple[Player, ...], ...] = ((),) * COLUMNS
    to_move: Player = Player.FIRST
    winner: Optional[Player] = None
    rows: int = ROWS

    def at(self, row: int, col: int) -> Optional[Player]:
        """Disc at (row, col), row 0 being the bottom."""
        column = self.columns[col]
        return column[row] if row < len(column) else None

    def height(self, col: int) -> int:
        return len(self.columns[col])

    @property
    def is_full(self) -> bool:
        return all(len(column) >= self.rows for column in self.columns)

    @property
    def discs(self) -> int:
        return sum(len(column) for column in self.columns)

    def grid(self) -> list[str]:
        """Rows as strings, top row first."""
        return [
            "".join(DISCS[self.at(row, col)] for col in range(len(self.columns)))
            for row in reversed(range(self.rows))
        ]

    def __str__(self) -> str:
        return "\n".join(self.grid())


def connects(state: ConnectFourState, row: int, col: int) -> bool:
    """Whether the disc at (row, col) is part of a line of CONNECT."""
    player = state.at(row, col)
    if player is None:
        return False
    width = len(state.columns)
    for dr, dc in DIRECTIONS:
        count = 1
        for sign in (1, -1):
            r, c = row + sign * dr, col + sign * dc
            while 0 <= r < state.rows and 0 <= c < width and state.at(r, c) is player:
                count += 1
                r += sign * dr
                c += sign * dc
        if count >= CONNECT:
            return True
    return False


def find_winner(state: ConnectFourState) -> Optional[Player]:
    """Full scan for a completed line. Used when a state is built from scratch."""
    for col, column in enumerate(state.columns):
        for row in range(len(column)):
            if connects(state, row, col):
                return column[row]
    return None


def from_grid(grid: list[str], to_move: Player | None = None) -> ConnectFourState:
    """
    Build a state from rows given top row first, e.g. "...X...".

    Discs must rest on something; gaps below a disc raise ValueError.
    """
    rows = len(grid)
    width = len(grid[0]) if grid else COLUMNS
    if any(len(line) != width for line in grid):
        raise ValueError("All rows must have the same width")
    columns = []
    for col in range(width):
        cells = [PLAYERS_BY_DISC[line[col]] for line in reversed(grid)]
        stack = tuple(player for player in cells if player is not None)
        if any(player is None for player in cells[:len(stack)]):
            raise ValueError(f"Column {col} has a gap below a disc")
        columns.append(stack)
    if to_move is None:
        firsts = sum(column.count(Player.FIRST) for column in columns)
        seconds = sum(column.count(Player.SECOND) for column in columns)
        to_move = Player.FIRST if firsts <= seconds else Player.SECOND
    state = ConnectFourState(columns=tuple(columns), to_move=to_move, rows=rows)
    winner = find_winner(state)
    if winner is None:
        return state
    return ConnectFourState(columns=state.columns, to_move=to_move, winner=winner, rows=rows)
