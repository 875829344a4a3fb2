"""
Perft - Count the leaf paths of a game tree.

Used to check move generation: a game whose legal_actions/apply are wrong
produces the wrong node counts. Terminal positions reached before the
requested depth count as one leaf.

Known values (tic-tac-toe from the empty board):
    depth 1 -> 9, depth 2 -> 72, depth 3 -> 504, depth 9 -> 255168
"""

from __future__ import annotations
from dataclasses import dataclass
import time

from .game import GameModel, State


@dataclass(frozen=True)
class PerftResult:
    depth: int
    nodes: int
    elapsed: float  # seconds

    @property
    def nodes_per_second(self) -> float:
        if self.elapsed <= 0:
            return float("inf")
        return self.nodes / self.elapsed

    def format_rate(self) -> str:
        """Human-readable throughput, e.g. '12.50 Kn/s'."""
        rate = self.nodes_per_second
        if rate == float("inf"):
            return "inf n/s"
        for unit in ("n/s", "Kn/s", "Mn/s", "Gn/s"):
            if rate < 1000.0:
                return f"{rate:.2f} {unit}"
            rate /= 1000.0
        return f"{rate:.2f} Tn/s"


def perft(
    game: GameModel,
    depth: int,
    state: State | None = None,
    cache_depth: int = 0,
) -> PerftResult:
    """
    Count leaf paths of length depth from state (default: initial state).

    cache_depth enables a transposition cache for the first cache_depth
    plies below the root. States must be hashable to use it.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if state is None:
        state = game.initial_state()

    start = time.perf_counter()
    if depth == 0:
        nodes = 1
    else:
        cache: dict[tuple[State, int], int] = {}
        nodes = _count(game, state, depth, cache_depth, cache)
    return PerftResult(depth=depth, nodes=nodes, elapsed=time.perf_counter() - start)


def _count(
    game: GameModel,
    state: State,
    depth: int,
    cache_depth: int,
    cache: dict[tuple[State, int], int],
) -> int:
    if game.is_terminal(state):
        return 1
    actions = game.legal_actions(state)
    if depth == 1:
        return len(actions)

    nodes = 0
    for action in actions:
        child = game.apply(state, action)
        if cache_depth > 0:
            key = (child, depth - 1)
            cached = cache.get(key)
            if cached is None:
                cached = _count(game, child, depth - 1, cache_depth - 1, cache)
                cache[key] = cached
            nodes += cached
        else:
            nodes += _count(game, child, depth - 1, 0, cache)
    return nodes
