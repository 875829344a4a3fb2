"""
Evaluators - Score non-terminal positions for search.

Minimax calls an evaluator when it reaches its depth limit on a position
that is not terminal. The evaluator is a swappable strategy object, so a
stronger backend only has to replace this one collaborator.

Scores are from the given player's perspective:
positive = good for player, negative = bad.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Mapping, Protocol, runtime_checkable

from ..engine_core.game import Player, State


@runtime_checkable
class Evaluator(Protocol):
    """Heuristic value of a state for a player."""

    def evaluate(self, state: State, player: Player) -> float:
        ...


class ZeroEvaluator:
    """Neutral evaluator: every non-terminal position is worth 0."""

    def evaluate(self, state: State, player: Player) -> float:
        return 0.0


class FunctionEvaluator:
    """Wraps a plain function ``fn(state, player) -> float``."""

    def __init__(self, fn: Callable[[State, Player], float]):
        self.fn = fn

    def evaluate(self, state: State, player: Player) -> float:
        return float(self.fn(state, player))


Feature = Callable[[State, Player], float]


@dataclass
class Evaluation:
    """
    Result of a weighted evaluation.
    """
    total: float
    breakdown: dict[str, float] = field(default_factory=dict)


class WeightedEvaluator:
    """
    Weighted sum of named features.

    Each feature is a function (state, player) -> float. Weights can be
    changed to create different play styles without touching the features.

    Usage:
        evaluator = WeightedEvaluator(
            features={"open_lines": open_lines, "center": center_control},
            weights={"open_lines": 1.0, "center": 0.5},
        )
        evaluator.evaluate(state, Player.FIRST)
    """

    def __init__(
        self,
        features: Mapping[str, Feature],
        weights: Mapping[str, float] | None = None,
    ):
        self.features = dict(features)
        self.weights = {name: 1.0 for name in self.features}
        if weights:
            unknown = set(weights) - set(self.features)
            if unknown:
                raise ValueError(f"Weights for unknown features: {sorted(unknown)}")
            self.weights.update(weights)

    def explain(self, state: State, player: Player) -> Evaluation:
        """Evaluate and return the per-feature contributions."""
        breakdown = {
            name: self.weights[name] * float(feature(state, player))
            for name, feature in self.features.items()
        }
        return Evaluation(total=sum(breakdown.values()), breakdown=breakdown)

    def evaluate(self, state: State, player: Player) -> float:
        return self.explain(state, player).total
