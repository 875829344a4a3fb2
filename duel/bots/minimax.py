"""
Minimax Agent - Depth and time bounded adversarial search.

Standard minimax with alpha-beta pruning, run as iterative deepening:

1. Search the whole tree to depth 1, then 2, ... up to max_depth
2. After each completed depth, remember its best action
3. Poll the deadline at every node expansion
4. When the deadline passes, drop the unfinished depth and return the
   best action of the deepest completed one

An iteration that runs into the interpreter's recursion limit is dropped
the same way, and deepening stops there.

Values are always from the root mover's perspective: nodes where the root
mover is to move maximize, every other node minimizes. Turns don't have to
alternate.

Leaves:
- terminal: game.utility(state, root_player)
- depth limit on a non-terminal state: evaluator.evaluate(state, root_player)

With order_moves, interior nodes try their children best-first according
to the evaluator. Root actions keep the game's order, so the tie-break
between equal root actions does not depend on the heuristic.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import timedelta
import logging
import math
import time
from typing import TYPE_CHECKING, Sequence

from ..engine_core.game import Action, GameModel, Player, State, game_name
from ..errors import GameModelError
from ..session.config import TieBreak
from .evaluator import Evaluator, ZeroEvaluator
from .policy import legal_or_raise

if TYPE_CHECKING:
    from ..session.config import ContestConfig

logger = logging.getLogger(__name__)


class _DeadlineReached(Exception):
    """Unwinds an in-progress search iteration."""


@dataclass
class SearchReport:
    """
    Summary of the last decide() call.

    For debugging and tests; nothing in here feeds into the next search.
    """
    action: Action
    value: float | None  # None if no depth completed
    depth_completed: int
    nodes: int
    elapsed: float
    timed_out: bool
    exhaustive: bool  # Whole tree searched without hitting the depth limit
    stack_limited: bool = False  # Deepening stopped at the recursion limit


class MinimaxAgent:
    """
    Alpha-beta minimax agent.

    Usage:
        agent = MinimaxAgent(game, max_depth=9)
        action = agent.decide(state, timedelta(seconds=1))

        agent.last_report.depth_completed  # how deep it got
    """

    def __init__(
        self,
        game: GameModel,
        max_depth: int,
        evaluator: Evaluator | None = None,
        tie_break: TieBreak = TieBreak.FIRST,
        budget_fraction: float = 0.9,
        order_moves: bool = False,
        name: str | None = None,
    ):
        if max_depth < 1:
            raise ValueError("max_depth must be >= 1")
        if not 0 < budget_fraction <= 1:
            raise ValueError("budget_fraction must be in (0, 1]")
        self.game = game
        self.max_depth = max_depth
        self.evaluator = evaluator or ZeroEvaluator()
        self.tie_break = TieBreak(tie_break)
        self.budget_fraction = budget_fraction
        self.order_moves = order_moves
        self.name = name or f"minimax(depth={max_depth})"
        self.last_report: SearchReport | None = None

    @classmethod
    def from_config(
        cls,
        game: GameModel,
        config: ContestConfig,
        evaluator: Evaluator | None = None,
        **kwargs,
    ) -> MinimaxAgent:
        """Build an agent from a contest config's depth and tie-break."""
        if config.max_search_depth is None:
            raise ValueError("ContestConfig.max_search_depth is required for MinimaxAgent")
        return cls(
            game,
            max_depth=config.max_search_depth,
            evaluator=evaluator,
            tie_break=config.tie_break,
            **kwargs,
        )

    def decide(self, state: State, time_budget: timedelta) -> Action:
        """Pick an action for the player to move in state."""
        start = time.perf_counter()
        deadline = start + time_budget.total_seconds() * self.budget_fraction

        actions = self._ordered(legal_or_raise(self.game, state))
        root_player = self.game.current_player(state)

        search = _Search(self.game, self.evaluator, root_player, deadline, self.order_moves)
        best_action = actions[0]
        best_value: float | None = None
        depth_completed = 0
        exhaustive = False
        timed_out = False
        stack_limited = False

        for depth in range(1, self.max_depth + 1):
            search.hit_depth_limit = False
            try:
                action, value = search.root(state, actions, depth)
            except _DeadlineReached:
                timed_out = True
                break
            except RecursionError:
                stack_limited = True
                logger.warning(
                    "%s hit the recursion limit at depth %d; keeping depth %d",
                    self.name, depth, depth_completed,
                )
                break
            best_action, best_value, depth_completed = action, value, depth
            if not search.hit_depth_limit:
                exhaustive = True
                break

        self.last_report = SearchReport(
            action=best_action,
            value=best_value,
            depth_completed=depth_completed,
            nodes=search.nodes,
            elapsed=time.perf_counter() - start,
            timed_out=timed_out,
            exhaustive=exhaustive,
            stack_limited=stack_limited,
        )
        logger.debug(
            "%s chose %r: value=%s depth=%d nodes=%d timed_out=%s",
            self.name, best_action, best_value, depth_completed, search.nodes, timed_out,
        )
        return best_action

    def _ordered(self, actions: Sequence[Action]) -> list[Action]:
        # Strict improvement keeps the first of equal actions, so LAST
        # is searched in reverse.
        ordered = list(actions)
        if self.tie_break is TieBreak.LAST:
            ordered.reverse()
        return ordered


class _Search:
    """
    State of one decide() call. Discarded when the call returns.
    """

    def __init__(
        self,
        game: GameModel,
        evaluator: Evaluator,
        root_player: Player,
        deadline: float,
        order_moves: bool = False,
    ):
        self.game = game
        self.evaluator = evaluator
        self.root_player = root_player
        self.deadline = deadline
        self.order_moves = order_moves
        self.nodes = 0
        self.hit_depth_limit = False

    def root(self, state: State, actions: list[Action], depth: int) -> tuple[Action, float]:
        """Search every root action to depth; return the best and its value."""
        self._expand()
        alpha, beta = -math.inf, math.inf
        best_action, best_value = actions[0], -math.inf
        for action in actions:
            child = self.game.apply(state, action)
            value = self.value(child, depth - 1, alpha, beta)
            if value > best_value:
                best_action, best_value = action, value
            alpha = max(alpha, best_value)
        return best_action, best_value

    def value(self, state: State, depth: int, alpha: float, beta: float) -> float:
        game = self.game
        if game.is_terminal(state):
            return game.utility(state, self.root_player)
        if depth == 0:
            self.hit_depth_limit = True
            return self.evaluator.evaluate(state, self.root_player)

        self._expand()
        maximizing = game.current_player(state) == self.root_player
        children = self._children(state, maximizing)
        if maximizing:
            best = -math.inf
            for child in children:
                best = max(best, self.value(child, depth - 1, alpha, beta))
                alpha = max(alpha, best)
                if alpha >= beta:
                    break
        else:
            best = math.inf
            for child in children:
                best = min(best, self.value(child, depth - 1, alpha, beta))
                beta = min(beta, best)
                if beta <= alpha:
                    break
        return best

    def _children(self, state: State, maximizing: bool) -> list[State]:
        actions = self.game.legal_actions(state)
        if not actions:
            raise GameModelError(
                f"{game_name(self.game)} has no legal actions in a non-terminal state"
            )
        children = [self.game.apply(state, action) for action in actions]
        if not self.order_moves:
            return children
        # sorted() is stable: equally scored children keep the game's order
        return sorted(children, key=self._score, reverse=maximizing)

    def _score(self, state: State) -> float:
        if self.game.is_terminal(state):
            return self.game.utility(state, self.root_player)
        return self.evaluator.evaluate(state, self.root_player)

    def _expand(self):
        self.nodes += 1
        if time.perf_counter() >= self.deadline:
            raise _DeadlineReached()
