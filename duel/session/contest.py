"""
Contest - Runs one game between two agents.

The loop:
1. Start from the initial state
2. If the state is terminal, report both utilities and stop
3. Ask the agent to move for an action, bounded by the time budget
4. Check the action is legal
5. Apply it, record the transition, repeat

A timeout or illegal action is a violation. With forfeit_on_violation the
offender loses immediately; otherwise the contest aborts with the
violation as a ContestError. A rejected action never reaches the state or
the history.

The timeline is strictly sequential: only one agent decides at a time and
only the contest touches its state and history. Separate contests share
nothing and may run in parallel threads.
"""

from __future__ import annotations
from enum import Enum
import logging
from typing import Any, Callable, Iterator

from ..engine_core.game import GameModel, Player, State, game_name
from ..engine_core.history import History, Transition
from ..engine_core.outcome import Outcome, ViolationKind
from ..errors import (
    AgentFailure,
    ContestError,
    GameAlreadyOver,
    GameModelError,
    IllegalAction,
    Timeout,
)
from ..bots.policy import agent_name
from .config import ContestConfig, ensure_config
from .timing import timed_decide

logger = logging.getLogger(__name__)


class ContestStatus(Enum):
    """Lifecycle of a contest."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABORTED = "aborted"


class Contest:
    """
    One game between agent_a (Player.FIRST) and agent_b (Player.SECOND).

    Usage:
        contest = Contest(minimax, random_agent, TicTacToe(), config)
        history, outcome = contest.run()

        # Or step by step
        for transition in contest:
            print(transition.player, transition.action)
        contest.outcome
    """

    def __init__(
        self,
        agent_a: Any,
        agent_b: Any,
        game: GameModel,
        config: ContestConfig | dict[str, Any],
        initial_state: State | None = None,
    ):
        self.config = ensure_config(config)
        self.game = game
        self.agents = {Player.FIRST: agent_a, Player.SECOND: agent_b}
        self.status = ContestStatus.NOT_STARTED
        self.state: State | None = None
        self.history: History | None = None
        self.outcome: Outcome | None = None
        self.error: ContestError | None = None
        self._initial_state = initial_state

    def run(self) -> tuple[History, Outcome]:
        """
        Play to the end.

        Returns (history, outcome). Raises ContestError if the contest
        aborts; the error carries the history accumulated so far.
        """
        while self.step() is not None:
            pass
        if self.status is ContestStatus.ABORTED:
            raise self.error
        return self.history, self.outcome

    def step(self) -> Transition | None:
        """
        Play one ply.

        Returns the applied transition, or None once the contest is over.
        """
        if self.status is ContestStatus.NOT_STARTED:
            try:
                self._start()
            except ContestError as exc:
                self._abort(exc)
                raise
        if self.status is not ContestStatus.IN_PROGRESS:
            return None
        try:
            return self._advance()
        except ContestError as exc:
            self._abort(exc)
            raise

    def __iter__(self) -> Iterator[Transition]:
        while True:
            transition = self.step()
            if transition is None:
                return
            yield transition

    @property
    def is_over(self) -> bool:
        return self.status in (ContestStatus.COMPLETED, ContestStatus.ABORTED)

    def _start(self):
        state = self._initial_state
        if state is None:
            state = self._model(self.game.initial_state)
        self.state = state
        self.history = History(
            state,
            agent_a=agent_name(self.agents[Player.FIRST]),
            agent_b=agent_name(self.agents[Player.SECOND]),
        )
        self.status = ContestStatus.IN_PROGRESS
        logger.info(
            "Contest started: %s vs %s (%s, budget %.3fs, forfeit_on_violation=%s)",
            self.history.agent_a,
            self.history.agent_b,
            game_name(self.game),
            self.config.time_budget_per_move.total_seconds(),
            self.config.forfeit_on_violation,
        )

    def _advance(self) -> Transition | None:
        if self._model(self.game.is_terminal, self.state):
            self._finish(self._model(Outcome.from_state, self.game, self.state))
            return None

        player = self._model(self.game.current_player, self.state)
        agent = self.agents[player]
        budget = self.config.time_budget_per_move
        limit = self.config.hard_limit

        decision = timed_decide(
            agent,
            self.state,
            budget,
            limit,
            thread_name=f"decide-{player.name.lower()}-ply{len(self.history)}",
        )

        if decision.finished and decision.error is not None:
            error = decision.error
            if isinstance(error, GameAlreadyOver):
                error.player = player
                raise error
            if isinstance(error, GameModelError):
                raise error
            raise AgentFailure(
                f"Agent {self.history.agent_name(player)} ({player.name}) failed: {error!r}",
                player=player,
            ) from error

        if decision.exceeded(limit):
            elapsed = decision.elapsed if decision.finished else None
            return self._violation(
                ViolationKind.TIMEOUT,
                Timeout(budget, elapsed=elapsed, player=player),
            )

        action = decision.action
        legal = self._model(self.game.legal_actions, self.state)
        if not _is_member(action, legal):
            return self._violation(
                ViolationKind.ILLEGAL_ACTION,
                IllegalAction(action, player=player),
            )

        after = self._model(self.game.apply, self.state, action)
        transition = self.history.record(player, action, after, elapsed=decision.elapsed)
        self.state = after
        logger.debug(
            "Ply %d: %s played %r (%.3fs)",
            transition.ply, player.name, action, decision.elapsed,
        )
        return transition

    def _violation(self, kind: ViolationKind, error: ContestError) -> None:
        logger.warning("Ply %d: %s", len(self.history), error)
        if not self.config.forfeit_on_violation:
            raise error
        self._finish(Outcome.forfeit(error.player, kind, self.config.forfeit_utility))
        return None

    def _finish(self, outcome: Outcome):
        self.outcome = outcome
        self.status = ContestStatus.COMPLETED
        logger.info("Contest finished after %d plies: %s", len(self.history), outcome)

    def _abort(self, error: ContestError):
        error.history = self.history
        self.error = error
        self.status = ContestStatus.ABORTED
        logger.error("Contest aborted: %s", error)

    def _model(self, fn: Callable[..., Any], *args: Any) -> Any:
        """Call into the game model, surfacing its failures as GameModelError."""
        try:
            return fn(*args)
        except GameModelError:
            raise
        except Exception as exc:
            raise GameModelError(
                f"{game_name(self.game)}.{getattr(fn, '__name__', 'call')} failed: {exc!r}"
            ) from exc


def _is_member(action: Any, legal: Any) -> bool:
    # Hashed containers raise TypeError for unhashable values
    try:
        return action in legal
    except TypeError:
        return False


def run(
    agent_a: Any,
    agent_b: Any,
    game: GameModel,
    config: ContestConfig | dict[str, Any],
    initial_state: State | None = None,
) -> tuple[History, Outcome]:
    """
    Play a full contest and return (history, outcome).

    agent_a plays Player.FIRST, agent_b plays Player.SECOND.
    Raises ContestError (with .history) if the contest aborts.
    """
    return Contest(agent_a, agent_b, game, config, initial_state).run()
