"""
History - Append-only record of a played contest.

Every applied action is recorded as a Transition (state before, action,
state after). Entries are never edited or removed; the contest runner owns
the history while the contest runs and hands it to the caller afterwards.

Replaying the recorded actions from the initial state through the game
model must reproduce every recorded state.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator

from ..errors import HistoryMismatch
from .game import Action, GameModel, Player, State


@dataclass(frozen=True)
class Transition:
    """One applied action."""
    ply: int  # 0-based index from contest start
    player: Player
    before: State
    action: Action
    after: State
    elapsed: float = 0.0  # Seconds the agent spent deciding


class History:
    """
    Ordered record of transitions from an initial state.

    Usage:
        history = History(initial_state, agent_a="minimax", agent_b="random")
        history.record(Player.FIRST, action, new_state, elapsed=0.02)

        for transition in history:
            ...
        history.replay(game)  # raises HistoryMismatch on divergence
    """

    def __init__(self, initial_state: State, agent_a: str = "agent_a", agent_b: str = "agent_b"):
        self._initial_state = initial_state
        self.agent_a = agent_a
        self.agent_b = agent_b
        self._transitions: list[Transition] = []

    @property
    def initial_state(self) -> State:
        return self._initial_state

    @property
    def transitions(self) -> tuple[Transition, ...]:
        return tuple(self._transitions)

    @property
    def final_state(self) -> State:
        """State after the last transition (the initial state if empty)."""
        if not self._transitions:
            return self._initial_state
        return self._transitions[-1].after

    def record(self, player: Player, action: Action, after: State, elapsed: float = 0.0) -> Transition:
        """Append a transition from the current final state."""
        transition = Transition(
            ply=len(self._transitions),
            player=player,
            before=self.final_state,
            action=action,
            after=after,
            elapsed=elapsed,
        )
        self._transitions.append(transition)
        return transition

    def actions(self) -> list[Action]:
        return [t.action for t in self._transitions]

    def states(self) -> list[State]:
        """Initial state followed by every state reached."""
        return [self._initial_state] + [t.after for t in self._transitions]

    def agent_name(self, player: Player) -> str:
        return self.agent_a if player is Player.FIRST else self.agent_b

    def replay(self, game: GameModel) -> list[State]:
        """
        Re-apply every action from the initial state.

        Returns the reproduced states. Raises HistoryMismatch if a
        reproduced state differs from the recorded one.
        """
        state = self._initial_state
        reproduced = [state]
        for transition in self._transitions:
            if transition.before != state:
                raise HistoryMismatch(transition.ply, f"State before ply {transition.ply} does not chain")
            state = game.apply(state, transition.action)
            if state != transition.after:
                raise HistoryMismatch(transition.ply)
            reproduced.append(state)
        return reproduced

    def __len__(self) -> int:
        return len(self._transitions)

    def __getitem__(self, index: int) -> Transition:
        return self._transitions[index]

    def __iter__(self) -> Iterator[Transition]:
        return iter(tuple(self._transitions))

    def __repr__(self) -> str:
        return f"History({self.agent_a} vs {self.agent_b}, {len(self)} plies)"
