"""
Agent Policy - Interface for agent decision-making.

An Agent takes a state and a time budget and returns an action that must
be legal in that state. Agents are polymorphic over this one operation;
there is no shared base class.

Simple agents live here:
- RandomAgent: uniform choice (baseline)
- FirstLegalAgent: first enumerated action (deterministic baseline)
- ScriptedAgent: plays a fixed sequence of actions
- FunctionAgent: adapts a plain callable
- InteractiveAgent: asks a human through text streams
"""

from __future__ import annotations
from datetime import timedelta
import random
import sys
from typing import Any, Callable, Iterable, Protocol, Sequence, TextIO, runtime_checkable

from ..engine_core.game import Action, GameModel, State, game_name
from ..errors import GameAlreadyOver, GameModelError


@runtime_checkable
class Agent(Protocol):
    """
    Decision contract for a player strategy.

    decide() must return a member of legal_actions(state) and should return
    within time_budget. It must never block indefinitely.
    """

    def decide(self, state: State, time_budget: timedelta) -> Action:
        ...


def agent_name(agent: Any) -> str:
    """Get an agent's name/identifier."""
    return getattr(agent, "name", None) or agent.__class__.__name__


def legal_or_raise(game: GameModel, state: State) -> Sequence[Action]:
    """
    Legal actions for state.

    GameAlreadyOver if the game is finished; GameModelError if the game
    is not finished but offers no actions.
    """
    if game.is_terminal(state):
        raise GameAlreadyOver("decide() called on a terminal state")
    legal = game.legal_actions(state)
    if not legal:
        raise GameModelError(f"{game_name(game)} has no legal actions in a non-terminal state")
    return legal


class RandomAgent:
    """
    Random agent - selects actions uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    """

    def __init__(self, game: GameModel, seed: int | None = None, name: str | None = None):
        self.game = game
        self.rng = random.Random(seed)
        self.name = name or "random"

    def decide(self, state: State, time_budget: timedelta) -> Action:
        legal = legal_or_raise(self.game, state)
        return self.rng.choice(list(legal))


class FirstLegalAgent:
    """
    First-legal agent - always selects the first enumerated legal action.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def __init__(self, game: GameModel, name: str | None = None):
        self.game = game
        self.name = name or "first_legal"

    def decide(self, state: State, time_budget: timedelta) -> Action:
        return next(iter(legal_or_raise(self.game, state)))


class ScriptedAgent:
    """
    Plays a fixed sequence of actions, one per call.

    The script is not checked against the rules; the contest runner does
    that. Raises ValueError once the script runs out.
    """

    def __init__(self, game: GameModel, actions: Iterable[Action], name: str | None = None):
        self.game = game
        self.script = list(actions)
        self.name = name or "scripted"
        self._position = 0

    def decide(self, state: State, time_budget: timedelta) -> Action:
        if self.game.is_terminal(state):
            raise GameAlreadyOver("decide() called on a terminal state")
        if self._position >= len(self.script):
            raise ValueError(f"Script exhausted after {len(self.script)} actions")
        action = self.script[self._position]
        self._position += 1
        return action


class FunctionAgent:
    """Adapts a callable ``fn(state) -> action`` to the Agent contract."""

    def __init__(self, fn: Callable[[State], Action], name: str | None = None):
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "function")

    def decide(self, state: State, time_budget: timedelta) -> Action:
        return self.fn(state)


class InteractiveAgent:
    """
    Human player over text streams.

    Prints the state and the numbered legal actions, then reads an index.
    Invalid input is re-prompted. End of input raises EOFError.
    """

    def __init__(
        self,
        game: GameModel,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
        render: Callable[[State], str] = str,
        name: str | None = None,
    ):
        self.game = game
        self.input_stream = input_stream or sys.stdin
        self.output_stream = output_stream or sys.stdout
        self.render = render
        self.name = name or "human"

    def decide(self, state: State, time_budget: timedelta) -> Action:
        legal = list(legal_or_raise(self.game, state))
        self._write(self.render(state))
        self._write("Select an action. The following moves are available:")
        for i, action in enumerate(legal):
            self._write(f"({i}): {action}")

        while True:
            line = self.input_stream.readline()
            if not line:
                raise EOFError("Input closed before an action was chosen")
            try:
                index = int(line.strip())
            except ValueError:
                index = -1
            if 0 <= index < len(legal):
                return legal[index]
            self._write(f"Enter a valid index between 0 and {len(legal) - 1}.")

    def _write(self, text: str):
        self.output_stream.write(text + "\n")
        self.output_stream.flush()
