"""
History Serializer - Save and load contest histories as JSON.

Loading replays every recorded action through the game model, so a
record that was edited (or written by a different rule set) is rejected
with HistoryMismatch instead of being trusted.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from pydantic import ValidationError

from ..engine_core.game import Action, GameModel, Player, State, game_name
from ..engine_core.history import History
from ..engine_core.outcome import Outcome, ViolationKind
from ..errors import GameModelError, HistoryMismatch
from .schemas import FORMAT_VERSION, HistoryRecord, OutcomeRecord, TransitionRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class StateCodec(Protocol):
    """Converts a game's states and actions to and from JSON values."""

    def encode_state(self, state: State) -> Any: ...

    def decode_state(self, data: Any) -> State: ...

    def encode_action(self, action: Action) -> Any: ...

    def decode_action(self, data: Any) -> Action: ...


class HistorySerializer:
    """
    Converts histories of one game to records and back.

    Usage:
        serializer = HistorySerializer(TicTacToe())
        serializer.save(history, "game.json", outcome)
        history, outcome = serializer.load("game.json")

    The codec defaults to the game itself; all bundled games implement it.
    """

    def __init__(self, game: GameModel, codec: Optional[StateCodec] = None):
        codec = codec if codec is not None else game
        if not isinstance(codec, StateCodec):
            raise TypeError(f"{type(codec).__name__} does not implement the state codec")
        self.game = game
        self.codec = codec

    def to_record(self, history: History, outcome: Optional[Outcome] = None) -> HistoryRecord:
        return HistoryRecord(
            game=game_name(self.game),
            agent_a=history.agent_a,
            agent_b=history.agent_b,
            initial_state=self.codec.encode_state(history.initial_state),
            transitions=[
                TransitionRecord(
                    ply=t.ply,
                    player=t.player.name,
                    action=self.codec.encode_action(t.action),
                    after=self.codec.encode_state(t.after),
                    elapsed=t.elapsed,
                )
                for t in history
            ],
            outcome=_outcome_record(outcome),
        )

    def from_record(self, record: HistoryRecord) -> tuple[History, Optional[Outcome]]:
        """
        Rebuild a history by replaying the recorded actions.

        Raises HistoryMismatch if a replayed state, player or ply differs
        from what the record says, and GameModelError if a state, action
        or outcome in the record cannot be decoded.
        """
        if record.format_version != FORMAT_VERSION:
            raise GameModelError(f"Unsupported record format version {record.format_version}")
        expected = game_name(self.game)
        if record.game != expected:
            raise GameModelError(f"Record is for game {record.game!r}, not {expected!r}")

        state = self._decode(self.codec.decode_state, record.initial_state, "initial state")
        history = History(state, agent_a=record.agent_a, agent_b=record.agent_b)
        for index, entry in enumerate(record.transitions):
            if entry.ply != index:
                raise HistoryMismatch(index, f"Ply {index} is recorded as ply {entry.ply}")
            player = self.game.current_player(state)
            if entry.player != player.name:
                raise HistoryMismatch(index, f"Ply {index} was played by {player.name}, record says {entry.player}")
            action = self._decode(self.codec.decode_action, entry.action, f"action at ply {index}")
            try:
                state = self.game.apply(state, action)
            except Exception as exc:
                raise HistoryMismatch(index, f"Action at ply {index} cannot be replayed: {exc}") from exc
            if state != self._decode(self.codec.decode_state, entry.after, f"state after ply {index}"):
                raise HistoryMismatch(index)
            history.record(player, action, state, elapsed=entry.elapsed)

        outcome = _outcome_from_record(record.outcome)
        if outcome is not None and not outcome.is_forfeit:
            if outcome != Outcome.from_state(self.game, state):
                raise HistoryMismatch(len(record.transitions), "Recorded outcome does not match the final state")
        logger.debug("Loaded %s record with %d plies", record.game, len(history))
        return history, outcome

    def _decode(self, decode: Any, data: Any, what: str) -> Any:
        try:
            return decode(data)
        except Exception as exc:
            raise GameModelError(f"Cannot decode {what}: {exc!r}") from exc

    def dumps(self, history: History, outcome: Optional[Outcome] = None, indent: Optional[int] = 2) -> str:
        return self.to_record(history, outcome).model_dump_json(indent=indent)

    def loads(self, text: str) -> tuple[History, Optional[Outcome]]:
        try:
            record = HistoryRecord.model_validate_json(text)
        except ValidationError as exc:
            raise GameModelError(f"Malformed history record: {exc}") from exc
        return self.from_record(record)

    def save(self, history: History, path: str | Path, outcome: Optional[Outcome] = None) -> Path:
        path = Path(path)
        path.write_text(self.dumps(history, outcome), encoding="utf-8")
        logger.info("Saved %d plies to %s", len(history), path)
        return path

    def load(self, path: str | Path) -> tuple[History, Optional[Outcome]]:
        return self.loads(Path(path).read_text(encoding="utf-8"))


def _outcome_record(outcome: Optional[Outcome]) -> Optional[OutcomeRecord]:
    if outcome is None or not outcome.is_terminal:
        return None
    return OutcomeRecord(
        first=outcome.first,
        second=outcome.second,
        forfeited_by=outcome.forfeited_by.name if outcome.forfeited_by else None,
        violation=outcome.violation.value if outcome.violation else None,
    )


def _outcome_from_record(record: Optional[OutcomeRecord]) -> Optional[Outcome]:
    if record is None:
        return None
    try:
        return Outcome(
            first=record.first,
            second=record.second,
            forfeited_by=Player[record.forfeited_by] if record.forfeited_by else None,
            violation=ViolationKind(record.violation) if record.violation else None,
        )
    except (KeyError, ValueError) as exc:
        raise GameModelError(f"Invalid outcome in record: {exc!r}") from exc
