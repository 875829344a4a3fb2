"""
Pydantic models for persisted contests.

A record holds the encoded initial state, every transition (encoded
action and resulting state) and, when the contest finished, its outcome.
States and actions are opaque JSON values produced by a game's codec.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

FORMAT_VERSION = 1


class TransitionRecord(BaseModel):
    """One applied action."""
    ply: int = Field(..., ge=0)
    player: str = Field(..., description="FIRST or SECOND")
    action: Any
    after: Any
    elapsed: float = Field(0.0, ge=0, description="Seconds spent deciding")


class OutcomeRecord(BaseModel):
    """Final utilities, plus forfeit details when the contest ended on a violation."""
    first: float
    second: float
    forfeited_by: Optional[str] = None
    violation: Optional[str] = None


class HistoryRecord(BaseModel):
    """A complete contest as written to disk."""
    format_version: int = FORMAT_VERSION
    game: str
    agent_a: str = "agent_a"
    agent_b: str = "agent_b"
    initial_state: Any
    transitions: list[TransitionRecord] = Field(default_factory=list)
    outcome: Optional[OutcomeRecord] = None
