"""
Session Module - Runs contests between agents.

A contest is one play-through of a game:
- Created with two agents, a game model and a ContestConfig
- Owns its state and history while it runs
- Hands history and outcome to the caller when it ends

Contests are independent: nothing is shared between two of them.
"""

from .config import ContestConfig, TieBreak, ensure_config
from .timing import TimedDecision, timed_decide
from .contest import Contest, ContestStatus, run

__all__ = [
    "ContestConfig",
    "TieBreak",
    "ensure_config",
    "TimedDecision",
    "timed_decide",
    "Contest",
    "ContestStatus",
    "run",
]
