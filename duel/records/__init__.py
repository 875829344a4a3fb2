"""
Records - Persisted contest histories.
"""

from .schemas import FORMAT_VERSION, HistoryRecord, OutcomeRecord, TransitionRecord
from .serializer import HistorySerializer, StateCodec

__all__ = [
    "FORMAT_VERSION",
    "HistoryRecord",
    "OutcomeRecord",
    "TransitionRecord",
    "HistorySerializer",
    "StateCodec",
]
