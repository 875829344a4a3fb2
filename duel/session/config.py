"""
Contest Configuration - Immutable settings for one contest.

Recognized options:
- time_budget_per_move: wall-clock budget per decision (seconds or timedelta)
- max_search_depth: ply limit for search agents built from the config
- forfeit_on_violation: required; True turns illegal actions and timeouts
  into a loss for the offender, False aborts the contest with a ContestError
- timeout_tolerance: overshoot allowed past the budget before a timeout
- tie_break: which of several equally valued actions search agents pick
- forfeit_utility: magnitude of the forfeit loss/win
"""

from datetime import timedelta
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ConfigurationError


class TieBreak(str, Enum):
    """Which action to keep when several evaluate equal."""
    FIRST = "first"  # First in the game's enumeration order
    LAST = "last"  # Last in the game's enumeration order


DEFAULT_TOLERANCE = timedelta(milliseconds=250)


class ContestConfig(BaseModel):
    """Settings for one contest. Frozen once created."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    time_budget_per_move: timedelta = Field(
        ..., description="Wall-clock budget for each decide() call"
    )
    max_search_depth: Optional[int] = Field(
        None, ge=1, description="Ply limit for search agents"
    )
    forfeit_on_violation: bool = Field(
        ..., description="Forfeit the offender instead of aborting the contest"
    )
    timeout_tolerance: timedelta = Field(
        DEFAULT_TOLERANCE, description="Allowed overshoot past the budget"
    )
    tie_break: TieBreak = Field(TieBreak.FIRST, description="Tie-break policy for search")
    forfeit_utility: float = Field(1.0, gt=0, description="Utility won/lost on forfeit")

    @field_validator("time_budget_per_move")
    @classmethod
    def _budget_positive(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("time budget must be positive")
        return value

    @field_validator("timeout_tolerance")
    @classmethod
    def _tolerance_non_negative(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("tolerance must not be negative")
        return value

    @classmethod
    def create(cls, **options: Any) -> "ContestConfig":
        """
        Build a config, raising ConfigurationError for invalid options.

        Every problem is reported, not just the first.
        """
        try:
            return cls(**options)
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(part) for part in error['loc']) or 'config'}: {error['msg']}"
                for error in exc.errors()
            ]
            raise ConfigurationError(errors) from exc

    @property
    def hard_limit(self) -> timedelta:
        """Budget plus tolerance: past this, an agent is abandoned."""
        return self.time_budget_per_move + self.timeout_tolerance


def ensure_config(config: Any) -> ContestConfig:
    """Accept a ContestConfig or a mapping of options."""
    if isinstance(config, ContestConfig):
        return config
    if isinstance(config, dict):
        return ContestConfig.create(**config)
    raise ConfigurationError([f"expected ContestConfig or dict, got {type(config).__name__}"])
