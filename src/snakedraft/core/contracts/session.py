"""Session contracts: the serializable draft state and its configuration.

- :class:`DraftConfig`  : draft shape (rounds, clock durations) seen by the engine.
- :class:`SessionState` : the flat, serializable snapshot of a session
  (catalog, participants, started flag, pointer, pick history, paused flag,
  remaining seconds). It is what undo/redo stores and what gets persisted.
- :class:`DraftStatus` / :class:`ClockStatus` : lifecycle labels derived from it.

Invariants
----------
`SessionState` validates its own consistency when built from raw data (e.g. a
file on disk):

- ``pointer == len(picks)``
- overall pick numbers are exactly ``1..pointer``
- no item is referenced by two picks
- the set of taken items equals the set of picked items
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from snakedraft.core.settings import Settings, load_settings

from .item import Item, Participant
from .pick import PickRecord


class DraftStatus(str, Enum):
    """Lifecycle of a draft session."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class ClockStatus(str, Enum):
    """Lifecycle of the per-turn countdown."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    EXPIRED = "expired"


class DraftConfig(BaseModel):
    """Draft shape and clock policy values consumed by the engine."""

    participant_count: int = Field(default=12, ge=1)
    total_rounds: int = Field(default=15, ge=1)
    early_round_seconds: int = Field(default=120, ge=1)
    late_round_seconds: int = Field(default=90, ge=1)
    early_rounds: int = Field(default=4, ge=0)
    warning_threshold: int = Field(default=10, ge=0)

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> DraftConfig:
        """Build a config from application settings (defaults to the cached ones)."""
        s = s if s is not None else load_settings()
        return cls(
            participant_count=s.participant_count,
            total_rounds=s.total_rounds,
            early_round_seconds=s.early_round_seconds,
            late_round_seconds=s.late_round_seconds,
            early_rounds=s.early_rounds,
            warning_threshold=s.warning_threshold,
        )


class SessionState(BaseModel):
    """Flat, serializable snapshot of a draft session."""

    catalog: list[Item] = Field(default_factory=list)
    participants: list[Participant] = Field(default_factory=list)
    started: bool = False
    pointer: int = Field(default=0, ge=0, description="Number of picks made so far.")
    picks: list[PickRecord] = Field(default_factory=list)
    paused: bool = False
    remaining: int = Field(default=0, ge=0, description="Seconds left on the turn clock.")

    @model_validator(mode="after")
    def _check_consistency(self) -> SessionState:
        if self.pointer != len(self.picks):
            raise ValueError(
                f"pointer ({self.pointer}) must equal the number of picks ({len(self.picks)})"
            )
        overall = [p.overall for p in self.picks]
        if overall != list(range(1, len(self.picks) + 1)):
            raise ValueError("overall pick numbers must run 1..N without gaps")
        picked = [p.item_id for p in self.picks]
        if len(set(picked)) != len(picked):
            raise ValueError("an item may be referenced by at most one pick")
        taken = {i.item_id for i in self.catalog if i.taken}
        if taken != set(picked):
            raise ValueError("taken items must match the items referenced by picks")
        slots = [p.slot for p in self.participants]
        if slots != list(range(len(slots))):
            raise ValueError("participant slots must be 0..N-1 in order")
        return self


__all__ = ["ClockStatus", "DraftConfig", "DraftStatus", "SessionState"]
