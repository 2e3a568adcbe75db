"""
Session snapshot definition.

This module defines the immutable record of a session state at a specific
point in time. It is separated from ``manager.py`` so the storage layer and the
CLI can use it without pulling in the undo/redo stacks.

Design Notes
------------
- **Immutability**: Once created, a snapshot does not change. We use ``frozen=True``
  on the record and hold a deep copy of the state that nothing else references.
- **Serialization**: ``timestamp`` is an ISO string captured at creation, so
  JSON output needs no datetime handling.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from snakedraft.core.contracts.session import SessionState


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """
    Immutable record of a session state.

    Attributes
    ----------
    timestamp : str
        ISO-8601 UTC timestamp string (e.g., "2025-09-01T19:00:00.123456Z").
    note : str | None
        Label of the action about to run when the snapshot was taken
        (e.g., 'pick 14', 'start').
    state : SessionState
        Deep copy of the session state. Callers must copy again before
        mutating; :meth:`copy_state` does that.
    """

    timestamp: str
    note: str | None
    state: SessionState

    @classmethod
    def capture(cls, state: SessionState, note: str | None = None) -> SessionSnapshot:
        """Deep-copy `state` into a new snapshot stamped with the current UTC time."""
        ts_str = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
        return cls(timestamp=ts_str, note=note, state=state.model_copy(deep=True))

    def copy_state(self) -> SessionState:
        """Return an independent copy of the stored state."""
        return self.state.model_copy(deep=True)


__all__ = ["SessionSnapshot"]
