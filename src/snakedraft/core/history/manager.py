"""
Snapshot-based undo/redo over the full session state.

Every mutating engine action hands the manager the *pre-mutation* state via
``record()``. The manager keeps two stacks of :class:`SessionSnapshot`:

- ``record(state, note)``: push onto the undo stack and clear the redo stack.
- ``undo(current)``: pop the last snapshot, push ``current`` onto the redo
  stack, and return the restored state.
- ``redo(current)``: the mirror image of ``undo``.

History is linear: a new ``record()`` after an undo discards the redo branch.
Stacks are unbounded; there is no eviction.

Design Goals
------------
- **Value semantics**: snapshots are deep copies; nothing is shared between a
  snapshot and live state.
- **Fail before mutate**: empty-stack errors are raised before either stack changes.
"""

from __future__ import annotations

from snakedraft.core.contracts.session import SessionState
from snakedraft.core.errors import NothingToRedoError, NothingToUndoError

from .snapshot import SessionSnapshot


class HistoryManager:
    """
    Undo/redo stacks of session snapshots.

    Attributes
    ----------
    _undo : list[SessionSnapshot]
        States to return to, most recent last.
    _redo : list[SessionSnapshot]
        States undone since the last recorded action, most recent last.
    """

    __slots__ = ("_undo", "_redo")

    def __init__(self) -> None:
        self._undo: list[SessionSnapshot] = []
        self._redo: list[SessionSnapshot] = []

    # ------------------------------- Recording ------------------------------

    def record(self, state: SessionState, note: str | None = None) -> SessionSnapshot:
        """
        Push a snapshot of `state` and drop the redo branch.

        Parameters
        ----------
        state : SessionState
            The state *before* the mutation that is about to run.
        note : str | None
            Label of that mutation, shown by the CLI history view.
        """
        snap = SessionSnapshot.capture(state, note)
        self._undo.append(snap)
        self._redo.clear()
        return snap

    def clear(self) -> None:
        """Forget every undo and redo snapshot."""
        self._undo.clear()
        self._redo.clear()

    # ------------------------------- Undo / Redo ----------------------------

    def undo(self, current: SessionState) -> SessionState:
        """Return the state before the last action; `current` becomes redoable."""
        if not self._undo:
            raise NothingToUndoError("nothing to undo")
        snap = self._undo.pop()
        self._redo.append(SessionSnapshot.capture(current, snap.note))
        return snap.copy_state()

    def redo(self, current: SessionState) -> SessionState:
        """Re-apply the most recently undone state; `current` becomes undoable."""
        if not self._redo:
            raise NothingToRedoError("nothing to redo")
        snap = self._redo.pop()
        self._undo.append(SessionSnapshot.capture(current, snap.note))
        return snap.copy_state()

    # ------------------------------- Introspection --------------------------

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def snapshots(self) -> tuple[SessionSnapshot, ...]:
        """Return the undo stack, oldest first (immutable tuple)."""
        return tuple(self._undo)


__all__ = ["HistoryManager"]
