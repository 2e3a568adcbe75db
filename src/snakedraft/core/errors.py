"""Error taxonomy for the draft session engine.

Every failure raised by the core derives from :class:`DraftError`. Each class
carries a stable machine ``code`` that the HTTP layer and the CLI surface to
callers, plus the HTTP status the API maps it to.

None of these are fatal: an operation that raises leaves the session exactly as
it was before the call.
"""

from __future__ import annotations

from typing import ClassVar


class DraftError(Exception):
    """Base class for all domain errors raised by snakedraft."""

    code: ClassVar[str] = "draft_error"
    http_status: ClassVar[int] = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DraftError):
    """Catalog input is missing required columns or yields no usable items."""

    code = "validation_error"
    http_status = 422


class InvalidConfigError(DraftError):
    """The session cannot start with the given catalog or participants."""

    code = "invalid_config"


class NotFoundError(DraftError):
    """An item identifier (or participant slot) is not part of the session."""

    code = "not_found"
    http_status = 404


class AlreadyTakenError(DraftError):
    """The item was already selected by an earlier pick."""

    code = "already_taken"
    http_status = 409


class DraftCompleteError(DraftError):
    """Every slot of every round has been filled."""

    code = "draft_complete"
    http_status = 409


class SessionStateError(DraftError):
    """The action is not valid in the engine's current lifecycle state."""

    code = "invalid_session_state"
    http_status = 409


class NothingToUndoError(DraftError):
    """The undo stack is empty."""

    code = "nothing_to_undo"
    http_status = 409


class NothingToRedoError(DraftError):
    """The redo stack is empty."""

    code = "nothing_to_redo"
    http_status = 409


class ClockStateError(DraftError):
    """A clock transition was requested from a state that does not allow it."""

    code = "invalid_clock_state"
    http_status = 409


__all__ = [
    "AlreadyTakenError",
    "ClockStateError",
    "DraftCompleteError",
    "DraftError",
    "InvalidConfigError",
    "NotFoundError",
    "NothingToRedoError",
    "NothingToUndoError",
    "SessionStateError",
    "ValidationError",
]
