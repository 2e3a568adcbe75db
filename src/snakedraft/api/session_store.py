"""
In-process holder for the API's single draft session.

Responsibilities
----------------
- **Own**: one :class:`DraftEngine` per process (one session per engine).
- **Persist**: write every new state through to a :class:`SessionStore`.
- **Restore**: reload the saved session at startup.
- **Log events**: keep a bounded, sequence-numbered log of emitted events so
  polling clients can catch up on clock warnings they missed.

All engine calls happen on the event loop thread (the routes are ``async`` and
the ticker is an asyncio task), so actions never overlap.
"""

from __future__ import annotations

from collections import deque
from typing import ClassVar

from snakedraft.api.schemas import ActionResponse, EventEntry, SessionView
from snakedraft.core.contracts.session import DraftConfig, SessionState
from snakedraft.core.draft.engine import DraftEngine, DraftUpdate
from snakedraft.core.errors import DraftError
from snakedraft.core.history.storage import SessionStore
from snakedraft.core.settings import get_logger

logger = get_logger("snakedraft.api")

_EVENT_LOG_SIZE = 200


class SessionHolder:
    """Process-wide owner of the draft engine."""

    # Singleton instance placeholder (initialized in app startup)
    _instance: ClassVar[SessionHolder | None] = None

    def __init__(
        self,
        config: DraftConfig | None = None,
        store: SessionStore | None = None,
    ) -> None:
        self.config = config if config is not None else DraftConfig.from_settings()
        self.store = store if store is not None else SessionStore()
        self.engine = DraftEngine(self.config, on_change=self._persist)
        self._events: deque[EventEntry] = deque(maxlen=_EVENT_LOG_SIZE)
        self._seq = 0

    @classmethod
    def get_instance(cls) -> SessionHolder:
        """Accessor for the global singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def _persist(self, state: SessionState) -> None:
        self.store.autosave(state)

    def restore(self) -> bool:
        """Reload the saved session, if any. Returns True when one was loaded.

        An unreadable file, or one saved under a larger draft shape, is logged
        and skipped; the fresh engine stays in place.
        """
        try:
            state = self.store.load()
            if state is None:
                return False
            engine = DraftEngine.from_state(state, self.config, on_change=self._persist)
        except (ValueError, DraftError) as exc:
            logger.warning("Ignoring saved session at %s: %s", self.store.path, exc)
            return False
        self.engine = engine
        return True

    def reset_engine(self) -> None:
        """Throw away the session entirely (catalog, participants and history)."""
        self.engine = DraftEngine(self.config, on_change=self._persist)
        self._events.clear()

    def publish(self, update: DraftUpdate) -> DraftUpdate:
        """Append the update's events to the event log and return it."""
        for event in update.events:
            self._seq += 1
            self._events.append(EventEntry(seq=self._seq, event=event))
        return update

    def events_after(self, seq: int) -> list[EventEntry]:
        return [e for e in self._events if e.seq > seq]

    def respond(self, update: DraftUpdate) -> ActionResponse:
        """Publish `update` and wrap it with a fresh session view."""
        self.publish(update)
        return ActionResponse(
            session=SessionView.from_engine(self.engine),
            events=list(update.events),
        )


# Global accessor for convenience
def get_session_holder() -> SessionHolder:
    return SessionHolder.get_instance()


__all__ = ["SessionHolder", "get_session_holder"]
