"""Disk-backed write-through store for session state.

This module persists the flat :class:`SessionState` snapshot as a single JSON
file so a session survives a process restart.

- Default path: `SNAKEDRAFT_STATE_PATH` setting, `artifacts/session.json` otherwise
- Content:      `{"saved_at": ..., "state": <SessionState as JSON>}`

Writes go to a sibling temp file first and are then moved into place, so a
crash mid-write never leaves a truncated session behind.

Usage
-----
>>> store = SessionStore()        # uses the configured path
>>> store.autosave(engine.state)  # after every action; False on disk errors
>>> state = store.load()          # on startup; None if nothing saved yet
"""

from __future__ import annotations

import json
import os
from datetime import UTC, datetime
from pathlib import Path

from snakedraft.core.contracts.session import SessionState
from snakedraft.core.settings import get_logger, load_settings

logger = get_logger("snakedraft.storage")


def _default_path() -> Path:
    """Return the configured snapshot path."""
    return load_settings().state_path


class SessionStore:
    """Persist session snapshots to disk as JSON."""

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path if path is not None else _default_path()

    def save(self, state: SessionState) -> Path:
        """Write `state` to disk and return the file path."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "saved_at": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "state": state.model_dump(mode="json"),
        }
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.write("\n")
        os.replace(tmp, self.path)
        return self.path

    def autosave(self, state: SessionState) -> bool:
        """Save `state`, logging instead of raising when the disk refuses.

        Returns False if the write failed; the live session is unaffected.
        """
        try:
            self.save(state)
        except OSError as exc:
            logger.warning("Autosave to %s failed: %s", self.path, exc)
            return False
        return True

    def load(self) -> SessionState | None:
        """Return the saved state, or None if no file exists.

        Raises
        ------
        pydantic.ValidationError
            If the file exists but does not describe a consistent session.
        """
        if not self.path.exists():
            return None
        with self.path.open(encoding="utf-8") as f:
            payload = json.load(f)
        state = SessionState.model_validate(payload.get("state", payload))
        logger.info("Loaded session from %s (%d picks)", self.path, state.pointer)
        return state

    def clear(self) -> None:
        """Delete the saved session, if any."""
        self.path.unlink(missing_ok=True)


__all__ = ["SessionStore"]
