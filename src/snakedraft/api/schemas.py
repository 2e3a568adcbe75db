"""
Request and response models for the snakedraft HTTP API.

Responses never expose the engine's internals directly: every action returns an
:class:`ActionResponse` carrying a compact :class:`SessionView` plus the events
the action emitted.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from snakedraft.core.contracts.events import DraftEvent
from snakedraft.core.contracts.item import Participant
from snakedraft.core.contracts.pick import PickRecord
from snakedraft.core.contracts.results import ResultRow
from snakedraft.core.contracts.session import ClockStatus, DraftStatus
from snakedraft.core.draft.engine import DraftEngine
from snakedraft.core.draft.order import Turn
from snakedraft.core.draft.pool import ItemFilter

# --------------------------------------------------------------------------- #
# Requests
# --------------------------------------------------------------------------- #


class CatalogRequest(BaseModel):
    """A catalog as item records or as raw CSV text (exactly one of the two)."""

    items: list[dict[str, Any]] | None = Field(
        default=None, description="Records with name/category/grouping/week/rank keys."
    )
    csv: str | None = Field(default=None, description="CSV text with RK, PLAYER NAME, ... headers.")


class ParticipantsRequest(BaseModel):
    labels: list[str] = Field(min_length=1, description="Participant labels in slot order.")


class RenameRequest(BaseModel):
    label: str = Field(min_length=1)


class StartRequest(BaseModel):
    """Optional catalog/participants; omitted parts use what was configured before."""

    catalog: CatalogRequest | None = None
    participants: list[str] | None = None


class PickRequest(BaseModel):
    item_id: str = Field(min_length=1)


class TopPickRequest(BaseModel):
    filters: ItemFilter = Field(default_factory=ItemFilter)
    search: str = ""


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


class TurnView(BaseModel):
    round: int
    slot: int
    overall: int
    participant: str


class SessionView(BaseModel):
    """What a front end needs to draw the header, clock and ticker."""

    status: DraftStatus
    clock_status: ClockStatus
    pointer: int
    total_picks: int
    total_rounds: int
    remaining: int
    paused: bool
    current: TurnView | None
    upcoming: list[TurnView]
    participants: list[Participant]
    recent: list[ResultRow]
    can_undo: bool
    can_redo: bool

    @classmethod
    def from_engine(cls, engine: DraftEngine) -> SessionView:
        labels = {p.slot: p.label for p in engine.participants}

        def view(turn: Turn) -> TurnView:
            return TurnView(
                round=turn.round,
                slot=turn.slot,
                overall=turn.overall,
                participant=labels[turn.slot],
            )

        current = engine.current_turn()
        return cls(
            status=engine.status,
            clock_status=engine.clock_status,
            pointer=engine.pointer,
            total_picks=engine.total_picks,
            total_rounds=engine.config.total_rounds,
            remaining=engine.remaining,
            paused=engine.clock_status is ClockStatus.PAUSED,
            current=view(current) if current else None,
            upcoming=[view(t) for t in engine.upcoming(2)],
            participants=engine.participants,
            recent=engine.recent_picks(6),
            can_undo=engine.can_undo,
            can_redo=engine.can_redo,
        )


class ActionResponse(BaseModel):
    session: SessionView
    events: list[DraftEvent] = Field(default_factory=list)


class EventEntry(BaseModel):
    """An emitted event with its position in the session's event log."""

    seq: int
    event: DraftEvent


class BoardResponse(BaseModel):
    participants: list[Participant]
    rounds: list[list[PickRecord | None]]


__all__ = [
    "ActionResponse",
    "BoardResponse",
    "CatalogRequest",
    "EventEntry",
    "ParticipantsRequest",
    "PickRequest",
    "RenameRequest",
    "SessionView",
    "StartRequest",
    "TopPickRequest",
    "TurnView",
]
