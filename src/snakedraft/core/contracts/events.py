"""Notification events emitted by the engine and the turn clock.

Events are plain data. Rendering them (a chime, a beep, a toast) is up to the
caller; the core only returns them from the action that produced them.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from .pick import PickRecord


class PickCompleted(BaseModel):
    """A pick was recorded."""

    kind: Literal["pick_completed"] = "pick_completed"
    record: PickRecord


class ThresholdCrossed(BaseModel):
    """The turn clock reached the low-time warning mark."""

    kind: Literal["threshold_crossed"] = "threshold_crossed"
    remaining: int = Field(ge=0)


class TurnExpired(BaseModel):
    """The turn clock reached zero. The turn does not advance on its own."""

    kind: Literal["turn_expired"] = "turn_expired"


DraftEvent = Annotated[
    PickCompleted | ThresholdCrossed | TurnExpired,
    Field(discriminator="kind"),
]


__all__ = ["DraftEvent", "PickCompleted", "ThresholdCrossed", "TurnExpired"]
