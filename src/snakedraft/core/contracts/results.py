"""Results contracts: picks joined with item attributes, grouped per participant."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ResultRow(BaseModel):
    """One pick joined with the attributes of the selected item."""

    participant: str
    slot: int
    item_id: str
    name: str
    category: str
    grouping: str
    round: int
    overall: int
    rank: float
    week: int


class ParticipantRoster(BaseModel):
    """All picks of one participant, in the order they were made."""

    slot: int
    label: str
    picks: list[ResultRow] = Field(default_factory=list)


__all__ = ["ParticipantRoster", "ResultRow"]
