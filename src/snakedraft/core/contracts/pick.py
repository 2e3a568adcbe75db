"""PickRecord: one immutable, append-only entry of the pick history."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class PickRecord(BaseModel):
    """A completed pick. Never mutated once created."""

    model_config = ConfigDict(frozen=True)

    round: int = Field(ge=1, description="1-based round number.")
    overall: int = Field(ge=1, description="1-based overall pick number.")
    slot: int = Field(ge=0, description="Acting participant slot.")
    item_id: str = Field(description="Identifier of the selected item.")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="UTC timestamp when the pick was made.",
    )


__all__ = ["PickRecord"]
