"""Catalog contracts: selectable items and drafting participants.

This module defines two Pydantic v2 models:

- `Item`        : one selectable entry of the shared pool (name, category,
  grouping label, scheduling week, rank, taken flag).
- `Participant` : one drafting slot with its display label.

Identity
--------
`Item.item_id` is derived deterministically from ``name|grouping|category`` so
re-ingesting the same catalog yields the same identifiers. Callers may pass an
explicit id (e.g. when reloading a snapshot); otherwise it is computed during
validation.

Lenient numerics
----------------
Rank and week are coerced rather than rejected: an unparseable rank becomes
:data:`UNRANKED` (sorted after every ranked item) and an unparseable week
becomes ``0``.
"""

from __future__ import annotations

import hashlib
import math
import re
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

#: Rank assigned to rows whose rank cannot be parsed.
UNRANKED: float = 9999.0

#: Closed set of well-known categories. Anything else is kept verbatim.
KNOWN_CATEGORIES: tuple[str, ...] = ("QB", "RB", "WR", "TE", "K", "DST")

_TRAILING_DIGITS = re.compile(r"\d+$")


def normalize_category(raw: str) -> str:
    """Strip whitespace and a trailing numeral, then upper-case (``"wr1" -> "WR"``)."""
    return _TRAILING_DIGITS.sub("", raw.strip()).upper()


def is_known_category(category: str) -> bool:
    """Return True if `category` belongs to the closed set."""
    return category in KNOWN_CATEGORIES


def make_item_id(name: str, grouping: str, category: str) -> str:
    """Return the stable identifier for an item.

    The same ``(name, grouping, category)`` triple always maps to the same id.
    """
    digest = hashlib.sha1(f"{name}|{grouping}|{category}".encode()).hexdigest()
    return digest[:12]


def parse_rank(value: Any) -> float:
    """Parse a rank value, falling back to :data:`UNRANKED`."""
    if isinstance(value, bool):
        return UNRANKED
    raw = value if isinstance(value, int | float) else str(value).strip()
    try:
        rank = float(raw)
    except ValueError:
        return UNRANKED
    return rank if math.isfinite(rank) else UNRANKED


def parse_week(value: Any) -> int:
    """Parse a scheduling-week value, falling back to ``0``."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        week = float(str(value).strip())
    except ValueError:
        return 0
    return int(week) if math.isfinite(week) else 0


class Item(BaseModel):
    """One selectable entry of the shared pool."""

    item_id: str = Field(description="Stable identifier derived from name/grouping/category.")
    name: str = Field(min_length=1, description="Display name.")
    category: str = Field(min_length=1, description="Normalized category, e.g. 'WR'.")
    grouping: str = Field(default="", description="Secondary grouping label, e.g. 'KC'.")
    week: int = Field(default=0, description="Scheduling week; 0 when unknown.")
    rank: float = Field(default=UNRANKED, description="Lower is more desirable.")
    taken: bool = Field(default=False, description="True once selected by a pick.")

    @model_validator(mode="before")
    @classmethod
    def _normalize_raw(cls, data: Any) -> Any:
        """Normalize text fields and fill in `item_id` before field validation."""
        if not isinstance(data, dict):
            return data
        out = dict(data)
        name = str(out.get("name") or "").strip()
        category = normalize_category(str(out.get("category") or ""))
        grouping = str(out.get("grouping") or "").strip().upper()
        out["name"] = name
        out["category"] = category
        out["grouping"] = grouping
        if not out.get("item_id"):
            out["item_id"] = make_item_id(name, grouping, category)
        return out

    @field_validator("rank", mode="before")
    @classmethod
    def _coerce_rank(cls, v: Any) -> float:
        return parse_rank(v)

    @field_validator("week", mode="before")
    @classmethod
    def _coerce_week(cls, v: Any) -> int:
        return parse_week(v)

    @property
    def is_ranked(self) -> bool:
        """Return True unless the rank fell back to the unranked sentinel."""
        return self.rank != UNRANKED


class Participant(BaseModel):
    """A drafting slot. The slot index fixes the position in the turn order."""

    slot: int = Field(ge=0, description="Zero-based turn-order position.")
    label: str = Field(min_length=1, description="Display label, e.g. 'Team 3'.")

    @field_validator("label")
    @classmethod
    def _strip_label(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("participant label must not be blank")
        return stripped


def default_participants(count: int) -> list[Participant]:
    """Return ``count`` participants labelled ``Team 1`` .. ``Team N``."""
    return [Participant(slot=i, label=f"Team {i + 1}") for i in range(count)]


__all__ = [
    "KNOWN_CATEGORIES",
    "UNRANKED",
    "Item",
    "Participant",
    "default_participants",
    "is_known_category",
    "make_item_id",
    "normalize_category",
    "parse_rank",
    "parse_week",
]
