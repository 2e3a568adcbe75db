"""Draft core: snake turn order, item pool, turn clock and the session engine."""

from __future__ import annotations

from .clock import ClockPolicy, TurnClock
from .engine import DraftEngine, DraftUpdate
from .order import Turn, round_order, turn_for_pick
from .pool import ItemFilter, ItemPool, ItemQuery

__all__ = [
    "ClockPolicy",
    "DraftEngine",
    "DraftUpdate",
    "ItemFilter",
    "ItemPool",
    "ItemQuery",
    "Turn",
    "TurnClock",
    "round_order",
    "turn_for_pick",
]
