"""
Snake turn order.

Pure functions mapping a zero-based pick index to the round, the acting slot,
and the overall pick number. Round 1 runs left to right; every following round
reverses direction, so the last picker of round K picks first in round K+1.

Example (4 participants)::

    round 1: 0 1 2 3
    round 2: 3 2 1 0
    round 3: 0 1 2 3

Callers bound ``pick_index`` against ``participant_count * total_rounds``
themselves; the functions here are defined for any non-negative index.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Turn:
    """Where a pick index lands in the snake."""

    pick_index: int
    round: int
    slot: int
    overall: int


def _check(pick_index: int, participant_count: int) -> None:
    if participant_count <= 0:
        raise ValueError("participant_count must be positive")
    if pick_index < 0:
        raise ValueError("pick_index must be non-negative")


def round_for_pick(pick_index: int, participant_count: int) -> int:
    """Return the 1-based round of ``pick_index``."""
    _check(pick_index, participant_count)
    return pick_index // participant_count + 1


def slot_for_pick(pick_index: int, participant_count: int) -> int:
    """Return the acting slot for ``pick_index``."""
    _check(pick_index, participant_count)
    round_zero = pick_index // participant_count
    position = pick_index % participant_count
    if round_zero % 2 == 0:
        return position
    return participant_count - 1 - position


def turn_for_pick(pick_index: int, participant_count: int) -> Turn:
    """Return the full :class:`Turn` for ``pick_index``."""
    return Turn(
        pick_index=pick_index,
        round=round_for_pick(pick_index, participant_count),
        slot=slot_for_pick(pick_index, participant_count),
        overall=pick_index + 1,
    )


def round_order(round_number: int, participant_count: int) -> list[int]:
    """Return the slots acting in ``round_number`` (1-based), in order."""
    if round_number < 1:
        raise ValueError("round_number must be >= 1")
    first = (round_number - 1) * participant_count
    return [slot_for_pick(first + i, participant_count) for i in range(participant_count)]


__all__ = ["Turn", "round_for_pick", "round_order", "slot_for_pick", "turn_for_pick"]
