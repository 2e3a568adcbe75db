"""
Per-turn countdown clock.

States
------
``IDLE`` (no session) -> ``RUNNING`` <-> ``PAUSED``; ``RUNNING`` -> ``EXPIRED``
when the countdown reaches zero.

- ``arm(seconds)``   : any state -> RUNNING with a fresh countdown.
- ``reset(seconds)`` : any state -> fresh countdown, keeping PAUSED if paused.
- ``tick()``         : RUNNING only; one call = one second. Other states ignore it.
- ``pause()`` / ``resume()`` : RUNNING <-> PAUSED.
- ``detach()``       : any state -> IDLE.

Ticks emit :class:`ThresholdCrossed` when the remaining time reaches the
warning mark and :class:`TurnExpired` when it reaches zero. Expiry only
reports; nothing advances the turn automatically.

The clock has no wall-clock driver of its own. Whoever owns the scheduler
(an asyncio task, a CLI loop, a test) calls ``tick()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from snakedraft.core.contracts.events import ThresholdCrossed, TurnExpired
from snakedraft.core.contracts.session import ClockStatus, DraftConfig
from snakedraft.core.errors import ClockStateError
from snakedraft.core.settings import get_logger

logger = get_logger("snakedraft.clock")

ClockEvent = ThresholdCrossed | TurnExpired


@dataclass(frozen=True, slots=True)
class ClockPolicy:
    """Round-dependent turn duration: longer for the first `early_rounds` rounds."""

    early_seconds: int = 120
    late_seconds: int = 90
    early_rounds: int = 4

    def duration_for(self, round_number: int) -> int:
        """Return the turn duration in seconds for a 1-based round."""
        if round_number <= self.early_rounds:
            return self.early_seconds
        return self.late_seconds

    @classmethod
    def from_config(cls, config: DraftConfig) -> ClockPolicy:
        return cls(
            early_seconds=config.early_round_seconds,
            late_seconds=config.late_round_seconds,
            early_rounds=config.early_rounds,
        )


class TurnClock:
    """Countdown state machine for a single turn."""

    __slots__ = ("_status", "_remaining", "_threshold")

    def __init__(self, warning_threshold: int = 10) -> None:
        self._status: ClockStatus = ClockStatus.IDLE
        self._remaining: int = 0
        self._threshold: int = warning_threshold

    @property
    def status(self) -> ClockStatus:
        return self._status

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def paused(self) -> bool:
        return self._status is ClockStatus.PAUSED

    @property
    def warning_threshold(self) -> int:
        return self._threshold

    # ------------------------------- Transitions ----------------------------

    def arm(self, seconds: int) -> None:
        """Start a fresh countdown of `seconds`, running."""
        if seconds < 0:
            raise ValueError("seconds must be non-negative")
        self._remaining = seconds
        self._status = ClockStatus.RUNNING if seconds > 0 else ClockStatus.EXPIRED

    def reset(self, seconds: int) -> None:
        """Start a fresh countdown, keeping the paused intent."""
        was_paused = self.paused
        self.arm(seconds)
        if was_paused and self._status is ClockStatus.RUNNING:
            self._status = ClockStatus.PAUSED

    def pause(self) -> None:
        if self._status is not ClockStatus.RUNNING:
            raise ClockStateError(f"cannot pause a clock that is {self._status.value}")
        self._status = ClockStatus.PAUSED

    def resume(self) -> None:
        if self._status is not ClockStatus.PAUSED:
            raise ClockStateError(f"cannot resume a clock that is {self._status.value}")
        self._status = ClockStatus.RUNNING

    def toggle(self) -> None:
        """Pause when running, resume when paused."""
        if self._status is ClockStatus.PAUSED:
            self.resume()
        else:
            self.pause()

    def detach(self) -> None:
        """Return to IDLE with no time on the clock."""
        self._status = ClockStatus.IDLE
        self._remaining = 0

    def restore(self, status: ClockStatus, remaining: int) -> None:
        """Set state directly (used when reloading a snapshot)."""
        self._status = status
        self._remaining = max(0, remaining)

    # ------------------------------- Ticking --------------------------------

    def tick(self) -> list[ClockEvent]:
        """Advance the countdown by one second and return any events."""
        if self._status is not ClockStatus.RUNNING:
            logger.debug("Ignoring tick while %s", self._status.value)
            return []

        before = self._remaining
        self._remaining = max(0, before - 1)
        events: list[ClockEvent] = []
        if before > self._threshold >= self._remaining and self._remaining > 0:
            events.append(ThresholdCrossed(remaining=self._remaining))
        if self._remaining == 0:
            self._status = ClockStatus.EXPIRED
            events.append(TurnExpired())
        return events


__all__ = ["ClockEvent", "ClockPolicy", "TurnClock"]
