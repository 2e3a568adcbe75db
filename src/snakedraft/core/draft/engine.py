"""
Draft session engine: the authoritative state machine of a snake draft.

Lifecycle
---------
``NOT_STARTED`` --start--> ``IN_PROGRESS`` --last pick--> ``COMPLETE``

``reset`` returns to ``NOT_STARTED``; undo/redo may cross any of these edges.

Responsibilities
----------------
- Own the pick history and the pick pointer (always ``len(history)``).
- Orchestrate the :class:`ItemPool` (taken flags) and the :class:`TurnClock`.
- Offer the pre-mutation state to the :class:`HistoryManager` before every
  mutating action (configuration edits, ``start``, ``pick``, ``reset``).
- Return a :class:`DraftUpdate` (new state + emitted events) from every action.

Every action validates first and mutates second, so a raised error leaves the
session exactly as it was. Clock actions (tick/pause/resume/restart) are not
recorded in history.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as SchemaError

from snakedraft.core.contracts.events import PickCompleted, ThresholdCrossed, TurnExpired
from snakedraft.core.contracts.item import Item, Participant, default_participants
from snakedraft.core.contracts.pick import PickRecord
from snakedraft.core.contracts.results import ParticipantRoster, ResultRow
from snakedraft.core.contracts.session import (
    ClockStatus,
    DraftConfig,
    DraftStatus,
    SessionState,
)
from snakedraft.core.errors import (
    AlreadyTakenError,
    DraftCompleteError,
    InvalidConfigError,
    NotFoundError,
    SessionStateError,
)
from snakedraft.core.history.manager import HistoryManager
from snakedraft.core.settings import get_logger

from .clock import ClockPolicy, TurnClock
from .order import Turn, turn_for_pick
from .pool import ItemFilter, ItemPool, ItemQuery

logger = get_logger("snakedraft.engine")

Event = PickCompleted | ThresholdCrossed | TurnExpired
CatalogInput = Iterable[Item | Mapping[str, Any]]
ParticipantInput = Sequence[str | Participant]
StateListener = Callable[[SessionState], None]


@dataclass(frozen=True, slots=True)
class DraftUpdate:
    """What an engine action returns: the new state plus any emitted events."""

    state: SessionState
    events: tuple[Event, ...] = ()


def _build_participants(entries: ParticipantInput) -> list[Participant]:
    if not entries:
        raise InvalidConfigError("at least one participant is required")
    out: list[Participant] = []
    for slot, entry in enumerate(entries):
        label = entry.label if isinstance(entry, Participant) else entry
        try:
            out.append(Participant(slot=slot, label=label))
        except SchemaError as exc:
            raise InvalidConfigError(f"invalid label for slot {slot}: {label!r}") from exc
    return out


class DraftEngine:
    """Single-session snake draft engine.

    Parameters
    ----------
    config : DraftConfig | None
        Draft shape and clock policy; defaults to values from settings.
    history : HistoryManager | None
        Undo/redo stacks; a fresh manager is created when omitted.
    on_change : Callable[[SessionState], None] | None
        Called with the new state after every successful action (write-through
        persistence hooks in here).
    """

    def __init__(
        self,
        config: DraftConfig | None = None,
        *,
        history: HistoryManager | None = None,
        on_change: StateListener | None = None,
    ) -> None:
        self.config: DraftConfig = config if config is not None else DraftConfig.from_settings()
        self._policy = ClockPolicy.from_config(self.config)
        self._clock = TurnClock(self.config.warning_threshold)
        self._pool = ItemPool()
        self._history = history if history is not None else HistoryManager()
        self._participants: list[Participant] = default_participants(
            self.config.participant_count
        )
        self._picks: list[PickRecord] = []
        self._started = False
        self._on_change = on_change

    @classmethod
    def from_state(
        cls,
        state: SessionState,
        config: DraftConfig | None = None,
        *,
        on_change: StateListener | None = None,
    ) -> DraftEngine:
        """Rebuild an engine from a persisted snapshot. History starts empty."""
        engine = cls(config, on_change=on_change)
        capacity = len(state.participants) * engine.config.total_rounds
        if state.participants and state.pointer > capacity:
            raise InvalidConfigError(
                f"snapshot has {state.pointer} picks, more than this draft allows"
            )
        engine._restore(state)
        return engine

    # ------------------------------- Read side ------------------------------

    @property
    def state(self) -> SessionState:
        """Return an independent copy of the current session state."""
        return SessionState(
            catalog=self._pool.items,
            participants=[p.model_copy() for p in self._participants],
            started=self._started,
            pointer=self.pointer,
            picks=list(self._picks),
            paused=self._clock.paused,
            remaining=self._clock.remaining,
        )

    @property
    def pointer(self) -> int:
        return len(self._picks)

    @property
    def participant_count(self) -> int:
        return len(self._participants)

    @property
    def participants(self) -> list[Participant]:
        return [p.model_copy() for p in self._participants]

    @property
    def total_picks(self) -> int:
        return self.participant_count * self.config.total_rounds

    @property
    def status(self) -> DraftStatus:
        if not self._started:
            return DraftStatus.NOT_STARTED
        if self.pointer >= self.total_picks:
            return DraftStatus.COMPLETE
        return DraftStatus.IN_PROGRESS

    @property
    def clock_status(self) -> ClockStatus:
        return self._clock.status

    @property
    def remaining(self) -> int:
        return self._clock.remaining

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def history(self) -> HistoryManager:
        return self._history

    def current_turn(self) -> Turn | None:
        """Return the turn on the clock, or None unless the draft is in progress."""
        if self.status is not DraftStatus.IN_PROGRESS:
            return None
        return turn_for_pick(self.pointer, self.participant_count)

    def on_the_clock(self) -> Participant | None:
        turn = self.current_turn()
        return self._participants[turn.slot].model_copy() if turn else None

    def upcoming(self, count: int = 2) -> list[Turn]:
        """Return the turns after the current one (who's next, who's after)."""
        if self.status is not DraftStatus.IN_PROGRESS:
            return []
        last = min(self.pointer + count, self.total_picks - 1)
        return [turn_for_pick(i, self.participant_count) for i in range(self.pointer + 1, last + 1)]

    def get_item(self, item_id: str) -> Item:
        return self._pool.get(item_id)

    def available(self, filters: ItemFilter | None = None, search: str = "") -> ItemQuery:
        """Return the best-available view (untaken items, ascending rank)."""
        return self._pool.query(filters, search)

    def filter_options(self) -> dict[str, list[Any]]:
        """Distinct category/grouping/week values for pick-list menus."""
        return {
            "categories": self._pool.categories(),
            "groupings": self._pool.groupings(),
            "weeks": self._pool.weeks(),
        }

    def recent_picks(self, limit: int = 6) -> list[ResultRow]:
        """Return the last `limit` picks joined with item attributes, oldest first."""
        tail = self._picks[-limit:] if limit > 0 else []
        return [self._row(p) for p in tail]

    def board(self) -> list[list[PickRecord | None]]:
        """Return a rounds x participants grid of picks (None for open cells)."""
        grid: list[list[PickRecord | None]] = [
            [None] * self.participant_count for _ in range(self.config.total_rounds)
        ]
        for pick in self._picks:
            grid[pick.round - 1][pick.slot] = pick
        return grid

    def export_results(self) -> list[ParticipantRoster]:
        """Return each participant's picks, in pick order, joined with item attributes."""
        rosters = [
            ParticipantRoster(slot=p.slot, label=p.label) for p in self._participants
        ]
        for pick in self._picks:
            rosters[pick.slot].picks.append(self._row(pick))
        return rosters

    def _row(self, pick: PickRecord) -> ResultRow:
        item = self._pool.get(pick.item_id)
        return ResultRow(
            participant=self._participants[pick.slot].label,
            slot=pick.slot,
            item_id=item.item_id,
            name=item.name,
            category=item.category,
            grouping=item.grouping,
            round=pick.round,
            overall=pick.overall,
            rank=item.rank,
            week=item.week,
        )

    # ------------------------------- Configuration --------------------------

    def configure_participants(self, labels: ParticipantInput) -> DraftUpdate:
        """Replace the participant list (slot order follows `labels`)."""
        self._require_not_started("configure participants")
        participants = _build_participants(labels)
        self._history.record(self.state, "configure participants")
        self._participants = participants
        return self._publish()

    def rename_participant(self, slot: int, label: str) -> DraftUpdate:
        """Change one participant's label without touching slot order."""
        self._require_not_started("rename participants")
        if not 0 <= slot < self.participant_count:
            raise NotFoundError(f"no participant in slot {slot}")
        try:
            renamed = Participant(slot=slot, label=label)
        except SchemaError as exc:
            raise InvalidConfigError(f"invalid label for slot {slot}: {label!r}") from exc
        self._history.record(self.state, f"rename slot {slot}")
        self._participants[slot] = renamed
        return self._publish()

    def load_catalog(self, records: CatalogInput) -> DraftUpdate:
        """Replace the catalog. Raises ValidationError if nothing usable remains."""
        self._require_not_started("load a catalog")
        pool = ItemPool()
        pool.ingest(records)
        self._history.record(self.state, "load catalog")
        self._pool = pool
        return self._publish()

    # ------------------------------- Lifecycle ------------------------------

    def start(
        self,
        catalog: CatalogInput | None = None,
        participants: ParticipantInput | None = None,
    ) -> DraftUpdate:
        """Begin the draft, optionally supplying catalog and participants.

        Raises
        ------
        SessionStateError
            If the draft has already started.
        InvalidConfigError
            If there is no catalog (or no participants) to draft with.
        """
        self._require_not_started("start")
        if catalog is not None:
            records = list(catalog)
            if not records:
                raise InvalidConfigError("cannot start a draft with an empty catalog")
            pool = ItemPool()
            pool.ingest(records)
        else:
            if len(self._pool) == 0:
                raise InvalidConfigError("cannot start a draft with an empty catalog")
            pool = ItemPool()
            pool.load(self._pool.items)
            pool.reset_flags()
        roster = (
            _build_participants(participants)
            if participants is not None
            else [p.model_copy() for p in self._participants]
        )
        if not roster:
            raise InvalidConfigError("at least one participant is required")

        self._history.record(self.state, "start")
        self._pool = pool
        self._participants = roster
        self._picks = []
        self._started = True
        self._clock.arm(self._policy.duration_for(1))
        logger.info(
            "Draft started: %d participants x %d rounds, %d items",
            self.participant_count,
            self.config.total_rounds,
            len(self._pool),
        )
        return self._publish()

    def pick(self, item_id: str) -> DraftUpdate:
        """Record a pick of `item_id` for the participant on the clock.

        Raises
        ------
        SessionStateError
            If the draft has not started.
        DraftCompleteError
            If every pick has already been made.
        NotFoundError
            If `item_id` is not in the catalog.
        AlreadyTakenError
            If the item was already picked.
        """
        self._require_in_progress()
        item = self._pool.get(item_id)
        if item.taken:
            raise AlreadyTakenError(f"item {item.name!r} ({item_id}) is already taken")

        turn = turn_for_pick(self.pointer, self.participant_count)
        self._history.record(self.state, f"pick {turn.overall}")

        record = PickRecord(
            round=turn.round, overall=turn.overall, slot=turn.slot, item_id=item_id
        )
        self._picks.append(record)
        self._pool.mark_taken(item_id)

        if self.pointer >= self.total_picks:
            self._clock.detach()
            logger.info("Draft complete after %d picks", self.pointer)
        else:
            next_round = turn_for_pick(self.pointer, self.participant_count).round
            self._clock.reset(self._policy.duration_for(next_round))

        logger.info(
            "Pick %d (round %d): %s -> %s",
            record.overall,
            record.round,
            self._participants[record.slot].label,
            item.name,
        )
        return self._publish([PickCompleted(record=record)])

    def pick_top(self, filters: ItemFilter | None = None, search: str = "") -> DraftUpdate:
        """Pick the best-ranked available item matching the filters."""
        self._require_in_progress()
        top = self._pool.query(filters, search).first()
        if top is None:
            raise NotFoundError("no available item matches the current filters")
        return self.pick(top.item_id)

    def reset(self) -> DraftUpdate:
        """Clear picks and taken flags and return to NOT_STARTED (undoable)."""
        self._history.record(self.state, "reset")
        self._pool.reset_flags()
        self._picks = []
        self._started = False
        self._clock.detach()
        logger.info("Draft reset")
        return self._publish()

    # ------------------------------- Undo / Redo ----------------------------

    def undo_last(self) -> DraftUpdate:
        """Restore the state before the last recorded action."""
        restored = self._history.undo(self.state)
        self._restore(restored)
        logger.info("Undo -> pointer %d", self.pointer)
        return self._publish()

    def redo_last(self) -> DraftUpdate:
        """Re-apply the most recently undone action."""
        restored = self._history.redo(self.state)
        self._restore(restored)
        logger.info("Redo -> pointer %d", self.pointer)
        return self._publish()

    # ------------------------------- Clock ----------------------------------

    def tick(self) -> DraftUpdate:
        """Advance the turn clock by one second. A stopped clock saves nothing."""
        running = self._clock.status is ClockStatus.RUNNING
        if self.status is not DraftStatus.IN_PROGRESS or not running:
            return DraftUpdate(state=self.state)
        return self._publish(self._clock.tick())

    def pause(self) -> DraftUpdate:
        self._clock.pause()
        return self._publish()

    def resume(self) -> DraftUpdate:
        self._clock.resume()
        return self._publish()

    def toggle_pause(self) -> DraftUpdate:
        self._clock.toggle()
        return self._publish()

    def restart_clock(self) -> DraftUpdate:
        """Re-arm the current round's duration, keeping the paused intent."""
        turn = self._require_in_progress()
        self._clock.reset(self._policy.duration_for(turn.round))
        return self._publish()

    # ------------------------------- Internals ------------------------------

    def _require_not_started(self, action: str) -> None:
        if self._started:
            raise SessionStateError(f"cannot {action} once the draft has started")

    def _require_in_progress(self) -> Turn:
        status = self.status
        if status is DraftStatus.NOT_STARTED:
            raise SessionStateError("the draft has not started")
        if status is DraftStatus.COMPLETE:
            raise DraftCompleteError(f"all {self.total_picks} picks have been made")
        return turn_for_pick(self.pointer, self.participant_count)

    def _restore(self, state: SessionState) -> None:
        self._pool.load(state.catalog)
        if state.participants:
            self._participants = [p.model_copy() for p in state.participants]
        self._picks = list(state.picks)
        self._started = state.started
        if not self._started or self.pointer >= self.total_picks:
            self._clock.detach()
        elif state.remaining == 0:
            self._clock.restore(ClockStatus.EXPIRED, 0)
        elif state.paused:
            self._clock.restore(ClockStatus.PAUSED, state.remaining)
        else:
            self._clock.restore(ClockStatus.RUNNING, state.remaining)

    def _publish(self, events: Iterable[Event] = ()) -> DraftUpdate:
        state = self.state
        if self._on_change is not None:
            self._on_change(state)
        return DraftUpdate(state=state, events=tuple(events))


__all__ = ["DraftEngine", "DraftUpdate"]
