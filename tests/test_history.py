"""Tests for snapshot-based undo/redo, both through the engine and directly."""

from __future__ import annotations

from typing import Any

import pytest

from snakedraft.core.contracts.item import Item
from snakedraft.core.contracts.session import ClockStatus, DraftConfig, DraftStatus, SessionState
from snakedraft.core.draft.engine import DraftEngine
from snakedraft.core.errors import NothingToRedoError, NothingToUndoError
from snakedraft.core.history.manager import HistoryManager

CONFIG = DraftConfig(participant_count=2, total_rounds=2)

CATALOG: list[dict[str, Any]] = [
    {"name": name, "category": "WR", "rank": n} for n, name in enumerate("ABCDE", start=1)
]


def _started() -> DraftEngine:
    engine = DraftEngine(CONFIG)
    engine.start(CATALOG)
    return engine


def test_undo_restores_pick_and_item() -> None:
    engine = _started()
    update = engine.pick_top()
    picked = update.state.picks[0].item_id

    engine.undo_last()

    assert engine.pointer == 0
    assert not engine.get_item(picked).taken
    assert engine.can_redo


def test_undo_then_redo_is_structurally_equal() -> None:
    engine = _started()
    engine.pick_top()
    engine.pick_top()
    before = engine.state.model_dump()

    engine.undo_last()
    engine.redo_last()

    assert engine.state.model_dump() == before


def _undo_redo_round_trip(engine: DraftEngine) -> tuple[dict[str, Any], dict[str, Any]]:
    before = engine.state.model_dump()
    engine.pick_top()
    after = engine.state.model_dump()

    engine.undo_last()
    assert engine.state.model_dump() == before
    engine.redo_last()
    assert engine.state.model_dump() == after
    return before, after


def test_undo_then_redo_keeps_a_paused_clock() -> None:
    engine = _started()
    engine.pause()

    before, after = _undo_redo_round_trip(engine)

    assert before["paused"] is True and after["paused"] is True
    assert engine.clock_status is ClockStatus.PAUSED
    engine.undo_last()
    assert engine.clock_status is ClockStatus.PAUSED
    assert engine.remaining == before["remaining"]


def test_undo_back_to_an_expired_clock() -> None:
    engine = _started()
    while engine.clock_status is ClockStatus.RUNNING:
        engine.tick()

    before, _ = _undo_redo_round_trip(engine)

    assert before["remaining"] == 0
    assert engine.clock_status is ClockStatus.RUNNING
    engine.undo_last()
    assert engine.clock_status is ClockStatus.EXPIRED
    assert engine.remaining == 0


def test_empty_stacks_raise() -> None:
    engine = DraftEngine(CONFIG)
    with pytest.raises(NothingToUndoError):
        engine.undo_last()
    with pytest.raises(NothingToRedoError):
        engine.redo_last()


def test_new_action_discards_redo_branch() -> None:
    engine = _started()
    engine.pick_top()
    engine.undo_last()
    assert engine.can_redo

    engine.pick_top()
    assert not engine.can_redo


def test_undo_start_and_reset() -> None:
    """Start and reset are undoable like picks."""
    engine = _started()
    engine.pick_top()

    engine.reset()
    assert engine.status is DraftStatus.NOT_STARTED
    assert engine.available().count() == 5

    engine.undo_last()
    assert engine.status is DraftStatus.IN_PROGRESS
    assert engine.pointer == 1

    engine.undo_last()
    engine.undo_last()
    assert engine.status is DraftStatus.NOT_STARTED
    assert engine.clock_status is ClockStatus.IDLE


def test_snapshots_are_isolated_copies() -> None:
    """Mutating a restored state does not reach the stored snapshot."""
    history = HistoryManager()
    state = SessionState(catalog=[Item(item_id="a", name="A", category="WR")])
    history.record(state, "first")
    state.catalog[0].rank = 1.0

    restored = history.undo(SessionState())
    assert restored.catalog[0].rank != 1.0
    restored.catalog[0].name = "changed"

    again = history.redo(restored)
    assert again.catalog == []
    assert history.undo(again).catalog[0].name == "changed"
    assert history.snapshots() == ()


def test_clear_forgets_both_stacks() -> None:
    history = HistoryManager()
    history.record(SessionState(), "first")
    history.record(SessionState(), "second")
    history.undo(SessionState())
    assert history.can_undo and history.can_redo

    history.clear()

    assert (history.undo_depth, history.redo_depth) == (0, 0)
    with pytest.raises(NothingToUndoError):
        history.undo(SessionState())
