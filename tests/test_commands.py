"""Tests for the keyboard command surface."""

from __future__ import annotations

import pytest

from snakedraft.commands import Command, CommandDispatcher
from snakedraft.core.contracts.session import ClockStatus, DraftConfig
from snakedraft.core.draft.engine import DraftEngine
from snakedraft.core.draft.pool import ItemFilter
from snakedraft.core.errors import NothingToUndoError


def _engine() -> DraftEngine:
    engine = DraftEngine(DraftConfig(participant_count=2, total_rounds=2))
    engine.start(
        [
            {"name": "Ace", "category": "QB", "rank": 1},
            {"name": "Bo", "category": "RB", "rank": 2},
            {"name": "Cy", "category": "RB", "rank": 3},
        ]
    )
    return engine


def test_resolve_default_bindings() -> None:
    d = CommandDispatcher(_engine())
    assert d.resolve("") is Command.DRAFT_TOP
    assert d.resolve("  ") is Command.DRAFT_TOP
    assert d.resolve("P") is Command.TOGGLE_PAUSE
    assert d.resolve("/") is Command.FOCUS_SEARCH
    assert d.resolve("x") is None


def test_enter_drafts_top_of_filtered_view() -> None:
    engine = _engine()
    d = CommandDispatcher(engine)
    d.view.filters = ItemFilter(category="RB")

    update = d.handle_key("")
    assert update is not None
    assert engine.get_item(update.state.picks[0].item_id).name == "Bo"


def test_clock_and_history_commands() -> None:
    engine = _engine()
    d = CommandDispatcher(engine)

    d.dispatch(Command.TOGGLE_PAUSE)
    assert engine.clock_status is ClockStatus.PAUSED
    d.handle_key("p")
    assert engine.clock_status is ClockStatus.RUNNING

    d.handle_key("")
    d.handle_key("u")
    assert engine.pointer == 0
    d.handle_key("r")
    assert engine.pointer == 1


def test_focus_search_calls_back_and_unbound_keys_do_nothing() -> None:
    calls: list[str] = []
    d = CommandDispatcher(_engine(), on_focus_search=lambda: calls.append("focus"))
    assert d.handle_key("/") is None
    assert calls == ["focus"]
    assert d.handle_key("z") is None


def test_custom_bindings_and_error_propagation() -> None:
    engine = DraftEngine(DraftConfig(participant_count=2, total_rounds=1))
    d = CommandDispatcher(engine, bindings={"z": Command.UNDO})
    assert d.resolve("u") is None
    with pytest.raises(NothingToUndoError):
        d.handle_key("z")
