"""Tests for the final roster CSV export."""

from __future__ import annotations

import csv
import io
from pathlib import Path

from snakedraft.core.contracts.session import DraftConfig
from snakedraft.core.draft.engine import DraftEngine
from snakedraft.io.export import HEADER, roster_csv, write_roster_csv


def _drafted() -> DraftEngine:
    engine = DraftEngine(DraftConfig(participant_count=2, total_rounds=2))
    engine.start(
        [
            {"name": "Smith, Jr.", "category": "WR1", "grouping": "kc", "week": 6, "rank": 1},
            {"name": "Jones", "category": "RB", "grouping": "SF", "week": 9, "rank": 2.5},
            {"name": "Brown", "category": "QB", "grouping": "BUF", "week": 7, "rank": 3},
            {"name": "Green", "category": "TE", "grouping": "", "week": "", "rank": "NR"},
        ],
        ["Sharks", "Jets"],
    )
    for _ in range(4):
        engine.pick_top()
    return engine


def test_header_and_rows_grouped_by_participant() -> None:
    text = roster_csv(_drafted().export_results())
    lines = text.splitlines()
    assert lines[0] == "team,player,position,team_abbr,round,overall,rk,bye"
    assert tuple(lines[0].split(",")) == HEADER

    rows = list(csv.reader(io.StringIO(text)))[1:]
    assert [(r[0], r[1], r[5]) for r in rows] == [
        ("Sharks", "Smith, Jr.", "1"),
        ("Sharks", "Green", "4"),
        ("Jets", "Jones", "2"),
        ("Jets", "Brown", "3"),
    ]


def test_fields_are_quoted_and_numbers_compact() -> None:
    text = roster_csv(_drafted().export_results())
    assert 'Sharks,"Smith, Jr.",WR,KC,1,1,1,6' in text
    assert "Jets,Jones,RB,SF,1,2,2.5,9" in text
    assert "Sharks,Green,TE,,2,4,9999,0" in text


def test_write_creates_parent_dirs(tmp_path: Path) -> None:
    path = write_roster_csv(_drafted().export_results(), tmp_path / "out" / "rosters.csv")
    assert path.read_text(encoding="utf-8").startswith("team,player")
