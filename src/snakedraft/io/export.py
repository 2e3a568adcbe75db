"""Results export: final rosters as CSV.

One row per pick, grouped by participant slot and in pick order within a
participant. Fields containing commas, quotes or newlines are quoted.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from pathlib import Path

from snakedraft.core.contracts.results import ParticipantRoster

HEADER: tuple[str, ...] = (
    "team",
    "player",
    "position",
    "team_abbr",
    "round",
    "overall",
    "rk",
    "bye",
)


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def roster_csv(rosters: Iterable[ParticipantRoster]) -> str:
    """Render `rosters` (from ``DraftEngine.export_results()``) as CSV text."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADER)
    for roster in rosters:
        for row in roster.picks:
            writer.writerow(
                [
                    roster.label,
                    row.name,
                    row.category,
                    row.grouping,
                    row.round,
                    row.overall,
                    _number(row.rank),
                    row.week,
                ]
            )
    return buf.getvalue()


def write_roster_csv(rosters: Iterable[ParticipantRoster], path: Path) -> Path:
    """Write the roster CSV to `path` and return it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(roster_csv(rosters), encoding="utf-8")
    return path


__all__ = ["HEADER", "roster_csv", "write_roster_csv"]
