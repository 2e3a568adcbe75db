"""Catalog ingestion: turn a ranked CSV export into item records.

The header row is required and must contain these labels (any case, any order,
extra columns ignored)::

    RK, PLAYER NAME, TEAM, POS, BYE

Each data row becomes a plain mapping with the keys the :class:`Item` contract
expects (``rank``, ``name``, ``grouping``, ``category``, ``week``). Value
cleanup happens in the contract itself:

- ``POS`` loses a trailing numeral and is upper-cased (``WR1 -> WR``)
- ``TEAM`` is upper-cased
- an unparseable ``RK`` becomes the unranked sentinel, an unparseable ``BYE`` 0

Examples
--------
>>> rows = parse_catalog("RK,PLAYER NAME,TEAM,POS,BYE\\n1,Jane Doe,kc,WR1,6\\n")
>>> rows[0]["name"], rows[0]["category"]
('Jane Doe', 'WR1')
"""

from __future__ import annotations

import csv
import io
from pathlib import Path

from snakedraft.core.errors import ValidationError
from snakedraft.core.settings import get_logger

logger = get_logger("snakedraft.catalog")

#: CSV header label -> Item field name.
COLUMNS: dict[str, str] = {
    "RK": "rank",
    "PLAYER NAME": "name",
    "TEAM": "grouping",
    "POS": "category",
    "BYE": "week",
}


def parse_catalog(text: str) -> list[dict[str, str]]:
    """Parse CSV `text` into item records.

    Raises
    ------
    ValidationError
        If the text is empty or a required header is missing.
    """
    rows = [r for r in csv.reader(io.StringIO(text)) if any(c.strip() for c in r)]
    if not rows:
        raise ValidationError("catalog CSV is empty")

    header = [h.strip().upper() for h in rows[0]]
    missing = [label for label in COLUMNS if label not in header]
    if missing:
        raise ValidationError(
            f"catalog CSV must have headers {', '.join(COLUMNS)}; missing {', '.join(missing)}"
        )
    index = {field: header.index(label) for label, field in COLUMNS.items()}

    records: list[dict[str, str]] = []
    for row in rows[1:]:
        records.append(
            {field: (row[i].strip() if i < len(row) else "") for field, i in index.items()}
        )
    logger.debug("Parsed %d catalog rows", len(records))
    return records


def read_catalog(path: Path) -> list[dict[str, str]]:
    """Read and parse the CSV file at `path` (UTF-8, BOM tolerated)."""
    return parse_catalog(path.read_text(encoding="utf-8-sig"))


__all__ = ["COLUMNS", "parse_catalog", "read_catalog"]
