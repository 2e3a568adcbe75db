"""Unit tests for the item pool and its best-available queries."""

from __future__ import annotations

from typing import Any

import pytest

from snakedraft.core.contracts.item import UNRANKED
from snakedraft.core.draft.pool import ItemFilter, ItemPool
from snakedraft.core.errors import AlreadyTakenError, NotFoundError, ValidationError


def _records() -> list[dict[str, Any]]:
    return [
        {"name": "Alpha", "category": "WR", "grouping": "KC", "week": 6, "rank": 3},
        {"name": "Bravo", "category": "RB", "grouping": "SF", "week": 9, "rank": 1},
        {"name": "Charlie", "category": "WR2", "grouping": "kc", "week": 6, "rank": "NR"},
        {"name": "Delta", "category": "QB", "grouping": "BUF", "week": 7, "rank": 2},
        {"name": "Echo", "category": "RB", "grouping": "SF", "week": 9, "rank": 2},
    ]


def _pool() -> ItemPool:
    pool = ItemPool()
    pool.ingest(_records())
    return pool


def _id(pool: ItemPool, name: str) -> str:
    return next(i.item_id for i in pool.items if i.name == name)


def test_best_available_sorted_by_rank_with_stable_ties() -> None:
    """Ascending rank; equal ranks keep catalog order; unranked sorts last."""
    names = [i.name for i in _pool().query()]
    assert names == ["Bravo", "Delta", "Echo", "Alpha", "Charlie"]


def test_unparseable_rank_becomes_unranked() -> None:
    pool = _pool()
    charlie = pool.get(_id(pool, "Charlie"))
    assert charlie.rank == UNRANKED
    assert not charlie.is_ranked
    assert charlie.category == "WR"
    assert charlie.grouping == "KC"


def test_ingest_drops_invalid_and_duplicate_rows() -> None:
    pool = ItemPool()
    kept = pool.ingest(
        [
            {"name": "Alpha", "category": "WR", "grouping": "KC"},
            {"name": "", "category": "WR"},
            {"name": "NoPos", "category": ""},
            {"name": "Alpha", "category": "WR1", "grouping": "kc"},
        ]
    )
    assert kept == 1
    assert len(pool) == 1


def test_ingest_with_nothing_usable_leaves_pool_untouched() -> None:
    pool = _pool()
    with pytest.raises(ValidationError):
        pool.ingest([{"name": "", "category": ""}])
    assert len(pool) == 5


def test_filters_and_search() -> None:
    """Category, grouping, week and substring search combine."""
    pool = _pool()
    wr = [i.name for i in pool.query(ItemFilter(category="wr1"))]
    assert wr == ["Alpha", "Charlie"]

    kc_week6 = pool.query(ItemFilter(grouping="kc", week=6))
    assert kc_week6.count() == 2

    everything = pool.query(ItemFilter(category="ALL", grouping="ALL"))
    assert everything.count() == 5

    assert [i.name for i in pool.query(search="ARL")] == ["Charlie"]
    assert pool.query(search="zulu").first() is None


def test_taken_items_leave_queries_and_cannot_be_taken_twice() -> None:
    pool = _pool()
    bravo = _id(pool, "Bravo")
    query = pool.query()

    pool.mark_taken(bravo)
    assert pool.is_taken(bravo)
    assert query.first() is not None and query.first().name == "Delta"
    with pytest.raises(AlreadyTakenError):
        pool.mark_taken(bravo)

    pool.mark_available(bravo)
    assert query.first() is not None and query.first().name == "Bravo"


def test_unknown_id_raises_not_found() -> None:
    pool = _pool()
    with pytest.raises(NotFoundError):
        pool.get("missing")
    with pytest.raises(NotFoundError):
        pool.mark_taken("missing")
    assert "missing" not in pool


def test_items_are_copies() -> None:
    """Mutating a returned item does not reach the pool."""
    pool = _pool()
    item = pool.get(_id(pool, "Alpha"))
    item.taken = True
    assert not pool.is_taken(item.item_id)


def test_filter_menus() -> None:
    pool = _pool()
    assert pool.categories() == ["QB", "RB", "WR"]
    assert pool.groupings() == ["BUF", "KC", "SF"]
    assert pool.weeks() == [6, 7, 9]
