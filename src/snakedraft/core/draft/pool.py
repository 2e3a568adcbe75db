"""
Item pool: the shared, depleting catalog of selectable items.

The pool owns every :class:`Item` of the session and is the only place their
``taken`` flag changes. It offers:

- ``ingest(records)``: replace the whole catalog (no merging), resetting flags.
- ``load(items)``: restore a catalog verbatim, flags included (undo/reload).
- ``query(filters, search)``: a lazy, restartable view over available items.
- ``mark_taken`` / ``mark_available``: the two flag mutations.

Items handed out by the pool are copies; callers cannot mutate pool state
behind its back.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaError

from snakedraft.core.contracts.item import Item, normalize_category
from snakedraft.core.errors import AlreadyTakenError, NotFoundError, ValidationError
from snakedraft.core.settings import get_logger

logger = get_logger("snakedraft.pool")

#: Filter value meaning "no filter", as offered by pick-list menus.
ALL = "ALL"


class ItemFilter(BaseModel):
    """Category / grouping / week filters for pool queries. ``None`` means any."""

    category: str | None = Field(default=None)
    grouping: str | None = Field(default=None)
    week: int | None = Field(default=None)

    def matches(self, item: Item) -> bool:
        """Return True if `item` passes every active filter."""
        if self.category and self.category.upper() != ALL:
            if item.category != normalize_category(self.category):
                return False
        if self.grouping and self.grouping.upper() != ALL:
            if item.grouping != self.grouping.strip().upper():
                return False
        if self.week is not None and item.week != self.week:
            return False
        return True


class ItemQuery:
    """Available items matching a filter, evaluated afresh on every iteration."""

    __slots__ = ("_pool", "_filters", "_needle", "_sort_by_rank")

    def __init__(
        self,
        pool: ItemPool,
        filters: ItemFilter,
        search: str,
        sort_by_rank: bool,
    ) -> None:
        self._pool = pool
        self._filters = filters
        self._needle = search.strip().lower()
        self._sort_by_rank = sort_by_rank

    def _candidates(self) -> Iterator[Item]:
        for item in self._pool._items:
            if item.taken or not self._filters.matches(item):
                continue
            if self._needle and self._needle not in item.name.lower():
                continue
            yield item

    def __iter__(self) -> Iterator[Item]:
        candidates: Iterable[Item] = self._candidates()
        if self._sort_by_rank:
            # sorted() is stable, so equal ranks keep catalog order
            candidates = sorted(candidates, key=lambda i: i.rank)
        for item in candidates:
            yield item.model_copy()

    def first(self) -> Item | None:
        """Return the top item, or None if nothing matches."""
        return next(iter(self), None)

    def count(self) -> int:
        """Return the number of matching items."""
        return sum(1 for _ in self._candidates())

    def take(self, limit: int) -> list[Item]:
        """Return at most `limit` items."""
        out: list[Item] = []
        for item in self:
            if len(out) >= limit:
                break
            out.append(item)
        return out


class ItemPool:
    """Holds the catalog and the taken flags."""

    __slots__ = ("_items", "_index")

    def __init__(self) -> None:
        self._items: list[Item] = []
        self._index: dict[str, int] = {}

    # ------------------------------- Loading --------------------------------

    def ingest(self, records: Iterable[Item | Mapping[str, Any]]) -> int:
        """Replace the pool with `records` and return the number of items kept.

        Rows that fail validation (e.g. no name) and duplicate identifiers are
        dropped with a warning. All taken flags start out False.

        Raises
        ------
        ValidationError
            If no row survives validation. The pool is left untouched.
        """
        parsed: list[Item] = []
        seen: set[str] = set()
        dropped = 0
        for n, record in enumerate(records, start=1):
            try:
                if isinstance(record, Item):
                    item = record.model_copy(update={"taken": False})
                else:
                    item = Item.model_validate({**record, "taken": False})
            except SchemaError as exc:
                dropped += 1
                logger.warning("Dropping catalog row %d: %s", n, exc.errors()[0]["msg"])
                continue
            if item.item_id in seen:
                dropped += 1
                logger.warning("Dropping catalog row %d: duplicate item %r", n, item.name)
                continue
            seen.add(item.item_id)
            parsed.append(item)

        if not parsed:
            raise ValidationError("catalog contains no usable items")

        self._replace(parsed)
        logger.info("Ingested %d items (%d rows dropped)", len(parsed), dropped)
        return len(parsed)

    def load(self, items: Iterable[Item]) -> None:
        """Restore `items` verbatim, taken flags included."""
        self._replace([i.model_copy() for i in items])

    def _replace(self, items: list[Item]) -> None:
        self._items = items
        self._index = {item.item_id: n for n, item in enumerate(items)}

    # ------------------------------- Reads ----------------------------------

    @property
    def items(self) -> list[Item]:
        """Return copies of every item in catalog order."""
        return [i.model_copy() for i in self._items]

    def get(self, item_id: str) -> Item:
        """Return a copy of the item with `item_id`."""
        return self._lookup(item_id).model_copy()

    def is_taken(self, item_id: str) -> bool:
        return self._lookup(item_id).taken

    def query(
        self,
        filters: ItemFilter | None = None,
        search: str = "",
        *,
        sort_by_rank: bool = True,
    ) -> ItemQuery:
        """Return a lazy, restartable view over available items."""
        return ItemQuery(self, filters or ItemFilter(), search, sort_by_rank)

    def categories(self) -> list[str]:
        return sorted({i.category for i in self._items})

    def groupings(self) -> list[str]:
        return sorted({i.grouping for i in self._items if i.grouping})

    def weeks(self) -> list[int]:
        return sorted({i.week for i in self._items})

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._index

    # ------------------------------- Mutations ------------------------------

    def mark_taken(self, item_id: str) -> None:
        """Flag `item_id` as taken.

        Raises
        ------
        NotFoundError
            If the identifier is not in the pool.
        AlreadyTakenError
            If the item is already taken.
        """
        item = self._lookup(item_id)
        if item.taken:
            raise AlreadyTakenError(f"item {item.name!r} ({item_id}) is already taken")
        item.taken = True

    def mark_available(self, item_id: str) -> None:
        """Clear the taken flag of `item_id`."""
        self._lookup(item_id).taken = False

    def reset_flags(self) -> None:
        """Mark every item available again."""
        for item in self._items:
            item.taken = False

    def _lookup(self, item_id: str) -> Item:
        n = self._index.get(item_id)
        if n is None:
            raise NotFoundError(f"unknown item id {item_id!r}")
        return self._items[n]


__all__ = ["ALL", "ItemFilter", "ItemPool", "ItemQuery"]
