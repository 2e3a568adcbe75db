"""
Command surface for draft front ends.

A single source of truth for the zero-argument actions a front end exposes
(focus search, draft the top of the filtered list, pause/resume, undo, redo,
restart the clock) and their default key bindings. The CLI loop and any other
front end resolve a key to a :class:`Command` and hand it to a
:class:`CommandDispatcher`.

Pattern: each command maps to a handler taking the dispatcher; handlers that
touch the engine return its :class:`DraftUpdate`, UI-only handlers return None.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from snakedraft.core.draft.engine import DraftEngine, DraftUpdate
from snakedraft.core.draft.pool import ItemFilter


class Command(str, Enum):
    """Actions available from the keyboard."""

    FOCUS_SEARCH = "focus_search"
    DRAFT_TOP = "draft_top"
    TOGGLE_PAUSE = "toggle_pause"
    UNDO = "undo"
    REDO = "redo"
    RESTART_CLOCK = "restart_clock"


#: Default key -> command bindings. "enter" stands for an empty input line.
DEFAULT_BINDINGS: dict[str, Command] = {
    "/": Command.FOCUS_SEARCH,
    "enter": Command.DRAFT_TOP,
    "p": Command.TOGGLE_PAUSE,
    "u": Command.UNDO,
    "r": Command.REDO,
    "c": Command.RESTART_CLOCK,
}

COMMAND_HELP: dict[Command, str] = {
    Command.FOCUS_SEARCH: "Search the best-available list",
    Command.DRAFT_TOP: "Draft the top item of the filtered list",
    Command.TOGGLE_PAUSE: "Pause / resume the clock",
    Command.UNDO: "Undo the last action",
    Command.REDO: "Redo the last undone action",
    Command.RESTART_CLOCK: "Restart the clock for the current turn",
}


@dataclass
class PickListView:
    """UI-side filter state that `DRAFT_TOP` drafts from."""

    filters: ItemFilter = field(default_factory=ItemFilter)
    search: str = ""

    def clear(self) -> None:
        self.filters = ItemFilter()
        self.search = ""


Handler = Callable[["CommandDispatcher"], DraftUpdate | None]


def _focus_search(d: CommandDispatcher) -> None:
    if d.on_focus_search is not None:
        d.on_focus_search()
    return None


_HANDLERS: dict[Command, Handler] = {
    Command.FOCUS_SEARCH: _focus_search,
    Command.DRAFT_TOP: lambda d: d.engine.pick_top(d.view.filters, d.view.search),
    Command.TOGGLE_PAUSE: lambda d: d.engine.toggle_pause(),
    Command.UNDO: lambda d: d.engine.undo_last(),
    Command.REDO: lambda d: d.engine.redo_last(),
    Command.RESTART_CLOCK: lambda d: d.engine.restart_clock(),
}


class CommandDispatcher:
    """Resolve keys to commands and run them against one engine.

    Domain errors raised by the engine propagate unchanged; the front end
    decides how to report them.
    """

    def __init__(
        self,
        engine: DraftEngine,
        *,
        bindings: Mapping[str, Command] | None = None,
        on_focus_search: Callable[[], None] | None = None,
    ) -> None:
        self.engine = engine
        self.view = PickListView()
        self.bindings: dict[str, Command] = dict(bindings or DEFAULT_BINDINGS)
        self.on_focus_search = on_focus_search

    def resolve(self, key: str) -> Command | None:
        """Return the command bound to `key` (letters are case-insensitive)."""
        normalized = key.strip().lower() or "enter"
        return self.bindings.get(normalized)

    def dispatch(self, command: Command) -> DraftUpdate | None:
        return _HANDLERS[command](self)

    def handle_key(self, key: str) -> DraftUpdate | None:
        """Run the command bound to `key`; unbound keys do nothing."""
        command = self.resolve(key)
        if command is None:
            return None
        return self.dispatch(command)


__all__ = [
    "COMMAND_HELP",
    "DEFAULT_BINDINGS",
    "Command",
    "CommandDispatcher",
    "PickListView",
]
