# src/snakedraft/cli.py
"""
snakedraft Command Line Interface (CLI).

This module implements the terminal front end using `typer` and `rich`.

Features
--------
- **Live Draft Loop**: `run` drives a whole draft from the keyboard, with the
  turn clock fed from wall-clock time elapsed between inputs.
- **Rich Rendering**: Snake board, best-available list and who's-up strip as tables.
- **Write-Through Autosave**: Every action saves the session snapshot, so a
  crashed or closed session resumes with `run --resume`.
- **Offline Views**: `board`, `available` and `export` read a saved session.

Usage
-----
    # Start a 12-team, 15-round draft from a ranked CSV
    $ snakedraft run rankings.csv -n 12 -r 15

    # Resume the autosaved session
    $ snakedraft run rankings.csv --resume

    # Export final rosters
    $ snakedraft export -o final_rosters.csv
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from snakedraft import __version__
from snakedraft.commands import COMMAND_HELP, DEFAULT_BINDINGS, CommandDispatcher
from snakedraft.core.contracts.item import KNOWN_CATEGORIES, is_known_category
from snakedraft.core.contracts.session import DraftConfig, DraftStatus, SessionState
from snakedraft.core.draft.engine import DraftEngine, DraftUpdate
from snakedraft.core.draft.pool import ItemFilter
from snakedraft.core.errors import DraftError
from snakedraft.core.history.storage import SessionStore
from snakedraft.core.settings import load_settings
from snakedraft.io.catalog import read_catalog
from snakedraft.io.export import write_roster_csv

# Ensure .env overrides (draft shape, state path) are visible before settings load
load_dotenv()

app = typer.Typer(
    help="snakedraft: run a timed snake draft from the terminal.",
    rich_markup_mode="markdown",
)
console = Console()

# Wall-clock source for the live loop; tests patch this.
_now = time.monotonic

_LIST_SIZE = 10

_CATEGORY_COLOURS = dict(
    zip(KNOWN_CATEGORIES, ("red", "green", "blue", "yellow", "magenta", "cyan"), strict=True)
)


# --------------------------------------------------------------------------- #
# Helpers: Rendering
# --------------------------------------------------------------------------- #


def _format_mmss(total_seconds: int) -> str:
    minutes, seconds = divmod(max(0, total_seconds), 60)
    return f"{minutes}:{seconds:02d}"


def _category_cell(category: str) -> str:
    """Colour well-known categories; anything else is shown as-is."""
    if not is_known_category(category):
        return category
    colour = _CATEGORY_COLOURS[category]
    return f"[{colour}]{category}[/{colour}]"


def _render_board(engine: DraftEngine) -> None:
    """Render the snake board: one column per participant, one row per round."""
    table = Table(title="Draft Board", show_lines=True)
    table.add_column("Rd", justify="right", style="dim")
    current = engine.current_turn()
    for p in engine.participants:
        style = "bold cyan" if current and current.slot == p.slot else ""
        table.add_column(p.label, header_style=style, overflow="fold")

    for r, row in enumerate(engine.board(), start=1):
        cells: list[str] = []
        for pick in row:
            if pick is None:
                cells.append("")
                continue
            item = engine.get_item(pick.item_id)
            cells.append(f"{item.name}\n[dim]{item.category}-{item.grouping} #{pick.overall}[/dim]")
        table.add_row(str(r), *cells)
    console.print(table)


def _render_available(engine: DraftEngine, view: ItemFilter, search: str, limit: int) -> None:
    table = Table(title="Best Available")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Player")
    table.add_column("Pos")
    table.add_column("Team")
    table.add_column("Bye", justify="right")
    table.add_column("RK", justify="right")
    for n, item in enumerate(engine.available(view, search).take(limit), start=1):
        rank = "-" if not item.is_ranked else f"{item.rank:g}"
        table.add_row(
            str(n), item.name, _category_cell(item.category), item.grouping, str(item.week), rank
        )
    console.print(table)


def _render_status(engine: DraftEngine) -> None:
    """Render who's on the clock, the clock, and who's next."""
    turn = engine.current_turn()
    if turn is None:
        console.print(f"[dim]Draft status: {engine.status.value}[/dim]")
        return
    labels = {p.slot: p.label for p in engine.participants}
    after = [labels[t.slot] for t in engine.upcoming(2)]
    clock = _format_mmss(engine.remaining)
    clock_style = "red" if engine.remaining <= engine.config.warning_threshold else "green"
    console.print(
        f"[bold]Round {turn.round} · Pick {turn.overall}[/bold]  "
        f"On the clock: [bold cyan]{labels[turn.slot]}[/bold cyan]  "
        f"[{clock_style}]{clock}[/{clock_style}] ({engine.clock_status.value})"
    )
    if after:
        console.print(f"[dim]Next: {' · '.join(after)}[/dim]")


def _report(update: DraftUpdate | None) -> None:
    """Print notification events returned by an engine action."""
    if update is None:
        return
    for event in update.events:
        if event.kind == "pick_completed":
            console.print(f"[green]✔ Pick #{event.record.overall} recorded[/green]")
        elif event.kind == "threshold_crossed":
            console.bell()
            console.print(f"[yellow]⏰ {event.remaining} seconds left[/yellow]")
        elif event.kind == "turn_expired":
            console.bell()
            console.print("[bold red]⏰ Time! Make the pick when ready.[/bold red]")


def _render_help() -> None:
    keys = {cmd: key for key, cmd in DEFAULT_BINDINGS.items()}
    lines = [f"[bold]{keys[cmd]:>5}[/bold]  {text}" for cmd, text in COMMAND_HELP.items()]
    lines += [
        "[bold]  1-9[/bold]  Draft that row of the list",
        "[bold]    b[/bold]  Show the board",
        "[bold]    q[/bold]  Quit (the session is saved)",
    ]
    console.print(Panel("\n".join(lines), title="Keys", border_style="dim"))


# --------------------------------------------------------------------------- #
# Helpers: Session
# --------------------------------------------------------------------------- #


def _load_engine(state_path: Path | None) -> DraftEngine:
    """Rebuild an engine from the saved session, or exit with an error."""
    store = SessionStore(state_path)
    try:
        state = store.load()
    except ValueError as e:
        console.print(f"[bold red]❌ Could not read session {store.path}:[/bold red] {e}")
        raise typer.Exit(code=1) from e
    if state is None:
        console.print(f"[bold red]❌ No saved session at {store.path}[/bold red]")
        raise typer.Exit(code=1)
    return DraftEngine.from_state(state)


def _autosaver(store: SessionStore) -> Callable[[SessionState], None]:
    """Return an on-change hook that saves the session and only warns on failure."""

    def save(state: SessionState) -> None:
        if not store.autosave(state):
            console.print(f"[bold yellow]⚠️ Autosave to {store.path} failed[/bold yellow]")

    return save


class _ClockFeeder:
    """Turn wall-clock time elapsed between inputs into whole-second ticks."""

    def __init__(self) -> None:
        self._last = _now()
        self._carry = 0.0

    def catch_up(self, engine: DraftEngine) -> None:
        now = _now()
        self._carry += now - self._last
        self._last = now
        whole = int(self._carry)
        self._carry -= whole
        for _ in range(whole):
            _report(engine.tick())


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def run(
    catalog: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Ranked CSV with columns RK, PLAYER NAME, TEAM, POS, BYE.",
        ),
    ],
    participants: Annotated[
        int | None,
        typer.Option("--participants", "-n", min=1, help="Number of drafting teams."),
    ] = None,
    rounds: Annotated[
        int | None,
        typer.Option("--rounds", "-r", min=1, help="Number of snake rounds."),
    ] = None,
    names: Annotated[
        list[str] | None,
        typer.Option("--name", help="Team name in draft order (repeat per team)."),
    ] = None,
    state: Annotated[
        Path | None,
        typer.Option("--state", "-s", help="Session file (defaults to SNAKEDRAFT_STATE_PATH)."),
    ] = None,
    resume: Annotated[
        bool,
        typer.Option("--resume", help="Continue the saved session instead of starting over."),
    ] = False,
) -> None:
    """
    Run a live draft from the keyboard.

    Press Enter to draft the top of the list, `/` to search, `p` to pause,
    `u`/`r` to undo/redo. The session is saved after every action.
    """
    s = load_settings()
    config = DraftConfig.from_settings(s)
    if participants is not None:
        config = config.model_copy(update={"participant_count": participants})
    if rounds is not None:
        config = config.model_copy(update={"total_rounds": rounds})

    store = SessionStore(state)
    console.print(
        Panel.fit(
            f"[bold cyan]snakedraft {__version__}[/bold cyan]\nCatalog: [u]{catalog.name}[/u]",
            border_style="cyan",
        )
    )

    autosave = _autosaver(store)
    try:
        saved = store.load() if resume else None
        if saved is not None:
            engine = DraftEngine.from_state(saved, config, on_change=autosave)
            console.print(f"[dim]Resumed session from {store.path}[/dim]")
            if engine.status is DraftStatus.NOT_STARTED:
                if not saved.catalog:
                    engine.load_catalog(read_catalog(catalog))
                engine.start()
        else:
            engine = DraftEngine(config, on_change=autosave)
            engine.load_catalog(read_catalog(catalog))
            if names:
                engine.configure_participants(names)
            engine.start()
    except (DraftError, ValueError) as e:
        console.print(f"\n[bold red]❌ Setup Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    dispatcher = CommandDispatcher(engine)
    feeder = _ClockFeeder()
    _render_help()

    while engine.status is not DraftStatus.COMPLETE:
        _render_status(engine)
        _render_available(engine, dispatcher.view.filters, dispatcher.view.search, _LIST_SIZE)
        try:
            key = console.input("[bold]> [/bold]")
        except (EOFError, KeyboardInterrupt):
            break
        feeder.catch_up(engine)

        key = key.strip()
        if key.lower() == "q":
            break
        if key.lower() == "b":
            _render_board(engine)
            continue

        try:
            if key.startswith("/"):
                dispatcher.view.search = key[1:].strip()
                continue
            if key.isdigit():
                rows = engine.available(dispatcher.view.filters, dispatcher.view.search)
                listed = rows.take(_LIST_SIZE)
                n = int(key)
                if not 1 <= n <= len(listed):
                    console.print(f"[red]No row {n} in the list[/red]")
                    continue
                _report(engine.pick(listed[n - 1].item_id))
                dispatcher.view.search = ""
                continue
            if dispatcher.resolve(key) is None:
                console.print(f"[red]Unknown key {key!r}[/red]")
                continue
            _report(dispatcher.handle_key(key))
        except DraftError as e:
            console.print(f"[bold red]⚠️ {e}[/bold red]")

    if engine.status is DraftStatus.COMPLETE:
        console.print("\n[bold green]✅ Draft complete![/bold green]\n")
        _render_board(engine)
    console.print(f"[dim]Session saved to: {store.path}[/dim]")


@app.command()  # type: ignore[misc]
def board(
    state: Annotated[
        Path | None,
        typer.Option("--state", "-s", help="Session file (defaults to SNAKEDRAFT_STATE_PATH)."),
    ] = None,
) -> None:
    """Show the snake board of a saved session."""
    engine = _load_engine(state)
    _render_status(engine)
    _render_board(engine)


@app.command()  # type: ignore[misc]
def available(
    state: Annotated[
        Path | None,
        typer.Option("--state", "-s", help="Session file (defaults to SNAKEDRAFT_STATE_PATH)."),
    ] = None,
    category: Annotated[str | None, typer.Option("--category", "--pos")] = None,
    team: Annotated[str | None, typer.Option("--team")] = None,
    week: Annotated[int | None, typer.Option("--week", "--bye")] = None,
    search: Annotated[str, typer.Option("--search", "-q")] = "",
    limit: Annotated[int, typer.Option("--limit", "-l", min=1)] = 25,
) -> None:
    """List the best available items of a saved session."""
    engine = _load_engine(state)
    filters = ItemFilter(category=category, grouping=team, week=week)
    _render_available(engine, filters, search, limit)


@app.command()  # type: ignore[misc]
def export(
    state: Annotated[
        Path | None,
        typer.Option("--state", "-s", help="Session file (defaults to SNAKEDRAFT_STATE_PATH)."),
    ] = None,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Where to write the roster CSV."),
    ] = Path("final_rosters.csv"),
) -> None:
    """Export final rosters of a saved session as CSV."""
    engine = _load_engine(state)
    try:
        path = write_roster_csv(engine.export_results(), output)
    except OSError as e:
        console.print(f"[bold red]⚠️ Failed to save to {output}: {e}[/bold red]")
        raise typer.Exit(code=1) from e
    console.print(
        Panel(
            f"Saved to: [link=file://{path}]{path}[/link]",
            title="Rosters",
            border_style="green",
        )
    )


if __name__ == "__main__":
    app()
