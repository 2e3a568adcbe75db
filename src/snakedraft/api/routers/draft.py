"""
API Routes for the draft session.

Endpoints
---------
- `GET  /session`                : Compact view (status, clock, who's up, ticker).
- `GET  /session/state`          : Full serializable snapshot.
- `POST /session/catalog`        : Replace the catalog (records or CSV text).
- `POST /session/participants`   : Replace the participant list.
- `PUT  /session/participants/{slot}` : Rename one participant.
- `POST /session/start`          : Start the draft.
- `POST /session/reset`          : Clear picks and return to setup.
- `POST /session/picks`          : Pick an item by id.
- `POST /session/picks/top`      : Pick the top of a filtered list.
- `POST /session/undo` / `redo`  : Walk the history.
- `GET  /items`, `/items/filters`: Best-available list and filter menus.
- `GET  /board`, `/results`, `/results.csv`, `/events`

Design Decisions
----------------
- **Async handlers**: engine calls are short and synchronous; running them on
  the event loop serializes them with the clock ticker.
- **Errors**: domain errors propagate to the app-level handler, which maps
  them to their HTTP status and a stable error code.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse

from snakedraft.api.schemas import (
    ActionResponse,
    BoardResponse,
    CatalogRequest,
    EventEntry,
    ParticipantsRequest,
    PickRequest,
    RenameRequest,
    SessionView,
    StartRequest,
    TopPickRequest,
)
from snakedraft.api.session_store import get_session_holder
from snakedraft.core.contracts.item import Item
from snakedraft.core.contracts.results import ParticipantRoster
from snakedraft.core.contracts.session import SessionState
from snakedraft.core.draft.pool import ItemFilter
from snakedraft.core.errors import ValidationError
from snakedraft.io.catalog import parse_catalog
from snakedraft.io.export import roster_csv

router = APIRouter(tags=["Draft"])


def _records(catalog: CatalogRequest) -> list[dict[str, Any]]:
    if catalog.csv is not None:
        return list(parse_catalog(catalog.csv))
    if catalog.items is not None:
        return catalog.items
    raise ValidationError("catalog needs either 'items' or 'csv'")


# --------------------------------------------------------------------------- #
# Session
# --------------------------------------------------------------------------- #


@router.get("/session", response_model=SessionView, summary="Current session view")
async def get_session() -> SessionView:
    return SessionView.from_engine(get_session_holder().engine)


@router.get("/session/state", response_model=SessionState, summary="Full session snapshot")
async def get_state() -> SessionState:
    return get_session_holder().engine.state


@router.post("/session/catalog", response_model=ActionResponse, summary="Load a catalog")
async def load_catalog(request: CatalogRequest) -> ActionResponse:
    """Replace the catalog. Only allowed before the draft starts."""
    engine = get_session_holder().engine
    return get_session_holder().respond(engine.load_catalog(_records(request)))


@router.post("/session/participants", response_model=ActionResponse)
async def configure_participants(request: ParticipantsRequest) -> ActionResponse:
    engine = get_session_holder().engine
    return get_session_holder().respond(engine.configure_participants(request.labels))


@router.put("/session/participants/{slot}", response_model=ActionResponse)
async def rename_participant(slot: int, request: RenameRequest) -> ActionResponse:
    engine = get_session_holder().engine
    return get_session_holder().respond(engine.rename_participant(slot, request.label))


@router.post("/session/start", response_model=ActionResponse, summary="Start the draft")
async def start_draft(request: StartRequest | None = None) -> ActionResponse:
    """
    Start the draft.

    Catalog and participants may be supplied here or configured beforehand via
    `/session/catalog` and `/session/participants`.
    """
    engine = get_session_holder().engine
    request = request or StartRequest()
    catalog = _records(request.catalog) if request.catalog is not None else None
    return get_session_holder().respond(engine.start(catalog, request.participants))


@router.post("/session/reset", response_model=ActionResponse)
async def reset_draft() -> ActionResponse:
    return get_session_holder().respond(get_session_holder().engine.reset())


# --------------------------------------------------------------------------- #
# Picks & History
# --------------------------------------------------------------------------- #


@router.post("/session/picks", response_model=ActionResponse, summary="Pick an item")
async def make_pick(request: PickRequest) -> ActionResponse:
    return get_session_holder().respond(get_session_holder().engine.pick(request.item_id))


@router.post("/session/picks/top", response_model=ActionResponse)
async def pick_top(request: TopPickRequest | None = None) -> ActionResponse:
    """Pick the best-ranked available item matching the filters."""
    request = request or TopPickRequest()
    engine = get_session_holder().engine
    return get_session_holder().respond(engine.pick_top(request.filters, request.search))


@router.post("/session/undo", response_model=ActionResponse)
async def undo() -> ActionResponse:
    return get_session_holder().respond(get_session_holder().engine.undo_last())


@router.post("/session/redo", response_model=ActionResponse)
async def redo() -> ActionResponse:
    return get_session_holder().respond(get_session_holder().engine.redo_last())


# --------------------------------------------------------------------------- #
# Read models
# --------------------------------------------------------------------------- #


@router.get("/items", response_model=list[Item], summary="Best available items")
async def list_items(
    category: str | None = None,
    grouping: str | None = None,
    week: int | None = None,
    search: str = "",
    limit: int = Query(default=50, ge=1, le=1000),
) -> list[Item]:
    engine = get_session_holder().engine
    filters = ItemFilter(category=category, grouping=grouping, week=week)
    return engine.available(filters, search).take(limit)


@router.get("/items/filters", summary="Distinct filter values")
async def filter_options() -> dict[str, list[Any]]:
    return get_session_holder().engine.filter_options()


@router.get("/board", response_model=BoardResponse)
async def get_board() -> BoardResponse:
    engine = get_session_holder().engine
    return BoardResponse(participants=engine.participants, rounds=engine.board())


@router.get("/results", response_model=list[ParticipantRoster])
async def get_results() -> list[ParticipantRoster]:
    return get_session_holder().engine.export_results()


@router.get("/results.csv", response_class=PlainTextResponse)
async def get_results_csv() -> PlainTextResponse:
    text = roster_csv(get_session_holder().engine.export_results())
    return PlainTextResponse(
        text,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="final_rosters.csv"'},
    )


@router.get("/events", response_model=list[EventEntry], summary="Events since a sequence number")
async def list_events(after: int = Query(default=0, ge=0)) -> list[EventEntry]:
    return get_session_holder().events_after(after)


__all__ = ["router"]
