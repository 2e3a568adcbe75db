"""
API Routes for the turn clock.

Endpoints
---------
- `POST /clock/pause`   : RUNNING -> PAUSED.
- `POST /clock/resume`  : PAUSED -> RUNNING.
- `POST /clock/toggle`  : Either of the above.
- `POST /clock/restart` : Fresh countdown for the current round, pause kept.
- `POST /clock/tick`    : Advance one second by hand (when auto-tick is off).
"""

from __future__ import annotations

from fastapi import APIRouter

from snakedraft.api.schemas import ActionResponse
from snakedraft.api.session_store import get_session_holder

router = APIRouter(prefix="/clock", tags=["Clock"])


@router.post("/pause", response_model=ActionResponse)
async def pause() -> ActionResponse:
    return get_session_holder().respond(get_session_holder().engine.pause())


@router.post("/resume", response_model=ActionResponse)
async def resume() -> ActionResponse:
    return get_session_holder().respond(get_session_holder().engine.resume())


@router.post("/toggle", response_model=ActionResponse)
async def toggle() -> ActionResponse:
    return get_session_holder().respond(get_session_holder().engine.toggle_pause())


@router.post("/restart", response_model=ActionResponse)
async def restart() -> ActionResponse:
    return get_session_holder().respond(get_session_holder().engine.restart_clock())


@router.post("/tick", response_model=ActionResponse)
async def tick() -> ActionResponse:
    return get_session_holder().respond(get_session_holder().engine.tick())


__all__ = ["router"]
