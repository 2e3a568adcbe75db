# src/snakedraft/api/ticker.py
"""
Clock driver for the API process.

The engine's turn clock has no timer of its own; something must call
``tick()`` once per second. In the API that is this asyncio task, started and
cancelled by the application lifespan.

It runs on the event loop, so ticks interleave with (never overlap) request
handlers. A failing tick is logged and the loop keeps going: a full disk must
not freeze the draft clock.
"""

from __future__ import annotations

import asyncio

from snakedraft.api.session_store import SessionHolder
from snakedraft.core.settings import get_logger

logger = get_logger("snakedraft.ticker")


def tick_once(holder: SessionHolder) -> int:
    """Advance the session clock by one second; return the number of events."""
    update = holder.publish(holder.engine.tick())
    for event in update.events:
        logger.info("Clock event: %s", event.kind)
    return len(update.events)


async def run_ticker(holder: SessionHolder, interval: float) -> None:
    """Call :func:`tick_once` every `interval` seconds until cancelled."""
    logger.info("Clock ticker started (every %.2fs)", interval)
    try:
        while True:
            await asyncio.sleep(interval)
            try:
                tick_once(holder)
            except Exception:
                logger.exception("Clock tick failed")
    finally:
        logger.info("Clock ticker stopped")


__all__ = ["run_ticker", "tick_once"]
