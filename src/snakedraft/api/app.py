"""
FastAPI Application Factory & Configuration.

This module initializes the FastAPI application instance. It is responsible for:
1.  **Middleware Setup**: CORS for browser front ends (board displays, phones).
2.  **Exception Handling**: Domain errors map to their HTTP status with a stable
    machine-readable ``error`` code; everything else returns structured JSON.
3.  **Routing**: Mounting the draft and clock routers plus `/health`.
4.  **Lifecycle**: Restoring the saved session and running the clock ticker.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`). This allows for:
-   Easy testing (spinning up separate app instances per test).
-   Configuration injection (turning the ticker or restore off in tests).
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from snakedraft import __version__
from snakedraft.api.routers import clock, draft
from snakedraft.api.session_store import SessionHolder
from snakedraft.api.ticker import run_ticker
from snakedraft.core.errors import DraftError
from snakedraft.core.settings import get_logger, load_settings

logger = get_logger("snakedraft.api")


def create_app(*, auto_tick: bool | None = None, restore: bool = True) -> FastAPI:
    """
    Construct and configure the snakedraft FastAPI application.

    Parameters
    ----------
    auto_tick:
        Run the once-per-interval clock driver. Defaults to ``SNAKEDRAFT_AUTO_TICK``.
    restore:
        Reload the autosaved session on startup.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    cfg = load_settings()
    tick_enabled = cfg.auto_tick if auto_tick is None else auto_tick

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Starting up (env=%s)", cfg.environment)
        holder = SessionHolder.get_instance()
        if restore and holder.restore():
            logger.info("Restored session from %s", holder.store.path)

        task: asyncio.Task[None] | None = None
        if tick_enabled:
            task = asyncio.create_task(run_ticker(holder, cfg.tick_interval))

        yield

        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.info("Shutting down")

    app = FastAPI(
        title="snakedraft API",
        description="Snake-draft session with turn clock, undo/redo and autosave",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Global Exception Handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(DraftError)
    async def draft_error_handler(request: Request, exc: DraftError) -> JSONResponse:
        """Map domain errors to `{"error": <code>, "detail": <message>}`."""
        return JSONResponse(
            status_code=exc.http_status,
            content={"error": exc.code, "detail": exc.message},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Map Python ValueErrors to HTTP 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content={"error": "bad_request", "detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler so unexpected failures still return JSON."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    app.include_router(draft.router)
    app.include_router(clock.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness probe."""
        return {"status": "ok", "version": __version__, "environment": cfg.environment}

    return app


__all__ = ["create_app"]
