"""
ASGI Entry Point for the snakedraft API.

This module exposes the `app` object required by ASGI servers (Uvicorn/Gunicorn).
It loads environment variables from `.env` before the application factory runs,
so draft-shape settings (participants, rounds, clock) are in place.

Usage
-----
Run via the module entry point:
    $ python -m snakedraft.api.server

Or via uvicorn directly (keep a single worker: the session lives in-process):
    $ uvicorn snakedraft.api.server:app
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

# Load .env BEFORE importing the application factory; settings are read at import.
load_dotenv(dotenv_path=Path(".env"))

from snakedraft.api.app import create_app  # noqa: E402
from snakedraft.core.settings import load_settings  # noqa: E402

# Factory invocation
app = create_app()


def main() -> None:
    """Run the API server locally for development."""
    cfg = load_settings()

    print(f"{'[ Draft Config ]':=^60}")
    print(f"{'participants':<20} : {cfg.participant_count}")
    print(f"{'rounds':<20} : {cfg.total_rounds}")
    print(
        f"{'turn clock':<20} : {cfg.early_round_seconds}s (rounds 1-{cfg.early_rounds}), "
        f"{cfg.late_round_seconds}s after"
    )
    print(f"{'state file':<20} : {cfg.state_path}")
    print(f"{'auto tick':<20} : {'on' if cfg.auto_tick else 'off'}")
    print(f"{'='*60}\n")

    uvicorn.run(
        "snakedraft.api.server:app",
        host="0.0.0.0",
        port=8000,
        log_level="info",
    )


if __name__ == "__main__":
    main()
