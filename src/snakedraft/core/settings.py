"""Centralized application configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod

Draft-shape values (participants, rounds, clock durations) live here so that the
engine never hardcodes them; `DraftConfig.from_settings()` turns them into the
engine-facing configuration model.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `SNAKEDRAFT_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    participant_count : int
        Number of drafting slots; maps from `SNAKEDRAFT_PARTICIPANTS`.
    total_rounds : int
        Number of snake rounds; maps from `SNAKEDRAFT_ROUNDS`.
    early_round_seconds / late_round_seconds : int
        Turn clock durations before and after the `early_rounds` cutoff.
    warning_threshold : int
        Remaining seconds at which the low-time warning fires.
    state_path : Path
        Write-through snapshot file used by the CLI and the API.
    auto_tick : bool
        Whether the API runs its own once-per-`tick_interval` clock driver.
    """

    environment: EnvName = Field(default="dev", alias="SNAKEDRAFT_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")

    participant_count: int = Field(default=12, ge=1, alias="SNAKEDRAFT_PARTICIPANTS")
    total_rounds: int = Field(default=15, ge=1, alias="SNAKEDRAFT_ROUNDS")
    early_round_seconds: int = Field(default=120, ge=1, alias="SNAKEDRAFT_EARLY_SECONDS")
    late_round_seconds: int = Field(default=90, ge=1, alias="SNAKEDRAFT_LATE_SECONDS")
    early_rounds: int = Field(default=4, ge=0, alias="SNAKEDRAFT_EARLY_ROUNDS")
    warning_threshold: int = Field(default=10, ge=0, alias="SNAKEDRAFT_WARNING_SECONDS")

    state_path: Path = Field(
        default=Path("artifacts") / "session.json", alias="SNAKEDRAFT_STATE_PATH"
    )
    auto_tick: bool = Field(default=True, alias="SNAKEDRAFT_AUTO_TICK")
    tick_interval: float = Field(default=1.0, gt=0.0, alias="SNAKEDRAFT_TICK_INTERVAL")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    @property
    def is_prod(self) -> bool:
        """Return True if running in the production environment."""
        return self.environment == "prod"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("SNAKEDRAFT_ENV", "dev")
    return Settings()


# Export a ready-to-use singleton (import-time read of env / .env files).
settings: Settings = load_settings()


def get_logger(name: str = "snakedraft") -> logging.Logger:
    """Return a process-global logger configured to the current `LOG_LEVEL`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
