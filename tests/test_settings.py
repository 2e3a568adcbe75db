"""Typed smoke tests for the settings loader.

These tests verify four guarantees:
1) Importing the module-level `settings` yields a `Settings` instance.
2) Environment variables override defaults after clearing the loader cache.
3) Draft-shape variables flow into `DraftConfig.from_settings()`.
4) `get_logger()` respects the configured LOG_LEVEL when constructing loggers.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from snakedraft.core.contracts.session import DraftConfig
from snakedraft.core.settings import (
    Settings,
    get_logger,
    load_settings,
    settings,
)


def test_settings_instance_type() -> None:
    """`settings` should be an instance of the typed `Settings` model."""
    assert isinstance(settings, Settings)


def test_env_overrides_with_cache_clear(monkeypatch: Any) -> None:
    """Changing env vars should take effect after `load_settings.cache_clear()`."""
    monkeypatch.setenv("SNAKEDRAFT_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    load_settings.cache_clear()
    s = load_settings()

    assert s.environment == "test"
    assert s.is_test and not s.is_prod
    assert s.log_level == "DEBUG"
    load_settings.cache_clear()


def test_draft_shape_from_env(monkeypatch: Any, tmp_path: Path) -> None:
    """Participants, rounds and clock durations are read from the environment."""
    monkeypatch.setenv("SNAKEDRAFT_PARTICIPANTS", "10")
    monkeypatch.setenv("SNAKEDRAFT_ROUNDS", "16")
    monkeypatch.setenv("SNAKEDRAFT_EARLY_SECONDS", "60")
    monkeypatch.setenv("SNAKEDRAFT_STATE_PATH", str(tmp_path / "s.json"))

    load_settings.cache_clear()
    s = load_settings()
    config = DraftConfig.from_settings(s)

    assert config.participant_count == 10
    assert config.total_rounds == 16
    assert config.early_round_seconds == 60
    assert config.late_round_seconds == 90
    assert s.state_path == tmp_path / "s.json"
    load_settings.cache_clear()


def test_get_logger_respects_level(monkeypatch: Any) -> None:
    """`get_logger()` should apply the numeric level derived from `LOG_LEVEL`."""
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    load_settings.cache_clear()
    _ = load_settings()

    logger = get_logger("snakedraft.tests.settings")

    assert logger.level == logging.ERROR
    # Sanity: the handler exists and uses our simple formatter.
    assert logger.handlers, "Expected at least one StreamHandler to be attached."
    load_settings.cache_clear()
