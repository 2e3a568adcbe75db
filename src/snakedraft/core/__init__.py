"""Core package initializer for snakedraft.

Downstream code imports from the submodules directly:
    from snakedraft.core.settings import settings, load_settings, Settings, get_logger
    from snakedraft.core.draft import DraftEngine
"""

from __future__ import annotations

__all__ = ["__doc__"]
