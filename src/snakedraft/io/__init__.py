"""Tabular input/output: catalog ingestion and results export."""

from __future__ import annotations

from .catalog import parse_catalog, read_catalog
from .export import roster_csv, write_roster_csv

__all__ = ["parse_catalog", "read_catalog", "roster_csv", "write_roster_csv"]
