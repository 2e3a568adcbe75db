"""snakedraft package bootstrap.

Exposes the package version used by the CLI banner and the ``/health`` endpoint.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
