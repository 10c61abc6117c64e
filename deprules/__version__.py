"""
deprules version information.

This module provides a single source of truth for the package version.

Version format:
    MAJOR.MINOR.PATCH[.devN]
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Main version (single source of truth)
# ---------------------------------------------------------------------------

__version__ = "0.1.0.dev0"


# ---------------------------------------------------------------------------
# Human-readable version (for CLI)
# ---------------------------------------------------------------------------

VERSION_STRING = f"deprules {__version__}"
