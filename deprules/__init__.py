"""
deprules: cross-build dependency consistency verifier

deprules inspects the dependency rules (Requires, Provides, Conflicts,
Obsoletes, and friends) declared by every subpackage of a build and,
optionally, compares them against a previous build of the same package.

Checks include:
    • Unexpanded macros left in dependency version strings
    • Shared library dependencies without an explicit subpackage requirement
    • Shared libraries provided by more than one subpackage
    • Missing epoch prefixes on version-release strings
    • Gained, changed, and lost dependencies between builds
"""

from __future__ import annotations

from deprules.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "deprules Contributors"
__license__ = "Apache-2.0"
__description__ = "Cross-build dependency rule consistency checks for packaged software."

# ---------------------------------------------------------------------------
# Public API
#
# Only expose stable, documented interfaces here.
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
]
