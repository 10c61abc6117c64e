"""
Centralized constants for deprules.

This module defines immutable configuration values used across deprules,
including dependency rule vocabulary, reporting strings, configuration
defaults, and logging formats. All values are intended to be treated as
read-only.
"""

from typing import Final, Mapping

# ---------------------------------------------------------------------------
# Inspection identity
# ---------------------------------------------------------------------------

#: Header attached to every finding produced by the inspection.
INSPECTION_NAME: Final[str] = "deprules"

# ---------------------------------------------------------------------------
# Dependency rule vocabulary
# ---------------------------------------------------------------------------

#: Prefix identifying automatically generated shared library dependencies.
SHARED_LIB_PREFIX: Final[str] = "lib"

#: Architecture name used for source packages.
SRPM_ARCH_NAME: Final[str] = "src"

#: Opening marker of a template placeholder in a version string.
MACRO_OPEN: Final[str] = "%{"

#: Closing marker of a template placeholder in a version string.
MACRO_CLOSE: Final[str] = "}"

#: Start of an architecture qualifier on a dependency subject.
ISA_OPEN: Final[str] = "("

# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------

#: Extension identifying the spec file in a source package file list.
SPEC_FILENAME_EXTENSION: Final[str] = ".spec"

#: Label used when no spec file name can be discovered.
DEFAULT_SPEC_LABEL: Final[str] = "spec file"

#: Remediation text keyed by remedy identifier.
REMEDIES: Final[Mapping[str, str]] = {
    "MACROS": (
        "Check the dependency rules in the spec file and make sure every "
        "macro used in a version field is defined and expanded at build time."
    ),
    "EXPLICIT": (
        "Add an explicit 'Requires: SUBPACKAGE = %{version}-%{release}' to "
        "the subpackage carrying the shared library dependency so old and new "
        "subpackages cannot be mixed."
    ),
    "EXPLICIT_EPOCH": (
        "Add an explicit 'Requires: SUBPACKAGE = %{epoch}:%{version}-%{release}' "
        "to the subpackage carrying the shared library dependency so old and "
        "new subpackages cannot be mixed."
    ),
    "MULTIPLE": (
        "Make sure only one subpackage provides each shared library, or add "
        "explicit requirements so the dependency binds to a single subpackage."
    ),
    "EPOCH": (
        "The package defines an Epoch, so every dependency using its "
        "version-release must be written as %{epoch}:%{version}-%{release}."
    ),
    "GAINED": (
        "A new dependency appeared in this build. Make sure it is intended "
        "and document it if it is."
    ),
    "CHANGED": (
        "A dependency changed between builds. Make sure the change is "
        "intended and compatible with existing users of the package."
    ),
    "LOST": (
        "A dependency disappeared in this build. Make sure nothing relied "
        "on it before removing it."
    ),
}

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Name of the standalone configuration file.
CONFIG_FILENAME: Final[str] = "deprules.toml"

#: Environment variable naming an explicit configuration file.
CONFIG_ENVVAR: Final[str] = "DEPRULES_CONFIG"

#: Default for ``rebaseable``.
DEFAULT_REBASEABLE: Final[tuple] = ()

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading manifest files.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
