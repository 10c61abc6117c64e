"""Configuration file loader for deprules.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``deprules.toml``: settings under ``[deprules]`` table
- ``pyproject.toml``: settings under ``[tool.deprules]`` table

Discovery order:

1. Explicit path from ``--config`` or ``DEPRULES_CONFIG``
2. ``deprules.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.deprules]`` section

Configuration precedence: defaults < config file < CLI args.

Typical usage::

    config = load_config()  # Auto-discover
    config = load_config(Path("custom.toml"))  # Explicit path

Example (``deprules.toml``)::

    [deprules]
    shared_lib_prefix = "lib"
    spec_extension = ".spec"
    rebaseable = ["foo", "foo2"]
"""

from __future__ import annotations


import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from deprules.exceptions import ConfigError
from deprules.utils.logger import get_logger
from deprules.constants import (
    CONFIG_FILENAME,
    DEFAULT_REBASEABLE,
    SHARED_LIB_PREFIX,
    SPEC_FILENAME_EXTENSION,
)

logger = get_logger("config")


@dataclass
class DepRulesConfig:
    """Parsed and validated deprules configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        shared_lib_prefix: Subject prefix identifying automatically
            generated shared library dependencies.
        spec_extension: Extension of the spec file looked up in the source
            package file list for reporting.
        rebaseable: Package names allowed to change name in a rebase.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    shared_lib_prefix: str = SHARED_LIB_PREFIX
    spec_extension: str = SPEC_FILENAME_EXTENSION
    rebaseable: List[str] = field(default_factory=lambda: list(DEFAULT_REBASEABLE))

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "shared_lib_prefix": self.shared_lib_prefix,
            "spec_extension": self.spec_extension,
            "rebaseable": list(self.rebaseable),
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Search order:

    1. ``explicit_path`` (from ``--config`` or ``DEPRULES_CONFIG``)
    2. ``deprules.toml`` in current directory
    3. ``pyproject.toml`` with ``[tool.deprules]`` section in current directory

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    deprules_toml = cwd / CONFIG_FILENAME
    if deprules_toml.is_file():
        logger.debug("Found %s: %s", CONFIG_FILENAME, deprules_toml)
        return deprules_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_deprules_section(pyproject_toml):
        logger.debug("Found [tool.deprules] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_deprules_section(path: Path) -> bool:
    """Check if pyproject.toml contains a ``[tool.deprules]`` section.

    An unreadable or invalid pyproject.toml is treated as having no
    section; it is not ours to validate.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    return "deprules" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> DepRulesConfig:
    """Load and validate deprules configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`DepRulesConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return DepRulesConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("deprules", {})
    else:
        section = raw.get("deprules", {})

    if not section:
        logger.debug("Config file found but no deprules section, using defaults")
        return DepRulesConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _require_string(section: Dict[str, Any], key: str, config_path: str) -> str:
    val = section[key]
    if not isinstance(val, str) or not val:
        raise ConfigError(
            f"{key} must be a non-empty string, got {type(val).__name__}",
            config_path=config_path,
            option=key,
        )
    return val


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> DepRulesConfig:
    """Parse and validate the ``[deprules]`` / ``[tool.deprules]`` table.

    Raises:
        ConfigError: Unknown keys or incorrect types.
    """
    config = DepRulesConfig()

    known_top = {
        "shared_lib_prefix",
        "spec_extension",
        "rebaseable",
    }

    unknown_top = set(section.keys()) - known_top
    if unknown_top:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown_top))}",
            config_path=config_path,
        )

    if "shared_lib_prefix" in section:
        config.shared_lib_prefix = _require_string(
            section, "shared_lib_prefix", config_path
        )

    if "spec_extension" in section:
        config.spec_extension = _require_string(section, "spec_extension", config_path)

    if "rebaseable" in section:
        val = section["rebaseable"]
        if not isinstance(val, list) or not all(isinstance(v, str) for v in val):
            raise ConfigError(
                "rebaseable must be a list of strings",
                config_path=config_path,
                option="rebaseable",
            )
        config.rebaseable = list(val)

    return config
