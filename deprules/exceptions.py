"""
Custom exception hierarchy for deprules.

This module defines structured exception types used across deprules.
All exceptions inherit from :class:`DepRulesError` and support optional
structured metadata via the ``details`` attribute to improve diagnostics
and logging.

Policy violations found while inspecting a build are never raised; they
are reported as findings. These exceptions cover malformed input only.
"""

from __future__ import annotations

from typing import Any, Mapping, MutableMapping, Optional


class DepRulesError(Exception):
    """Base exception for all deprules errors.

    All deprules-specific exceptions should inherit from this class.
    It supports structured metadata via ``details`` for richer error
    reporting and debugging.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        # Internally normalize to a mutable dict
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


class ParseError(DepRulesError):
    """Raised when a dependency declaration cannot be parsed.

    Args:
        message: Error description.
        line_number: Position of the declaration in its list, if known.
        line_content: Raw declaration text.
        file_path: Path to the manifest the declaration came from.
    """

    __slots__ = ("line_number", "line_content", "file_path")

    def __init__(
        self,
        message: str,
        *,
        line_number: Optional[int] = None,
        line_content: Optional[str] = None,
        file_path: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "line", line_number)
        _add_if(
            details,
            "content",
            _truncate(line_content) if line_content is not None else None,
        )
        _add_if(details, "file", file_path)

        super().__init__(message, details)

        self.line_number = line_number
        self.line_content = line_content
        self.file_path = file_path


class ManifestError(DepRulesError):
    """Raised when a build manifest is malformed.

    Args:
        message: Error description.
        file_path: Path to the manifest file.
        package: Name (or index) of the package entry at fault.
        field_name: Offending field, if any.
    """

    __slots__ = ("file_path", "package", "field_name")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        package: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "file", file_path)
        _add_if(details, "package", package)
        _add_if(details, "field", field_name)

        super().__init__(message, details)

        self.file_path = file_path
        self.package = package
        self.field_name = field_name


class ConfigError(DepRulesError):
    """Raised when a configuration file is invalid.

    Args:
        message: Error description.
        config_path: Path to the configuration file.
        option: Name of the offending option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


class FileOperationError(DepRulesError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/validate).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
