"""
Unified data model exports for deprules.

This module re-exports all core data models to provide a stable and
convenient public API. Users can import models directly from
``deprules.models`` instead of individual submodules.

Example:
    >>> from deprules.models import DependencyRule, Subpackage, Finding
"""

from __future__ import annotations

from deprules.models.rule import (
    DependencyRule,
    Operator,
    RuleKind,
    deprules_match,
    strip_isa,
)
from deprules.models.subpackage import Build, Subpackage
from deprules.models.finding import (
    Finding,
    FindingSet,
    Severity,
    Verb,
    WaiverAuth,
    grade,
)

__all__ = [
    "DependencyRule",
    "Operator",
    "RuleKind",
    "deprules_match",
    "strip_isa",
    "Build",
    "Subpackage",
    "Finding",
    "FindingSet",
    "Severity",
    "Verb",
    "WaiverAuth",
    "grade",
]
