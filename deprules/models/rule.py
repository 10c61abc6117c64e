"""
Dependency rule data model for deprules.

This module defines a structured representation of a single dependency
declaration (a "deprule") as carried in package metadata, together with
the closed vocabularies for rule kinds and comparison operators.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional

from deprules.constants import ISA_OPEN


class RuleKind(Enum):
    """Kind of a dependency rule.

    Only ``REQUIRES`` and ``PROVIDES`` receive special handling; every
    other kind is compared opaquely. ``OTHER`` covers tags outside the
    known set.
    """

    REQUIRES = "Requires"
    PROVIDES = "Provides"
    CONFLICTS = "Conflicts"
    OBSOLETES = "Obsoletes"
    RECOMMENDS = "Recommends"
    SUGGESTS = "Suggests"
    ENHANCES = "Enhances"
    SUPPLEMENTS = "Supplements"
    OTHER = "Other"

    @property
    def description(self) -> str:
        """Human-readable tag, as written in a spec file."""
        return self.value

    @classmethod
    def from_tag(cls, tag: str) -> "RuleKind":
        """Map a declaration tag to a kind.

        Matching is case-insensitive and ignores qualifiers such as
        ``Requires(post)``.
        """
        wanted = strip_isa(tag).strip().lower()
        for kind in cls:
            if kind is not cls.OTHER and kind.value.lower() == wanted:
                return kind
        return cls.OTHER


class Operator(Enum):
    """Version comparison operator of a dependency rule."""

    NONE = ""
    EQUAL = "="
    LESS = "<"
    LESS_EQUAL = "<="
    GREATER = ">"
    GREATER_EQUAL = ">="

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_symbol(cls, symbol: str) -> "Operator":
        """Return the operator for ``symbol``.

        ``==`` is accepted as a spelling of ``=``.

        Raises:
            ValueError: ``symbol`` is not a known operator.
        """
        if symbol == "==":
            return cls.EQUAL
        return cls(symbol)


def strip_isa(requirement: str) -> str:
    """Return ``requirement`` with everything from the first ``(`` removed.

    ``libfoo.so.1()(64bit)`` becomes ``libfoo.so.1`` and
    ``foo-libs(x86-64)`` becomes ``foo-libs``.
    """
    index = requirement.find(ISA_OPEN)
    if index == -1:
        return requirement
    return requirement[:index]


@dataclass(eq=False)
class DependencyRule:
    """
    Represents a single dependency declaration of a package.

    Rules compare by identity. Use :meth:`matches` for structural
    comparison between builds.

    Attributes:
        kind: Rule kind (Requires, Provides, ...).
        requirement: Subject of the rule, optionally suffixed with an
            architecture qualifier such as ``(x86-64)``.
        operator: Version comparison operator.
        version: Version string compared against, if any.
        peer: Corresponding rule in the other build, set by peer linking.
        providers: Names of subpackages found to satisfy this rule.
    """

    kind: RuleKind
    requirement: str
    operator: Operator = Operator.NONE
    version: Optional[str] = None
    peer: Optional["DependencyRule"] = field(default=None, repr=False)
    providers: List[str] = field(default_factory=list, repr=False)

    @property
    def base_requirement(self) -> str:
        """Subject with any architecture qualifier stripped."""
        return strip_isa(self.requirement)

    @property
    def has_isa(self) -> bool:
        """True if the subject carries a parenthesized qualifier."""
        return ISA_OPEN in self.requirement

    def is_kind(self, kind: RuleKind) -> bool:
        return self.kind is kind

    def add_provider(self, name: str) -> None:
        """Record a providing subpackage, keeping insertion order unique."""
        if name not in self.providers:
            self.providers.append(name)

    def matches(self, other: "DependencyRule") -> bool:
        """Return True if both rules declare the same dependency."""
        return (
            self.kind is other.kind
            and self.requirement == other.requirement
            and self.operator is other.operator
            and self.version == other.version
        )

    def to_string(self) -> str:
        """
        Render the rule the way it is written in a spec file.

        Returns:
            String such as ``Requires: foo >= 1.0-1``.
        """
        result = f"{self.kind.description}: {self.requirement}"

        if self.operator is not Operator.NONE and self.version:
            result += f" {self.operator.symbol} {self.version}"

        return result

    def __str__(self) -> str:
        return self.to_string()


def deprules_match(first: DependencyRule, second: DependencyRule) -> bool:
    """Structural equality predicate between two rules."""
    return first.matches(second)
