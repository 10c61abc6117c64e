"""
Inspection finding data models for deprules.

This module defines the structured result records produced by the
verifiers, the severity and waiver vocabularies they use, and a
collection type that derives the overall pass/fail verdict.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from deprules.constants import INSPECTION_NAME, REMEDIES


class Severity(IntEnum):
    """Severity of a finding, ordered from harmless to blocking."""

    OK = 0
    INFO = 1
    VERIFY = 2
    BAD = 3

    @property
    def label(self) -> str:
        return self.name

    @property
    def is_failure(self) -> bool:
        """VERIFY and BAD findings fail the inspection."""
        return self >= Severity.VERIFY


class WaiverAuth(Enum):
    """Who may waive a finding."""

    NOT_WAIVABLE = "Not Waivable"
    WAIVABLE_BY_ANYONE = "Anyone"


class Verb(Enum):
    """What happened to the subject of a finding."""

    OK = "ok"
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    FAILED = "failed"


def grade(rebase: bool, failure: Severity) -> Tuple[Severity, WaiverAuth]:
    """Pick severity and waiver authority for a rebase-sensitive finding.

    A rebase expects churn, so the finding drops to informational and
    cannot be waived. Otherwise it carries ``failure`` severity and may be
    waived by anyone.

    Args:
        rebase: Whether the build is a rebase.
        failure: Severity to use outside a rebase.

    Returns:
        ``(severity, waiver_auth)`` tuple.
    """
    if rebase:
        return Severity.INFO, WaiverAuth.NOT_WAIVABLE
    return failure, WaiverAuth.WAIVABLE_BY_ANYONE


@dataclass(frozen=True)
class Finding:
    """A single result reported by an inspection.

    Args:
        severity: How serious the finding is.
        waiver_auth: Who may waive it.
        message: Full human-readable description.
        noun: Short template used to group similar findings; ``${FILE}``
            and ``${ARCH}`` stand for :attr:`file` and :attr:`arch`.
        verb: What happened to the subject.
        remedy: Remediation identifier (a key of ``REMEDIES``).
        file: Rule string (or spec label) the finding is about.
        arch: Architecture of the affected subpackage.
        header: Name of the inspection producing the finding.
    """

    severity: Severity
    waiver_auth: WaiverAuth = WaiverAuth.NOT_WAIVABLE
    message: Optional[str] = None
    noun: Optional[str] = None
    verb: Verb = Verb.OK
    remedy: Optional[str] = None
    file: Optional[str] = None
    arch: Optional[str] = None
    header: str = INSPECTION_NAME

    @property
    def remedy_text(self) -> Optional[str]:
        """Remediation advice for :attr:`remedy`, if any."""
        if self.remedy is None:
            return None
        return REMEDIES.get(self.remedy)

    @property
    def is_failure(self) -> bool:
        return self.severity.is_failure

    def expand_noun(self) -> Optional[str]:
        """Return :attr:`noun` with its placeholders substituted."""
        if self.noun is None:
            return None
        return self.noun.replace("${FILE}", self.file or "").replace(
            "${ARCH}", self.arch or ""
        )

    def to_json(self) -> Dict[str, Optional[str]]:
        """Return a JSON-serializable representation."""
        return {
            "header": self.header,
            "severity": self.severity.label,
            "waiver_auth": self.waiver_auth.value,
            "verb": self.verb.value,
            "message": self.message,
            "noun": self.noun,
            "file": self.file,
            "arch": self.arch,
            "remedy": self.remedy,
        }

    def __str__(self) -> str:
        return f"{self.severity.label}: {self.message or self.verb.value}"


@dataclass
class FindingSet:
    """Ordered collection of findings from one inspection run.

    Args:
        findings: Findings in the order they were produced.
    """

    findings: List[Finding] = field(default_factory=list)

    def add(self, finding: Finding) -> None:
        """Add a finding to the set."""
        self.findings.append(finding)

    def extend(self, findings: List[Finding]) -> None:
        self.findings.extend(findings)

    @property
    def passed(self) -> bool:
        """True if no finding is VERIFY or BAD."""
        return not any(f.is_failure for f in self.findings)

    def worst_severity(self) -> Severity:
        """Highest severity present, ``OK`` for an empty set."""
        if not self.findings:
            return Severity.OK
        return max(f.severity for f in self.findings)

    def by_severity(self, severity: Severity) -> List[Finding]:
        return [f for f in self.findings if f.severity is severity]

    def by_remedy(self, remedy: str) -> List[Finding]:
        return [f for f in self.findings if f.remedy == remedy]

    def counts(self) -> Dict[str, int]:
        """Number of findings per severity label."""
        result = {severity.label: 0 for severity in Severity}
        for finding in self.findings:
            result[finding.severity.label] += 1
        return result

    def __len__(self) -> int:
        return len(self.findings)

    def __iter__(self) -> Iterator[Finding]:
        return iter(self.findings)
