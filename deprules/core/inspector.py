"""Dependency rule inspection driver.

:class:`DepRulesInspector` runs every check over a :class:`Build`:

1. **Macros**: unexpanded macros in after-build version strings.
2. **Explicit requirements**: shared library Requires backed by an
   explicit subpackage requirement, plus multiple-provider detection;
   **epoch prefixes** on version-release strings.
3. **Changes**: gained, retained, changed and lost rules, only when a
   previous build is present.

All findings are collected in one :class:`FindingSet`. The inspection
passes when none of them is VERIFY or BAD, in which case a single OK
finding closes the report.

Typical usage::

    from deprules.core import DepRulesInspector, build_from_manifests

    build = build_from_manifests("after.json", "before.json")
    result = DepRulesInspector().inspect(build)
    if not result.passed:
        for finding in result.findings:
            print(finding.message)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List

from deprules.constants import SHARED_LIB_PREFIX
from deprules.core.changes import classify_changes
from deprules.core.epoch import check_explicit_epoch
from deprules.core.explicit_lib import check_explicit_lib_deps
from deprules.core.macros import find_unexpanded_macros
from deprules.models import (
    Build,
    Finding,
    FindingSet,
    Severity,
    Verb,
    WaiverAuth,
)
from deprules.utils.logger import get_logger, level_for_severity

logger = get_logger("core.inspector")


@dataclass
class InspectionResult:
    """Outcome of one inspection run.

    Attributes:
        label: Spec file name (or generic label) of the inspected build.
        rebase: Whether the build was treated as a rebase.
        findings: Every finding, in the order produced.
    """

    label: str
    rebase: bool = False
    findings: FindingSet = field(default_factory=FindingSet)

    @property
    def passed(self) -> bool:
        return self.findings.passed

    def failures(self) -> List[Finding]:
        """Findings that caused the inspection to fail."""
        return [f for f in self.findings if f.is_failure]


class DepRulesInspector:
    """Run the dependency rule checks over a build.

    The inspector holds configuration only; every call to :meth:`inspect`
    is independent, so one instance can be reused across builds.

    Args:
        shared_lib_prefix: Subject prefix identifying shared library
            dependencies.
    """

    def __init__(self, *, shared_lib_prefix: str = SHARED_LIB_PREFIX) -> None:
        self.shared_lib_prefix = shared_lib_prefix

    def inspect(self, build: Build) -> InspectionResult:
        """Inspect ``build`` and return every finding with the verdict.

        Args:
            build: Fully assembled build; rules must already be linked.

        Returns:
            :class:`InspectionResult` for the build.
        """
        result = InspectionResult(label=build.label, rebase=build.rebase)
        logger.info(
            "Inspecting %d subpackage(s) from %s%s",
            len(build),
            build.label,
            " (rebase)" if build.rebase else "",
        )

        # first pass: simple checks
        for subpackage in build:
            self._collect(result, build, find_unexpanded_macros(subpackage))

        # second pass: checks needing the whole build
        for subpackage in build:
            self._collect(
                result,
                build,
                check_explicit_lib_deps(
                    subpackage, build, prefix=self.shared_lib_prefix
                ),
            )
            self._collect(
                result,
                build,
                check_explicit_epoch(subpackage, rebase=build.rebase),
            )

        if build.has_before:
            for subpackage in build:
                self._collect(result, build, classify_changes(subpackage, build))
        else:
            logger.debug("No previous build, skipping change comparison")

        if result.passed:
            result.findings.add(
                Finding(
                    severity=Severity.OK,
                    waiver_auth=WaiverAuth.NOT_WAIVABLE,
                    verb=Verb.OK,
                    file=build.label,
                )
            )

        logger.info(
            "Inspection %s (worst: %s): %s",
            "passed" if result.passed else "failed",
            result.findings.worst_severity().label,
            result.findings.counts(),
        )
        return result

    @staticmethod
    def _collect(
        result: InspectionResult,
        build: Build,
        findings: List[Finding],
    ) -> None:
        for finding in findings:
            if finding.file is None:
                finding = replace(finding, file=build.label)
            logger.log(
                level_for_severity(finding.severity.label),
                "%s: %s",
                finding.severity.label,
                finding.message,
            )
            result.findings.add(finding)
