"""Epoch prefix verification.

A package with ``Epoch: 2`` must write every dependency on its own
version-release as ``2:%{version}-%{release}``; a bare
``%{version}-%{release}`` compares lower than any epoch-prefixed version
and silently matches the wrong builds.
"""

from __future__ import annotations

from typing import List

from deprules.models import (
    DependencyRule,
    Finding,
    Severity,
    Subpackage,
    Verb,
    grade,
)
from deprules.utils.logger import get_logger

logger = get_logger("core.epoch")


def needs_epoch_prefix(rule: DependencyRule, subpackage: Subpackage) -> bool:
    """Return True if ``rule`` uses the package version-release without epoch."""
    if not rule.version or subpackage.epoch <= 0:
        return False

    uses_release = rule.version.endswith(subpackage.version_release)
    has_prefix = rule.version.startswith(f"{subpackage.epoch}:")
    return uses_release and not has_prefix


def check_explicit_epoch(subpackage: Subpackage, *, rebase: bool = False) -> List[Finding]:
    """Check that rules using the package version carry its epoch.

    Only subpackages with an epoch greater than zero and at least one
    after-build rule are checked.

    Args:
        subpackage: Subpackage to check.
        rebase: Whether the build is a rebase; findings are then
            informational only.

    Returns:
        One finding per rule missing the epoch prefix.
    """
    if not subpackage.after_rules or subpackage.epoch == 0:
        return []

    severity, waiver_auth = grade(rebase, Severity.BAD)
    findings: List[Finding] = []

    for rule in subpackage.after_rules:
        if not needs_epoch_prefix(rule, subpackage):
            continue

        rule_string = rule.to_string()
        logger.debug("Missing epoch prefix in %s: %s", subpackage.name, rule_string)

        findings.append(
            Finding(
                severity=severity,
                waiver_auth=waiver_auth,
                message=(
                    "Missing epoch prefix on the version-release in "
                    f"'{rule_string}' for {subpackage.name} on {subpackage.arch}"
                ),
                noun=f"'${{FILE}}' needs epoch in {subpackage.name} on ${{ARCH}}",
                verb=Verb.FAILED,
                remedy="EPOCH",
                file=rule_string,
                arch=subpackage.arch,
            )
        )

    return findings
