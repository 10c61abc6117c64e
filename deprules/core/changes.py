"""Before/after comparison of dependency rules.

Every after-build rule is classified against its peer from the before
build:

- **gained**: no peer, the rule is new;
- **retained**: the peer declares the same dependency;
- **changed**: the peer declares something different.

Every before-build rule without a peer is **lost**.

Changes that simply track the new version of a sibling subpackage
(``Requires: foo-libs = 1.2-3`` becoming ``= 1.3-1``) are expected and
reported as informational only. During a rebase every change is.
"""

from __future__ import annotations

from enum import Enum
from typing import List

from deprules.models import (
    Build,
    DependencyRule,
    Finding,
    Operator,
    Severity,
    Subpackage,
    Verb,
    WaiverAuth,
    grade,
)
from deprules.utils.logger import get_logger

logger = get_logger("core.changes")


class ChangeType(Enum):
    """Classification of a rule between two builds."""

    GAINED = "Gained"
    RETAINED = "Retained"
    CHANGED = "Changed"
    LOST = "Lost"


def classify_rule(rule: DependencyRule) -> ChangeType:
    """Classify an after-build rule by its peer."""
    if rule.peer is None:
        return ChangeType.GAINED
    if rule.matches(rule.peer):
        return ChangeType.RETAINED
    return ChangeType.CHANGED


def expected_deprule_change(
    rule: DependencyRule,
    subpackage: Subpackage,
    build: Build,
) -> bool:
    """Decide whether a changed rule is a normal consequence of versioning.

    Args:
        rule: The changed after-build rule.
        subpackage: Subpackage carrying ``rule``.
        build: Whole build, searched for a sibling subpackage named by
            ``rule``.

    Returns:
        True if the change is expected and should not be flagged.
    """
    if subpackage.is_source:
        return True

    if build.rebase:
        return True

    requirement = rule.base_requirement
    sibling = None

    for candidate in build.subpackages:
        if candidate.is_source:
            continue

        if candidate.arch == subpackage.arch and candidate.name == requirement:
            sibling = candidate
            break

    if sibling is None:
        return False

    if rule.operator is not Operator.EQUAL:
        return False

    expected = rule.version == sibling.epoch_version_release
    logger.debug(
        "'%s' %s sibling %s at %s",
        rule,
        "tracks" if expected else "does not track",
        sibling.name,
        sibling.epoch_version_release,
    )
    return expected


def classify_changes(subpackage: Subpackage, build: Build) -> List[Finding]:
    """Report gained, retained, changed and lost rules of one subpackage.

    Args:
        subpackage: Subpackage with linked before and after rules.
        build: Whole build, for the rebase flag and sibling lookups.

    Returns:
        One finding per after-build rule plus one per lost rule.
    """
    findings: List[Finding] = []
    where = subpackage.describe()
    noun = f"'${{FILE}}' in {subpackage.name} on ${{ARCH}}"

    for rule in subpackage.after_rules:
        rule_string = rule.to_string()
        change = classify_rule(rule)
        severity, waiver_auth = grade(build.rebase, Severity.VERIFY)

        if change is ChangeType.GAINED:
            message = f"Gained '{rule_string}' in {where}"
            rule_noun = noun
            remedy = "GAINED"
            verb = Verb.ADDED
        elif change is ChangeType.RETAINED:
            message = f"Retained '{rule_string}' in {where}"
            rule_noun = noun
            remedy = None
            verb = Verb.OK
            severity, waiver_auth = Severity.INFO, WaiverAuth.NOT_WAIVABLE
        else:
            peer_string = rule.peer.to_string()
            message = f"Changed '{peer_string}' to '{rule_string}' in {where}"
            rule_noun = (
                f"'{peer_string}' became '${{FILE}}' in {subpackage.name} on ${{ARCH}}"
            )
            remedy = "CHANGED"
            verb = Verb.CHANGED

            if expected_deprule_change(rule, subpackage, build):
                severity, waiver_auth = Severity.INFO, WaiverAuth.NOT_WAIVABLE
                message += "; this is expected"

        findings.append(
            Finding(
                severity=severity,
                waiver_auth=waiver_auth,
                message=message,
                noun=rule_noun,
                verb=verb,
                remedy=remedy,
                file=rule_string,
                arch=subpackage.arch,
            )
        )

    for rule in subpackage.before_rules or []:
        if rule.peer is not None:
            continue

        rule_string = rule.to_string()
        severity, waiver_auth = grade(build.rebase, Severity.VERIFY)

        findings.append(
            Finding(
                severity=severity,
                waiver_auth=waiver_auth,
                message=f"Lost '{rule_string}' in {where}",
                noun=noun,
                verb=Verb.REMOVED,
                remedy="LOST",
                file=rule_string,
                arch=subpackage.arch,
            )
        )

    return findings
