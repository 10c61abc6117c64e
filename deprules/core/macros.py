"""Unexpanded macro detection for dependency version strings.

A macro that survived the build (``%{version}``, ``%{?dist}``) leaves a
dependency that can never be satisfied as intended. Every after-build
rule whose version still contains an opening ``%{`` and a closing ``}``
is reported as a blocking finding.

A lone ``%{`` without any ``}`` is deliberately not reported.
"""

from __future__ import annotations

from typing import List, Optional

from deprules.constants import MACRO_CLOSE, MACRO_OPEN
from deprules.models import (
    DependencyRule,
    Finding,
    Severity,
    Subpackage,
    Verb,
    WaiverAuth,
)
from deprules.utils.logger import get_logger

logger = get_logger("core.macros")


def has_unexpanded_macro(version: Optional[str]) -> bool:
    """Return True if ``version`` contains an unexpanded macro.

    Example::

        >>> has_unexpanded_macro("%{version}-1")
        True
        >>> has_unexpanded_macro("%{undefined")
        False
    """
    if not version or MACRO_OPEN not in version:
        return False
    return MACRO_CLOSE in version


def find_unexpanded_macros(subpackage: Subpackage) -> List[Finding]:
    """Report after-build rules of ``subpackage`` with unexpanded macros.

    Args:
        subpackage: Subpackage whose after-build rules are scanned.

    Returns:
        One BAD finding per offending rule, in declaration order.
    """
    findings: List[Finding] = []

    for rule in subpackage.after_rules:
        if not has_unexpanded_macro(rule.version):
            continue

        logger.debug("Unexpanded macro in %s: %s", subpackage.name, rule)
        findings.append(_macro_finding(subpackage, rule))

    return findings


def _macro_finding(subpackage: Subpackage, rule: DependencyRule) -> Finding:
    rule_string = rule.to_string()
    return Finding(
        severity=Severity.BAD,
        waiver_auth=WaiverAuth.WAIVABLE_BY_ANYONE,
        message=(
            f"Invalid looking {rule.kind.description} dependency in the "
            f"{subpackage.name} package on {subpackage.arch}: {rule_string}"
        ),
        noun=f"'${{FILE}}' in {subpackage.name} on ${{ARCH}}",
        verb=Verb.FAILED,
        remedy="MACROS",
        file=rule_string,
        arch=subpackage.arch,
    )
