"""Explicit requirements for automatically generated shared library deps.

When subpackage ``foo-tools`` requires ``libfoo.so.1()(64bit)`` and that
library is provided by ``foo-libs`` from the same build, ``foo-tools``
must also carry ``Requires: foo-libs = %{version}-%{release}``. Without
it, a user could combine an old ``foo-libs`` with a new ``foo-tools``
and nothing would stop them.

This module also reports shared libraries provided by more than one
subpackage, since such a dependency can bind to any of them.

Provider lookup walks subpackages in build order. The first subpackage
providing the library is the one the explicit requirement must name;
every provider found is recorded on the rule.
"""

from __future__ import annotations

from typing import List, Optional

from deprules.constants import SHARED_LIB_PREFIX
from deprules.models import (
    Build,
    DependencyRule,
    Finding,
    Operator,
    RuleKind,
    Severity,
    Subpackage,
    Verb,
    WaiverAuth,
)
from deprules.utils.logger import get_logger

logger = get_logger("core.explicit_lib")


def _is_lib_rule(rule: DependencyRule, kind: RuleKind, prefix: str) -> bool:
    return rule.is_kind(kind) and rule.requirement.startswith(prefix)


def _provides_match(requirement: DependencyRule, provide: DependencyRule) -> bool:
    """Compare subjects exactly, or ignoring architecture qualifiers.

    A dependency such as ``Requires: %{name}-libs%{?_isa}`` expands to
    ``foo-libs(x86-64)``, so the ``(...)`` part is trimmed before the
    second comparison.
    """
    if requirement.requirement == provide.requirement:
        return True

    if requirement.has_isa or provide.has_isa:
        return requirement.base_requirement == provide.base_requirement

    return False


def find_provider(
    requirement: DependencyRule,
    build: Build,
    *,
    prefix: str = SHARED_LIB_PREFIX,
) -> Optional[Subpackage]:
    """Find the subpackage providing a shared library requirement.

    Every subpackage with a matching Provides is added to
    ``requirement.providers`` so that ambiguous libraries can be reported.
    The first one in build order is the provider the explicit requirement
    must point at.

    Args:
        requirement: A shared library Requires rule.
        build: Build whose subpackages are searched in order.
        prefix: Shared library subject prefix.

    Returns:
        The first providing subpackage, or ``None``.
    """
    provider: Optional[Subpackage] = None

    for candidate in build.subpackages:
        if not candidate.after_rules:
            continue

        for provide in candidate.after_rules:
            # a package may both provide and require the same thing
            if provide is requirement:
                continue

            if not _is_lib_rule(provide, RuleKind.PROVIDES, prefix):
                continue

            if _provides_match(requirement, provide):
                requirement.add_provider(candidate.name)
                if provider is None:
                    provider = candidate

    return provider


def has_explicit_requirement(
    subpackage: Subpackage,
    provider: Subpackage,
    *,
    prefix: str = SHARED_LIB_PREFIX,
) -> bool:
    """Return True if ``subpackage`` pins ``provider`` to its exact build.

    The pin must be a non-library Requires on the provider's name with
    operator ``=`` and the provider's ``[epoch:]version-release``.
    """
    expected = provider.epoch_version_release

    for rule in subpackage.after_rules:
        if rule.kind is not RuleKind.REQUIRES or rule.requirement.startswith(prefix):
            continue

        if (
            rule.requirement == provider.name
            and rule.operator is Operator.EQUAL
            and rule.version == expected
        ):
            return True

    return False


def check_explicit_lib_deps(
    subpackage: Subpackage,
    build: Build,
    *,
    prefix: str = SHARED_LIB_PREFIX,
) -> List[Finding]:
    """Verify the shared library Requires of one subpackage.

    Args:
        subpackage: Subpackage whose after-build rules are checked.
        build: Whole build, used to locate providers.
        prefix: Shared library subject prefix.

    Returns:
        Missing-explicit-requirement and multiple-provider findings.
    """
    findings: List[Finding] = []

    for requirement in subpackage.after_rules:
        if not _is_lib_rule(requirement, RuleKind.REQUIRES, prefix):
            continue

        provider = find_provider(requirement, build, prefix=prefix)

        if provider is not None and not has_explicit_requirement(
            subpackage, provider, prefix=prefix
        ):
            logger.debug(
                "%s needs an explicit requirement on %s for %s",
                subpackage.name,
                provider.name,
                requirement,
            )
            findings.append(_missing_finding(subpackage, requirement, provider))

        if len(requirement.providers) > 1:
            logger.debug(
                "Multiple providers for %s: %s", requirement, requirement.providers
            )
            findings.append(_multiple_finding(subpackage, requirement))

    return findings


def _missing_finding(
    subpackage: Subpackage,
    requirement: DependencyRule,
    provider: Subpackage,
) -> Finding:
    if provider.epoch > 0:
        rulestr = "%{epoch}:%{version}-%{release}"
        remedy = "EXPLICIT_EPOCH"
    else:
        rulestr = "%{version}-%{release}"
        remedy = "EXPLICIT"

    return Finding(
        severity=Severity.VERIFY,
        waiver_auth=WaiverAuth.WAIVABLE_BY_ANYONE,
        message=(
            f"Subpackage {subpackage.name} on {subpackage.arch} carries "
            f"'{requirement}' which comes from subpackage {provider.name} but "
            "does not carry an explicit package version requirement.  Please "
            f"add 'Requires: {provider.name} = {rulestr}' to the spec file to "
            "avoid the need to test interoperability between various "
            "combinations of old and new subpackages."
        ),
        noun=f"missing 'Requires: ${{FILE}} = {rulestr}' in {subpackage.name} on ${{ARCH}}",
        verb=Verb.FAILED,
        remedy=remedy,
        file=provider.name,
        arch=subpackage.arch,
    )


def _multiple_finding(subpackage: Subpackage, requirement: DependencyRule) -> Finding:
    rule_string = requirement.to_string()
    multiples = ", ".join(requirement.providers)

    return Finding(
        severity=Severity.VERIFY,
        waiver_auth=WaiverAuth.WAIVABLE_BY_ANYONE,
        message=f"Multiple subpackages provide '{rule_string}': {multiples}",
        noun=f"{multiples} all provide '${{FILE}}' on ${{ARCH}}",
        verb=Verb.FAILED,
        remedy="MULTIPLE",
        file=rule_string,
        arch=subpackage.arch,
    )
