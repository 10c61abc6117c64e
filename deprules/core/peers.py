"""Linking a previous build to the current one.

Helpers that prepare a :class:`Build` for inspection:

- :func:`link_peers` pairs before-build rules with after-build rules;
- :func:`find_spec_label` finds the spec file name used in reports;
- :func:`is_rebase` decides whether two builds are a rebase.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence

from deprules.constants import DEFAULT_SPEC_LABEL, SPEC_FILENAME_EXTENSION
from deprules.models import DependencyRule, Subpackage
from deprules.utils.logger import get_logger

logger = get_logger("core.peers")


def _link_pass(
    before: Sequence[DependencyRule],
    after: Sequence[DependencyRule],
    key: Callable[[DependencyRule], str],
) -> int:
    linked = 0

    for old in before:
        if old.peer is not None:
            continue

        for new in after:
            if new.peer is not None or new.kind is not old.kind:
                continue

            if key(old) == key(new):
                old.peer = new
                new.peer = old
                linked += 1
                break

    return linked


def link_peers(
    before: Optional[Sequence[DependencyRule]],
    after: Optional[Sequence[DependencyRule]],
) -> int:
    """Pair each before-build rule with its after-build counterpart.

    Rules pair up when they share a kind and a subject. A second pass
    pairs the leftovers whose subjects agree once architecture
    qualifiers are stripped, so ``foo-libs(x86-64)`` still finds
    ``foo-libs``. Rules left unpaired keep ``peer`` set to ``None``.

    Args:
        before: Rules of the previous build, if any.
        after: Rules of the current build.

    Returns:
        Number of pairs created.
    """
    if not before or not after:
        return 0

    linked = _link_pass(before, after, lambda rule: rule.requirement)
    linked += _link_pass(before, after, lambda rule: rule.base_requirement)

    logger.debug(
        "Linked %d of %d before / %d after rule(s)", linked, len(before), len(after)
    )
    return linked


def find_spec_label(
    subpackages: Iterable[Subpackage],
    *,
    extension: str = SPEC_FILENAME_EXTENSION,
) -> str:
    """Return the spec file name of the source package.

    Falls back to a generic label when the build carries no source
    package or the source package lists no spec file.
    """
    for subpackage in subpackages:
        if not subpackage.is_source:
            continue

        for path in subpackage.files:
            if path.endswith(extension):
                return path

    return DEFAULT_SPEC_LABEL


def _reference(subpackages: List[Subpackage]) -> Optional[Subpackage]:
    for subpackage in subpackages:
        if subpackage.is_source:
            return subpackage
    return subpackages[0] if subpackages else None


def is_rebase(
    before: Optional[List[Subpackage]],
    after: List[Subpackage],
    *,
    rebaseable: Iterable[str] = (),
) -> bool:
    """Decide whether moving from ``before`` to ``after`` is a rebase.

    The source package (or the first subpackage when there is none) is
    compared between builds. A different upstream version is a rebase.
    A rename counts only if either name is listed in ``rebaseable``.

    Args:
        before: Subpackages of the previous build, or ``None``.
        after: Subpackages of the current build.
        rebaseable: Package names allowed to be renamed in a rebase.

    Returns:
        True for a rebase, False otherwise or without a previous build.
    """
    if not before or not after:
        return False

    old = _reference(before)
    new = _reference(after)

    if old.name != new.name:
        allowed = set(rebaseable)
        return old.name in allowed or new.name in allowed

    return old.version != new.version
