"""
Subpackage and build data models for deprules.

A :class:`Build` is the top-level input of an inspection: every
:class:`Subpackage` produced by the build, in declaration order, together
with the rebase flag and the label used when reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from deprules.constants import DEFAULT_SPEC_LABEL, SRPM_ARCH_NAME
from deprules.models.rule import DependencyRule


@dataclass
class Subpackage:
    """
    One binary or source package produced by a build.

    Attributes:
        name: Package name.
        arch: Package architecture (``src`` for source packages).
        version: Upstream version.
        release: Package release.
        epoch: Epoch override, 0 when the package defines none.
        after_rules: Dependency rules of the new build.
        before_rules: Dependency rules of the previous build, or ``None``
            when the subpackage did not exist there.
        files: File list, used to discover the spec file name.
    """

    name: str
    arch: str
    version: str
    release: str
    epoch: int = 0
    after_rules: List[DependencyRule] = field(default_factory=list)
    before_rules: Optional[List[DependencyRule]] = None
    files: List[str] = field(default_factory=list)

    @property
    def is_source(self) -> bool:
        return self.arch == SRPM_ARCH_NAME

    @property
    def version_release(self) -> str:
        """The ``version-release`` string."""
        return f"{self.version}-{self.release}"

    @property
    def epoch_version_release(self) -> str:
        """``epoch:version-release`` when epoch > 0, else ``version-release``."""
        if self.epoch > 0:
            return f"{self.epoch}:{self.version_release}"
        return self.version_release

    @property
    def has_before(self) -> bool:
        return self.before_rules is not None

    def describe(self) -> str:
        """Location phrase used in finding messages."""
        if self.is_source:
            return f"source package {self.name}"
        return f"subpackage {self.name} on {self.arch}"

    def __str__(self) -> str:
        return f"{self.name}-{self.epoch_version_release}.{self.arch}"


@dataclass
class Build:
    """
    The set of subpackages under inspection.

    Attributes:
        subpackages: Every subpackage of the after build, in declaration
            order. Order is significant for provider detection.
        rebase: True when before and after represent a deliberate jump to
            a different upstream version.
        label: Spec file name used in reports.
        has_before: True when a previous build was supplied.
    """

    subpackages: List[Subpackage] = field(default_factory=list)
    rebase: bool = False
    label: str = DEFAULT_SPEC_LABEL
    has_before: bool = False

    def find(self, name: str, arch: Optional[str] = None) -> Optional[Subpackage]:
        """Return the first subpackage named ``name`` (and on ``arch``)."""
        for subpackage in self.subpackages:
            if subpackage.name != name:
                continue
            if arch is not None and subpackage.arch != arch:
                continue
            return subpackage
        return None

    def __len__(self) -> int:
        return len(self.subpackages)

    def __iter__(self) -> Iterator[Subpackage]:
        return iter(self.subpackages)
