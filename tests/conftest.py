"""Shared fixtures for deprules tests."""

from __future__ import annotations

from typing import Callable, List, Optional

import pytest

from deprules.core.parser import DepRuleParser
from deprules.models import DependencyRule, Subpackage


@pytest.fixture
def parser() -> DepRuleParser:
    """Return a fresh declaration parser."""
    return DepRuleParser()


@pytest.fixture
def rules(parser: DepRuleParser) -> Callable[..., List[DependencyRule]]:
    """Parse declaration strings into rules."""

    def _rules(*declarations: str) -> List[DependencyRule]:
        return parser.parse_lines(list(declarations))

    return _rules


@pytest.fixture
def make_subpackage(
    rules: Callable[..., List[DependencyRule]],
) -> Callable[..., Subpackage]:
    """Build a subpackage from declaration strings.

    Defaults to ``x86_64``, version ``1.0`` and release ``1``.
    """

    def _make(
        name: str,
        *declarations: str,
        arch: str = "x86_64",
        version: str = "1.0",
        release: str = "1",
        epoch: int = 0,
        before: Optional[List[str]] = None,
        files: Optional[List[str]] = None,
    ) -> Subpackage:
        return Subpackage(
            name=name,
            arch=arch,
            version=version,
            release=release,
            epoch=epoch,
            after_rules=rules(*declarations),
            before_rules=rules(*before) if before is not None else None,
            files=list(files or []),
        )

    return _make
