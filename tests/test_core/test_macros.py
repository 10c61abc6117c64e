"""Unit tests for deprules.core.macros module."""

from __future__ import annotations

import pytest

from deprules.core.macros import find_unexpanded_macros, has_unexpanded_macro
from deprules.models import Severity, Verb, WaiverAuth


@pytest.mark.unit
class TestHasUnexpandedMacro:
    """Tests for has_unexpanded_macro."""

    @pytest.mark.parametrize(
        "version",
        ["%{version}-1", "1.0-%{release}", "%{?epoch:%{epoch}:}1.0"],
    )
    def test_detects_macro(self, version: str) -> None:
        assert has_unexpanded_macro(version) is True

    @pytest.mark.parametrize(
        "version",
        [None, "", "1.0-1", "%{undefined", "1.0}", "%version"],
    )
    def test_no_macro(self, version) -> None:
        """Test strings lacking both '%{' and '}' are not reported."""
        assert has_unexpanded_macro(version) is False


@pytest.mark.unit
class TestFindUnexpandedMacros:
    """Tests for find_unexpanded_macros."""

    def test_reports_each_offending_rule(self, make_subpackage) -> None:
        pkg = make_subpackage(
            "foo-devel",
            "Requires: foo-libs = %{version}-%{release}",
            "Requires: zlib-devel",
            "Conflicts: foo-old < %{version}",
        )

        findings = find_unexpanded_macros(pkg)

        assert len(findings) == 2
        assert [f.file for f in findings] == [
            "Requires: foo-libs = %{version}-%{release}",
            "Conflicts: foo-old < %{version}",
        ]

    def test_finding_fields(self, make_subpackage) -> None:
        pkg = make_subpackage(
            "foo-devel", "Requires: foo-libs = %{version}", arch="aarch64"
        )

        (finding,) = find_unexpanded_macros(pkg)

        assert finding.severity is Severity.BAD
        assert finding.waiver_auth is WaiverAuth.WAIVABLE_BY_ANYONE
        assert finding.verb is Verb.FAILED
        assert finding.remedy == "MACROS"
        assert finding.arch == "aarch64"
        assert finding.message == (
            "Invalid looking Requires dependency in the foo-devel package on "
            "aarch64: Requires: foo-libs = %{version}"
        )
        assert finding.expand_noun() == (
            "'Requires: foo-libs = %{version}' in foo-devel on aarch64"
        )

    def test_clean_subpackage(self, make_subpackage) -> None:
        pkg = make_subpackage("foo", "Requires: bar = 1.0-1")
        assert find_unexpanded_macros(pkg) == []

    def test_before_rules_ignored(self, make_subpackage) -> None:
        """Test only the current build is scanned."""
        pkg = make_subpackage("foo", before=["Requires: bar = %{version}"])
        assert find_unexpanded_macros(pkg) == []
