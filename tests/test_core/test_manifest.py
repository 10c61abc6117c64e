"""Unit tests for deprules.core.manifest module.

Test Coverage:
- Manifest loading from disk
- Structural validation and error reporting
- Build assembly: subpackage pairing, peer linking, rebase and label
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from deprules.core.manifest import (
    assemble_build,
    build_from_manifests,
    load_manifest,
    parse_manifest,
)
from deprules.exceptions import FileOperationError, ManifestError, ParseError
from deprules.models import RuleKind


def _package(name: str, arch: str = "x86_64", **extra: Any) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "name": name,
        "arch": arch,
        "version": "1.0",
        "release": "1",
    }
    entry.update(extra)
    return entry


def _write(path: Path, *packages: Dict[str, Any]) -> Path:
    path.write_text(json.dumps({"packages": list(packages)}), encoding="utf-8")
    return path


@pytest.mark.unit
class TestParseManifest:
    """Tests for parse_manifest."""

    def test_parses_packages_in_order(self) -> None:
        data = {
            "packages": [
                _package("foo", "src", files=["foo.spec"]),
                _package(
                    "foo-libs",
                    epoch=2,
                    deprules=["Provides: libfoo.so.1", "Requires: glibc"],
                ),
            ]
        }

        subpackages = parse_manifest(data)

        assert [p.name for p in subpackages] == ["foo", "foo-libs"]
        assert subpackages[0].files == ["foo.spec"]
        assert subpackages[0].after_rules == []
        assert subpackages[1].epoch == 2
        assert [r.kind for r in subpackages[1].after_rules] == [
            RuleKind.PROVIDES,
            RuleKind.REQUIRES,
        ]
        assert subpackages[1].before_rules is None

    def test_null_epoch_is_zero(self) -> None:
        (pkg,) = parse_manifest({"packages": [_package("foo", epoch=None)]})
        assert pkg.epoch == 0

    @pytest.mark.parametrize("data", [[], {"packages": {}}, {}, "packages"])
    def test_invalid_top_level(self, data: Any) -> None:
        with pytest.raises(ManifestError, match="'packages' list"):
            parse_manifest(data)

    def test_entry_must_be_object(self) -> None:
        with pytest.raises(ManifestError, match="must be an object") as exc_info:
            parse_manifest({"packages": ["foo"]})

        assert exc_info.value.details["package"] == "#0"

    @pytest.mark.parametrize("missing", ["name", "arch", "version", "release"])
    def test_required_fields(self, missing: str) -> None:
        entry = _package("foo")
        del entry[missing]

        with pytest.raises(ManifestError) as exc_info:
            parse_manifest({"packages": [entry]})

        assert exc_info.value.field_name == missing

    @pytest.mark.parametrize("epoch", [-1, "1", 1.5, True])
    def test_invalid_epoch(self, epoch: Any) -> None:
        with pytest.raises(ManifestError, match="epoch"):
            parse_manifest({"packages": [_package("foo", epoch=epoch)]})

    @pytest.mark.parametrize("key", ["files", "deprules"])
    def test_list_fields_must_hold_strings(self, key: str) -> None:
        entry = _package("foo", **{key: ["ok", 3]})

        with pytest.raises(ManifestError) as exc_info:
            parse_manifest({"packages": [entry]})

        assert exc_info.value.details == {"package": "foo", "field": key}

    def test_bad_declaration_raises_parse_error(self) -> None:
        entry = _package("foo", deprules=["Requires: foo", "garbage"])

        with pytest.raises(ParseError) as exc_info:
            parse_manifest({"packages": [entry]}, source_file_path="after.json")

        assert exc_info.value.line_number == 2
        assert exc_info.value.file_path == "after.json"


@pytest.mark.unit
class TestLoadManifest:
    """Tests for load_manifest."""

    def test_loads_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "after.json", _package("foo", deprules=["Requires: bar"]))

        (pkg,) = load_manifest(path)

        assert pkg.name == "foo"
        assert pkg.after_rules[0].requirement == "bar"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "after.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ManifestError, match="Invalid JSON in after.json"):
            load_manifest(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError):
            load_manifest(tmp_path / "missing.json")


@pytest.mark.unit
class TestAssembleBuild:
    """Tests for assemble_build."""

    def test_without_previous_build(self) -> None:
        after = parse_manifest({"packages": [_package("foo", "src", files=["foo.spec"])]})

        build = assemble_build(after)

        assert build.has_before is False
        assert build.rebase is False
        assert build.label == "foo.spec"
        assert after[0].before_rules is None

    def test_pairs_on_name_and_arch(self) -> None:
        before = parse_manifest(
            {
                "packages": [
                    _package("foo-libs", "x86_64", deprules=["Requires: a"]),
                    _package("foo-libs", "aarch64", deprules=["Requires: b"]),
                ]
            }
        )
        after = parse_manifest(
            {
                "packages": [
                    _package("foo-libs", "aarch64", deprules=["Requires: b"]),
                    _package("foo-new", "x86_64", deprules=["Requires: c"]),
                ]
            }
        )

        build = assemble_build(after, before)

        paired, new = after
        assert build.has_before is True
        assert paired.before_rules[0].requirement == "b"
        assert paired.after_rules[0].peer is paired.before_rules[0]
        assert new.before_rules == []
        assert new.after_rules[0].peer is None

    def test_detects_rebase(self) -> None:
        before = parse_manifest({"packages": [_package("foo", "src", version="1.0")]})
        after = parse_manifest({"packages": [_package("foo", "src", version="2.0")]})

        assert assemble_build(after, before).rebase is True

    def test_forced_rebase(self) -> None:
        before = parse_manifest({"packages": [_package("foo", "src", version="1.0")]})
        after = parse_manifest({"packages": [_package("foo", "src", version="2.0")]})

        assert assemble_build(after, before, rebase=False).rebase is False


@pytest.mark.unit
class TestBuildFromManifests:
    """Tests for build_from_manifests."""

    def test_round_trip_from_disk(self, tmp_path: Path) -> None:
        before = _write(
            tmp_path / "before.json",
            _package("foo", "src", files=["foo.spec"]),
            _package("foo-libs", deprules=["Requires: glibc"]),
        )
        after = _write(
            tmp_path / "after.json",
            _package("foo", "src", release="2", files=["foo.spec"]),
            _package("foo-libs", release="2", deprules=["Requires: glibc"]),
        )

        build = build_from_manifests(after, before)

        assert build.label == "foo.spec"
        assert build.rebase is False
        libs = build.find("foo-libs")
        assert libs.after_rules[0].peer is libs.before_rules[0]
