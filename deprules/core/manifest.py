"""Build manifest loader.

A manifest describes every subpackage of one build as JSON::

    {
      "packages": [
        {
          "name": "foo",
          "arch": "src",
          "version": "1.2",
          "release": "3.fc40",
          "epoch": 0,
          "files": ["foo.spec", "foo-1.2.tar.gz"],
          "deprules": ["Requires: gcc", "Requires: make"]
        },
        {
          "name": "foo-libs",
          "arch": "x86_64",
          "version": "1.2",
          "release": "3.fc40",
          "deprules": ["Provides: libfoo.so.1()(64bit)"]
        }
      ]
    }

:func:`build_from_manifests` loads the current build and, optionally, the
previous one, pairs subpackages on ``(name, arch)``, links their rules,
and returns a :class:`Build` ready for inspection.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from deprules.core.parser import DepRuleParser
from deprules.core.peers import find_spec_label, is_rebase, link_peers
from deprules.constants import SPEC_FILENAME_EXTENSION
from deprules.exceptions import ManifestError
from deprules.models import Build, Subpackage
from deprules.utils import get_logger, safe_read_file

logger = get_logger("manifest")

PathLike = Union[str, Path]

_REQUIRED_FIELDS = ("name", "arch", "version", "release")


def load_manifest(
    file_path: PathLike,
    *,
    parser: Optional[DepRuleParser] = None,
) -> List[Subpackage]:
    """Read a manifest file and return its subpackages.

    Args:
        file_path: Path to the JSON manifest.
        parser: Declaration parser; a new one is created if omitted.

    Returns:
        Subpackages with ``after_rules`` populated, in manifest order.

    Raises:
        FileOperationError: The file cannot be read.
        ManifestError: The file is not valid JSON or not a valid manifest.
        ParseError: A dependency declaration is malformed.
    """
    path = Path(file_path)
    content = safe_read_file(path)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestError(
            f"Invalid JSON in {path.name}: {exc}",
            file_path=str(path),
        ) from exc

    subpackages = parse_manifest(data, source_file_path=str(path), parser=parser)
    logger.info("Loaded %d subpackage(s) from %s", len(subpackages), path)
    return subpackages


def parse_manifest(
    data: Any,
    *,
    source_file_path: Optional[str] = None,
    parser: Optional[DepRuleParser] = None,
) -> List[Subpackage]:
    """Convert decoded manifest data into subpackages.

    Raises:
        ManifestError: The structure or a field type is invalid.
        ParseError: A dependency declaration is malformed.
    """
    parser = parser or DepRuleParser()

    if not isinstance(data, Mapping) or not isinstance(data.get("packages"), list):
        raise ManifestError(
            "Manifest must be an object with a 'packages' list",
            file_path=source_file_path,
            field_name="packages",
        )

    return [
        _parse_package(entry, index, source_file_path, parser)
        for index, entry in enumerate(data["packages"])
    ]


def _parse_package(
    entry: Any,
    index: int,
    source_file_path: Optional[str],
    parser: DepRuleParser,
) -> Subpackage:
    if not isinstance(entry, Mapping):
        raise ManifestError(
            "Package entry must be an object",
            file_path=source_file_path,
            package=f"#{index}",
        )

    label = entry.get("name") if isinstance(entry.get("name"), str) else f"#{index}"

    for key in _REQUIRED_FIELDS:
        value = entry.get(key)
        if not isinstance(value, str) or not value:
            raise ManifestError(
                f"Field '{key}' must be a non-empty string",
                file_path=source_file_path,
                package=label,
                field_name=key,
            )

    epoch = entry.get("epoch", 0)
    if epoch is None:
        epoch = 0
    if isinstance(epoch, bool) or not isinstance(epoch, int) or epoch < 0:
        raise ManifestError(
            "Field 'epoch' must be a non-negative integer",
            file_path=source_file_path,
            package=label,
            field_name="epoch",
        )

    files = _string_list(entry, "files", label, source_file_path)
    declarations = _string_list(entry, "deprules", label, source_file_path)

    return Subpackage(
        name=entry["name"],
        arch=entry["arch"],
        version=entry["version"],
        release=entry["release"],
        epoch=epoch,
        after_rules=parser.parse_lines(declarations, source_file_path),
        files=files,
    )


def _string_list(
    entry: Mapping[str, Any],
    key: str,
    label: str,
    source_file_path: Optional[str],
) -> List[str]:
    value = entry.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ManifestError(
            f"Field '{key}' must be a list of strings",
            file_path=source_file_path,
            package=label,
            field_name=key,
        )
    return list(value)


def assemble_build(
    after: List[Subpackage],
    before: Optional[List[Subpackage]] = None,
    *,
    rebase: Optional[bool] = None,
    rebaseable: Iterable[str] = (),
    spec_extension: str = SPEC_FILENAME_EXTENSION,
) -> Build:
    """Combine current and previous subpackages into a :class:`Build`.

    Subpackages are paired on ``(name, arch)``. A paired subpackage gets
    the previous rules as ``before_rules`` and the two rule lists are
    linked. Previous subpackages without a current counterpart are not
    inspected.

    Args:
        after: Subpackages of the current build.
        before: Subpackages of the previous build, if any.
        rebase: Force the rebase flag; detected with :func:`is_rebase`
            when ``None``.
        rebaseable: Names allowed to change in a rebase.
        spec_extension: Extension identifying the spec file.

    Returns:
        The assembled build.
    """
    if before is not None:
        previous: Dict[Tuple[str, str], Subpackage] = {}
        for old in before:
            previous.setdefault((old.name, old.arch), old)

        for new in after:
            old = previous.get((new.name, new.arch))
            if old is None:
                # no counterpart: every rule is gained
                new.before_rules = []
                continue

            new.before_rules = old.after_rules
            link_peers(new.before_rules, new.after_rules)

    if rebase is None:
        rebase = is_rebase(before, after, rebaseable=rebaseable)

    build = Build(
        subpackages=after,
        rebase=rebase,
        label=find_spec_label(after, extension=spec_extension),
        has_before=before is not None,
    )

    logger.debug(
        "Assembled build: %d subpackage(s), rebase=%s, label=%s",
        len(build),
        build.rebase,
        build.label,
    )
    return build


def build_from_manifests(
    after_path: PathLike,
    before_path: Optional[PathLike] = None,
    *,
    rebase: Optional[bool] = None,
    rebaseable: Iterable[str] = (),
    spec_extension: str = SPEC_FILENAME_EXTENSION,
) -> Build:
    """Load manifests from disk and assemble them into a :class:`Build`."""
    parser = DepRuleParser()
    after = load_manifest(after_path, parser=parser)
    before = (
        load_manifest(before_path, parser=parser) if before_path is not None else None
    )

    return assemble_build(
        after,
        before,
        rebase=rebase,
        rebaseable=rebaseable,
        spec_extension=spec_extension,
    )
