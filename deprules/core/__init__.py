"""
Core functionality exports for deprules.

This module provides convenient access to the core subsystems of deprules.
Importing from here keeps user-facing imports clean and stable:

    from deprules.core import DepRulesInspector, build_from_manifests
"""

from __future__ import annotations

from deprules.core.parser import DepRuleParser
from deprules.core.peers import find_spec_label, is_rebase, link_peers
from deprules.core.macros import find_unexpanded_macros, has_unexpanded_macro
from deprules.core.explicit_lib import check_explicit_lib_deps, find_provider
from deprules.core.epoch import check_explicit_epoch
from deprules.core.changes import (
    ChangeType,
    classify_changes,
    classify_rule,
    expected_deprule_change,
)
from deprules.core.manifest import (
    assemble_build,
    build_from_manifests,
    load_manifest,
    parse_manifest,
)
from deprules.core.inspector import DepRulesInspector, InspectionResult

__all__ = [
    "DepRuleParser",
    "find_spec_label",
    "is_rebase",
    "link_peers",
    "find_unexpanded_macros",
    "has_unexpanded_macro",
    "check_explicit_lib_deps",
    "find_provider",
    "check_explicit_epoch",
    "ChangeType",
    "classify_changes",
    "classify_rule",
    "expected_deprule_change",
    "assemble_build",
    "build_from_manifests",
    "load_manifest",
    "parse_manifest",
    "DepRulesInspector",
    "InspectionResult",
]
