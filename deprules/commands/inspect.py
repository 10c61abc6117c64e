"""Inspect command implementation for deprules.

Checks the dependency rules of a build, optionally against a previous
build of the same package.

The command orchestrates three core components:

1. **Manifest loader**: reads the JSON manifests and parses every
   dependency declaration into :class:`DependencyRule` objects.
2. **Build assembly**: pairs subpackages between builds, links their
   rules, discovers the spec file label and decides whether the update is
   a rebase.
3. **DepRulesInspector**: runs the checks and produces the findings and
   the verdict.

Typical usage::

    # Check a single build
    $ deprules inspect after.json

    # Compare against the previous build
    $ deprules inspect after.json --before before.json

    # Machine-readable JSON output
    $ deprules inspect after.json --before before.json --format json > report.json

    # Treat the update as a rebase regardless of versions
    $ deprules inspect after.json --before before.json --rebase
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from deprules.core import DepRulesInspector, InspectionResult, build_from_manifests
from deprules.exceptions import DepRulesError
from deprules.context import pass_context, DepRulesContext
from deprules.models import Finding
from deprules.utils import (
    colorize_severity,
    get_logger,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.inspect")


@click.command()
@click.argument(
    "after",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--before",
    "-b",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Manifest of the previous build to compare against.",
)
@click.option(
    "--rebase/--no-rebase",
    default=None,
    help="Force the rebase decision instead of detecting it from versions.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "simple", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--failures-only",
    is_flag=True,
    help="Show only findings that fail the inspection.",
)
@pass_context
def inspect(
    ctx: DepRulesContext,
    after: Path,
    before: Optional[Path],
    rebase: Optional[bool],
    format: str,
    failures_only: bool,
) -> None:
    """Inspect the dependency rules of a build.

    AFTER is the JSON manifest of the build under inspection. With
    ``--before``, dependency rules are also compared with the previous
    build and every gained, changed or lost rule is reported.

    Exits:
        0 if the inspection passed, 1 if it failed or an error occurred.
    """
    click_ctx = click.get_current_context()

    try:
        result = _run_inspection(ctx, after, before, rebase)
    except DepRulesError as e:
        print_error(f"{e}")
        click_ctx.exit(1)

    findings = result.failures() if failures_only else list(result.findings)

    if format == "table":
        _display_table(result, findings)
    elif format == "simple":
        _display_simple(findings)
    else:  # json
        _display_json(result, findings)

    if format != "json":
        _display_summary(result)

    click_ctx.exit(0 if result.passed else 1)


def _run_inspection(
    ctx: DepRulesContext,
    after: Path,
    before: Optional[Path],
    rebase: Optional[bool],
) -> InspectionResult:
    """Load manifests, assemble the build and inspect it.

    Raises:
        DepRulesError: A manifest cannot be read or parsed.
    """
    config = ctx.config
    logger.info("Inspecting %s%s", after, f" against {before}" if before else "")

    build = build_from_manifests(
        after,
        before,
        rebase=rebase,
        rebaseable=config.rebaseable,
        spec_extension=config.spec_extension,
    )

    inspector = DepRulesInspector(shared_lib_prefix=config.shared_lib_prefix)
    return inspector.inspect(build)


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def _finding_row(finding: Finding) -> Dict[str, Any]:
    return {
        "Severity": colorize_severity(finding.severity.label),
        "Result": finding.verb.value,
        "Arch": finding.arch or "",
        "Message": finding.message or "No problems found",
        "Waivable": finding.waiver_auth.value,
    }


def _display_table(result: InspectionResult, findings: List[Finding]) -> None:
    """Render findings as a Rich table."""
    if not findings:
        return

    print_table(
        [_finding_row(f) for f in findings],
        title=f"Dependency rules: {result.label}",
        column_styles={
            "Severity": {"no_wrap": True},
            "Result": {"no_wrap": True},
            "Arch": {"style": "dim", "no_wrap": True},
        },
        show_row_lines=True,
    )


def _display_simple(findings: List[Finding]) -> None:
    """Render one finding per line."""
    for finding in findings:
        line = f"{finding.severity.label:<7} {finding.message or 'No problems found'}"
        click.echo(line)


def _display_json(result: InspectionResult, findings: List[Finding]) -> None:
    """Render the full result as JSON on stdout."""
    payload = {
        "label": result.label,
        "rebase": result.rebase,
        "passed": result.passed,
        "counts": result.findings.counts(),
        "findings": [f.to_json() for f in findings],
    }
    click.echo(json.dumps(payload, indent=2))


def _display_summary(result: InspectionResult) -> None:
    """Print the closing verdict and the remedies for failed findings."""
    failures = result.failures()

    if not failures:
        print_success(f"Dependency rules in {result.label} look good")
        return

    console = get_raw_console()
    remedies = []
    for finding in failures:
        if finding.remedy_text and finding.remedy_text not in remedies:
            remedies.append(finding.remedy_text)

    if remedies:
        console.print("\n[bold]Suggested remedies:[/bold]")
        for remedy in remedies:
            console.print(f"  • {remedy}", markup=False)

    print_warning(f"\n{len(failures)} finding(s) need attention")
