"""
Command-line interface for deprules.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

import click

from deprules.config import load_config
from deprules.__version__ import VERSION_STRING, __version__
from deprules.constants import CONFIG_ENVVAR
from deprules.context import DepRulesContext
from deprules.exceptions import ConfigError, DepRulesError
from deprules.utils.logger import get_logger, level_for_verbosity, setup_logging
from deprules.utils.console import print_error, print_warning

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar=CONFIG_ENVVAR,
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="DEPRULES_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="deprules",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """deprules: dependency rule consistency checks between builds.

    \b
    Available commands:
      deprules inspect             Inspect the dependency rules of a build

    \b
    Examples:
      deprules inspect after.json
      deprules inspect after.json --before before.json
      deprules -v inspect after.json --before before.json --format json

    Use ``deprules COMMAND --help`` for command-specific options.
    """
    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        ctx.exit(1)

    deprules_ctx = DepRulesContext()
    deprules_ctx.config_path = config or loaded_config.source_path
    deprules_ctx.color = color
    deprules_ctx.verbose = verbose
    deprules_ctx.config = loaded_config
    ctx.obj = deprules_ctx

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"

    logger.debug("Running %s", VERSION_STRING)
    logger.debug("Config path: %s", deprules_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    level = level_for_verbosity(verbose)
    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized")


# Register CLI subcommands
from deprules.commands.inspect import inspect  # noqa: E402

cli.add_command(inspect)


def main() -> int:
    """Main entry point for the deprules CLI.

    Returns:
        Exit code:
            0   Inspection passed
            1   Inspection failed, or an application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        exit_code = cli(standalone_mode=False)
        return exit_code if isinstance(exit_code, int) else 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except DepRulesError as exc:
        print_error(str(exc))
        logger.debug(
            "DepRulesError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (KeyboardInterrupt, click.exceptions.Abort):
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
