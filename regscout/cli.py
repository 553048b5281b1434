"""
Command-line interface for regscout.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from regscout.config import load_config
from regscout.__version__ import __version__
from regscout.context import RegScoutContext
from regscout.exceptions import ConfigError, RegScoutError
from regscout.utils.logger import get_logger, setup_logging, verbosity_to_level
from regscout.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="REGSCOUT_CONFIG",
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
    envvar="REGSCOUT_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="regscout",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """regscout: plugin registry compatibility scout.

    \b
    Available commands:
      regscout check               Aggregate the registry and report support
      regscout inspect             Reconcile a single plugin
      regscout serve               Serve the registry over HTTP

    \b
    Examples:
      regscout check --only-unsupported
      regscout -v inspect @scope/pkg github:scope/pkg
      regscout serve --port 8080

    Use ``regscout COMMAND --help`` for command-specific options.
    """
    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    _configure_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    regscout_ctx = RegScoutContext()
    regscout_ctx.config_path = config or loaded_config.source_path
    regscout_ctx.color = color
    regscout_ctx.verbose = verbose
    regscout_ctx.config = loaded_config
    ctx.obj = regscout_ctx

    logger.debug("regscout v%s", __version__)
    logger.debug("Config path: %s", regscout_ctx.config_path)
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    level = verbosity_to_level(verbose)
    setup_logging(level=level, verbose=verbose >= 2)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
from regscout.commands.check import check  # noqa: E402
from regscout.commands.inspect import inspect  # noqa: E402
from regscout.commands.serve import serve  # noqa: E402

cli.add_command(check)
cli.add_command(inspect)
cli.add_command(serve)


def main() -> int:
    """Main entry point for the regscout CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.exceptions.Exit as exc:
        return exc.exit_code

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except RegScoutError as exc:
        print_error(str(exc))
        logger.debug(
            "RegScoutError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (KeyboardInterrupt, click.Abort):
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
