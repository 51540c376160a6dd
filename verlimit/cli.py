"""
Command-line interface for verlimit.

The ``cli`` group loads ``verlimit.toml`` (or ``[tool.verlimit]`` in
``pyproject.toml``) once and hands it to ``check`` and ``update`` through
:class:`~verlimit.context.VerlimitContext`. Both commands run the same
collect and reconcile pipeline over a package.json and package-lock.json pair.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from verlimit.config import load_config
from verlimit.__version__ import __version__
from verlimit.context import VerlimitContext
from verlimit.exceptions import ConfigError, VerlimitError
from verlimit.utils.logger import get_logger, setup_logging
from verlimit.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to verlimit.toml or a pyproject.toml with [tool.verlimit].",
    envvar="VERLIMIT_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v for progress, -vv for debug output).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Colorize range tables and warnings.",
    envvar="VERLIMIT_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="verlimit",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """verlimit: infer the Node.js and npm versions a project supports.

    Dependencies and the lockfile each imply a minimum Node.js version via a
    built-in requirement table; the package.json engines field adds its own
    bounds. The highest minimum and the lowest maximum form the result.

    \b
    Available commands:
      verlimit check               Show the inferred version range
      verlimit update              Write the range into package.json

    \b
    Examples:
      verlimit check
      verlimit check --format json
      verlimit -v update --path ./my-app

    Use ``verlimit COMMAND --help`` for command-specific options.
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

    verlimit_ctx = VerlimitContext()
    verlimit_ctx.config_path = config or loaded_config.source_path
    verlimit_ctx.color = color
    verlimit_ctx.verbose = verbose
    verlimit_ctx.config = loaded_config
    ctx.obj = verlimit_ctx

    logger.debug("verlimit v%s", __version__)
    logger.debug("Config path: %s", verlimit_ctx.config_path)
    if loaded_config.source_path:
        logger.debug("Loaded configuration: %s", loaded_config.to_log_dict())
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    setup_logging(level=level, verbose=verbose > 1)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
try:
    from verlimit.commands.check import check
    from verlimit.commands.update import update

    cli.add_command(check)
    cli.add_command(update)

except ImportError as exc:
    sys.stderr.write(f"FATAL: Failed to import CLI commands: {exc}\n")
    sys.exit(1)


def main() -> int:
    """Main entry point for the verlimit CLI.

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

    except VerlimitError as exc:
        print_error(str(exc))
        logger.debug(
            "VerlimitError details: %s",
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
