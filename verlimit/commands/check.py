"""Check command implementation for verlimit.

Analyzes a Node.js project and reports the Node.js/npm version range it
is compatible with.

The command runs the analysis pipeline:

1. **ConstraintCollector** gathers constraints from ``engines``,
   ``dependencies``, ``devDependencies`` and ``package-lock.json``.
2. **reconcile** folds them into the tightest minimum/maximum pair.

Typical usage::

    # Human-readable table
    $ verlimit check

    # One "node:<v>|npm:<v>" line per bound, for scripts
    $ verlimit check --format simple

    # Machine-readable JSON output
    $ verlimit check --path ./my-app --format json > range.json
"""

from __future__ import annotations

import sys
import json
from pathlib import Path
from typing import Tuple

import click

from verlimit.models import Summary
from verlimit.constants import UNLIMITED
from verlimit.exceptions import VerlimitError
from verlimit.context import pass_context, VerlimitContext
from verlimit.core import CollectionResult, ConstraintCollector, reconcile
from verlimit.utils import (
    get_logger,
    get_raw_console,
    print_error,
    print_table,
    print_warning,
)

logger = get_logger("commands.check")


@click.command()
@click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Path to the project to analyze.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "simple", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def check(ctx: VerlimitContext, path: Path, format: str) -> None:
    """Show the Node.js and npm versions a project is compatible with.

    Reads ``package.json`` and ``package-lock.json`` in the project
    directory, derives a version constraint from every ``engines`` entry
    and every dependency with a known Node.js requirement, and reconciles
    them into the highest minimum and lowest maximum.

    Args:
        ctx: Verlimit context with configuration and verbosity settings.
        path: Project directory (default: current directory).
        format: Output format (``table``, ``simple``, or ``json``).

    Exits:
        0 on success, 1 if the project cannot be analyzed.
    """
    format = format.lower()

    try:
        _, summary = run_analysis(ctx, path, quiet=format != "table")
    except VerlimitError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in check command")
        sys.exit(1)

    if format == "table":
        display_summary(summary)
    elif format == "simple":
        _display_simple(summary)
    else:  # json
        _display_json(summary)


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


def run_analysis(
    ctx: VerlimitContext,
    path: Path,
    *,
    quiet: bool,
) -> Tuple[CollectionResult, Summary]:
    """Collect and reconcile the constraints of the project at ``path``.

    Args:
        ctx: Verlimit context; its configuration selects which inputs
            are scanned.
        path: Project directory.
        quiet: Suppress progress and warning log messages.

    Returns:
        The raw collection result and the reconciled summary.

    Raises:
        ProjectNotFoundError: No usable ``package.json`` or lockfile.
    """
    config = ctx.get_config()

    collector = ConstraintCollector(
        path,
        quiet=quiet,
        include_dev_dependencies=config.include_dev_dependencies,
        include_lockfile=config.include_lockfile,
    )
    result = collector.collect()
    summary = reconcile(result.constraints)

    logger.info(
        "Found %d constraint(s) in %s",
        len(result.constraints),
        result.project_name or collector.project_root,
    )
    return result, summary


# ---------------------------------------------------------------------------
# Display renderers
# ---------------------------------------------------------------------------


def _format_version(version: str) -> str:
    """Prefix concrete versions with ``v``; leave sentinels alone."""
    return f"v{version}" if version[:1].isdigit() else version


def display_summary(summary: Summary) -> None:
    """Render the summary as a Rich table followed by the best-effort note.

    Example::

                Version Constraints Summary
        ┏━━━━━━━━━┳━━━━━━━━━━━┳━━━━━━━━━━━━━━━━━━━┓
        ┃ Bound   ┃ Node.js   ┃ npm               ┃
        ┡━━━━━━━━━╇━━━━━━━━━━━╇━━━━━━━━━━━━━━━━━━━┩
        │ Lowest  │ v16.0.0   │ v7.10.0           │
        │ Highest │ unlimited │ latest compatible │
        └─────────┴───────────┴───────────────────┘
                    Source: engines
    """
    console = get_raw_console()

    if not summary.has_constraints:
        print_warning("No Node.js version constraints found.")
    else:
        rows = [
            {
                "Bound": "Lowest",
                "Node.js": _format_version(summary.lowest.node),
                "npm": _format_version(summary.lowest.npm),
            },
            {
                "Bound": "Highest",
                "Node.js": _format_version(summary.highest.node),
                "npm": _format_version(summary.highest.npm),
            },
        ]
        print_table(
            rows,
            title="Version Constraints Summary",
            caption=f"Source: {summary.source.value}",
            column_styles={
                "Bound": {"style": "bold"},
                "Node.js": {"style": "bold green", "no_wrap": True},
                "npm": {"style": "cyan", "no_wrap": True},
            },
        )

    console.print(
        "\nNote: This is a best-effort analysis and may not capture all "
        "constraints.\nFor precise requirements, review each dependency's "
        "documentation.",
        style="dim",
    )


def _display_simple(summary: Summary) -> None:
    """Print one ``node:<v>|npm:<v>`` line per bound.

    An unlimited Node.js maximum is printed as ``latest``.
    """
    if summary.lowest.node:
        print(f"node:{summary.lowest.node}|npm:{summary.lowest.npm}")
    if summary.highest.node:
        highest = "latest" if summary.highest.node == UNLIMITED else summary.highest.node
        print(f"node:{highest}|npm:{summary.highest.npm}")


def _display_json(summary: Summary) -> None:
    """Print the summary as formatted JSON."""
    print(json.dumps(summary.to_json(), indent=2))
