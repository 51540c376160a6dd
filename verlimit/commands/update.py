"""Update command implementation for verlimit.

Runs the same analysis as ``verlimit check`` and writes the resulting
range into ``package.json`` (``engines.node``, ``engines.npm`` and
``packageManager``) after confirmation.

Typical usage::

    # Review, confirm, write
    $ verlimit update

    # Non-interactive, keeping a timestamped backup
    $ verlimit update --yes --backup
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from verlimit.models import Summary
from verlimit.constants import MANIFEST_FILENAME
from verlimit.exceptions import VerlimitError
from verlimit.context import pass_context, VerlimitContext
from verlimit.commands.check import display_summary, run_analysis
from verlimit.core import render_engine_fields, update_manifest_engines
from verlimit.utils import (
    confirm,
    get_logger,
    get_raw_console,
    print_error,
    print_success,
    print_warning,
)

logger = get_logger("commands.update")


@click.command()
@click.option(
    "--path",
    "-p",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Path to the project to update.",
)
@click.option(
    "--yes",
    "-y",
    is_flag=True,
    help="Apply changes without asking for confirmation.",
)
@click.option(
    "--backup/--no-backup",
    default=None,
    help="Back up package.json before writing (default: from config).",
)
@pass_context
def update(
    ctx: VerlimitContext,
    path: Path,
    yes: bool,
    backup: Optional[bool],
) -> None:
    """Write the inferred Node.js and npm range into package.json.

    Shows the summary and the fields that will be added or replaced, then
    asks for confirmation unless ``--yes`` is given. Other manifest
    content is left untouched.

    Args:
        ctx: Verlimit context with configuration and verbosity settings.
        path: Project directory (default: current directory).
        yes: Skip the confirmation prompt.
        backup: Create a backup first; ``None`` defers to configuration.

    Exits:
        0 when the manifest was updated or the user declined, 1 on error.
    """
    manifest_path = path / MANIFEST_FILENAME
    if not manifest_path.is_file():
        print_error(f"No {MANIFEST_FILENAME} found in {path.resolve()}.")
        print_error(
            "Make sure you are in a Node.js project or specify a path with --path."
        )
        sys.exit(1)

    try:
        _, summary = run_analysis(ctx, path, quiet=False)
    except VerlimitError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in update command")
        sys.exit(1)

    display_summary(summary)

    if not summary.has_constraints:
        print_warning(f"Nothing to write; {MANIFEST_FILENAME} left unchanged.")
        return

    _display_planned_changes(summary)

    if not yes and not confirm("\nProceed?"):
        get_raw_console().print(f"\nNo changes made to {MANIFEST_FILENAME}.")
        return

    create_backup = ctx.get_config().create_backup if backup is None else backup

    if update_manifest_engines(manifest_path, summary, create_backup=create_backup):
        print_success(f"Successfully updated {MANIFEST_FILENAME}!")
    else:
        print_error(
            f"Failed to update {MANIFEST_FILENAME}. Please check the file permissions."
        )
        sys.exit(1)


def _display_planned_changes(summary: Summary) -> None:
    """Show the manifest fields the update will write."""
    fields = render_engine_fields(summary)
    console = get_raw_console()

    console.print(f"\n[bold]Update {MANIFEST_FILENAME}[/bold]")
    console.print("This will add/update the following:")
    console.print('  "engines": {', markup=False)
    console.print(f'    "node": "{fields["node"]}",', markup=False)
    console.print(f'    "npm": "{fields["npm"]}"', markup=False)
    console.print("  },", markup=False)
    console.print(f'  "packageManager": "{fields["packageManager"]}"', markup=False)
