"""
Executable module for verlimit.

Running:
    python -m verlimit

is equivalent to:
    verlimit

This module simply forwards execution to the CLI entrypoint defined in
`verlimit.cli`.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI import failure on stderr."""
    try:
        from verlimit.__version__ import __version__

        version = __version__
    except ImportError:
        version = "<unknown>"

    sys.stderr.write(f"verlimit version: {version}\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m verlimit`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from verlimit.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
