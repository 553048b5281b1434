"""
Executable module for regscout.

Running:
    python -m regscout

is equivalent to:
    regscout

This module simply forwards execution to the CLI entrypoint defined in
`regscout.cli`.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI import failure on stderr."""
    sys.stderr.write("regscout CLI could not be loaded.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from regscout.__version__ import __version__

        sys.stderr.write(f"regscout version: {__version__}\n")
    except ImportError:
        sys.stderr.write("regscout version: <unknown>\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m regscout`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from regscout.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
