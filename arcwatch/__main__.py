"""
Executable module for arcwatch.

Running:
    python -m arcwatch

is equivalent to:
    arcwatch
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Explain on stderr why the CLI could not be loaded."""
    sys.stderr.write("arcwatch CLI could not be loaded.\n")
    sys.stderr.write(f"Python version  : {sys.version}\n")
    try:
        from arcwatch.__version__ import __version__

        sys.stderr.write(f"arcwatch version: {__version__}\n")
    except Exception:
        sys.stderr.write("arcwatch version: <unknown>\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m arcwatch`.

    Returns:
        Exit code returned by the CLI, or 1 if it cannot be imported.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from arcwatch.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
