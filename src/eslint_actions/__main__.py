"""Entry point for the eslint-actions language server."""

import sys

from eslint_actions.cli import run


def main() -> None:
    """Run the server with command-line arguments."""
    sys.exit(run())


if __name__ == "__main__":
    main()
