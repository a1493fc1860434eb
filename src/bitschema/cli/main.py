"""Main CLI entry point for bitschema."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .. import __version__
from ..cli.analyze import analyze_file
from ..exceptions import ConfigurationError


def main() -> int:
    """Main entry point for the bitschema CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="bitschema: schema-driven bit-level codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bitschema --analyze schema.txt         Show binary keys and bit sizes
  bitschema --version                    Show version
        """,
    )

    parser.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Analyze a schema file and show each definition's size",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"bitschema {__version__}",
    )

    args = parser.parse_args()

    if args.analyze:
        file_path = Path(args.analyze)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            analyze_file(file_path)
            return 0
        except ConfigurationError as e:
            print(f"Error in schema {file_path}: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
