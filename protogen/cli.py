"""Command-line parser for protogen."""

from __future__ import annotations

import argparse

from . import __version__
from .codegen.cli_integration import add_codegen_args

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser.

    Returns:
        Parser accepting the code generation and logging options.
    """
    parser = argparse.ArgumentParser(
        prog="protogen",
        description="Compile a YAML API specification into source code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  protogen --mode protocol --input api.yaml > api.py
  protogen --mode routes --input routes.yaml --label-prefix site.
  protogen --mode paths --input routes.yaml -o paths.py
  protogen --list-languages
        """.strip(),
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        help="Verbosity of diagnostics on stderr (default: WARNING)",
    )

    add_codegen_args(parser)
    return parser
