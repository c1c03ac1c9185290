"""Entry point for the protogen command."""

from __future__ import annotations

import sys
from typing import Sequence

from .cli import build_parser
from .codegen.cli_integration import handle_codegen_command
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, configure logging and run code generation.

    Args:
        argv: Arguments without the program name, defaults to ``sys.argv``.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger.debug("Parsed arguments: %s", args)

    return handle_codegen_command(args)


if __name__ == "__main__":
    sys.exit(main())
