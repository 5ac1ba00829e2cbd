"""CLI module for BIMCall.

Provides argument parsing, settings and logging setup, and dispatch to the
parse, occurrences, export and import subcommands.
"""

import logging
import sys
from typing import Optional

from ..api.exceptions import APIError
from ..config.settings import get_settings
from ..ics.exceptions import ICSError
from ..importer.exceptions import CalendarImportError
from ..utils.logging import apply_command_line_overrides, setup_logging
from .commands import run_export, run_import, run_occurrences, run_parse
from .parser import create_parser, parse_date

logger = logging.getLogger(__name__)

COMMANDS = {
    "parse": run_parse,
    "occurrences": run_occurrences,
    "export": run_export,
    "import": run_import,
}


async def main_entry(argv: Optional[list[str]] = None) -> int:
    """Main entry point with argument parsing and command dispatch.

    Args:
        argv: Arguments to parse instead of ``sys.argv[1:]``

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = apply_command_line_overrides(get_settings(args.config), args)
    setup_logging(settings)

    handler = COMMANDS[args.command]
    try:
        return await handler(args, settings)
    except (ICSError, APIError, CalendarImportError) as e:
        logger.debug(f"{args.command} failed", exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


__all__ = [
    "COMMANDS",
    "create_parser",
    "main_entry",
    "parse_date",
    "run_export",
    "run_import",
    "run_occurrences",
    "run_parse",
]
