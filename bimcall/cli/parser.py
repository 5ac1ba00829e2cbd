"""Command-line argument parsing for BIMCall.

This module builds the argparse parser with one subcommand per calendar
operation (parse, occurrences, export, import) plus the shared logging and
configuration options.
"""

import argparse
from datetime import date
from email.utils import parseaddr

from .. import __version__
from ..ics.models import ExportAttendee, RecurrenceRule
from ..ics.recurrence import MAX_OCCURRENCE_COUNT, MIN_OCCURRENCE_COUNT

LOG_LEVELS = ["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"]


def parse_date(date_str: str) -> date:
    """Parse a YYYY-MM-DD argument.

    Raises:
        argparse.ArgumentTypeError: If the date format is invalid
    """
    try:
        return date.fromisoformat(date_str)
    except ValueError as e:
        raise argparse.ArgumentTypeError(
            f"Invalid date format: '{date_str}'. Expected YYYY-MM-DD format."
        ) from e


def parse_time(time_str: str) -> str:
    """Validate an HH:MM argument and return it zero-padded."""
    try:
        hours, minutes = (int(part) for part in time_str.split(":"))
    except ValueError as e:
        raise argparse.ArgumentTypeError(
            f"Invalid time format: '{time_str}'. Expected HH:MM format."
        ) from e
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise argparse.ArgumentTypeError(f"Time out of range: '{time_str}'")
    return f"{hours:02d}:{minutes:02d}"


def parse_occurrence_count(value: str) -> int:
    """Accept occurrence counts between the supported minimum and maximum."""
    try:
        count = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid occurrence count: '{value}'") from e
    if not MIN_OCCURRENCE_COUNT <= count <= MAX_OCCURRENCE_COUNT:
        raise argparse.ArgumentTypeError(
            f"Occurrence count must be between {MIN_OCCURRENCE_COUNT} "
            f"and {MAX_OCCURRENCE_COUNT}, got {count}"
        )
    return count


def parse_attendee(value: str) -> ExportAttendee:
    """Parse an attendee given as ``Name <email>`` or a bare email address."""
    name, email = parseaddr(value)
    if not email or "@" not in email:
        raise argparse.ArgumentTypeError(f"Invalid attendee: '{value}'. Expected 'Name <email>'.")
    return ExportAttendee(name=name or email.split("@")[0], email=email)


def _add_global_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("--config", metavar="FILE", help="Path to a YAML configuration file")

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument(
        "--log-level", choices=LOG_LEVELS, type=str.upper, help="Console and file log level"
    )
    logging_group.add_argument(
        "-v", "--verbose", action="store_true", help="Enable VERBOSE logging"
    )
    logging_group.add_argument(
        "-q", "--quiet", action="store_true", help="Only show errors on the console"
    )
    logging_group.add_argument("--log-dir", metavar="DIR", help="Write log files to DIR")
    logging_group.add_argument(
        "--no-log-colors", action="store_true", help="Disable colored console output"
    )


def _add_parse_command(subparsers: argparse._SubParsersAction) -> None:
    parse_cmd = subparsers.add_parser("parse", help="List the events in an ICS file")
    parse_cmd.add_argument("file", help="Calendar file (.ics, .ical, .ifb, .icalendar)")
    parse_cmd.add_argument("--search", help="Only show events matching this text")
    parse_cmd.add_argument("--json", action="store_true", help="Print events as JSON")


def _add_occurrences_command(subparsers: argparse._SubParsersAction) -> None:
    occ_cmd = subparsers.add_parser("occurrences", help="Preview the dates of a meeting series")
    occ_cmd.add_argument("start", type=parse_date, help="First meeting date (YYYY-MM-DD)")
    occ_cmd.add_argument(
        "--rule",
        choices=[rule.value for rule in RecurrenceRule],
        default=RecurrenceRule.WEEKLY.value,
        help="Recurrence pattern (default: weekly)",
    )
    occ_cmd.add_argument(
        "--count",
        type=parse_occurrence_count,
        default=6,
        help=f"Number of occurrences ({MIN_OCCURRENCE_COUNT}-{MAX_OCCURRENCE_COUNT}, default: 6)",
    )
    occ_cmd.add_argument("--json", action="store_true", help="Print occurrences as JSON")


def _add_export_command(subparsers: argparse._SubParsersAction) -> None:
    export_cmd = subparsers.add_parser(
        "export", help="Write a meeting invitation as an ICS file"
    )
    export_cmd.add_argument(
        "--meeting-id", help="Export an existing meeting from the server instead"
    )
    export_cmd.add_argument("--title", help="Meeting title")
    export_cmd.add_argument("--date", type=parse_date, help="Meeting date (YYYY-MM-DD)")
    export_cmd.add_argument("--start-time", type=parse_time, help="Start time (HH:MM)")
    export_cmd.add_argument("--end-time", type=parse_time, help="End time (HH:MM)")
    export_cmd.add_argument("--location", default="", help="Meeting location")
    export_cmd.add_argument("--agenda", help="Agenda written to DESCRIPTION")
    export_cmd.add_argument("--link", help="Video call link written to URL")
    export_cmd.add_argument(
        "--attendee",
        action="append",
        type=parse_attendee,
        default=[],
        help="Attendee as 'Name <email>' (repeatable)",
    )
    export_cmd.add_argument(
        "-o", "--output", help="Output file or directory (default: stdout)"
    )
    export_cmd.add_argument(
        "--links", action="store_true", help="Also print Google and Outlook calendar links"
    )


def _add_import_command(subparsers: argparse._SubParsersAction) -> None:
    import_cmd = subparsers.add_parser(
        "import", help="Import the events of an ICS file as meetings and series"
    )
    import_cmd.add_argument("file", help="Calendar file (.ics, .ical, .ifb, .icalendar)")
    import_cmd.add_argument("--project-id", help="Project to attach the imports to")
    import_cmd.add_argument("--project-name", help="Project label for imported meetings")
    import_cmd.add_argument(
        "--count",
        type=parse_occurrence_count,
        help="Occurrences to create per recurring event",
    )
    import_cmd.add_argument("--search", help="Only import events matching this text")
    import_cmd.add_argument(
        "--no-duplicate-check",
        action="store_true",
        help="Import events even if their UID was imported before",
    )
    import_cmd.add_argument(
        "--sync-duplicates",
        action="store_true",
        help="Sync already-imported events from the calendar instead of skipping them",
    )
    import_cmd.add_argument(
        "--dry-run", action="store_true", help="Show what would be created without calling the API"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="bimcall",
        description="BIMCall - calendar import and export for coordination meetings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s parse meetings.ics                       # List events in a calendar file
  %(prog)s occurrences 2024-01-01 --rule biweekly   # Preview series dates
  %(prog)s export --title "Design review" --date 2024-03-04 \\
      --start-time 09:00 --end-time 10:00 -o review.ics
  %(prog)s import meetings.ics --project-id p1      # Create meetings on the server
        """,
    )
    _add_global_arguments(parser)

    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")
    _add_parse_command(subparsers)
    _add_occurrences_command(subparsers)
    _add_export_command(subparsers)
    _add_import_command(subparsers)

    return parser
