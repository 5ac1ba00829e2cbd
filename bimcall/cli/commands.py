"""Subcommand handlers for the BIMCall CLI.

Each handler takes the parsed arguments and the application settings and
returns a process exit code (0 for success, 1 for failure).
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

from ..api.client import BIMCallClient
from ..config.settings import BIMCallSettings
from ..ics.export import export_filename, generate_ics, google_calendar_url, outlook_calendar_url
from ..ics.models import ExportAttendee, MeetingExport, ParsedCalendarEvent
from ..ics.parser import parse_ics_file, read_ics_file
from ..ics.recurrence import generate_occurrences
from ..importer.service import CalendarImporter, filter_events

logger = logging.getLogger(__name__)


def _format_event(index: int, event: ParsedCalendarEvent) -> str:
    when = "no start date"
    if event.start_date:
        when = f"{event.start_date.date} {event.start_date.time}"
        if event.end_date:
            when += f"-{event.end_date.time}"

    line = f"{index:>3}. {event.title}  [{when}]"
    if event.is_recurring:
        line += f"  repeats {event.recurrence_rule or 'irregularly'}"
    if event.location:
        line += f"  @ {event.location}"
    return line


def _load_events(path: str, settings: BIMCallSettings) -> list[ParsedCalendarEvent]:
    content = read_ics_file(path, max_bytes=settings.max_ics_size_bytes)
    events = parse_ics_file(content)
    logger.info(f"Found {len(events)} event(s) in {path}")
    return events


async def run_parse(args: Any, settings: BIMCallSettings) -> int:
    """List the events found in a calendar file."""
    events = filter_events(_load_events(args.file, settings), getattr(args, "search", None))

    if args.json:
        payload = [event.model_dump(mode="json", by_alias=True) for event in events]
        print(json.dumps(payload, indent=2))
        return 0

    if not events:
        print("No events found in calendar file")
        return 0

    for index, event in enumerate(events, start=1):
        print(_format_event(index, event))
    return 0


async def run_occurrences(args: Any, settings: BIMCallSettings) -> int:
    """Print the dates a meeting series would be scheduled on."""
    occurrences = generate_occurrences(args.start, args.rule, args.count)

    if args.json:
        print(json.dumps([occ.model_dump() for occ in occurrences], indent=2))
    else:
        for occurrence in occurrences:
            print(occurrence.date)
    return 0


async def _meeting_from_server(
    meeting_id: str, settings: BIMCallSettings
) -> tuple[MeetingExport, list[ExportAttendee]]:
    async with BIMCallClient(settings) as client:
        meeting = await client.get_meeting(meeting_id)
        attendees = await client.get_meeting_attendees(meeting_id)

    exportable = [a.to_export() for a in attendees]
    return meeting.to_export(), [a for a in exportable if a is not None]


async def run_export(args: Any, settings: BIMCallSettings) -> int:
    """Write a meeting invitation to a file or stdout."""
    if args.meeting_id:
        meeting, attendees = await _meeting_from_server(args.meeting_id, settings)
        attendees.extend(args.attendee)
    else:
        missing = [
            flag
            for flag, value in (
                ("--title", args.title),
                ("--date", args.date),
                ("--start-time", args.start_time),
                ("--end-time", args.end_time),
            )
            if not value
        ]
        if missing:
            print(f"Error: export needs {', '.join(missing)} (or --meeting-id)", file=sys.stderr)
            return 1

        meeting = MeetingExport(
            id=f"cli-{args.date.strftime('%Y%m%d')}-{args.start_time.replace(':', '')}",
            title=args.title,
            date=args.date.isoformat(),
            start_time=args.start_time,
            end_time=args.end_time,
            location=args.location,
            agenda=args.agenda,
            meeting_link=args.link,
        )
        attendees = list(args.attendee)

    ics_content = generate_ics(meeting, attendees)

    if args.output:
        output = Path(args.output)
        if output.is_dir():
            output = output / export_filename(meeting)
        output.write_bytes(ics_content.encode("utf-8"))
        print(f"Wrote {output}")
    else:
        print(ics_content, end="")

    if args.links:
        print(f"Google Calendar: {google_calendar_url(meeting)}")
        print(f"Outlook: {outlook_calendar_url(meeting)}")
    return 0


def _apply_import_overrides(args: Any, settings: BIMCallSettings) -> None:
    options = settings.importer
    if args.project_id:
        options.project_id = args.project_id
    if args.project_name:
        options.project_name = args.project_name
    if args.count:
        options.occurrence_count = args.count
    if args.no_duplicate_check:
        options.check_duplicates = False
    if args.sync_duplicates:
        options.sync_duplicates = True


def _print_dry_run(importer: CalendarImporter, events: list[ParsedCalendarEvent]) -> None:
    for event in events:
        if importer.imports_as_series(event):
            series = importer.build_series(event)
            dates = [occ.date for occ in importer.build_occurrences(event)]
            print(
                f"series  '{series.title}' {series.recurrence_rule} "
                f"{series.start_time}-{series.end_time}: {', '.join(dates)}"
            )
        else:
            meeting = importer.build_meeting(event)
            print(
                f"meeting '{meeting.title}' {meeting.date} "
                f"{meeting.start_time}-{meeting.end_time} @ {meeting.location}"
            )


async def run_import(args: Any, settings: BIMCallSettings) -> int:
    """Create meetings and series on the server from a calendar file."""
    events = filter_events(_load_events(args.file, settings), args.search)
    if not events:
        print("No events to import")
        return 0

    _apply_import_overrides(args, settings)

    if args.dry_run:
        # Payloads are built without any API calls
        _print_dry_run(CalendarImporter(client=None, options=settings.importer), events)
        return 0

    async with BIMCallClient(settings) as client:
        importer = CalendarImporter(client, options=settings.importer)
        summary = await importer.import_events(events)

    for result in summary.results:
        detail = f" ({result.message})" if result.message else ""
        print(f"{result.status:<9} {result.title}{detail}")
    print(summary.message)

    return 1 if summary.failed else 0
