"""ICS calendar parsing, occurrence generation and export."""

from .exceptions import (
    ICSContentError,
    ICSContentTooLargeError,
    ICSError,
    ICSExportError,
    ICSParseError,
)
from .export import generate_ics, google_calendar_url, outlook_calendar_url
from .models import (
    ExportAttendee,
    ICSDateTime,
    MeetingExport,
    Occurrence,
    ParsedCalendarEvent,
    RecurrenceRule,
)
from .parser import parse_ics_date, parse_ics_file, parse_rrule, read_ics_file
from .recurrence import generate_occurrences

__all__ = [
    "ExportAttendee",
    "ICSContentError",
    "ICSContentTooLargeError",
    "ICSDateTime",
    "ICSError",
    "ICSExportError",
    "ICSParseError",
    "MeetingExport",
    "Occurrence",
    "ParsedCalendarEvent",
    "RecurrenceRule",
    "generate_ics",
    "generate_occurrences",
    "google_calendar_url",
    "outlook_calendar_url",
    "parse_ics_date",
    "parse_ics_file",
    "parse_rrule",
    "read_ics_file",
]
