"""Lightweight iCalendar parser for calendar file imports.

Extracts the handful of VEVENT properties BIMCall imports (SUMMARY,
DESCRIPTION, LOCATION, DTSTART, DTEND, RRULE, UID) with a line scanner rather
than a full RFC 5545 implementation. Malformed properties degrade to defaults
field by field; nothing in here raises for odd content.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from .exceptions import ICSContentError, ICSContentTooLargeError, ICSParseError
from .models import ICSDateTime, ParsedCalendarEvent, RecurrenceRule

logger = logging.getLogger(__name__)

MAX_ICS_SIZE_BYTES = 5 * 1024 * 1024  # 5MB upload limit
ICS_FILE_EXTENSIONS = (".ics", ".ical", ".ifb", ".icalendar")

UNTITLED_EVENT = "Untitled Event"

_FOLDED_LINE_RE = re.compile(r"\r?\n[ \t]")
_LINE_BREAK_RE = re.compile(r"\r?\n")
_MEETING_LINK_RE = re.compile(
    r"https?://[^\s]*(?:zoom\.us|teams\.microsoft\.com|meet\.google\.com|webex\.com)[^\s]*",
    re.IGNORECASE,
)


def unfold_lines(content: str) -> str:
    """Join folded continuation lines back onto the line they continue.

    A line break followed by a single space or tab marks a continuation. The
    break and that one whitespace character are removed.
    """
    return _FOLDED_LINE_RE.sub("", content)


def split_lines(content: str) -> list[str]:
    """Split text on CRLF or LF boundaries."""
    return _LINE_BREAK_RE.split(content)


def decode_text(value: str, decode_newlines: bool = True) -> str:
    r"""Decode the ``\,`` and (optionally) ``\n`` escapes of a text value."""
    decoded = value.replace("\\,", ",")
    if decode_newlines:
        decoded = decoded.replace("\\n", "\n")
    return decoded


def parse_ics_date(raw: str) -> Optional[ICSDateTime]:
    """Parse a DTSTART/DTEND value into a wall-clock date and time.

    Every ``T`` and ``Z`` is dropped before slicing digits, which covers the
    ``YYYYMMDD``, ``YYYYMMDDTHHMMSS`` and ``YYYYMMDDTHHMMSSZ`` forms.

    Args:
        raw: Property value without parameters

    Returns:
        ICSDateTime, or None when the value is empty or too short
    """
    if not raw:
        return None

    cleaned = raw.replace("T", "").replace("Z", "")
    if len(cleaned) < 8:
        return None

    year = cleaned[0:4]
    month = cleaned[4:6]
    day = cleaned[6:8]
    hour = cleaned[8:10] if len(cleaned) >= 10 else "00"
    minute = cleaned[10:12] if len(cleaned) >= 12 else "00"

    return ICSDateTime(date=f"{year}-{month}-{day}", time=f"{hour}:{minute}")


def parse_rrule(rrule: str) -> Optional[RecurrenceRule]:
    """Classify an RRULE value as weekly, biweekly or monthly.

    Only FREQ and an INTERVAL of 2 are looked at. Anything that is not
    recognised (DAILY, YEARLY, other intervals) is reported as weekly.
    """
    if not rrule:
        return None

    if "FREQ=WEEKLY" in rrule and "INTERVAL=2" in rrule:
        return RecurrenceRule.BIWEEKLY
    if "FREQ=WEEKLY" in rrule:
        return RecurrenceRule.WEEKLY
    if "FREQ=MONTHLY" in rrule:
        return RecurrenceRule.MONTHLY
    return RecurrenceRule.WEEKLY


def _build_event(fields: dict[str, str]) -> ParsedCalendarEvent:
    """Turn the properties collected for one VEVENT into an event record."""
    rrule = fields.get("RRULE", "")
    is_recurring = bool(rrule)

    return ParsedCalendarEvent(
        title=decode_text(fields.get("SUMMARY") or UNTITLED_EVENT),
        description=decode_text(fields.get("DESCRIPTION") or ""),
        # Location keeps literal \n sequences
        location=decode_text(fields.get("LOCATION") or "", decode_newlines=False),
        start_date=parse_ics_date(fields.get("DTSTART") or ""),
        end_date=parse_ics_date(fields.get("DTEND") or ""),
        is_recurring=is_recurring,
        recurrence_rule=parse_rrule(rrule) if is_recurring else None,
        uid=fields.get("UID") or None,
    )


def parse_ics_file(content: str) -> list[ParsedCalendarEvent]:
    """Parse raw ICS text into events, in file order.

    Args:
        content: Full text of an .ics file

    Returns:
        One ParsedCalendarEvent per complete BEGIN:VEVENT/END:VEVENT block
    """
    events: list[ParsedCalendarEvent] = []
    fields: dict[str, str] = {}
    in_event = False

    for line in split_lines(unfold_lines(content)):
        if line == "BEGIN:VEVENT":
            in_event = True
            fields = {}
            continue

        if line == "END:VEVENT" and in_event:
            events.append(_build_event(fields))
            in_event = False
            continue

        if in_event:
            colon_index = line.find(":")
            if colon_index > 0:
                # Drop parameters such as ;TZID=...
                key = line[:colon_index].split(";", 1)[0]
                fields[key] = line[colon_index + 1 :]

    logger.debug(f"Parsed {len(events)} event(s) from ICS content")
    return events


def extract_meeting_link(*texts: Optional[str]) -> Optional[str]:
    """Find the first Zoom/Teams/Meet/Webex URL in the given texts."""
    search_text = " ".join(text for text in texts if text)
    match = _MEETING_LINK_RE.search(search_text)
    return match.group(0) if match else None


def is_ics_filename(filename: str) -> bool:
    """Check whether a filename carries one of the accepted calendar extensions."""
    return filename.lower().endswith(ICS_FILE_EXTENSIONS)


def read_ics_file(
    path: Union[str, Path], max_bytes: int = MAX_ICS_SIZE_BYTES
) -> str:
    """Read an uploaded calendar file from disk.

    Args:
        path: Location of the .ics/.ical/.ifb/.icalendar file
        max_bytes: Upper bound on the file size

    Returns:
        File contents decoded as UTF-8

    Raises:
        ICSContentError: If the extension is not a calendar extension
        ICSContentTooLargeError: If the file exceeds max_bytes
        ICSParseError: If the file cannot be read
    """
    file_path = Path(path)

    if not is_ics_filename(file_path.name):
        raise ICSContentError(
            f"Invalid file type '{file_path.suffix}'. Only ICS/iCal files are allowed.",
            filename=file_path.name,
        )

    try:
        size = file_path.stat().st_size
        if size > max_bytes:
            raise ICSContentTooLargeError(
                f"Calendar file is {size} bytes, limit is {max_bytes} bytes",
                filename=file_path.name,
            )
        raw = file_path.read_bytes()
    except OSError as e:
        logger.error(f"Could not read calendar file {file_path}: {e}")
        raise ICSParseError(f"Could not read calendar file: {e}", filename=file_path.name) from e

    logger.debug(f"Read {len(raw)} bytes from {file_path}")
    return raw.decode("utf-8", errors="replace")
