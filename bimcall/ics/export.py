"""Export meetings as ICS invitations and "add to calendar" links."""

import logging
import re
from collections.abc import Iterable
from datetime import datetime, timezone
from urllib.parse import urlencode

from icalendar import Calendar, Event as ICalEvent, vCalAddress, vText

from .exceptions import ICSExportError
from .models import ExportAttendee, MeetingExport

logger = logging.getLogger(__name__)

PRODID = "-//BIMCall//Coordination Meeting Manager//EN"
UID_DOMAIN = "bimcall.app"

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"
OUTLOOK_CALENDAR_URL = "https://outlook.office.com/calendar/0/action/compose"

_PARTSTAT = {"accepted": "ACCEPTED", "declined": "DECLINED"}


def _meeting_datetime(date_str: str, time_str: str) -> datetime:
    try:
        return datetime.strptime(f"{date_str} {time_str}", "%Y-%m-%d %H:%M")
    except ValueError as e:
        raise ICSExportError(f"Invalid meeting date/time '{date_str} {time_str}': {e}") from e


def _attendee_address(attendee: ExportAttendee) -> vCalAddress:
    address = vCalAddress(f"mailto:{attendee.email}")
    address.params["cn"] = vText(attendee.name)
    address.params["partstat"] = vText(_PARTSTAT.get(attendee.status, "NEEDS-ACTION"))
    return address


def generate_ics(meeting: MeetingExport, attendees: Iterable[ExportAttendee] = ()) -> str:
    """Render a meeting as a single-event ICS invitation.

    DTSTART/DTEND are written as floating local times, matching how meeting
    times are stored. Escaping and line folding are left to icalendar.

    Args:
        meeting: Meeting to export
        attendees: Attendees to list with their participation status

    Returns:
        ICS document text with CRLF line endings

    Raises:
        ICSExportError: If the meeting date or times are malformed
    """
    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "REQUEST")

    event = ICalEvent()
    event.add("uid", f"{meeting.id}@{UID_DOMAIN}")
    event.add("dtstamp", datetime.now(timezone.utc))
    event.add("dtstart", _meeting_datetime(meeting.date, meeting.start_time))
    event.add("dtend", _meeting_datetime(meeting.date, meeting.end_time))
    event.add("summary", meeting.title)
    event.add("location", meeting.location)

    if meeting.agenda:
        event.add("description", meeting.agenda)
    if meeting.meeting_link:
        event.add("url", meeting.meeting_link)

    attendee_count = 0
    for attendee in attendees:
        event.add("attendee", _attendee_address(attendee), encode=0)
        attendee_count += 1

    cal.add_component(event)
    logger.debug(f"Exported meeting {meeting.id} with {attendee_count} attendee(s)")
    return cal.to_ical().decode("utf-8")


def export_filename(meeting: MeetingExport) -> str:
    """Build the download filename for an exported meeting."""
    safe_title = re.sub(r"[^a-z0-9]", "_", meeting.title, flags=re.IGNORECASE)
    return f"{safe_title}_{meeting.date}.ics"


def google_calendar_url(meeting: MeetingExport) -> str:
    """Build a Google Calendar event template link."""
    day = meeting.date.replace("-", "")
    start = meeting.start_time.replace(":", "")
    end = meeting.end_time.replace(":", "")

    params = {
        "action": "TEMPLATE",
        "text": meeting.title,
        "dates": f"{day}T{start}00/{day}T{end}00",
        "details": meeting.agenda or "",
        "location": meeting.meeting_link or meeting.location,
        "sf": "true",
    }
    return f"{GOOGLE_CALENDAR_URL}?{urlencode(params)}"


def outlook_calendar_url(meeting: MeetingExport) -> str:
    """Build an Outlook web compose link for the meeting."""
    params = {
        "path": "/calendar/action/compose",
        "rru": "addevent",
        "subject": meeting.title,
        "startdt": f"{meeting.date}T{meeting.start_time}:00",
        "enddt": f"{meeting.date}T{meeting.end_time}:00",
        "body": meeting.agenda or "",
        "location": meeting.meeting_link or meeting.location,
    }
    return f"{OUTLOOK_CALENDAR_URL}?{urlencode(params)}"
