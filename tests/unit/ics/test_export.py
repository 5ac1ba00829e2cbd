"""Unit tests for ICS invitation export and calendar links."""

from urllib.parse import parse_qs, urlparse

import pytest

from bimcall.ics.exceptions import ICSExportError
from bimcall.ics.export import (
    PRODID,
    export_filename,
    generate_ics,
    google_calendar_url,
    outlook_calendar_url,
)
from bimcall.ics.models import ExportAttendee, ICSDateTime, MeetingExport
from bimcall.ics.parser import parse_ics_file, unfold_lines


@pytest.fixture
def meeting() -> MeetingExport:
    """Create a meeting with agenda and video link."""
    return MeetingExport(
        id="m-42",
        title="Design review, phase 2",
        date="2024-03-04",
        start_time="09:00",
        end_time="10:00",
        location="Room 4, Level 2",
        agenda="Item 1\nItem 2",
        meeting_link="https://teams.microsoft.com/l/meetup-join/abc",
    )


class TestGenerateICS:
    """Test ICS document generation."""

    def test_generate_ics_calendar_properties(self, meeting: MeetingExport) -> None:
        """Test the VCALENDAR header and event identity."""
        ics = unfold_lines(generate_ics(meeting))

        assert ics.startswith("BEGIN:VCALENDAR")
        assert f"PRODID:{PRODID}" in ics
        assert "METHOD:REQUEST" in ics
        assert "UID:m-42@bimcall.app" in ics
        assert "DTSTART:20240304T090000" in ics
        assert "DTEND:20240304T100000" in ics
        assert "URL:https://teams.microsoft.com/l/meetup-join/abc" in ics

    def test_generate_ics_parses_back(self, meeting: MeetingExport) -> None:
        """Test that an exported invitation is read back by the import parser."""
        events = parse_ics_file(generate_ics(meeting))

        assert len(events) == 1
        event = events[0]
        assert event.title == "Design review, phase 2"
        assert event.location == "Room 4, Level 2"
        assert event.description == "Item 1\nItem 2"
        assert event.start_date == ICSDateTime(date="2024-03-04", time="09:00")
        assert event.end_date == ICSDateTime(date="2024-03-04", time="10:00")
        assert event.uid == "m-42@bimcall.app"
        assert event.is_recurring is False

    def test_generate_ics_attendees(self, meeting: MeetingExport) -> None:
        """Test attendees are listed with their participation status."""
        attendees = [
            ExportAttendee(name="Ana Lima", email="ana@example.com", status="accepted"),
            ExportAttendee(name="Ben Okafor", email="ben@example.com", status="declined"),
            ExportAttendee(name="Chris Wu", email="chris@example.com"),
        ]

        ics = unfold_lines(generate_ics(meeting, attendees))
        attendee_lines = [line for line in ics.splitlines() if line.startswith("ATTENDEE")]

        assert len(attendee_lines) == 3
        assert "PARTSTAT=ACCEPTED" in attendee_lines[0]
        assert attendee_lines[0].endswith("mailto:ana@example.com")
        assert "PARTSTAT=DECLINED" in attendee_lines[1]
        assert "PARTSTAT=NEEDS-ACTION" in attendee_lines[2]
        assert "Chris Wu" in attendee_lines[2]

    def test_generate_ics_without_optional_fields(self) -> None:
        """Test that DESCRIPTION and URL are omitted when empty."""
        plain = MeetingExport(
            id="m-1", title="Site walk", date="2024-06-01", start_time="14:00", end_time="15:00"
        )

        ics = generate_ics(plain)

        assert "DESCRIPTION" not in ics
        assert "URL:" not in ics

    def test_generate_ics_invalid_time_raises(self, meeting: MeetingExport) -> None:
        """Test malformed times raise ICSExportError."""
        broken = meeting.model_copy(update={"start_time": "9am"})

        with pytest.raises(ICSExportError):
            generate_ics(broken)


class TestExportHelpers:
    """Test filenames and add-to-calendar links."""

    def test_export_filename(self, meeting: MeetingExport) -> None:
        """Test non-alphanumerics in the title are replaced."""
        assert export_filename(meeting) == "Design_review__phase_2_2024-03-04.ics"

    def test_google_calendar_url(self, meeting: MeetingExport) -> None:
        """Test the Google Calendar template link."""
        url = urlparse(google_calendar_url(meeting))
        params = parse_qs(url.query)

        assert url.netloc == "calendar.google.com"
        assert params["action"] == ["TEMPLATE"]
        assert params["text"] == ["Design review, phase 2"]
        assert params["dates"] == ["20240304T090000/20240304T100000"]
        assert params["location"] == ["https://teams.microsoft.com/l/meetup-join/abc"]

    def test_outlook_calendar_url_uses_location_without_link(self, meeting: MeetingExport) -> None:
        """Test the Outlook compose link falls back to the physical location."""
        no_link = meeting.model_copy(update={"meeting_link": None})

        params = parse_qs(urlparse(outlook_calendar_url(no_link)).query)

        assert params["subject"] == ["Design review, phase 2"]
        assert params["startdt"] == ["2024-03-04T09:00:00"]
        assert params["enddt"] == ["2024-03-04T10:00:00"]
        assert params["location"] == ["Room 4, Level 2"]
