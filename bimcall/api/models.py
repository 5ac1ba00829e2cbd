"""Request and response models for the BIMCall REST API.

Fields are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..ics.models import ExportAttendee, MeetingExport, RecurrenceRule


class APIModel(BaseModel):
    """Base model translating between snake_case fields and camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialize for a request body, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MeetingCreate(APIModel):
    """Payload for POST /api/meetings."""

    title: str
    project: str = Field(..., description="Project name shown on the meeting")
    date: str = Field(..., description="Meeting date as YYYY-MM-DD")
    start_time: str
    end_time: str
    location: str
    platform: str = "outlook"
    project_id: Optional[str] = None
    agenda: Optional[str] = None
    meeting_link: Optional[str] = None
    calendar_provider: Optional[str] = None
    calendar_event_id: Optional[str] = None


class Meeting(MeetingCreate):
    """Meeting record returned by the API."""

    id: str
    status: str = "scheduled"
    created_at: Optional[datetime] = None

    def to_export(self) -> MeetingExport:
        """Convert to the fields needed for ICS export."""
        return MeetingExport(
            id=self.id,
            title=self.title,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            location=self.location,
            agenda=self.agenda,
            meeting_link=self.meeting_link,
        )


class MeetingSeriesCreate(APIModel):
    """Payload for POST /api/meeting-series."""

    title: str
    recurrence_rule: RecurrenceRule
    start_time: str
    end_time: str
    location: str
    platform: str = "outlook"
    project_id: Optional[str] = None
    agenda: Optional[str] = None
    meeting_link: Optional[str] = None
    calendar_provider: Optional[str] = None
    calendar_event_id: Optional[str] = None


class MeetingSeries(MeetingSeriesCreate):
    """Meeting series record returned by the API."""

    id: str
    status: str = "active"
    created_at: Optional[datetime] = None


class MeetingOccurrenceCreate(APIModel):
    """Payload for POST /api/meeting-occurrences."""

    series_id: str
    date: str
    status: str = "scheduled"
    start_time_override: Optional[str] = None
    end_time_override: Optional[str] = None
    location_override: Optional[str] = None
    calendar_occurrence_id: Optional[str] = None
    notes: Optional[str] = None


class MeetingOccurrence(MeetingOccurrenceCreate):
    """Occurrence record returned by the API."""

    id: str


class AttendeeCreate(APIModel):
    """Payload for POST /api/attendees."""

    meeting_id: str
    name: str
    email: Optional[str] = None
    role: str = "Participant"
    company: str = ""


class SeriesAttendeeCreate(APIModel):
    """Payload for POST /api/series-attendees."""

    series_id: str
    name: str
    email: Optional[str] = None
    role: str = "Participant"
    company: str = ""


class Attendee(APIModel):
    """Meeting or series attendee returned by the API."""

    id: str
    name: str
    email: Optional[str] = None
    role: str = "Participant"
    company: Optional[str] = None
    status: str = "pending"
    meeting_id: Optional[str] = None
    series_id: Optional[str] = None

    def to_export(self) -> Optional[ExportAttendee]:
        """Convert for ICS export; attendees without email are not exportable."""
        if not self.email:
            return None
        return ExportAttendee(name=self.name, email=self.email, status=self.status)


class DuplicateCheckResult(APIModel):
    """Response of GET /api/calendar/check-duplicate."""

    is_duplicate: bool = False
    type: Optional[Literal["meeting", "series"]] = None
    entity: Optional[dict[str, Any]] = None
    message: Optional[str] = None

    @property
    def entity_id(self) -> Optional[str]:
        """ID of the meeting or series the event was already imported as."""
        if not self.entity:
            return None
        return self.entity.get("id")


class CalendarSyncResult(APIModel):
    """Response of the sync-from-calendar endpoints."""

    status: Literal["updated", "removed"]
    message: str = ""
    meeting: Optional[Meeting] = None
    series: Optional[MeetingSeries] = None
