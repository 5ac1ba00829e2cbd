"""Data models for parsed calendar events and generated occurrences."""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RecurrenceRule(str, Enum):
    """Recurrence patterns supported by meeting series."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class ICSDateTime(BaseModel):
    """Zone-less wall-clock date and time taken from a DTSTART/DTEND value.

    Time zone parameters such as TZID are discarded during parsing and a
    trailing ``Z`` is not converted. No offset or zone is attached.
    """

    date: str = Field(..., description="Calendar date as YYYY-MM-DD")
    time: str = Field(..., description="Wall-clock time as HH:MM")


class ParsedCalendarEvent(BaseModel):
    """One VEVENT block extracted from an ICS file."""

    title: str = Field(default="Untitled Event", description="Decoded SUMMARY")
    description: str = Field(default="", description="Decoded DESCRIPTION")
    location: str = Field(default="", description="Decoded LOCATION")
    start_date: Optional[ICSDateTime] = Field(default=None, description="Parsed DTSTART")
    end_date: Optional[ICSDateTime] = Field(default=None, description="Parsed DTEND")
    is_recurring: bool = Field(default=False, description="True when an RRULE was present")
    recurrence_rule: Optional[RecurrenceRule] = Field(
        default=None, description="Simplified RRULE classification"
    )
    uid: Optional[str] = Field(default=None, description="External calendar event UID")

    model_config = ConfigDict(
        use_enum_values=True, alias_generator=to_camel, populate_by_name=True
    )


class Occurrence(BaseModel):
    """A single dated instance of a recurring meeting series."""

    date: str = Field(..., description="Occurrence date as YYYY-MM-DD")
    status: Literal["scheduled"] = "scheduled"


class ExportAttendee(BaseModel):
    """Attendee written to an exported meeting invitation."""

    name: str = Field(..., description="Display name (CN)")
    email: str = Field(..., description="Attendee email address")
    status: str = Field(default="pending", description="pending, accepted or declined")


class MeetingExport(BaseModel):
    """Meeting fields needed to render an ICS invitation or calendar link."""

    id: str = Field(..., description="Meeting ID, used for the event UID")
    title: str
    date: str = Field(..., description="Meeting date as YYYY-MM-DD")
    start_time: str = Field(..., description="Start time as HH:MM")
    end_time: str = Field(..., description="End time as HH:MM")
    location: str = ""
    agenda: Optional[str] = None
    meeting_link: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
