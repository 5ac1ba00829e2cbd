"""Client for the BIMCall meeting REST API."""

from .client import BIMCallClient
from .exceptions import (
    APIAuthError,
    APIError,
    APINetworkError,
    APINotFoundError,
    APIResponseError,
)
from .models import (
    Attendee,
    AttendeeCreate,
    CalendarSyncResult,
    DuplicateCheckResult,
    Meeting,
    MeetingCreate,
    MeetingOccurrence,
    MeetingOccurrenceCreate,
    MeetingSeries,
    MeetingSeriesCreate,
    SeriesAttendeeCreate,
)

__all__ = [
    "APIAuthError",
    "APIError",
    "APINetworkError",
    "APINotFoundError",
    "APIResponseError",
    "Attendee",
    "AttendeeCreate",
    "BIMCallClient",
    "CalendarSyncResult",
    "DuplicateCheckResult",
    "Meeting",
    "MeetingCreate",
    "MeetingOccurrence",
    "MeetingOccurrenceCreate",
    "MeetingSeries",
    "MeetingSeriesCreate",
    "SeriesAttendeeCreate",
]
