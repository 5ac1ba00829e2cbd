"""Calendar event import into meetings and meeting series."""

from .exceptions import CalendarImportError
from .models import BulkImportSummary, EventAttendee, ImportResult, ImportStatus
from .service import CalendarImporter, filter_events

__all__ = [
    "BulkImportSummary",
    "CalendarImportError",
    "CalendarImporter",
    "EventAttendee",
    "ImportResult",
    "ImportStatus",
    "filter_events",
]
