"""Calendar import exceptions."""

from typing import Optional


class CalendarImportError(Exception):
    """Raised when a calendar event cannot be turned into a meeting or series."""

    def __init__(self, message: str, event_title: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.event_title = event_title
