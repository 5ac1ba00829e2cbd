"""Import parsed calendar events as BIMCall meetings and meeting series."""

import logging
from collections.abc import Awaitable, Iterable, Sequence
from datetime import date
from typing import Callable, Optional

from pydantic import ValidationError

from ..api.client import BIMCallClient
from ..api.exceptions import APIError
from ..api.models import (
    AttendeeCreate,
    DuplicateCheckResult,
    MeetingCreate,
    MeetingOccurrenceCreate,
    MeetingSeriesCreate,
    SeriesAttendeeCreate,
)
from ..config.settings import ImportSettings
from ..ics.models import ICSDateTime, Occurrence, ParsedCalendarEvent
from ..ics.parser import extract_meeting_link
from ..ics.recurrence import clamp_occurrence_count, generate_occurrences
from ..utils.logging import VERBOSE
from .exceptions import CalendarImportError
from .models import BulkImportSummary, EventAttendee, ImportResult, ImportStatus

logger = logging.getLogger(__name__)


def filter_events(
    events: Iterable[ParsedCalendarEvent], search: Optional[str]
) -> list[ParsedCalendarEvent]:
    """Keep events whose title, location or description contains the search text."""
    events = list(events)
    if not search:
        return events

    needle = search.lower()
    return [
        event
        for event in events
        if needle in event.title.lower()
        or needle in event.location.lower()
        or needle in event.description.lower()
    ]


class CalendarImporter:
    """Turns parsed calendar events into meetings or series through the API.

    Events are imported one at a time. A failure on one event is recorded and
    the next event is attempted; records already created are left in place.
    """

    def __init__(
        self,
        client: Optional[BIMCallClient],
        options: Optional[ImportSettings] = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize importer.

        Args:
            client: Open API client, or None when only payloads are built
            options: Import defaults (project, occurrence count, fallbacks)
            today: Date source for events without DTSTART
        """
        self.client = client
        self.options = options or ImportSettings()
        self._today = today

    @property
    def api(self) -> BIMCallClient:
        """The API client.

        Raises:
            CalendarImportError: If the importer was created without a client
        """
        if self.client is None:
            raise CalendarImportError("No API client configured for import")
        return self.client

    # Payload construction

    def _resolve_times(self, event: ParsedCalendarEvent) -> tuple[ICSDateTime, ICSDateTime]:
        start = event.start_date or ICSDateTime(
            date=self._today().isoformat(), time=self.options.fallback_start_time
        )
        end = event.end_date or ICSDateTime(date=start.date, time=self.options.fallback_end_time)
        return start, end

    def build_meeting(self, event: ParsedCalendarEvent) -> MeetingCreate:
        """Map a one-off event to a meeting payload."""
        start, end = self._resolve_times(event)
        return MeetingCreate(
            title=event.title,
            project=self.options.project_name,
            date=start.date,
            start_time=start.time,
            end_time=end.time,
            location=event.location or self.options.default_location,
            platform=self.options.platform,
            project_id=self.options.project_id,
            agenda=event.description or None,
            meeting_link=extract_meeting_link(event.description, event.location),
            calendar_event_id=event.uid,
        )

    def build_series(self, event: ParsedCalendarEvent) -> MeetingSeriesCreate:
        """Map a recurring event to a meeting series payload.

        Raises:
            CalendarImportError: If the event has no recurrence rule
        """
        if not event.recurrence_rule:
            raise CalendarImportError("Event has no recurrence rule", event_title=event.title)

        start, end = self._resolve_times(event)
        return MeetingSeriesCreate(
            title=event.title,
            recurrence_rule=event.recurrence_rule,
            start_time=start.time,
            end_time=end.time,
            location=event.location or self.options.default_location,
            platform=self.options.platform,
            project_id=self.options.project_id,
            agenda=event.description or None,
            meeting_link=extract_meeting_link(event.description, event.location),
            calendar_event_id=event.uid,
        )

    def build_occurrences(self, event: ParsedCalendarEvent) -> list[Occurrence]:
        """Generate the occurrences created for an imported series."""
        if not event.recurrence_rule:
            raise CalendarImportError("Event has no recurrence rule", event_title=event.title)

        start, _ = self._resolve_times(event)
        count = clamp_occurrence_count(self.options.occurrence_count)
        return generate_occurrences(start.date, event.recurrence_rule, count)

    @staticmethod
    def imports_as_series(event: ParsedCalendarEvent) -> bool:
        """Recurring events with a recognised rule become series."""
        return event.is_recurring and event.recurrence_rule is not None

    # Import operations

    async def _add_attendees(
        self,
        attendees: Sequence[EventAttendee],
        create: Callable[[EventAttendee], Awaitable[object]],
    ) -> int:
        """Create attendees one by one, skipping ones without email or that fail."""
        added = 0
        for attendee in attendees:
            if not attendee.email:
                continue
            try:
                await create(attendee)
                added += 1
            except APIError as e:
                logger.warning(f"Could not add attendee {attendee.email}: {e.message}")
        return added

    async def _import_meeting(
        self, event: ParsedCalendarEvent, attendees: Sequence[EventAttendee]
    ) -> ImportResult:
        meeting = await self.api.create_meeting(self.build_meeting(event))

        async def create(attendee: EventAttendee) -> object:
            return await self.api.create_attendee(
                AttendeeCreate(
                    meeting_id=meeting.id, name=attendee.display_name, email=attendee.email
                )
            )

        attendee_count = await self._add_attendees(attendees, create)
        return ImportResult(
            status=ImportStatus.IMPORTED,
            title=event.title,
            entity_type="meeting",
            entity_id=meeting.id,
            attendee_count=attendee_count,
        )

    async def _import_series(
        self, event: ParsedCalendarEvent, attendees: Sequence[EventAttendee]
    ) -> ImportResult:
        occurrences = self.build_occurrences(event)
        series = await self.api.create_series(self.build_series(event))

        for occurrence in occurrences:
            await self.api.create_occurrence(
                MeetingOccurrenceCreate(
                    series_id=series.id, date=occurrence.date, status=occurrence.status
                )
            )

        async def create(attendee: EventAttendee) -> object:
            return await self.api.create_series_attendee(
                SeriesAttendeeCreate(
                    series_id=series.id, name=attendee.display_name, email=attendee.email
                )
            )

        attendee_count = await self._add_attendees(attendees, create)
        logger.log(
            VERBOSE,
            f"Series '{series.title}' created with {len(occurrences)} occurrence(s)"
        )
        return ImportResult(
            status=ImportStatus.IMPORTED,
            title=event.title,
            entity_type="series",
            entity_id=series.id,
            occurrence_count=len(occurrences),
            attendee_count=attendee_count,
        )

    async def sync_duplicate(
        self, event: ParsedCalendarEvent, duplicate: DuplicateCheckResult
    ) -> ImportResult:
        """Refresh the meeting or series an event was already imported as.

        Raises:
            CalendarImportError: If the duplicate record carries no entity id
        """
        entity_id = duplicate.entity_id
        if not entity_id:
            raise CalendarImportError(
                "Duplicate check returned no entity to sync", event_title=event.title
            )

        if duplicate.type == "series":
            sync = await self.api.sync_series(entity_id)
        else:
            sync = await self.api.sync_meeting(entity_id)

        return ImportResult(
            status=ImportStatus.SYNCED,
            title=event.title,
            entity_type=duplicate.type,
            entity_id=entity_id,
            message=sync.message or f"Sync {sync.status}",
        )

    async def import_event(
        self, event: ParsedCalendarEvent, attendees: Sequence[EventAttendee] = ()
    ) -> ImportResult:
        """Import one event as a meeting or a series.

        Events with a UID are checked against earlier imports first; duplicates
        are skipped, or synced from the calendar when ``sync_duplicates`` is set.

        Raises:
            APIError: If the API rejects a call
            CalendarImportError: If a duplicate cannot be synced
        """
        if self.options.check_duplicates and event.uid:
            duplicate = await self.api.check_duplicate(event.uid)
            if duplicate.is_duplicate:
                if self.options.sync_duplicates:
                    return await self.sync_duplicate(event, duplicate)

                logger.info(f"Skipping '{event.title}': {duplicate.message or 'already imported'}")
                return ImportResult(
                    status=ImportStatus.DUPLICATE,
                    title=event.title,
                    entity_type=duplicate.type,
                    entity_id=duplicate.entity_id,
                    message=duplicate.message,
                )

        if self.imports_as_series(event):
            return await self._import_series(event, attendees)
        return await self._import_meeting(event, attendees)

    async def import_events(self, events: Iterable[ParsedCalendarEvent]) -> BulkImportSummary:
        """Import events sequentially and count the outcomes."""
        summary = BulkImportSummary()

        for event in events:
            try:
                result = await self.import_event(event)
            except (APIError, CalendarImportError, ValidationError) as e:
                logger.error(f"Failed to import '{event.title}': {e}")
                result = ImportResult(status=ImportStatus.FAILED, title=event.title, message=str(e))
            summary.add(result)

        logger.info(summary.message)
        return summary
