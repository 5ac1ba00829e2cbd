"""Async HTTP client for the BIMCall REST API."""

import asyncio
import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import ValidationError

from .exceptions import (
    APIAuthError,
    APIError,
    APINetworkError,
    APINotFoundError,
    APIResponseError,
)
from .models import (
    APIModel,
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

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=APIModel)


class BIMCallClient:
    """Async client for the meeting, series, attendee and calendar endpoints."""

    def __init__(self, settings: Any, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize API client.

        Args:
            settings: Application settings
            transport: Optional httpx transport (used to stub the server in tests)
        """
        self.settings = settings
        self.client: Optional[httpx.AsyncClient] = None
        self._transport = transport

        logger.debug(f"API client initialized for {settings.api_base_url}")

    async def __aenter__(self) -> "BIMCallClient":
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self._close_client()

    def _default_headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": f"{self.settings.app_name}/1.0.0 API-Client",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.settings.api_token:
            headers["Authorization"] = f"Bearer {self.settings.api_token}"
        if self.settings.dev_user_id:
            headers["x-dev-user-id"] = self.settings.dev_user_id
        if self.settings.dev_user_email:
            headers["x-dev-user-email"] = self.settings.dev_user_email
        return headers

    async def _ensure_client(self) -> None:
        """Ensure HTTP client exists."""
        if self.client is None or self.client.is_closed:
            timeout = httpx.Timeout(
                connect=10.0, read=self.settings.request_timeout, write=10.0, pool=30.0
            )
            self.client = httpx.AsyncClient(
                base_url=self.settings.api_base_url,
                timeout=timeout,
                follow_redirects=True,
                headers=self._default_headers(),
                transport=self._transport,
            )

    async def _close_client(self) -> None:
        """Close HTTP client."""
        if self.client and not self.client.is_closed:
            await self.client.aclose()

    def _map_status_error(self, error: httpx.HTTPStatusError) -> APIError:
        """Translate an HTTP error status into the matching APIError."""
        response = error.response
        status = response.status_code

        detail = response.reason_phrase
        try:
            body = response.json()
            if isinstance(body, dict):
                detail = body.get("message") or body.get("error") or detail
        except ValueError:
            pass

        message = f"HTTP {status} for {error.request.method} {error.request.url.path}: {detail}"
        if status in (401, 403):
            return APIAuthError(message, status)
        if status == 404:
            return APINotFoundError(message, status)
        return APIResponseError(message, status)

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, str]] = None,
    ) -> Any:
        """Send a request with retry on transport failures and return the JSON body.

        Raises:
            APIAuthError: On 401/403
            APINotFoundError: On 404
            APIResponseError: On other error statuses or a non-JSON body
            APINetworkError: When every attempt failed at the transport level
            APIError: On any other httpx failure, such as a dropped connection
        """
        await self._ensure_client()
        if self.client is None:
            raise APIError("HTTP client not initialized")

        max_retries = self.settings.max_retries
        for attempt in range(max_retries + 1):
            try:
                response = await self.client.request(method, path, json=json, params=params)
                response.raise_for_status()
                break

            except (httpx.TimeoutException, httpx.NetworkError) as e:
                if attempt < max_retries:
                    backoff_time = self.settings.retry_backoff_factor**attempt
                    logger.warning(
                        f"{method} {path} failed (attempt {attempt + 1}/{max_retries + 1}), "
                        f"retrying in {backoff_time:.1f}s: {e}"
                    )
                    await asyncio.sleep(backoff_time)
                else:
                    logger.error(f"All retry attempts failed for {method} {path}")
                    raise APINetworkError(f"Network error: {e}") from e

            except httpx.HTTPStatusError as e:
                # HTTP errors are not retried
                raise self._map_status_error(e) from e

            except httpx.HTTPError as e:
                logger.error(f"Unexpected HTTP error for {method} {path}: {e}")
                raise APIError(f"HTTP error: {e}") from e

        logger.debug(f"{method} {path} -> {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise APIResponseError(
                f"Invalid JSON in response to {method} {path}", response.status_code
            ) from e

    @staticmethod
    def _parse(model: type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise APIResponseError(f"Unexpected {model.__name__} response: {e}") from e

    # Meetings

    async def create_meeting(self, meeting: MeetingCreate) -> Meeting:
        """Create a single meeting."""
        data = await self._request("POST", "/api/meetings", json=meeting.to_payload())
        created = self._parse(Meeting, data)
        logger.info(f"Created meeting '{created.title}' ({created.id})")
        return created

    async def get_meeting(self, meeting_id: str) -> Meeting:
        """Fetch a meeting by id."""
        data = await self._request("GET", f"/api/meetings/{meeting_id}")
        return self._parse(Meeting, data)

    async def get_meeting_attendees(self, meeting_id: str) -> list[Attendee]:
        """Fetch the attendees of a meeting."""
        data = await self._request("GET", f"/api/meetings/{meeting_id}/attendees")
        return [self._parse(Attendee, item) for item in data or []]

    async def create_attendee(self, attendee: AttendeeCreate) -> Attendee:
        """Add an attendee to a meeting."""
        data = await self._request("POST", "/api/attendees", json=attendee.to_payload())
        return self._parse(Attendee, data)

    # Series

    async def create_series(self, series: MeetingSeriesCreate) -> MeetingSeries:
        """Create a recurring meeting series (without occurrences)."""
        data = await self._request("POST", "/api/meeting-series", json=series.to_payload())
        created = self._parse(MeetingSeries, data)
        logger.info(f"Created meeting series '{created.title}' ({created.id})")
        return created

    async def create_occurrence(self, occurrence: MeetingOccurrenceCreate) -> MeetingOccurrence:
        """Add one dated occurrence to a series."""
        data = await self._request(
            "POST", "/api/meeting-occurrences", json=occurrence.to_payload()
        )
        return self._parse(MeetingOccurrence, data)

    async def create_series_attendee(self, attendee: SeriesAttendeeCreate) -> Attendee:
        """Add an attendee to every meeting of a series."""
        data = await self._request("POST", "/api/series-attendees", json=attendee.to_payload())
        return self._parse(Attendee, data)

    # Calendar linkage

    async def check_duplicate(self, event_id: str) -> DuplicateCheckResult:
        """Check whether a calendar event was already imported as a meeting or series."""
        data = await self._request(
            "GET", "/api/calendar/check-duplicate", params={"eventId": event_id}
        )
        return self._parse(DuplicateCheckResult, data)

    async def sync_meeting(self, meeting_id: str) -> CalendarSyncResult:
        """Refresh a previously imported meeting from its calendar event."""
        data = await self._request("POST", f"/api/meetings/{meeting_id}/sync-from-calendar")
        return self._parse(CalendarSyncResult, data)

    async def sync_series(self, series_id: str) -> CalendarSyncResult:
        """Refresh a previously imported series from its calendar event."""
        data = await self._request(
            "POST", f"/api/meeting-series/{series_id}/sync-from-calendar"
        )
        return self._parse(CalendarSyncResult, data)
