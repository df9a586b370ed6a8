"""
Client for the scheduling service's events API.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import pendulum
import requests
from pendulum import DateTime

from ..domain.exceptions import CalendarAPIError
from ..domain.models import CalendarEvent
from .api_client import ApiClient

logger = logging.getLogger(__name__)

RawEvent = Dict[str, Any]

KNOWN_EXTERNAL_SOURCES = ("google", "microsoft")


class CalendarEventsClient:
    """
    Fetches internal and external events for a date range.

    Both endpoints are cursor paginated; pages are collected in a loop until
    the service stops returning a cursor.
    """

    def __init__(
        self,
        api_client: ApiClient,
        events_url: str,
        merchant_id: str,
        brand_id: str,
        page_limit: int = 500,
    ):
        self._api_client = api_client
        self._events_url = events_url.rstrip("/")
        self._merchant_id = merchant_id
        self._brand_id = brand_id
        self._page_limit = page_limit

    def fetch_internal_events(
        self,
        start_date_time: str,
        end_date_time: str,
        provider_ids: Optional[Sequence[str]] = None,
        consumer_ids: Optional[Sequence[str]] = None,
    ) -> List[RawEvent]:
        """Fetch events created in the scheduling service itself."""
        query: Dict[str, Any] = {
            "isGroup": True,
            "isAllSchedule": True,
            "merchantId": self._merchant_id,
            "brand": self._brand_id,
            **self._range_query(start_date_time, end_date_time, provider_ids, consumer_ids),
            "limit": self._page_limit,
        }
        return self._collect_pages(
            self._events_url,
            query,
            cursor_param="cursorStr",
            cursor_field="next_cursor",
            stop_on_empty_page=False,
        )

    def fetch_external_events(
        self,
        start_date_time: str,
        end_date_time: str,
        provider_ids: Optional[Sequence[str]] = None,
        consumer_ids: Optional[Sequence[str]] = None,
        calendar_ids: Optional[Sequence[str]] = None,
    ) -> List[RawEvent]:
        """Fetch events synced from connected calendars (Google, Microsoft)."""
        query: Dict[str, Any] = {
            **self._range_query(start_date_time, end_date_time, provider_ids, consumer_ids),
            "limit": self._page_limit,
        }
        if calendar_ids:
            query["calendarIds"] = list(calendar_ids)

        return self._collect_pages(
            f"{self._events_url}/external",
            query,
            cursor_param="cursor",
            cursor_field="cursor",
            stop_on_empty_page=True,
        )

    def fetch_all_events(
        self,
        start_date_time: str,
        end_date_time: str,
        provider_ids: Optional[Sequence[str]] = None,
        calendar_ids: Optional[Sequence[str]] = None,
    ) -> List[CalendarEvent]:
        """
        Fetch internal and external events, deduplicated by id.

        When both sources return the same id, the external copy wins.
        """
        internal = self.fetch_internal_events(start_date_time, end_date_time, provider_ids)
        external = self.fetch_external_events(
            start_date_time, end_date_time, provider_ids, calendar_ids=calendar_ids
        )

        events_by_id: Dict[str, RawEvent] = {}
        for raw_event in [*internal, *external]:
            events_by_id[raw_event.get("id", "")] = raw_event

        events: List[CalendarEvent] = []
        for raw_event in events_by_id.values():
            try:
                events.append(convert_event(raw_event))
            except (KeyError, ValueError) as e:
                logger.warning("Skipping unparseable event %r: %s", raw_event.get("id"), e)
        return events

    def _collect_pages(
        self,
        url: str,
        query: Dict[str, Any],
        cursor_param: str,
        cursor_field: str,
        stop_on_empty_page: bool,
    ) -> List[RawEvent]:
        """
        Follow the cursor until the service stops returning one.

        With ``stop_on_empty_page`` an empty page also ends the listing;
        otherwise an empty page that carries a cursor is followed.
        """
        events: List[RawEvent] = []
        cursor = ""

        while True:
            try:
                response = self._api_client.get(url, params={"q": {**query, cursor_param: cursor}})
            except requests.exceptions.RequestException as e:
                raise CalendarAPIError(f"Failed to fetch events from {url}: {e}") from e

            data = response.get("data") or {}
            page = data.get("events") or []
            if not page and stop_on_empty_page:
                break

            events.extend(page)
            cursor = data.get(cursor_field)
            if not cursor:
                break

            logger.debug("Fetched %s events from %s, following cursor", len(page), url)

        return events

    @staticmethod
    def _range_query(
        start_date_time: str,
        end_date_time: str,
        provider_ids: Optional[Sequence[str]],
        consumer_ids: Optional[Sequence[str]],
    ) -> Dict[str, Any]:
        query: Dict[str, Any] = {
            "startDateTime": start_date_time,
            "endDateTime": end_date_time,
        }
        if provider_ids:
            query["providerIds"] = list(provider_ids)
        if consumer_ids:
            query["consumerIds"] = list(consumer_ids)
        return query


def convert_event(raw_event: RawEvent) -> CalendarEvent:
    """
    Convert a raw API event into a CalendarEvent.

    ``startTime``/``endTime`` take precedence over ``startDateTime``/``endDateTime``.
    """
    start = _parse_datetime(raw_event.get("startTime") or raw_event["startDateTime"])
    end = _parse_datetime(raw_event.get("endTime") or raw_event["endDateTime"])

    external_source = raw_event.get("externalSource")

    return CalendarEvent(
        id=raw_event["id"],
        title=raw_event.get("title") or "Untitled Event",
        start=start,
        end=end,
        event_type=raw_event.get("type") or "APPOINTMENT",
        is_external=bool(raw_event.get("isExternal")),
        external_source=external_source if external_source in KNOWN_EXTERNAL_SOURCES else None,
    )


def _parse_datetime(datetime_str: str) -> DateTime:
    parsed = pendulum.parse(datetime_str)

    if isinstance(parsed, DateTime):
        return parsed

    raise ValueError(f"Could not parse datetime: {datetime_str}")
