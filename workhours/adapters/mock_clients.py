"""
Mock API clients for running without credentials or network access.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pendulum

from ..domain.models import CalendarEvent, WeeklySchedule, WorkingHoursData
from ..domain.normalizer import WorkingHoursNormalizer
from .events_client import convert_event

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"


def _load_json(data_file: Path, default: Any) -> Any:
    if not data_file.exists():
        return default
    with open(data_file, "r", encoding="utf-8") as f:
        return json.load(f)


class MockWorkingHoursClient:
    """
    Serves working hours from mock_working_hours.json.

    The file maps provider ids to raw awhours payloads. Unknown providers
    yield None, just like an empty API response.
    """

    def __init__(
        self,
        data_file: Path | None = None,
        normalizer: WorkingHoursNormalizer | None = None,
    ):
        self.data_file = data_file or DATA_DIR / "mock_working_hours.json"
        self._normalizer = normalizer or WorkingHoursNormalizer()
        self.schedules: Dict[str, Dict[str, Any]] = _load_json(self.data_file, {})

    def provider_ids(self) -> List[str]:
        return list(self.schedules)

    def get_working_hours(
        self,
        user_id: str,
        account_id: Optional[str] = None
    ) -> Optional[WorkingHoursData]:
        payload = self.schedules.get(user_id)
        if payload is None:
            logger.info("No mock working hours for %s", user_id)
            return None
        return self._normalizer.normalize(WeeklySchedule.from_api(payload))

    async def fetch_working_hours(
        self,
        user_id: str,
        account_id: Optional[str] = None
    ) -> Optional[WorkingHoursData]:
        return self.get_working_hours(user_id, account_id)


class MockEventsClient:
    """Serves raw events from mock_events.json, filtered by date range."""

    def __init__(self, data_file: Path | None = None):
        self.data_file = data_file or DATA_DIR / "mock_events.json"
        self.raw_events: List[Dict[str, Any]] = _load_json(self.data_file, [])

    def fetch_all_events(
        self,
        start_date_time: str,
        end_date_time: str,
        provider_ids: Optional[Sequence[str]] = None,
        calendar_ids: Optional[Sequence[str]] = None,
    ) -> List[CalendarEvent]:
        window_start = pendulum.parse(start_date_time)
        window_end = pendulum.parse(end_date_time)

        events: List[CalendarEvent] = []
        for raw_event in self.raw_events:
            if provider_ids and raw_event.get("providerId") not in provider_ids:
                continue
            try:
                event = convert_event(raw_event)
            except (KeyError, ValueError):
                continue
            if event.start < window_end and event.end > window_start:
                events.append(event)
        return events
