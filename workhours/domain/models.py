"""
Domain models for working hours, availability blocks and hour ranges.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from .exceptions import InvalidIntervalError

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

WEEK_DAY_CODES: Dict[int, str] = {
    0: "SU",
    1: "MO",
    2: "TU",
    3: "WE",
    4: "TH",
    5: "FR",
    6: "SA",
}

WEEK_DAY_NUMBERS: Dict[str, int] = {code: day for day, code in WEEK_DAY_CODES.items()}


def _validate_minutes_interval(kind: str, start: int, end: int) -> None:
    if not 0 <= start < end <= MINUTES_PER_DAY:
        raise InvalidIntervalError(
            f"{kind} must satisfy 0 <= start < end <= {MINUTES_PER_DAY}, "
            f"got start={start}, end={end}"
        )


@dataclass(frozen=True)
class WorkingHoursSlot:
    """
    One open interval within a single day, in minutes since midnight.

    Invariant: 0 <= start < end <= 1440.
    """
    start: int
    end: int

    def __post_init__(self):
        _validate_minutes_interval("Working hours slot", self.start, self.end)


@dataclass(frozen=True)
class WorkingHoursBreak:
    """A sub-interval of a slot during which the provider is away (e.g. lunch)."""
    start: int
    end: int

    def __post_init__(self):
        _validate_minutes_interval("Break", self.start, self.end)


@dataclass(frozen=True)
class DayConfig:
    """Raw configuration of one weekday. No hours means closed all day."""
    hours: Tuple[WorkingHoursSlot, ...] = ()
    breaks: Tuple[WorkingHoursBreak, ...] = ()

    @classmethod
    def from_api(cls, payload: Any) -> "DayConfig":
        """
        Parse a raw ``{hours?, breaks?}`` mapping.

        Malformed entries are skipped as sparse data. Well-formed entries with
        an invalid range raise InvalidIntervalError.
        """
        if not isinstance(payload, Mapping):
            return cls()

        hours = tuple(
            WorkingHoursSlot(start=start, end=end)
            for start, end in _iter_raw_intervals(payload.get("hours"))
        )
        breaks = tuple(
            WorkingHoursBreak(start=start, end=end)
            for start, end in _iter_raw_intervals(payload.get("breaks"))
        )
        return cls(hours=hours, breaks=breaks)


def _iter_raw_intervals(raw: Any) -> List[Tuple[int, int]]:
    if not isinstance(raw, list):
        return []

    intervals: List[Tuple[int, int]] = []
    for item in raw:
        if not isinstance(item, Mapping):
            logger.debug("Skipping malformed interval entry: %r", item)
            continue
        start, end = item.get("start"), item.get("end")
        # bool is an int subclass but never a minute offset
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (start, end)):
            logger.debug("Skipping interval with non-integer bounds: %r", item)
            continue
        intervals.append((start, end))
    return intervals


@dataclass(frozen=True)
class WeeklySchedule:
    """
    A provider's raw weekly schedule, keyed by two-letter weekday code.
    """
    week_day_config: Dict[str, DayConfig] = field(default_factory=dict)
    timezone: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "WeeklySchedule":
        """
        Parse the ``{weekDayConfig?, timezone?}`` shape returned by the
        working hours API.
        """
        raw_config = payload.get("weekDayConfig")
        week_day_config: Dict[str, DayConfig] = {}

        if isinstance(raw_config, Mapping):
            for code, day_payload in raw_config.items():
                if code not in WEEK_DAY_NUMBERS:
                    logger.debug("Ignoring unknown weekday key %r", code)
                    continue
                week_day_config[code] = DayConfig.from_api(day_payload)

        timezone = payload.get("timezone")
        return cls(
            week_day_config=week_day_config,
            timezone=timezone if isinstance(timezone, str) and timezone else None,
        )

    def day(self, day_of_week: int) -> Optional[DayConfig]:
        return self.week_day_config.get(WEEK_DAY_CODES[day_of_week])


@dataclass(frozen=True)
class WorkingHoursBlock:
    """
    A contiguous availability window, already split around breaks.
    """
    days_of_week: FrozenSet[int]
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    start_minutes: int
    end_minutes: int

    def applies_to(self, day_of_week: int) -> bool:
        return day_of_week in self.days_of_week


@dataclass(frozen=True)
class WorkingHoursData:
    """Normalized working hours of one provider."""
    blocks: Tuple[WorkingHoursBlock, ...]
    timezone: str

    def is_within_working_hours(self, moment: datetime) -> bool:
        """
        Check whether a moment falls inside any block.

        The moment is interpreted in its own wall-clock time; weekday is
        Sunday-based like the blocks.
        """
        weekday = moment.isoweekday() % 7
        minutes = moment.hour * 60 + moment.minute

        return any(
            block.applies_to(weekday)
            and block.start_minutes <= minutes < block.end_minutes
            for block in self.blocks
        )


@dataclass(frozen=True)
class TimeRange:
    """
    A range of decimal hours within a day, used by the merge and inversion engine.
    """
    start: float
    end: float


@dataclass(frozen=True)
class UnavailableHour:
    """A whole-hour range the timeline should render as not bookable."""
    start: int
    end: int

    def to_dict(self) -> Dict[str, int]:
        return {"start": self.start, "end": self.end}

    def __str__(self) -> str:
        return f"{self.start:02d}:00 - {self.end:02d}:00"


UnavailableHoursByDayOfWeek = Dict[int, List[UnavailableHour]]


@dataclass(frozen=True)
class CalendarEvent:
    """An event from the scheduling service, reduced to what the timeline needs."""
    id: str
    title: str
    start: datetime
    end: datetime
    event_type: str = "APPOINTMENT"  # APPOINTMENT, OFF or BREAK
    is_external: bool = False
    external_source: Optional[str] = None  # google or microsoft

    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() / 60)
