"""
Conversions between minute offsets, ``HH:MM`` strings and decimal hours,
plus day-boundary helpers in the fixed IST reference offset (UTC+05:30).
"""

from datetime import date, datetime
from typing import Union

import pendulum
from pendulum import DateTime

# Fixed offset, not a tz database zone.
IST_OFFSET_SECONDS = 5 * 3600 + 30 * 60
IST = pendulum.fixed_timezone(IST_OFFSET_SECONDS)

DateLike = Union[str, date, datetime]


def minutes_to_time_string(minutes: int) -> str:
    """
    Format minutes since midnight as a zero-padded ``HH:MM`` string.

    Example: 570 -> "09:30". A slot ending at midnight (1440) renders as "24:00".
    """
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def time_string_to_decimal_hours(time_string: str) -> float:
    """
    Convert an ``HH:MM`` string to decimal hours.

    Example: "09:30" -> 9.5, "14:00" -> 14.0
    """
    hours, minutes = (int(part) for part in time_string.split(":"))
    return hours + minutes / 60


def day_of_week(value: DateLike) -> int:
    """Return the weekday index with Sunday = 0 through Saturday = 6."""
    if isinstance(value, str):
        value = pendulum.from_format(value, "YYYY-MM-DD")
    return value.isoweekday() % 7


def _as_datetime(moment: Union[date, datetime, None]) -> DateTime:
    if moment is None:
        return pendulum.now(IST)
    if isinstance(moment, datetime):
        return pendulum.instance(moment)
    return pendulum.datetime(moment.year, moment.month, moment.day, tz=IST)


def to_ist_string(moment: Union[date, datetime]) -> str:
    """Format a moment as ``YYYY-MM-DDTHH:MM:SS+05:30``."""
    return _as_datetime(moment).in_timezone(IST).format("YYYY-MM-DD[T]HH:mm:ssZ")


def get_current_ist() -> str:
    return to_ist_string(pendulum.now(IST))


def get_month_start_ist(moment: Union[date, datetime, None] = None) -> str:
    """First instant of the moment's calendar month, in IST."""
    start = _as_datetime(moment).in_timezone(IST).start_of("month")
    return to_ist_string(start)


def get_month_end_ist(moment: Union[date, datetime, None] = None) -> str:
    """Last second of the moment's calendar month, in IST."""
    end = _as_datetime(moment).in_timezone(IST).end_of("month")
    return to_ist_string(end)


def parse_to_ist(iso_string: str) -> DateTime:
    """Parse an ISO 8601 string and convert it to the IST offset."""
    parsed = pendulum.parse(iso_string)
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Could not parse datetime: {iso_string}")
    return parsed.in_timezone(IST)


def get_date_for_day_of_week(base: Union[date, datetime], target_day: int) -> DateTime:
    """
    Return the date in ``base``'s Sunday-based week that falls on ``target_day``.
    """
    day_start = _as_datetime(base).start_of("day")
    return day_start.add(days=target_day - day_of_week(day_start))
