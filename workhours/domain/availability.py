"""
Aggregates several providers' working hours into unavailable hours.

Everything here is a pure function of its inputs; callers may cache results
keyed by the provider map they passed in.
"""

from typing import Dict, Iterable, List, Mapping

from .intervals import invert_time_ranges, merge_time_ranges
from .models import TimeRange, UnavailableHour, UnavailableHoursByDayOfWeek, WorkingHoursData
from .time_utils import DateLike, day_of_week, time_string_to_decimal_hours

ProviderMap = Mapping[str, WorkingHoursData]


def _collect_ranges(provider_map: ProviderMap, weekday: int) -> List[TimeRange]:
    """All blocks, across all providers, that apply to one weekday."""
    return [
        TimeRange(
            start=time_string_to_decimal_hours(block.start_time),
            end=time_string_to_decimal_hours(block.end_time),
        )
        for working_hours in provider_map.values()
        for block in working_hours.blocks
        if block.applies_to(weekday)
    ]


def _unavailable_for_weekday(provider_map: ProviderMap, weekday: int) -> List[UnavailableHour]:
    # No blocks at all means closed, not open
    return invert_time_ranges(merge_time_ranges(_collect_ranges(provider_map, weekday)))


def get_unavailable_hours_by_day_of_week(provider_map: ProviderMap) -> UnavailableHoursByDayOfWeek:
    """
    Compute unavailable hours for every weekday (0 = Sunday .. 6 = Saturday).

    Returns an empty mapping when no providers are given; substituting a
    default policy for that case is up to the caller.
    """
    if not provider_map:
        return {}

    return {weekday: _unavailable_for_weekday(provider_map, weekday) for weekday in range(7)}


def get_unavailable_hours_for_date(provider_map: ProviderMap, date: DateLike) -> List[UnavailableHour]:
    """
    Compute unavailable hours for the weekday of a single date.

    Args:
        provider_map: Provider id -> normalized working hours
        date: A date, datetime or ``YYYY-MM-DD`` string

    Returns:
        Unavailable hour ranges, or an empty list when no providers are given
    """
    if not provider_map:
        return []

    return _unavailable_for_weekday(provider_map, day_of_week(date))


def get_unavailable_hours_for_dates(
    provider_map: ProviderMap,
    dates: Iterable[DateLike]
) -> Dict[DateLike, List[UnavailableHour]]:
    """Unavailable hours for each of several dates, keyed by the given date."""
    return {date: get_unavailable_hours_for_date(provider_map, date) for date in dates}
