"""
Interval algebra on decimal-hour ranges within a single day.
"""

import math
from typing import Iterable, List, Sequence

from .models import TimeRange, UnavailableHour

DAY_START = 0
DAY_END = 24


def merge_time_ranges(ranges: Iterable[TimeRange]) -> List[TimeRange]:
    """
    Merge overlapping or touching time ranges.

    Example: [9-12, 11-15] -> [9-15]; [9-12, 12-15] -> [9-15]
    """
    sorted_ranges = sorted(ranges, key=lambda r: r.start)
    if not sorted_ranges:
        return []

    merged: List[TimeRange] = [sorted_ranges[0]]

    for current in sorted_ranges[1:]:
        last = merged[-1]

        # Touching counts as continuous availability
        if current.start <= last.end:
            merged[-1] = TimeRange(start=last.start, end=max(last.end, current.end))
        else:
            merged.append(current)

    return merged


def invert_time_ranges(available: Sequence[TimeRange]) -> List[UnavailableHour]:
    """
    Turn sorted, disjoint available ranges into whole-hour unavailable ranges.

    Example: [9-17] -> [0-9, 17-24]

    Boundaries round toward availability: gap starts are rounded up and gap
    ends rounded down, so 9.5-17.25 available gives [0-9, 18-24].
    """
    if not available:
        return [UnavailableHour(start=DAY_START, end=DAY_END)]

    unavailable: List[UnavailableHour] = []

    first = available[0]
    if first.start > DAY_START:
        unavailable.append(UnavailableHour(start=DAY_START, end=math.floor(first.start)))

    for current, following in zip(available, available[1:]):
        if following.start > current.end:
            unavailable.append(
                UnavailableHour(start=math.ceil(current.end), end=math.floor(following.start))
            )

    last = available[-1]
    if last.end < DAY_END:
        unavailable.append(UnavailableHour(start=math.ceil(last.end), end=DAY_END))

    return unavailable
