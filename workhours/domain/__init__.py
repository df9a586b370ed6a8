"""
Domain layer: working hours, interval algebra and availability aggregation.
"""

from .availability import (
    get_unavailable_hours_by_day_of_week,
    get_unavailable_hours_for_date,
    get_unavailable_hours_for_dates,
)
from .intervals import invert_time_ranges, merge_time_ranges
from .models import (
    DayConfig,
    TimeRange,
    UnavailableHour,
    WeeklySchedule,
    WorkingHoursBlock,
    WorkingHoursBreak,
    WorkingHoursData,
    WorkingHoursSlot,
)
from .normalizer import WorkingHoursNormalizer, apply_breaks

__all__ = [
    "DayConfig",
    "TimeRange",
    "UnavailableHour",
    "WeeklySchedule",
    "WorkingHoursBlock",
    "WorkingHoursBreak",
    "WorkingHoursData",
    "WorkingHoursSlot",
    "WorkingHoursNormalizer",
    "apply_breaks",
    "merge_time_ranges",
    "invert_time_ranges",
    "get_unavailable_hours_by_day_of_week",
    "get_unavailable_hours_for_date",
    "get_unavailable_hours_for_dates",
]
