"""
Turns a provider's raw weekly schedule into flat working hours blocks.
"""

from typing import List, Sequence

from .models import (
    WeeklySchedule,
    WorkingHoursBlock,
    WorkingHoursBreak,
    WorkingHoursData,
    WorkingHoursSlot,
)
from .time_utils import minutes_to_time_string

DEFAULT_TIMEZONE = "Asia/Kolkata"


def apply_breaks(
    slot: WorkingHoursSlot,
    breaks: Sequence[WorkingHoursBreak]
) -> List[WorkingHoursSlot]:
    """
    Split a slot around its breaks.

    Example:
    Slot: 09:00 - 17:00
    Breaks: [12:00-13:00]
    Result: [09:00-12:00, 13:00-17:00]

    Only breaks that start strictly inside the remaining part of the slot cut
    it. If nothing is left (a break swallowing the slot), the original slot is
    returned unchanged so it never disappears.
    """
    result: List[WorkingHoursSlot] = []
    current_start = slot.start

    for break_period in sorted(breaks, key=lambda b: b.start):
        if current_start < break_period.start < slot.end:
            result.append(WorkingHoursSlot(start=current_start, end=break_period.start))
            current_start = max(current_start, break_period.end)

    if current_start < slot.end:
        result.append(WorkingHoursSlot(start=current_start, end=slot.end))

    return result or [slot]


class WorkingHoursNormalizer:
    """
    Converts a WeeklySchedule into WorkingHoursData.

    Algorithm, per weekday (Sunday = 0 .. Saturday = 6):
    1. Skip the day when it has no hours (closed all day)
    2. Split every slot around the day's breaks
    3. Emit one block per resulting piece, tagged with that weekday only
    """

    def __init__(self, default_timezone: str = DEFAULT_TIMEZONE):
        self.default_timezone = default_timezone

    def normalize(self, schedule: WeeklySchedule) -> WorkingHoursData:
        blocks: List[WorkingHoursBlock] = []

        for day_of_week in range(7):
            day_config = schedule.day(day_of_week)

            if day_config is None or not day_config.hours:
                continue

            for slot in day_config.hours:
                pieces = apply_breaks(slot, day_config.breaks) if day_config.breaks else [slot]
                blocks.extend(self._to_block(day_of_week, piece) for piece in pieces)

        return WorkingHoursData(
            blocks=tuple(blocks),
            timezone=schedule.timezone or self.default_timezone,
        )

    @staticmethod
    def _to_block(day_of_week: int, slot: WorkingHoursSlot) -> WorkingHoursBlock:
        return WorkingHoursBlock(
            days_of_week=frozenset({day_of_week}),
            start_time=minutes_to_time_string(slot.start),
            end_time=minutes_to_time_string(slot.end),
            start_minutes=slot.start,
            end_minutes=slot.end,
        )
