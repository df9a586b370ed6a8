"""
Tests for domain models.
"""

import pendulum
import pytest

from workhours.domain.exceptions import InvalidIntervalError
from workhours.domain.models import (
    DayConfig,
    UnavailableHour,
    WeeklySchedule,
    WorkingHoursBlock,
    WorkingHoursBreak,
    WorkingHoursData,
    WorkingHoursSlot,
)


class TestIntervalValidation:
    """Tests for slot and break invariants."""

    def test_valid_slot(self):
        slot = WorkingHoursSlot(start=540, end=1020)

        assert slot.start == 540
        assert slot.end == 1020

    def test_whole_day_is_valid(self):
        WorkingHoursSlot(start=0, end=1440)
        WorkingHoursBreak(start=0, end=1440)

    @pytest.mark.parametrize("start, end", [(600, 540), (600, 600), (-10, 60), (1380, 1441)])
    def test_invalid_break_raises_error(self, start, end):
        """Breaks that are empty, reversed or outside the day are rejected."""
        with pytest.raises(InvalidIntervalError, match="must satisfy"):
            WorkingHoursBreak(start=start, end=end)

    def test_invalid_interval_error_is_value_error(self):
        with pytest.raises(ValueError):
            WorkingHoursSlot(start=1020, end=540)


class TestDayConfigParsing:
    """Tests for parsing raw per-day configuration."""

    def test_parses_hours_and_breaks(self):
        config = DayConfig.from_api({
            "hours": [{"start": 540, "end": 1020}],
            "breaks": [{"start": 720, "end": 780}],
        })

        assert config.hours == (WorkingHoursSlot(540, 1020),)
        assert config.breaks == (WorkingHoursBreak(720, 780),)

    @pytest.mark.parametrize(
        "payload",
        [None, "closed", {}, {"hours": None}, {"hours": "9-17"}, {"hours": [None, "x"]}],
    )
    def test_malformed_hours_mean_closed(self, payload):
        """Missing or malformed hours are sparse data, not errors."""
        assert DayConfig.from_api(payload).hours == ()

    def test_entries_with_non_integer_bounds_are_skipped(self):
        config = DayConfig.from_api({
            "hours": [{"start": "540", "end": 1020}, {"start": 600}, {"start": 600, "end": 700}],
        })

        assert config.hours == (WorkingHoursSlot(600, 700),)

    def test_reversed_break_raises(self):
        with pytest.raises(InvalidIntervalError):
            DayConfig.from_api({
                "hours": [{"start": 540, "end": 1020}],
                "breaks": [{"start": 800, "end": 700}],
            })


class TestWeeklySchedule:
    """Tests for the raw weekly schedule."""

    def test_from_api(self):
        schedule = WeeklySchedule.from_api({
            "weekDayConfig": {
                "MO": {"hours": [{"start": 540, "end": 1020}]},
                "XX": {"hours": [{"start": 540, "end": 1020}]},
            },
            "timezone": "Europe/Berlin",
        })

        assert set(schedule.week_day_config) == {"MO"}
        assert schedule.day(1).hours == (WorkingHoursSlot(540, 1020),)
        assert schedule.day(2) is None
        assert schedule.timezone == "Europe/Berlin"

    def test_missing_fields(self):
        schedule = WeeklySchedule.from_api({})

        assert schedule.week_day_config == {}
        assert schedule.timezone is None


class TestWorkingHoursData:
    """Tests for WorkingHoursData."""

    def _monday_nine_to_five(self) -> WorkingHoursData:
        block = WorkingHoursBlock(
            days_of_week=frozenset({1}),
            start_time="09:00",
            end_time="17:00",
            start_minutes=540,
            end_minutes=1020,
        )
        return WorkingHoursData(blocks=(block,), timezone="Asia/Kolkata")

    def test_is_within_working_hours(self):
        working_hours = self._monday_nine_to_five()

        assert working_hours.is_within_working_hours(pendulum.parse("2024-11-25 09:00"))
        assert working_hours.is_within_working_hours(pendulum.parse("2024-11-25 16:59"))

    def test_end_is_exclusive(self):
        working_hours = self._monday_nine_to_five()

        assert not working_hours.is_within_working_hours(pendulum.parse("2024-11-25 17:00"))

    def test_other_weekday(self):
        working_hours = self._monday_nine_to_five()

        # Sunday
        assert not working_hours.is_within_working_hours(pendulum.parse("2024-11-24 10:00"))


class TestUnavailableHour:
    """Tests for UnavailableHour."""

    def test_to_dict_and_str(self):
        hour = UnavailableHour(start=0, end=9)

        assert hour.to_dict() == {"start": 0, "end": 9}
        assert str(hour) == "00:00 - 09:00"
