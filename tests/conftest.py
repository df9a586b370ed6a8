"""
Shared fixtures and helpers.
"""

import pytest

from workhours.domain.models import WeeklySchedule, WorkingHoursData
from workhours.domain.normalizer import WorkingHoursNormalizer


def make_working_hours(week_day_config, timezone="Asia/Kolkata") -> WorkingHoursData:
    """Normalize a raw weekDayConfig mapping given in minutes."""
    schedule = WeeklySchedule.from_api({"weekDayConfig": week_day_config, "timezone": timezone})
    return WorkingHoursNormalizer().normalize(schedule)


def hours(start_hour, end_hour):
    """A single raw slot in whole hours."""
    return {"start": start_hour * 60, "end": end_hour * 60}


@pytest.fixture
def provider_a() -> WorkingHoursData:
    """Works Monday 09:00-17:00."""
    return make_working_hours({"MO": {"hours": [hours(9, 17)]}})


@pytest.fixture
def provider_b() -> WorkingHoursData:
    """Works Monday 13:00-20:00."""
    return make_working_hours({"MO": {"hours": [hours(13, 20)]}})
