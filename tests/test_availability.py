"""
Tests for multi-provider unavailable hours aggregation.
"""

from datetime import date

import pendulum

from conftest import hours, make_working_hours
from workhours.domain.availability import (
    get_unavailable_hours_by_day_of_week,
    get_unavailable_hours_for_date,
    get_unavailable_hours_for_dates,
)
from workhours.domain.models import UnavailableHour

FULL_DAY = [UnavailableHour(start=0, end=24)]


def _total(ranges):
    return sum(r.end - r.start for r in ranges)


class TestUnavailableHoursByDayOfWeek:
    """Tests for the per-weekday batch computation."""

    def test_no_providers(self):
        """Without providers the mapping is empty; the caller decides the policy."""
        assert get_unavailable_hours_by_day_of_week({}) == {}

    def test_two_providers_on_monday(self, provider_a, provider_b):
        """09:00-17:00 and 13:00-20:00 merge to 9-20 available."""
        result = get_unavailable_hours_by_day_of_week({"a": provider_a, "b": provider_b})

        assert result[1] == [UnavailableHour(0, 9), UnavailableHour(20, 24)]

    def test_days_without_blocks_are_fully_unavailable(self, provider_a):
        result = get_unavailable_hours_by_day_of_week({"a": provider_a})

        assert set(result) == set(range(7))
        for weekday in (0, 2, 3, 4, 5, 6):
            assert result[weekday] == FULL_DAY

    def test_monday_key_maps_to_index_one_only(self):
        working_hours = make_working_hours({"MO": {"hours": [hours(10, 16)]}})

        result = get_unavailable_hours_by_day_of_week({"p": working_hours})

        assert result[1] == [UnavailableHour(0, 10), UnavailableHour(16, 24)]
        assert result[0] == FULL_DAY
        assert result[2] == FULL_DAY

    def test_touching_blocks_across_providers(self):
        morning = make_working_hours({"FR": {"hours": [hours(9, 12)]}})
        afternoon = make_working_hours({"FR": {"hours": [hours(12, 15)]}})

        result = get_unavailable_hours_by_day_of_week({"m": morning, "a": afternoon})

        assert result[5] == [UnavailableHour(0, 9), UnavailableHour(15, 24)]

    def test_break_shows_as_gap(self):
        working_hours = make_working_hours({
            "TU": {"hours": [hours(9, 17)], "breaks": [hours(12, 13)]},
        })

        result = get_unavailable_hours_by_day_of_week({"p": working_hours})

        assert result[2] == [
            UnavailableHour(0, 9),
            UnavailableHour(12, 13),
            UnavailableHour(17, 24),
        ]

    def test_half_hours_round_toward_availability(self):
        working_hours = make_working_hours({"WE": {"hours": [{"start": 570, "end": 1050}]}})

        result = get_unavailable_hours_by_day_of_week({"p": working_hours})

        assert result[3] == [UnavailableHour(0, 9), UnavailableHour(18, 24)]

    def test_second_provider_never_adds_unavailability(self):
        """Filling a gap left by one provider shrinks the unavailable hours."""
        first = make_working_hours({"MO": {"hours": [hours(9, 12), hours(14, 17)]}})
        second = make_working_hours({"MO": {"hours": [hours(12, 14)]}})

        alone = get_unavailable_hours_by_day_of_week({"first": first})
        together = get_unavailable_hours_by_day_of_week({"first": first, "second": second})

        assert alone[1] == [UnavailableHour(0, 9), UnavailableHour(12, 14), UnavailableHour(17, 24)]
        assert together[1] == [UnavailableHour(0, 9), UnavailableHour(17, 24)]
        for weekday in range(7):
            assert _total(together[weekday]) <= _total(alone[weekday])

    def test_pure_and_repeatable(self, provider_a, provider_b):
        provider_map = {"a": provider_a, "b": provider_b}

        first = get_unavailable_hours_by_day_of_week(provider_map)
        second = get_unavailable_hours_by_day_of_week(provider_map)

        assert first == second
        assert provider_map == {"a": provider_a, "b": provider_b}


class TestUnavailableHoursForDate:
    """Tests for the single-date entry point."""

    def test_no_providers(self):
        assert get_unavailable_hours_for_date({}, "2024-11-25") == []

    def test_matches_batch_result(self, provider_a, provider_b):
        provider_map = {"a": provider_a, "b": provider_b}
        batch = get_unavailable_hours_by_day_of_week(provider_map)

        # 2024-11-24 is a Sunday
        for offset in range(7):
            day = pendulum.date(2024, 11, 24).add(days=offset)
            assert get_unavailable_hours_for_date(provider_map, day) == batch[offset]

    def test_accepts_strings_and_dates(self, provider_a):
        provider_map = {"a": provider_a}
        expected = [UnavailableHour(0, 9), UnavailableHour(17, 24)]

        assert get_unavailable_hours_for_date(provider_map, "2024-11-25") == expected
        assert get_unavailable_hours_for_date(provider_map, date(2024, 11, 25)) == expected

    def test_for_dates(self, provider_a):
        result = get_unavailable_hours_for_dates({"a": provider_a}, ["2024-11-24", "2024-11-25"])

        assert result == {
            "2024-11-24": FULL_DAY,
            "2024-11-25": [UnavailableHour(0, 9), UnavailableHour(17, 24)],
        }
