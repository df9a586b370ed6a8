"""
Tests for the working hours normalizer.
"""

from workhours.domain.models import WeeklySchedule, WorkingHoursBreak, WorkingHoursSlot
from workhours.domain.normalizer import WorkingHoursNormalizer, apply_breaks


def _normalize(week_day_config, timezone=None):
    payload = {"weekDayConfig": week_day_config}
    if timezone:
        payload["timezone"] = timezone
    return WorkingHoursNormalizer().normalize(WeeklySchedule.from_api(payload))


def _spans(working_hours):
    return [(block.start_time, block.end_time) for block in working_hours.blocks]


class TestApplyBreaks:
    """Tests for splitting a slot around breaks."""

    def test_break_in_the_middle(self):
        """09:00-17:00 with a 12:00-13:00 break gives two pieces."""
        pieces = apply_breaks(WorkingHoursSlot(540, 1020), [WorkingHoursBreak(720, 780)])

        assert pieces == [WorkingHoursSlot(540, 720), WorkingHoursSlot(780, 1020)]

    def test_break_covering_slot_keeps_original(self):
        """A slot never disappears, even when a break covers it entirely."""
        slot = WorkingHoursSlot(540, 1020)

        assert apply_breaks(slot, [WorkingHoursBreak(540, 1020)]) == [slot]

    def test_breaks_are_sorted_before_splitting(self):
        pieces = apply_breaks(
            WorkingHoursSlot(480, 1080),
            [WorkingHoursBreak(900, 960), WorkingHoursBreak(720, 780)],
        )

        assert pieces == [
            WorkingHoursSlot(480, 720),
            WorkingHoursSlot(780, 900),
            WorkingHoursSlot(960, 1080),
        ]

    def test_break_outside_slot_is_ignored(self):
        slot = WorkingHoursSlot(540, 720)

        assert apply_breaks(slot, [WorkingHoursBreak(780, 840)]) == [slot]

    def test_break_running_past_slot_end(self):
        pieces = apply_breaks(WorkingHoursSlot(540, 720), [WorkingHoursBreak(660, 780)])

        assert pieces == [WorkingHoursSlot(540, 660)]


class TestWorkingHoursNormalizer:
    """Tests for WorkingHoursNormalizer."""

    def test_slot_without_breaks(self):
        working_hours = _normalize({"MO": {"hours": [{"start": 540, "end": 1020}]}})

        assert len(working_hours.blocks) == 1
        block = working_hours.blocks[0]
        assert block.days_of_week == frozenset({1})
        assert (block.start_time, block.end_time) == ("09:00", "17:00")
        assert (block.start_minutes, block.end_minutes) == (540, 1020)

    def test_slot_with_break(self):
        working_hours = _normalize({
            "TU": {
                "hours": [{"start": 540, "end": 1020}],
                "breaks": [{"start": 720, "end": 780}],
            }
        })

        assert _spans(working_hours) == [("09:00", "12:00"), ("13:00", "17:00")]
        assert all(block.days_of_week == frozenset({2}) for block in working_hours.blocks)

    def test_breaks_apply_to_every_slot_of_the_day(self):
        working_hours = _normalize({
            "WE": {
                "hours": [{"start": 480, "end": 720}, {"start": 840, "end": 1080}],
                "breaks": [{"start": 600, "end": 630}, {"start": 960, "end": 990}],
            }
        })

        assert _spans(working_hours) == [
            ("08:00", "10:00"),
            ("10:30", "12:00"),
            ("14:00", "16:00"),
            ("16:30", "18:00"),
        ]

    def test_days_without_hours_are_skipped(self):
        working_hours = _normalize({
            "SU": {"hours": []},
            "MO": {"breaks": [{"start": 720, "end": 780}]},
            "SA": {"hours": [{"start": 600, "end": 840}]},
        })

        assert [set(block.days_of_week) for block in working_hours.blocks] == [{6}]

    def test_blocks_are_ordered_by_weekday(self):
        working_hours = _normalize({
            "FR": {"hours": [{"start": 540, "end": 600}]},
            "SU": {"hours": [{"start": 600, "end": 660}]},
            "MO": {"hours": [{"start": 660, "end": 720}]},
        })

        assert [min(block.days_of_week) for block in working_hours.blocks] == [0, 1, 5]

    def test_timezone(self):
        assert _normalize({}, timezone="Europe/Berlin").timezone == "Europe/Berlin"
        assert _normalize({}).timezone == "Asia/Kolkata"

    def test_custom_default_timezone(self):
        normalizer = WorkingHoursNormalizer(default_timezone="UTC")

        assert normalizer.normalize(WeeklySchedule()).timezone == "UTC"

    def test_empty_schedule(self):
        assert _normalize({}).blocks == ()
