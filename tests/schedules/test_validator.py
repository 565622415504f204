from datetime import datetime, time, timezone

import pytest

from clock_trust.core.enums import EventType, ScheduleErrorCode
from clock_trust.schedules.model import DaySchedule, ScheduleValidationConfig, WeeklySchedule, default_weekly_schedule
from clock_trust.schedules.validator import ScheduleValidator

# 2025-01-06 is a Monday, 2025-01-04 a Saturday.
MONDAY = (2025, 1, 6)
SATURDAY = (2025, 1, 4)


def _at(hour: int, minute: int, day=MONDAY) -> datetime:
    return datetime(*day, hour, minute)


@pytest.fixture()
def schedule():
    return default_weekly_schedule("E1", tolerance_minutes=15)


@pytest.fixture()
def validator():
    return ScheduleValidator()


def test_entry_within_tolerance_is_clean(validator, schedule):
    v = validator.validate(EventType.ENTRY, _at(8, 10), schedule)

    assert v.is_valid
    assert v.is_work_day
    assert v.is_within_tolerance
    assert v.warnings == []
    assert v.expected_start_time == "08:00"
    assert v.current_time == "08:10"


def test_late_entry_is_a_warning_with_delay(validator, schedule):
    v = validator.validate(EventType.ENTRY, _at(8, 40), schedule)

    assert v.is_valid
    assert v.delay_minutes == 25
    assert v.warnings == ["Entry 25 minutes late"]


def test_strict_mode_turns_late_entry_into_error(validator, schedule):
    v = validator.validate(EventType.ENTRY, _at(8, 40), schedule, ScheduleValidationConfig(strict=True))

    assert not v.is_valid
    assert v.errors == ["Entry 25 minutes late"]


def test_early_entry_window_boundary(validator, schedule):
    # window opens at 08:00 - 15 (tolerance) - 5 (grace) = 07:40
    on_edge = validator.validate(EventType.ENTRY, _at(7, 40), schedule)
    assert on_edge.is_valid
    assert on_edge.warnings == []

    outside = validator.validate(EventType.ENTRY, _at(7, 39), schedule)
    assert outside.is_valid
    assert outside.early_entry_minutes == 6
    assert outside.warnings == ["Entry 6 minutes early"]


def test_early_entry_rejected_when_not_allowed(validator, schedule):
    config = ScheduleValidationConfig(allow_early_entry=False)

    assert validator.validate(EventType.ENTRY, _at(7, 40), schedule, config).is_valid

    v = validator.validate(EventType.ENTRY, _at(7, 39), schedule, config)
    assert not v.is_valid
    assert v.error_code == ScheduleErrorCode.EARLY_ENTRY_NOT_ALLOWED


def test_entry_far_too_early_warns(validator, schedule):
    v = validator.validate(EventType.ENTRY, _at(7, 0), schedule)

    assert v.is_valid
    assert v.warnings[0].startswith("Entry too early")


def test_non_work_day_is_an_error(validator, schedule):
    v = validator.validate(EventType.ENTRY, _at(8, 0, SATURDAY), schedule)

    assert not v.is_valid
    assert not v.is_work_day
    assert v.error_code == ScheduleErrorCode.NOT_WORK_DAY
    assert v.errors == ["Not a work day (Saturday)"]


def test_missing_hours_is_an_error(validator):
    schedule = WeeklySchedule("E1", (DaySchedule(day_of_week=1, is_work_day=True),))
    v = validator.validate(EventType.ENTRY, _at(8, 0), schedule)

    assert not v.is_valid
    assert v.error_code == ScheduleErrorCode.MISSING_SCHEDULE


def test_early_departure(validator, schedule):
    v = validator.validate(EventType.EXIT, _at(16, 30), schedule)
    assert v.is_valid
    assert v.early_departure_minutes == 15
    assert v.warnings == ["Exit 15 minutes early"]

    strict = validator.validate(EventType.EXIT, _at(16, 30), schedule, ScheduleValidationConfig(strict=True))
    assert not strict.is_valid


def test_late_exit(validator, schedule):
    relaxed = validator.validate(EventType.EXIT, _at(17, 30), schedule)
    assert relaxed.is_valid
    assert relaxed.late_exit_minutes == 15
    assert relaxed.warnings == ["Exit 15 minutes late"]

    too_late = validator.validate(EventType.EXIT, _at(18, 30), schedule)
    assert too_late.warnings[0].startswith("Exit too late")

    forbidden = validator.validate(EventType.EXIT, _at(17, 30), schedule, ScheduleValidationConfig(allow_late_exit=False))
    assert not forbidden.is_valid
    assert forbidden.error_code == ScheduleErrorCode.LATE_EXIT_NOT_ALLOWED


def test_exit_without_break_warns(validator, schedule):
    v = validator.validate(EventType.EXIT, _at(17, 0), schedule, break_taken=False)
    assert v.is_valid
    assert v.warnings == ["No break was recorded for this work day"]

    unchecked = validator.validate(EventType.EXIT, _at(17, 0), schedule, ScheduleValidationConfig(require_break=False),
                                   break_taken=False)
    assert unchecked.warnings == []


def test_break_start_uses_fixed_band(validator, schedule):
    assert validator.validate(EventType.BREAK_START, _at(12, 15), schedule).warnings == []

    v = validator.validate(EventType.BREAK_START, _at(12, 16), schedule)
    assert v.is_valid
    assert v.warnings == ["Break start outside the expected time"]


def test_break_end_checks_duration(validator, schedule):
    short = validator.validate(EventType.BREAK_END, _at(12, 55), schedule, break_started_at=_at(12, 40))
    assert short.break_minutes == 15
    assert short.warnings == ["Break of 15 minutes is shorter than the minimum of 30"]

    normal = validator.validate(EventType.BREAK_END, _at(13, 0), schedule, break_started_at=_at(12, 0))
    assert normal.break_minutes == 60
    assert normal.warnings == []


def test_break_without_configured_time_is_an_error(validator):
    day = DaySchedule(day_of_week=1, is_work_day=True, start_time=time(8, 0), end_time=time(17, 0))
    v = validator.validate(EventType.BREAK_START, _at(12, 0), WeeklySchedule("E1", (day,)))

    assert not v.is_valid
    assert v.error_code == ScheduleErrorCode.MISSING_SCHEDULE


def test_summary_lines(validator, schedule):
    lines = validator.validate(EventType.ENTRY, _at(8, 40), schedule).summary_lines()

    assert "Day: Monday" in lines
    assert "Expected: 08:00 - 17:00" in lines
    assert "Delay: 25 minutes" in lines


def test_break_duration_across_stored_and_offset_times(validator, schedule):
    # break start read back from storage as naive UTC, break end submitted with an offset
    v = validator.validate(
        EventType.BREAK_END,
        datetime(2025, 1, 6, 12, 50, tzinfo=timezone.utc),
        schedule,
        break_started_at=datetime(2025, 1, 6, 12, 0),
    )

    assert v.is_valid
    assert v.break_minutes == 50
    assert v.warnings == []
