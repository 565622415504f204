from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import List, Optional, Sequence

from ..common.datetime_utils import minutes_to_time
from ..core.constants import DEFAULT_GRACE_MINUTES
from ..core.enums import ScheduleErrorCode

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


@dataclass(frozen=True)
class DaySchedule:
    """Expected attendance for one weekday (0 = Sunday ... 6 = Saturday)."""

    day_of_week: int
    is_work_day: bool
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    break_start: Optional[time] = None
    break_end: Optional[time] = None
    tolerance_minutes: int = 0

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]


@dataclass(frozen=True)
class WeeklySchedule:
    employee_id: str
    days: Sequence[DaySchedule]

    def for_day(self, day_of_week: int) -> Optional[DaySchedule]:
        for day in self.days:
            if day.day_of_week == day_of_week:
                return day
        return None


@dataclass(frozen=True)
class ScheduleValidationConfig:
    allow_early_entry: bool = True
    allow_late_exit: bool = True
    max_early_entry_minutes: int = 30
    max_late_exit_minutes: int = 60
    require_break: bool = True
    min_break_minutes: int = 30
    max_break_minutes: int = 120
    grace_period_minutes: int = DEFAULT_GRACE_MINUTES
    # Late entry / early departure become errors instead of warnings.
    strict: bool = False


DEFAULT_SCHEDULE_CONFIG = ScheduleValidationConfig()


@dataclass
class ScheduleVerdict:
    is_valid: bool
    is_work_day: bool
    current_time: str
    day_schedule: Optional[DaySchedule] = None
    is_within_work_hours: bool = False
    is_within_tolerance: bool = False
    tolerance_minutes: int = 0
    expected_start_time: Optional[str] = None
    expected_end_time: Optional[str] = None
    delay_minutes: Optional[int] = None
    early_entry_minutes: Optional[int] = None
    early_departure_minutes: Optional[int] = None
    late_exit_minutes: Optional[int] = None
    break_minutes: Optional[int] = None
    error_code: Optional[ScheduleErrorCode] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def fail(self, code: ScheduleErrorCode, message: str) -> "ScheduleVerdict":
        self.is_valid = False
        if self.error_code is None:
            self.error_code = code
        self.errors.append(message)
        return self

    def summary_lines(self) -> List[str]:
        day = self.day_schedule
        lines = [
            f"Day: {day.day_name if day else 'N/A'}",
            f"Time: {self.current_time}",
            f"Work day: {'yes' if self.is_work_day else 'no'}",
            f"Valid: {'yes' if self.is_valid else 'no'}",
        ]
        if self.expected_start_time and self.expected_end_time:
            lines.append(f"Expected: {self.expected_start_time} - {self.expected_end_time}")
            lines.append(f"Tolerance: {self.tolerance_minutes} minutes")
        if self.delay_minutes:
            lines.append(f"Delay: {self.delay_minutes} minutes")
        if self.early_departure_minutes:
            lines.append(f"Early departure: {self.early_departure_minutes} minutes")
        lines.extend(f"WARNING: {w}" for w in self.warnings)
        lines.extend(f"ERROR: {e}" for e in self.errors)
        return lines


def default_weekly_schedule(employee_id: str, *, tolerance_minutes: int = 15) -> WeeklySchedule:
    """Monday to Friday 08:00-17:00 with a 12:00-13:00 break."""
    days = []
    for dow in range(7):
        if 1 <= dow <= 5:
            days.append(
                DaySchedule(
                    day_of_week=dow,
                    is_work_day=True,
                    start_time=time(8, 0),
                    end_time=time(17, 0),
                    break_start=time(12, 0),
                    break_end=time(13, 0),
                    tolerance_minutes=tolerance_minutes,
                )
            )
        else:
            days.append(DaySchedule(day_of_week=dow, is_work_day=False))
    return WeeklySchedule(employee_id=employee_id, days=tuple(days))


def format_time(value: Optional[time]) -> Optional[str]:
    if value is None:
        return None
    return minutes_to_time(value.hour * 60 + value.minute)
