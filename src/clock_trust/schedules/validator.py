from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, Optional

from ..common.datetime_utils import day_of_week, minutes_to_time, time_to_minutes, to_naive_utc
from ..core.constants import BREAK_TOLERANCE_MINUTES
from ..core.enums import EventType, ScheduleErrorCode
from .model import (
    DEFAULT_SCHEDULE_CONFIG,
    DaySchedule,
    ScheduleValidationConfig,
    ScheduleVerdict,
    WeeklySchedule,
    format_time,
)


class ScheduleValidator:
    """Checks an event timestamp against an employee's weekly schedule.

    Pure: the verdict depends only on (day of week, event type), the schedule and the config.
    Schedule deviations are warnings unless the config is strict or forbids them;
    a non-work day or a misconfigured day is always an error.
    """

    def __init__(self) -> None:
        self._handlers: Dict[EventType, Callable[..., ScheduleVerdict]] = {
            EventType.ENTRY: self._validate_entry,
            EventType.EXIT: self._validate_exit,
            EventType.BREAK_START: self._validate_break_start,
            EventType.BREAK_END: self._validate_break_end,
        }

    def validate(
        self,
        event_type: EventType,
        timestamp: datetime,
        schedule: WeeklySchedule,
        config: ScheduleValidationConfig = DEFAULT_SCHEDULE_CONFIG,
        *,
        break_started_at: Optional[datetime] = None,
        break_taken: Optional[bool] = None,
    ) -> ScheduleVerdict:
        event_type = EventType(event_type)
        day = schedule.for_day(day_of_week(timestamp))
        current = timestamp.hour * 60 + timestamp.minute

        verdict = ScheduleVerdict(
            is_valid=True,
            is_work_day=bool(day and day.is_work_day),
            current_time=minutes_to_time(current),
            day_schedule=day,
            tolerance_minutes=day.tolerance_minutes if day else 0,
        )

        if day is None or not day.is_work_day:
            name = day.day_name if day else "unscheduled day"
            return verdict.fail(ScheduleErrorCode.NOT_WORK_DAY, f"Not a work day ({name})")

        if day.start_time is None or day.end_time is None:
            return verdict.fail(ScheduleErrorCode.MISSING_SCHEDULE, "Working hours are not defined for this day")

        verdict.expected_start_time = format_time(day.start_time)
        verdict.expected_end_time = format_time(day.end_time)

        handler = self._handlers[event_type]
        return handler(
            verdict,
            day,
            current,
            config,
            break_started_at=break_started_at,
            break_taken=break_taken,
            timestamp=timestamp,
        )

    @staticmethod
    def _window(expected: int, day: DaySchedule, config: ScheduleValidationConfig) -> tuple[int, int]:
        # tolerance and grace are additive
        slack = day.tolerance_minutes + config.grace_period_minutes
        return expected - slack, expected + slack

    def _validate_entry(self, verdict: ScheduleVerdict, day: DaySchedule, current: int,
                        config: ScheduleValidationConfig, **_) -> ScheduleVerdict:
        start = time_to_minutes(day.start_time)
        window_start, window_end = self._window(start, day, config)

        verdict.is_within_work_hours = window_start <= current <= window_end
        verdict.is_within_tolerance = verdict.is_within_work_hours

        if current > window_end:
            verdict.delay_minutes = current - (start + day.tolerance_minutes)
            message = f"Entry {verdict.delay_minutes} minutes late"
            if config.strict:
                verdict.is_valid = False
                verdict.errors.append(message)
            else:
                verdict.warnings.append(message)

        if current < window_start:
            verdict.early_entry_minutes = (start - day.tolerance_minutes) - current
            if not config.allow_early_entry:
                verdict.fail(ScheduleErrorCode.EARLY_ENTRY_NOT_ALLOWED, "Early entry is not allowed")
            elif start - current > config.max_early_entry_minutes:
                verdict.warnings.append(
                    f"Entry too early (more than {config.max_early_entry_minutes} minutes before the scheduled start)"
                )
            else:
                verdict.warnings.append(f"Entry {verdict.early_entry_minutes} minutes early")

        return verdict

    def _validate_exit(self, verdict: ScheduleVerdict, day: DaySchedule, current: int,
                       config: ScheduleValidationConfig, *, break_taken: Optional[bool] = None,
                       **_) -> ScheduleVerdict:
        end = time_to_minutes(day.end_time)
        window_start, window_end = self._window(end, day, config)

        verdict.is_within_work_hours = window_start <= current <= window_end
        verdict.is_within_tolerance = verdict.is_within_work_hours

        if current < window_start:
            verdict.early_departure_minutes = (end - day.tolerance_minutes) - current
            message = f"Exit {verdict.early_departure_minutes} minutes early"
            if config.strict:
                verdict.is_valid = False
                verdict.errors.append(message)
            else:
                verdict.warnings.append(message)

        if current > window_end:
            verdict.late_exit_minutes = current - (end + day.tolerance_minutes)
            if not config.allow_late_exit:
                verdict.fail(ScheduleErrorCode.LATE_EXIT_NOT_ALLOWED, "Late exit is not allowed")
            elif current - end > config.max_late_exit_minutes:
                verdict.warnings.append(
                    f"Exit too late (more than {config.max_late_exit_minutes} minutes after the scheduled end)"
                )
            else:
                verdict.warnings.append(f"Exit {verdict.late_exit_minutes} minutes late")

        if config.require_break and break_taken is False and day.break_start is not None:
            verdict.warnings.append("No break was recorded for this work day")

        return verdict

    def _break_band(self, verdict: ScheduleVerdict, expected, current: int, label: str) -> ScheduleVerdict:
        if expected is None:
            return verdict.fail(ScheduleErrorCode.MISSING_SCHEDULE, f"Break {label} time is not defined")

        verdict.is_within_work_hours = abs(current - time_to_minutes(expected)) <= BREAK_TOLERANCE_MINUTES
        verdict.is_within_tolerance = verdict.is_within_work_hours
        if not verdict.is_within_tolerance:
            verdict.warnings.append(f"Break {label} outside the expected time")
        return verdict

    def _validate_break_start(self, verdict: ScheduleVerdict, day: DaySchedule, current: int,
                              config: ScheduleValidationConfig, **_) -> ScheduleVerdict:
        return self._break_band(verdict, day.break_start, current, "start")

    def _validate_break_end(self, verdict: ScheduleVerdict, day: DaySchedule, current: int,
                            config: ScheduleValidationConfig, *, break_started_at: Optional[datetime] = None,
                            timestamp: Optional[datetime] = None, **_) -> ScheduleVerdict:
        verdict = self._break_band(verdict, day.break_end, current, "end")
        if not verdict.is_valid or break_started_at is None or timestamp is None:
            return verdict

        elapsed = to_naive_utc(timestamp) - to_naive_utc(break_started_at)
        verdict.break_minutes = int(elapsed.total_seconds() // 60)
        if verdict.break_minutes < config.min_break_minutes:
            verdict.warnings.append(
                f"Break of {verdict.break_minutes} minutes is shorter than the minimum of {config.min_break_minutes}"
            )
        elif verdict.break_minutes > config.max_break_minutes:
            verdict.warnings.append(
                f"Break of {verdict.break_minutes} minutes is longer than the maximum of {config.max_break_minutes}"
            )
        return verdict
