from __future__ import annotations

from typing import Optional, Protocol

from .model import WeeklySchedule


class WeeklyScheduleRepository(Protocol):
    def get_for_employee(self, employee_id: str) -> Optional[WeeklySchedule]:
        raise NotImplementedError

    def save(self, schedule: WeeklySchedule) -> None:
        """Replace all day rows of the employee's schedule (HR administration)."""

        raise NotImplementedError
