from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from clock_trust.core.enums import DeviceClass
from clock_trust.database.mysql_base import datetime_to_mysql
from clock_trust.devices.model import DeviceEvaluation, DeviceSignal
from clock_trust.events.model import ClockEvent
from clock_trust.pipeline.service import ClockEventPipeline
from clock_trust.schedules.model import WeeklySchedule, default_weekly_schedule


class InMemoryEvents:
    """Stores timestamps as naive UTC, like the MySQL adapter."""

    def __init__(self):
        self.events: dict[str, ClockEvent] = {}
        self._id = 0

    def list_for_employee_since(self, employee_id: str, since: datetime):
        items = [e for e in self.events.values() if e.employee_id == employee_id and e.timestamp >= since]
        items.sort(key=lambda e: e.timestamp)
        return items

    def get_by_id(self, event_id: str) -> Optional[ClockEvent]:
        return self.events.get(event_id)

    def create(self, event: ClockEvent) -> str:
        self._id += 1
        event_id = f"evt-{self._id}"
        self.events[event_id] = replace(event, id=event_id, timestamp=datetime_to_mysql(event.timestamp))
        return event_id


class InMemorySchedules:
    def __init__(self, schedules: Optional[dict[str, WeeklySchedule]] = None):
        self.schedules = dict(schedules or {})

    def get_for_employee(self, employee_id: str) -> Optional[WeeklySchedule]:
        return self.schedules.get(employee_id)

    def save(self, schedule: WeeklySchedule) -> None:
        self.schedules[schedule.employee_id] = schedule


def device_evaluation(*, is_valid: bool = True, errors=None, is_vm: bool = False) -> DeviceEvaluation:
    signal = DeviceSignal(
        device_id="fp123",
        device_class=DeviceClass.DESKTOP,
        platform="Windows",
        browser="Chrome",
        browser_version="120",
        screen_resolution="1920x1080",
        timezone="Asia/Ho_Chi_Minh",
        is_secure_context=True,
        is_virtual_machine=is_vm,
        is_emulator=False,
        confidence=1.0,
    )
    return DeviceEvaluation(signal=signal, is_valid=is_valid, errors=list(errors or []))


@pytest.fixture()
def events_repo():
    return InMemoryEvents()


@pytest.fixture()
def schedules_repo():
    return InMemorySchedules({"E1": default_weekly_schedule("E1")})


@pytest.fixture()
def pipeline(events_repo, schedules_repo):
    return ClockEventPipeline(events_repo, schedules_repo)


@pytest.fixture()
def make_device():
    return device_evaluation


@pytest.fixture()
def unscheduled_pipeline(events_repo):
    return ClockEventPipeline(events_repo, InMemorySchedules())
