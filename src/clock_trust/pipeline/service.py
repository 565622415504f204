from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import to_naive_utc, utc_date
from ..core.enums import EventType
from ..core.exceptions import ValidationError
from ..devices.evaluator import DeviceTrustEvaluator
from ..devices.model import DeviceEvaluation
from ..devices.probe import CapabilityProbe
from ..duplicates.detector import DuplicateDetector
from ..duplicates.model import DuplicateDetectionConfig, DuplicateVerdict
from ..events.model import ClockEvent
from ..events.repository import ClockEventRepository
from ..integrity.hasher import IntegrityHasher
from ..integrity.model import VerificationResult
from ..schedules.model import WeeklySchedule
from ..schedules.repository import WeeklyScheduleRepository
from ..schedules.validator import ScheduleValidator
from .locks import EmployeeLockRegistry
from .model import PipelineResult
from .settings import PipelineSettings

_logger = logging.getLogger(__name__)


def _same_day(events: Sequence[ClockEvent], when: datetime) -> list[ClockEvent]:
    day = utc_date(when)
    return sorted((e for e in events if utc_date(e.timestamp) == day), key=lambda e: to_naive_utc(e.timestamp))


def open_break_start(history: Sequence[ClockEvent], when: datetime) -> Optional[datetime]:
    """Timestamp of today's BREAK_START not yet closed by a BREAK_END, if any."""
    started = None
    for e in _same_day(history, when):
        if e.type == EventType.BREAK_START:
            started = e.timestamp
        elif e.type == EventType.BREAK_END:
            started = None
    return started


def duplicate_reason(verdict: DuplicateVerdict, new_event: ClockEvent) -> str:
    percent = round(verdict.confidence * 100)
    if verdict.similar_events and verdict.time_difference_minutes is not None:
        closest = min(verdict.similar_events, key=lambda e: abs(
            (to_naive_utc(e.timestamp) - to_naive_utc(new_event.timestamp)).total_seconds()))
        return (
            f"Duplicate of {closest.type.value.lower()} {verdict.time_difference_minutes:.0f} minutes ago "
            f"({verdict.duplicate_type.value}, {percent}%)"
        )
    return f"Duplicate submission ({verdict.duplicate_type.value}, {percent}%)"


class ClockEventPipeline:
    """Runs device, schedule and duplicate validation, then seals accepted events.

    `evaluate` is the side-effect-free composition. `submit` adds the storage
    round trip (history read, event write) under a per-employee lock.
    """

    def __init__(
        self,
        events: ClockEventRepository,
        schedules: WeeklyScheduleRepository,
        *,
        settings: Optional[PipelineSettings] = None,
        locks: Optional[EmployeeLockRegistry] = None,
        schedule_validator: Optional[ScheduleValidator] = None,
        duplicate_detector: Optional[DuplicateDetector] = None,
        hasher: Optional[IntegrityHasher] = None,
    ):
        self._events = events
        self._schedules = schedules
        self._settings = settings or PipelineSettings()
        self._locks = locks or EmployeeLockRegistry()
        self._schedule_validator = schedule_validator or ScheduleValidator()
        self._detector = duplicate_detector or DuplicateDetector()
        self._hasher = hasher or IntegrityHasher()

    @property
    def settings(self) -> PipelineSettings:
        return self._settings

    def evaluate(
        self,
        event: ClockEvent,
        *,
        device: DeviceEvaluation,
        schedule: Optional[WeeklySchedule],
        history: Sequence[ClockEvent],
        duplicate_config: Optional[DuplicateDetectionConfig] = None,
    ) -> PipelineResult:
        s = self._settings
        if event.integrity_bundle is not None:
            raise ValidationError("Event is already sealed")

        if not event.device_descriptor:
            event = replace(event, device_descriptor=device.signal.descriptor())

        result = PipelineResult(device_ok=device.is_valid, schedule_ok=False, duplicate_ok=False, device=device)
        result.reasons.extend(device.errors)
        result.warnings.extend(device.warnings)

        if schedule is None:
            result.reasons.append(f"No weekly schedule configured for employee {event.employee_id}")
        else:
            same_day = _same_day(history, event.timestamp)
            verdict = self._schedule_validator.validate(
                event.type,
                event.timestamp,
                schedule,
                s.schedule,
                break_started_at=open_break_start(history, event.timestamp) if event.type == EventType.BREAK_END else None,
                break_taken=any(e.type == EventType.BREAK_START for e in same_day) if event.type == EventType.EXIT else None,
            )
            result.schedule = verdict
            result.schedule_ok = verdict.is_valid
            result.reasons.extend(verdict.errors)
            result.warnings.extend(verdict.warnings)

        duplicate = self._detector.detect(event, history, duplicate_config or s.duplicates, s.strategy)
        result.duplicate = duplicate
        result.duplicate_ok = not duplicate.is_duplicate
        result.warnings.extend(duplicate.warnings)
        if duplicate.is_duplicate:
            result.reasons.append(duplicate_reason(duplicate, event))

        if result.device_ok and result.schedule_ok and result.duplicate_ok:
            bundle = self._hasher.seal(event, s.hashing)
            check = self._hasher.verify(event, bundle, s.hashing)
            if check.is_valid:
                result.integrity_bundle = bundle
                event = event.with_bundle(bundle)
            else:
                result.reasons.extend(check.errors)

        result.event = event
        return result

    def submit(
        self,
        event: ClockEvent,
        device: DeviceEvaluation | CapabilityProbe,
        *,
        duplicate_config: Optional[DuplicateDetectionConfig] = None,
    ) -> PipelineResult:
        s = self._settings
        if not isinstance(device, DeviceEvaluation):
            device = DeviceTrustEvaluator(device).evaluate(s.device)

        with self._locks.hold(event.employee_id, timeout=s.lock_timeout_seconds):
            since = to_naive_utc(event.timestamp) - timedelta(days=s.history_lookback_days)
            history = self._events.list_for_employee_since(event.employee_id, since)
            schedule = self._schedules.get_for_employee(event.employee_id)

            result = self.evaluate(
                event, device=device, schedule=schedule, history=history, duplicate_config=duplicate_config
            )
            if result.accepted:
                event_id = self._events.create(result.event)
                result.event = result.event.with_id(event_id)

        if result.accepted:
            _logger.info("Clock event %s accepted for employee %s (%s)",
                         result.event.id, event.employee_id, event.type.value)
        else:
            _logger.info("Clock event rejected for employee %s (%s): %s",
                         event.employee_id, result.status.value, "; ".join(result.reasons))
        return result

    def verify_stored(self, event_id: str) -> VerificationResult:
        event = self._events.get_by_id(event_id)
        if event is None:
            raise ValidationError(f"Clock event {event_id} does not exist")
        if event.integrity_bundle is None:
            raise ValidationError(f"Clock event {event_id} has no integrity bundle")
        return self._hasher.verify(event, event.integrity_bundle, self._settings.hashing)
