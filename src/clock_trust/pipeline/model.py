from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..core.enums import SubmissionStatus
from ..devices.model import DeviceEvaluation
from ..duplicates.model import DuplicateVerdict
from ..events.model import ClockEvent, IntegrityBundle
from ..schedules.model import ScheduleVerdict

HTTP_STATUS = {
    SubmissionStatus.ACCEPTED: 201,
    SubmissionStatus.REJECTED_DUPLICATE: 409,
    SubmissionStatus.REJECTED_INVALID: 422,
}


@dataclass
class PipelineResult:
    device_ok: bool
    schedule_ok: bool
    duplicate_ok: bool
    integrity_bundle: Optional[IntegrityBundle] = None
    reasons: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    event: Optional[ClockEvent] = None
    device: Optional[DeviceEvaluation] = None
    schedule: Optional[ScheduleVerdict] = None
    duplicate: Optional[DuplicateVerdict] = None

    @property
    def accepted(self) -> bool:
        return self.device_ok and self.schedule_ok and self.duplicate_ok and self.integrity_bundle is not None

    @property
    def status(self) -> SubmissionStatus:
        if self.accepted:
            return SubmissionStatus.ACCEPTED
        if self.device_ok and self.schedule_ok and not self.duplicate_ok:
            return SubmissionStatus.REJECTED_DUPLICATE
        return SubmissionStatus.REJECTED_INVALID

    @property
    def http_status(self) -> int:
        return HTTP_STATUS[self.status]

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "event_id": self.event.id if self.event else None,
            "device_ok": self.device_ok,
            "schedule_ok": self.schedule_ok,
            "duplicate_ok": self.duplicate_ok,
            "integrity_bundle": self.integrity_bundle.to_dict() if self.integrity_bundle else None,
            "reasons": list(self.reasons),
            "warnings": list(self.warnings),
        }
