from __future__ import annotations

from typing import Optional

from ...core.enums import DuplicateType
from ..model import CheckResult
from .base import DuplicateCheck, same_day


class SameTypeCheck(DuplicateCheck):
    """An event of the same type already exists on the same calendar day."""

    duplicate_type = DuplicateType.SAME_TYPE

    def evaluate(self, *, new_event, history, config) -> Optional[CheckResult]:
        if config.allow_multiple_same_type or new_event.type in config.same_type_exempt_types:
            return None
        hits = [e for e in history if e.type == new_event.type and same_day(e, new_event)]
        if not hits:
            return None
        return CheckResult(self.duplicate_type, config.scoring.same_type_confidence, hits)


class DailyCapCheck(DuplicateCheck):
    duplicate_type = DuplicateType.MAX_DAILY

    def evaluate(self, *, new_event, history, config) -> Optional[CheckResult]:
        today = [e for e in history if same_day(e, new_event)]
        if len(today) < config.max_records_per_day:
            return None
        return CheckResult(self.duplicate_type, config.scoring.daily_cap_confidence, today)


class BlockedTypeCheck(DuplicateCheck):
    """The employee's rules do not allow this event type at all."""

    duplicate_type = DuplicateType.BLOCKED_TYPE

    def evaluate(self, *, new_event, history, config) -> Optional[CheckResult]:
        if new_event.type not in config.blocked_types:
            return None
        return CheckResult(self.duplicate_type, config.scoring.blocked_type_confidence, [])
