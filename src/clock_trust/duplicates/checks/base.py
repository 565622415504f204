from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...common.datetime_utils import utc_date
from ...core.enums import DuplicateType
from ...events.model import ClockEvent
from ..model import CheckResult, DuplicateDetectionConfig


def capped(matches: int, weight: float, cap: float) -> float:
    return round(min(cap, matches * weight), 4)


def same_day(a: ClockEvent, b: ClockEvent) -> bool:
    return utc_date(a.timestamp) == utc_date(b.timestamp)


class DuplicateCheck(ABC):
    """Strategy Pattern: one independent signal scored against the employee's history."""

    duplicate_type: DuplicateType = DuplicateType.NONE

    @abstractmethod
    def evaluate(
        self,
        *,
        new_event: ClockEvent,
        history: Sequence[ClockEvent],
        config: DuplicateDetectionConfig,
    ) -> Optional[CheckResult]:
        """Return a scored result, or None when the signal does not fire."""

        raise NotImplementedError


class MatchingCheck(DuplicateCheck):
    """Scores `matches * weight`, capped, over the history events that match."""

    @abstractmethod
    def matches(self, new_event: ClockEvent, other: ClockEvent, config: DuplicateDetectionConfig) -> bool:
        raise NotImplementedError

    @abstractmethod
    def weight_and_cap(self, config: DuplicateDetectionConfig) -> tuple[float, float]:
        raise NotImplementedError

    def evaluate(self, *, new_event, history, config) -> Optional[CheckResult]:
        hits = [e for e in history if self.matches(new_event, e, config)]
        if not hits:
            return None
        weight, cap = self.weight_and_cap(config)
        return CheckResult(duplicate_type=self.duplicate_type, confidence=capped(len(hits), weight, cap), events=hits)
