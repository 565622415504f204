from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import minutes_between, to_naive_utc
from ..common.geo import haversine_meters
from ..core.enums import DetectionStrategy
from ..events.model import ClockEvent
from .factory import DuplicateCheckFactory
from .model import CheckResult, DEFAULT_DUPLICATE_CONFIG, DuplicateDetectionConfig, DuplicateVerdict


class DuplicateDetector:
    """Scores a new clock event against the employee's recent events.

    Every selected check runs independently; the verdict keeps the single
    highest-confidence result (not the first check in priority order).
    """

    def __init__(self, factory: Optional[DuplicateCheckFactory] = None):
        self._factory = factory or DuplicateCheckFactory()

    def detect(
        self,
        new_event: ClockEvent,
        history: Sequence[ClockEvent],
        config: DuplicateDetectionConfig = DEFAULT_DUPLICATE_CONFIG,
        strategy: DetectionStrategy = DetectionStrategy.HYBRID,
    ) -> DuplicateVerdict:
        employee_history = [
            e for e in history
            if e.employee_id == new_event.employee_id and (new_event.id is None or e.id != new_event.id)
        ]

        best: Optional[CheckResult] = None
        for check in self._factory.for_strategy(strategy, config):
            result = check.evaluate(new_event=new_event, history=employee_history, config=config)
            if result is not None and result.confidence > (best.confidence if best else 0.0):
                best = result

        verdict = DuplicateVerdict()
        if best is None:
            return verdict

        scoring = config.scoring
        verdict.duplicate_type = best.duplicate_type
        verdict.confidence = best.confidence
        verdict.similar_events = list(best.events)
        verdict.is_duplicate = best.confidence > scoring.duplicate_threshold

        if verdict.similar_events:
            closest = min(
                verdict.similar_events,
                key=lambda e: abs((to_naive_utc(e.timestamp) - to_naive_utc(new_event.timestamp)).total_seconds()),
            )
            verdict.time_difference_minutes = minutes_between(new_event.timestamp, closest.timestamp)
            if new_event.has_location and closest.has_location:
                verdict.location_difference_meters = haversine_meters(
                    new_event.latitude, new_event.longitude, closest.latitude, closest.longitude
                )

        percent = round(best.confidence * 100)
        if best.confidence > scoring.high_probability_threshold:
            verdict.warnings.append(f"High probability of duplicate detected ({percent}%)")
        elif best.confidence > scoring.duplicate_threshold:
            verdict.warnings.append(f"Possible duplicate detected ({percent}%)")

        return verdict
