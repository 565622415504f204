from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import FrozenSet, List, Optional, Sequence

from ..core.constants import (
    DEFAULT_LOCATION_THRESHOLD_METERS,
    DEFAULT_MAX_RECORDS_PER_DAY,
    DEFAULT_TIME_WINDOW_MINUTES,
    DUPLICATE_THRESHOLD,
    HIGH_PROBABILITY_THRESHOLD,
)
from ..core.enums import DuplicateType, EventType
from ..events.model import ClockEvent


@dataclass(frozen=True)
class DuplicateScoringPolicy:
    """Per-check weights and ceilings.

    A weighted check scores min(cap, matches * weight).
    """

    time_window_weight: float = 0.3
    time_window_cap: float = 0.9
    location_weight: float = 0.25
    location_cap: float = 0.8
    device_weight: float = 0.2
    device_cap: float = 0.7
    ip_weight: float = 0.15
    ip_cap: float = 0.6
    same_type_confidence: float = 0.95
    daily_cap_confidence: float = 0.9
    blocked_type_confidence: float = 1.0
    duplicate_threshold: float = DUPLICATE_THRESHOLD
    high_probability_threshold: float = HIGH_PROBABILITY_THRESHOLD


DEFAULT_SCORING_POLICY = DuplicateScoringPolicy()


@dataclass(frozen=True)
class DuplicateDetectionConfig:
    time_window_minutes: float = DEFAULT_TIME_WINDOW_MINUTES
    check_location: bool = True
    location_threshold_meters: float = DEFAULT_LOCATION_THRESHOLD_METERS
    check_device: bool = True
    check_ip: bool = True
    allow_multiple_same_type: bool = False
    max_records_per_day: int = DEFAULT_MAX_RECORDS_PER_DAY
    # Types that may repeat on the same day even when allow_multiple_same_type is off.
    same_type_exempt_types: FrozenSet[EventType] = frozenset()
    # Types an employee may not record at all.
    blocked_types: FrozenSet[EventType] = frozenset()
    scoring: DuplicateScoringPolicy = DEFAULT_SCORING_POLICY


DEFAULT_DUPLICATE_CONFIG = DuplicateDetectionConfig()


@dataclass(frozen=True)
class CheckResult:
    duplicate_type: DuplicateType
    confidence: float
    events: Sequence[ClockEvent]


@dataclass
class DuplicateVerdict:
    is_duplicate: bool = False
    duplicate_type: DuplicateType = DuplicateType.NONE
    confidence: float = 0.0
    similar_events: List[ClockEvent] = field(default_factory=list)
    time_difference_minutes: Optional[float] = None
    location_difference_meters: Optional[float] = None
    warnings: List[str] = field(default_factory=list)

    def summary_lines(self) -> List[str]:
        lines = [
            f"Duplicate: {'yes' if self.is_duplicate else 'no'}",
            f"Type: {self.duplicate_type.value}",
            f"Confidence: {round(self.confidence * 100)}%",
        ]
        if self.similar_events:
            lines.append(f"Similar events: {len(self.similar_events)}")
            if self.time_difference_minutes is not None:
                lines.append(f"Time difference: {self.time_difference_minutes:.1f} minutes")
            if self.location_difference_meters is not None:
                lines.append(f"Location difference: {self.location_difference_meters:.0f} meters")
            for i, e in enumerate(self.similar_events[:3], start=1):
                lines.append(f"{i}. {e.type.value} - {e.timestamp:%Y-%m-%d %H:%M:%S}")
        lines.extend(f"WARNING: {w}" for w in self.warnings)
        return lines


@dataclass(frozen=True)
class DuplicateRules:
    """Employee-scoped overrides of the duplicate detection config."""

    employee_id: str
    company_id: str
    time_window_minutes: Optional[float] = None
    location_threshold_meters: Optional[float] = None
    max_records_per_day: Optional[int] = None
    allowed_types_per_day: FrozenSet[EventType] = frozenset(EventType)
    blocked_types_per_day: FrozenSet[EventType] = frozenset()
    allow_multiple_entries: bool = False
    allow_multiple_exits: bool = False
    allow_multiple_breaks: bool = True

    def to_config(self, base: DuplicateDetectionConfig = DEFAULT_DUPLICATE_CONFIG) -> DuplicateDetectionConfig:
        exempt = set(base.same_type_exempt_types)
        if self.allow_multiple_entries:
            exempt.add(EventType.ENTRY)
        if self.allow_multiple_exits:
            exempt.add(EventType.EXIT)
        if self.allow_multiple_breaks:
            exempt.update((EventType.BREAK_START, EventType.BREAK_END))

        blocked = set(base.blocked_types) | set(self.blocked_types_per_day)
        blocked |= set(EventType) - set(self.allowed_types_per_day)

        overrides = {
            "same_type_exempt_types": frozenset(exempt),
            "blocked_types": frozenset(blocked),
        }
        if self.time_window_minutes is not None:
            overrides["time_window_minutes"] = self.time_window_minutes
        if self.location_threshold_meters is not None:
            overrides["location_threshold_meters"] = self.location_threshold_meters
        if self.max_records_per_day is not None:
            overrides["max_records_per_day"] = self.max_records_per_day
        return replace(base, **overrides)
