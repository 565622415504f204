from __future__ import annotations

from ...common.datetime_utils import minutes_between
from ...common.geo import haversine_meters
from ...core.enums import DuplicateType
from ...events.model import ClockEvent
from ..model import DuplicateDetectionConfig
from .base import MatchingCheck


class TimeWindowCheck(MatchingCheck):
    """History events within `time_window_minutes` of the new event."""

    duplicate_type = DuplicateType.TIME_WINDOW

    def matches(self, new_event: ClockEvent, other: ClockEvent, config: DuplicateDetectionConfig) -> bool:
        return minutes_between(new_event.timestamp, other.timestamp) <= config.time_window_minutes

    def weight_and_cap(self, config: DuplicateDetectionConfig) -> tuple[float, float]:
        return config.scoring.time_window_weight, config.scoring.time_window_cap


class LocationCheck(MatchingCheck):
    """History events recorded within `location_threshold_meters` of the new event."""

    duplicate_type = DuplicateType.LOCATION

    def matches(self, new_event: ClockEvent, other: ClockEvent, config: DuplicateDetectionConfig) -> bool:
        if not new_event.has_location or not other.has_location:
            return False
        distance = haversine_meters(new_event.latitude, new_event.longitude, other.latitude, other.longitude)
        return distance <= config.location_threshold_meters

    def weight_and_cap(self, config: DuplicateDetectionConfig) -> tuple[float, float]:
        return config.scoring.location_weight, config.scoring.location_cap
