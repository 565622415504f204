from __future__ import annotations

from typing import Optional

from ...core.enums import DuplicateType
from ...events.model import ClockEvent
from ..model import DuplicateDetectionConfig
from .base import MatchingCheck

MOBILE_KEYWORDS = ("mobile", "android", "ios")


def is_mobile_descriptor(descriptor: Optional[str]) -> bool:
    text = (descriptor or "").lower()
    return any(k in text for k in MOBILE_KEYWORDS)


class DeviceCheck(MatchingCheck):
    """Coarse device similarity: both mobile or both non-mobile."""

    duplicate_type = DuplicateType.DEVICE

    def matches(self, new_event: ClockEvent, other: ClockEvent, config: DuplicateDetectionConfig) -> bool:
        if not new_event.device_descriptor or not other.device_descriptor:
            return False
        return is_mobile_descriptor(new_event.device_descriptor) == is_mobile_descriptor(other.device_descriptor)

    def weight_and_cap(self, config: DuplicateDetectionConfig) -> tuple[float, float]:
        return config.scoring.device_weight, config.scoring.device_cap


class IpCheck(MatchingCheck):
    duplicate_type = DuplicateType.IP

    def matches(self, new_event: ClockEvent, other: ClockEvent, config: DuplicateDetectionConfig) -> bool:
        if not new_event.ip_address or not other.ip_address:
            return False
        return new_event.ip_address == other.ip_address

    def weight_and_cap(self, config: DuplicateDetectionConfig) -> tuple[float, float]:
        return config.scoring.ip_weight, config.scoring.ip_cap
