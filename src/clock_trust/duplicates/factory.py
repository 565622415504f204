from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..core.enums import DetectionStrategy
from .checks.base import DuplicateCheck
from .checks.daily import BlockedTypeCheck, DailyCapCheck, SameTypeCheck
from .checks.environment import DeviceCheck, IpCheck
from .checks.proximity import LocationCheck, TimeWindowCheck
from .model import DuplicateDetectionConfig


@dataclass
class DuplicateCheckFactory:
    """Factory Pattern: choose the checks a detection strategy runs.

    Order matters only for ties: an equal confidence never displaces an earlier check.
    """

    def for_strategy(self, strategy: DetectionStrategy, config: DuplicateDetectionConfig) -> List[DuplicateCheck]:
        strategy = DetectionStrategy(strategy)
        hybrid = strategy == DetectionStrategy.HYBRID
        checks: List[DuplicateCheck] = []

        if hybrid or strategy == DetectionStrategy.TIME_WINDOW:
            checks.append(TimeWindowCheck())
        if config.check_location and (hybrid or strategy == DetectionStrategy.LOCATION_BASED):
            checks.append(LocationCheck())
        if config.check_device and (hybrid or strategy == DetectionStrategy.DEVICE_BASED):
            checks.append(DeviceCheck())
        if config.check_ip and (hybrid or strategy == DetectionStrategy.DEVICE_BASED):
            checks.append(IpCheck())

        # Same-day rules apply whatever the strategy.
        checks.extend([SameTypeCheck(), DailyCapCheck(), BlockedTypeCheck()])
        return checks
