from __future__ import annotations

from dataclasses import dataclass, field
from types import ModuleType
from typing import Optional

from ..core.constants import DEFAULT_HISTORY_LOOKBACK_DAYS
from ..core.enums import DetectionStrategy, HashAlgorithm, HashEncoding, TimestampPrecision
from ..core.exceptions import ConfigurationError
from ..devices.model import DeviceValidationConfig
from ..duplicates.model import DuplicateDetectionConfig
from ..integrity.model import HashConfig
from ..schedules.model import ScheduleValidationConfig


@dataclass(frozen=True)
class PipelineSettings:
    """Every policy knob the pipeline needs, passed explicitly per call."""

    device: DeviceValidationConfig = field(default_factory=DeviceValidationConfig)
    schedule: ScheduleValidationConfig = field(default_factory=ScheduleValidationConfig)
    duplicates: DuplicateDetectionConfig = field(default_factory=DuplicateDetectionConfig)
    hashing: HashConfig = field(default_factory=HashConfig)
    strategy: DetectionStrategy = DetectionStrategy.HYBRID
    history_lookback_days: int = DEFAULT_HISTORY_LOOKBACK_DAYS
    lock_timeout_seconds: Optional[float] = None

    @classmethod
    def from_settings_module(cls, settings: ModuleType) -> "PipelineSettings":
        try:
            hashing = HashConfig(
                algorithm=HashAlgorithm(getattr(settings, "HASH_ALGORITHM", "SHA256")),
                encoding=HashEncoding(getattr(settings, "HASH_ENCODING", "hex")),
                timestamp_precision=TimestampPrecision(getattr(settings, "TIMESTAMP_PRECISION", "milliseconds")),
                signing_key=getattr(settings, "SIGNING_KEY", None) or None,
            )
            strategy = DetectionStrategy(getattr(settings, "DUPLICATE_STRATEGY", "HYBRID"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid pipeline setting: {e}") from e

        return cls(
            device=DeviceValidationConfig(
                require_secure_context=bool(getattr(settings, "REQUIRE_SECURE_CONTEXT", False)),
            ),
            hashing=hashing,
            strategy=strategy,
            history_lookback_days=int(getattr(settings, "HISTORY_LOOKBACK_DAYS", DEFAULT_HISTORY_LOOKBACK_DAYS)),
            lock_timeout_seconds=getattr(settings, "LOCK_TIMEOUT_SECONDS", None),
        )
