from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..core.enums import DeviceClass


@dataclass(frozen=True)
class DeviceValidationConfig:
    """Which environments may submit clock events."""

    allow_mobile: bool = True
    allow_desktop: bool = True
    allow_tablet: bool = True
    block_virtual_machines: bool = True
    block_emulators: bool = True
    require_secure_context: bool = False


DEFAULT_DEVICE_CONFIG = DeviceValidationConfig()


@dataclass(frozen=True)
class DeviceSignal:
    """Snapshot of the submitting environment."""

    device_id: str
    device_class: DeviceClass
    platform: str
    browser: str
    browser_version: str
    screen_resolution: str
    timezone: str
    is_secure_context: bool
    is_virtual_machine: bool
    is_emulator: bool
    confidence: float
    user_agent: str = ""

    @property
    def is_mobile(self) -> bool:
        return self.device_class == DeviceClass.MOBILE

    def descriptor(self) -> str:
        """Free-text summary stored on the clock event as its device descriptor."""
        parts = [self.device_class.value.title(), self.platform, f"{self.browser} {self.browser_version}".strip()]
        return " / ".join(p for p in parts if p and p != "Unknown")


@dataclass
class DeviceEvaluation:
    signal: DeviceSignal
    is_valid: bool = True
    reason: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def summary_lines(self) -> List[str]:
        s = self.signal
        lines = [
            f"Status: {'VALID' if self.is_valid else 'INVALID'}",
            f"Confidence: {round(s.confidence * 100)}%",
            f"Device ID: {s.device_id}",
            f"Type: {s.device_class.value}",
            f"Platform: {s.platform}",
            f"Browser: {s.browser} {s.browser_version}".rstrip(),
            f"Resolution: {s.screen_resolution}",
            f"Timezone: {s.timezone}",
            f"Secure context: {'yes' if s.is_secure_context else 'no'}",
            f"Virtual machine: {'yes' if s.is_virtual_machine else 'no'}",
            f"Emulator: {'yes' if s.is_emulator else 'no'}",
        ]
        lines.extend(f"WARNING: {w}" for w in self.warnings)
        lines.extend(f"ERROR: {e}" for e in self.errors)
        return lines
