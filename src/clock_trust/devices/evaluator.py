from __future__ import annotations

import logging
import re
from typing import Callable, Optional, TypeVar

from ..core.constants import (
    EMULATOR_CONFIDENCE_PENALTY,
    INSECURE_CONFIDENCE_PENALTY,
    VM_CONFIDENCE_PENALTY,
    WARNING_CONFIDENCE_PENALTY,
)
from ..core.enums import DeviceClass
from .fingerprint import fingerprint
from .model import DEFAULT_DEVICE_CONFIG, DeviceEvaluation, DeviceSignal, DeviceValidationConfig
from .probe import CapabilityProbe

_logger = logging.getLogger(__name__)

T = TypeVar("T")

VM_INDICATORS = ("virtualbox", "vmware", "parallels", "qemu", "xen", "hyper-v", "docker", "wine")
EMULATOR_INDICATORS = ("emulator", "android sdk", "genymotion", "bluestacks", "nox", "mumu", "ldplayer")

_MOBILE_RE = re.compile(r"android|webos|iphone|ipad|ipod|blackberry|iemobile|opera mini", re.IGNORECASE)
_BROWSERS = (
    ("Edge", re.compile(r"Edg(?:e|A|iOS)?/(\d+)")),
    ("Firefox", re.compile(r"Firefox/(\d+)")),
    ("Chrome", re.compile(r"Chrome/(\d+)")),
    ("Safari", re.compile(r"Version/(\d+).*Safari")),
)


def _safe(probe_call: Callable[[], T]) -> Optional[T]:
    try:
        return probe_call()
    except Exception as e:  # sandboxed / unsupported probes count as absent
        _logger.debug("Capability probe %s unavailable: %s", getattr(probe_call, "__name__", probe_call), e)
        return None


def classify_device(user_agent: Optional[str]) -> DeviceClass:
    if not user_agent:
        return DeviceClass.UNKNOWN
    ua = user_agent.lower()
    if not _MOBILE_RE.search(ua):
        return DeviceClass.DESKTOP
    if "ipad" in ua or "tablet" in ua or ("android" in ua and "mobile" not in ua):
        return DeviceClass.TABLET
    return DeviceClass.MOBILE


def detect_platform(platform: Optional[str], user_agent: Optional[str]) -> str:
    # navigator.platform first, user agent as fallback
    for source in (platform or "", user_agent or ""):
        if "iPhone" in source or "iPad" in source or "iOS" in source:
            return "iOS"
        if "Android" in source:
            return "Android"
        if "Win" in source:
            return "Windows"
        if "Mac" in source:
            return "macOS"
        if "Linux" in source:
            return "Linux"
    return "Unknown"


def detect_browser(user_agent: Optional[str]) -> tuple[str, str]:
    if not user_agent:
        return "Unknown", ""
    for name, pattern in _BROWSERS:
        match = pattern.search(user_agent)
        if match:
            return name, match.group(1)
    return "Unknown", ""


def _contains_any(haystacks: tuple[str, ...], indicators: tuple[str, ...]) -> bool:
    text = " ".join(haystacks).lower()
    return any(indicator in text for indicator in indicators)


def compute_confidence(*, is_vm: bool, is_emulator: bool, is_secure: bool, warning_count: int) -> float:
    confidence = 1.0
    if is_vm:
        confidence -= VM_CONFIDENCE_PENALTY
    if is_emulator:
        confidence -= EMULATOR_CONFIDENCE_PENALTY
    if not is_secure:
        confidence -= INSECURE_CONFIDENCE_PENALTY
    confidence -= WARNING_CONFIDENCE_PENALTY * warning_count
    return max(0.0, round(confidence, 4))


class DeviceTrustEvaluator:
    """Fingerprints the submitting environment and checks it against a capability config."""

    def __init__(self, probe: CapabilityProbe):
        self._probe = probe

    def fingerprint_components(self) -> list[Optional[object]]:
        p = self._probe
        geometry = _safe(p.screen_geometry)
        return [
            _safe(p.user_agent),
            _safe(p.language),
            geometry[0] if geometry else None,
            geometry[1] if geometry else None,
            _safe(p.color_depth),
            _safe(p.timezone_offset),
            _safe(p.hardware_concurrency) or None,
            _safe(p.max_touch_points) or None,
            _safe(p.render_surface),
        ]

    def evaluate(self, config: DeviceValidationConfig = DEFAULT_DEVICE_CONFIG) -> DeviceEvaluation:
        p = self._probe
        user_agent = _safe(p.user_agent) or ""
        geometry = _safe(p.screen_geometry)
        gpu = _safe(p.gpu_strings) or ("", "")
        is_secure = bool(_safe(p.is_secure_context))

        device_class = classify_device(user_agent)
        browser, version = detect_browser(user_agent)
        is_vm = _contains_any((user_agent, *gpu), VM_INDICATORS)
        is_emulator = _contains_any((user_agent, *gpu), EMULATOR_INDICATORS)

        errors: list[str] = []
        warnings: list[str] = []
        reason: Optional[str] = None

        if config.require_secure_context and not is_secure:
            errors.append("A secure context (HTTPS) is required")
            reason = "Insecure context"

        if not config.allow_mobile and device_class == DeviceClass.MOBILE:
            errors.append("Mobile devices are not allowed")
            reason = "Mobile device not allowed"

        if not config.allow_desktop and device_class == DeviceClass.DESKTOP:
            errors.append("Desktop devices are not allowed")
            reason = "Desktop not allowed"

        if not config.allow_tablet and device_class == DeviceClass.TABLET:
            errors.append("Tablets are not allowed")
            reason = "Tablet not allowed"

        if config.block_virtual_machines and is_vm:
            errors.append("Virtual machines are not allowed")
            reason = "Virtual machine detected"

        if config.block_emulators and is_emulator:
            errors.append("Emulators are not allowed")
            reason = "Emulator detected"

        if is_vm:
            warnings.append("Virtual machine detected - possible fraud attempt")
        if is_emulator:
            warnings.append("Emulator detected - possible fraud attempt")
        if not is_secure:
            warnings.append("Insecure context - HTTPS is recommended")

        signal = DeviceSignal(
            device_id=fingerprint(self.fingerprint_components()),
            device_class=device_class,
            platform=detect_platform(_safe(p.platform), user_agent),
            browser=browser,
            browser_version=version,
            screen_resolution=f"{geometry[0]}x{geometry[1]}" if geometry else "",
            timezone=_safe(p.timezone_name) or "",
            is_secure_context=is_secure,
            is_virtual_machine=is_vm,
            is_emulator=is_emulator,
            confidence=compute_confidence(
                is_vm=is_vm, is_emulator=is_emulator, is_secure=is_secure, warning_count=len(warnings)
            ),
            user_agent=user_agent,
        )

        if errors:
            _logger.info("Device %s rejected: %s", signal.device_id, "; ".join(errors))

        return DeviceEvaluation(signal=signal, is_valid=not errors, reason=reason, errors=errors, warnings=warnings)
