from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pytest

from clock_trust.core.enums import DeviceClass
from clock_trust.devices.evaluator import DeviceTrustEvaluator, classify_device, detect_browser
from clock_trust.devices.model import DeviceValidationConfig

DESKTOP_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
ANDROID_PHONE_UA = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)
ANDROID_TABLET_UA = (
    "Mozilla/5.0 (Linux; Android 13; SM-X700) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
IPAD_UA = (
    "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
EDGE_UA = DESKTOP_UA + " Edg/120.0.2210.91"


@dataclass
class FakeProbe:
    ua: Optional[str] = DESKTOP_UA
    lang: Optional[str] = "en-US"
    plat: Optional[str] = None
    geometry: Optional[tuple[int, int]] = (1920, 1080)
    depth: Optional[int] = 24
    tz_offset: Optional[int] = -420
    tz_name: Optional[str] = "Asia/Ho_Chi_Minh"
    cores: Optional[int] = 8
    touch: Optional[int] = 0
    canvas: Optional[str] = "data:image/png;base64,AAAA"
    gpu: Optional[tuple[str, str]] = ("Google Inc.", "ANGLE (Intel UHD Graphics)")
    secure: bool = True

    def user_agent(self):
        return self.ua

    def language(self):
        return self.lang

    def platform(self):
        return self.plat

    def screen_geometry(self):
        return self.geometry

    def color_depth(self):
        return self.depth

    def timezone_offset(self):
        return self.tz_offset

    def timezone_name(self):
        return self.tz_name

    def hardware_concurrency(self):
        return self.cores

    def max_touch_points(self):
        return self.touch

    def render_surface(self):
        return self.canvas

    def gpu_strings(self):
        return self.gpu

    def is_secure_context(self):
        return self.secure


class SandboxedProbe(FakeProbe):
    def render_surface(self):
        raise PermissionError("canvas read blocked")


def test_trusted_desktop_is_valid_with_full_confidence():
    ev = DeviceTrustEvaluator(FakeProbe()).evaluate()

    assert ev.is_valid
    assert ev.errors == []
    assert ev.warnings == []
    assert ev.signal.device_class == DeviceClass.DESKTOP
    assert ev.signal.platform == "Windows"
    assert (ev.signal.browser, ev.signal.browser_version) == ("Chrome", "120")
    assert ev.signal.screen_resolution == "1920x1080"
    assert ev.signal.confidence == pytest.approx(1.0)


@pytest.mark.parametrize(
    "ua, expected",
    [
        (DESKTOP_UA, DeviceClass.DESKTOP),
        (ANDROID_PHONE_UA, DeviceClass.MOBILE),
        (ANDROID_TABLET_UA, DeviceClass.TABLET),
        (IPAD_UA, DeviceClass.TABLET),
        ("", DeviceClass.UNKNOWN),
        (None, DeviceClass.UNKNOWN),
    ],
)
def test_classify_device(ua, expected):
    assert classify_device(ua) == expected


def test_edge_is_not_reported_as_chrome():
    assert detect_browser(EDGE_UA) == ("Edge", "120")


def test_mobile_descriptor():
    ev = DeviceTrustEvaluator(FakeProbe(ua=ANDROID_PHONE_UA)).evaluate()

    assert ev.signal.is_mobile
    assert ev.signal.descriptor() == "Mobile / Android / Chrome 120"


def test_mobile_rejected_when_not_allowed():
    ev = DeviceTrustEvaluator(FakeProbe(ua=ANDROID_PHONE_UA)).evaluate(DeviceValidationConfig(allow_mobile=False))

    assert not ev.is_valid
    assert "Mobile devices are not allowed" in ev.errors
    assert ev.reason == "Mobile device not allowed"


def test_virtual_machine_is_blocked_and_penalised():
    probe = FakeProbe(gpu=("VMware, Inc.", "SVGA3D; build: RELEASE"))
    ev = DeviceTrustEvaluator(probe).evaluate()

    assert not ev.is_valid
    assert ev.signal.is_virtual_machine
    assert "Virtual machines are not allowed" in ev.errors
    assert ev.warnings == ["Virtual machine detected - possible fraud attempt"]
    # 1.0 - 0.3 (vm) - 0.1 (one warning)
    assert ev.signal.confidence == pytest.approx(0.6)


def test_virtual_machine_allowed_still_warns():
    probe = FakeProbe(gpu=("VMware, Inc.", "SVGA3D"))
    ev = DeviceTrustEvaluator(probe).evaluate(DeviceValidationConfig(block_virtual_machines=False))

    assert ev.is_valid
    assert ev.warnings == ["Virtual machine detected - possible fraud attempt"]


def test_emulator_detected_from_user_agent():
    probe = FakeProbe(ua=ANDROID_PHONE_UA + " Genymotion")
    ev = DeviceTrustEvaluator(probe).evaluate()

    assert ev.signal.is_emulator
    assert "Emulators are not allowed" in ev.errors


def test_confidence_never_negative():
    probe = FakeProbe(ua=ANDROID_PHONE_UA + " BlueStacks", gpu=("VirtualBox", "VirtualBox Graphics"), secure=False)
    ev = DeviceTrustEvaluator(probe).evaluate()

    assert len(ev.warnings) == 3
    assert ev.signal.confidence == pytest.approx(0.0)
    assert ev.signal.confidence >= 0.0


def test_insecure_context_warns_or_rejects():
    relaxed = DeviceTrustEvaluator(FakeProbe(secure=False)).evaluate()
    assert relaxed.is_valid
    assert relaxed.warnings == ["Insecure context - HTTPS is recommended"]
    assert relaxed.signal.confidence == pytest.approx(0.8)

    strict = DeviceTrustEvaluator(FakeProbe(secure=False)).evaluate(DeviceValidationConfig(require_secure_context=True))
    assert not strict.is_valid


def test_fingerprint_is_stable_and_opaque():
    a = DeviceTrustEvaluator(FakeProbe()).evaluate().signal.device_id
    b = DeviceTrustEvaluator(FakeProbe()).evaluate().signal.device_id
    c = DeviceTrustEvaluator(FakeProbe(tz_offset=60)).evaluate().signal.device_id

    assert a == b
    assert a != c
    assert a.isalnum()
    assert 0 < len(a) <= 32


def test_failing_probe_counts_as_absent():
    sandboxed = DeviceTrustEvaluator(SandboxedProbe()).evaluate()
    no_canvas = DeviceTrustEvaluator(FakeProbe(canvas=None)).evaluate()

    assert sandboxed.is_valid
    assert sandboxed.signal.device_id == no_canvas.signal.device_id


def test_summary_lines_mention_status_and_warnings():
    ev = DeviceTrustEvaluator(FakeProbe(secure=False)).evaluate()
    lines = ev.summary_lines()

    assert lines[0] == "Status: VALID"
    assert "Confidence: 80%" in lines
    assert "WARNING: Insecure context - HTTPS is recommended" in lines
