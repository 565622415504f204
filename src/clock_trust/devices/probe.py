"""Capability probes: where the device evaluator reads environment attributes from.

Each probe method returns the attribute or None when the feature is absent.
A probe method may also raise; the evaluator treats that as "feature absent".
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class CapabilityProbe(Protocol):
    def user_agent(self) -> Optional[str]:
        raise NotImplementedError

    def language(self) -> Optional[str]:
        raise NotImplementedError

    def platform(self) -> Optional[str]:
        raise NotImplementedError

    def screen_geometry(self) -> Optional[tuple[int, int]]:
        raise NotImplementedError

    def color_depth(self) -> Optional[int]:
        raise NotImplementedError

    def timezone_offset(self) -> Optional[int]:
        """Minutes behind UTC, as browsers report it."""

        raise NotImplementedError

    def timezone_name(self) -> Optional[str]:
        raise NotImplementedError

    def hardware_concurrency(self) -> Optional[int]:
        raise NotImplementedError

    def max_touch_points(self) -> Optional[int]:
        raise NotImplementedError

    def render_surface(self) -> Optional[str]:
        """Opaque output of a rendering-surface probe (e.g. a canvas data URL)."""

        raise NotImplementedError

    def gpu_strings(self) -> Optional[tuple[str, str]]:
        """(vendor, renderer) of the graphics stack."""

        raise NotImplementedError

    def is_secure_context(self) -> bool:
        raise NotImplementedError


def _int_or_none(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


class BrowserPayloadProbe:
    """Attributes reported by the browser-side collector script.

    Expected keys (camelCase, as the script posts them): userAgent, language,
    platform, screenWidth, screenHeight, colorDepth, timezoneOffset, timezone,
    hardwareConcurrency, maxTouchPoints, canvas, webglVendor, webglRenderer,
    isSecureContext. Request headers fill in the user agent and language when
    the payload omits them.
    """

    def __init__(self, payload: Mapping[str, Any], *, headers: Optional[Mapping[str, str]] = None,
                 secure: Optional[bool] = None):
        self._p = dict(payload or {})
        self._headers = headers or {}
        self._secure = secure

    def user_agent(self) -> Optional[str]:
        return self._p.get("userAgent") or self._headers.get("User-Agent") or None

    def language(self) -> Optional[str]:
        lang = self._p.get("language")
        if lang:
            return str(lang)
        accept = self._headers.get("Accept-Language")
        if not accept:
            return None
        return accept.split(",")[0].split(";")[0].strip() or None

    def platform(self) -> Optional[str]:
        return self._p.get("platform") or None

    def screen_geometry(self) -> Optional[tuple[int, int]]:
        width = _int_or_none(self._p.get("screenWidth"))
        height = _int_or_none(self._p.get("screenHeight"))
        if width is None or height is None:
            return None
        return width, height

    def color_depth(self) -> Optional[int]:
        return _int_or_none(self._p.get("colorDepth"))

    def timezone_offset(self) -> Optional[int]:
        return _int_or_none(self._p.get("timezoneOffset"))

    def timezone_name(self) -> Optional[str]:
        return self._p.get("timezone") or None

    def hardware_concurrency(self) -> Optional[int]:
        return _int_or_none(self._p.get("hardwareConcurrency"))

    def max_touch_points(self) -> Optional[int]:
        return _int_or_none(self._p.get("maxTouchPoints"))

    def render_surface(self) -> Optional[str]:
        return self._p.get("canvas") or None

    def gpu_strings(self) -> Optional[tuple[str, str]]:
        vendor = self._p.get("webglVendor")
        renderer = self._p.get("webglRenderer")
        if not vendor and not renderer:
            return None
        return str(vendor or ""), str(renderer or "")

    def is_secure_context(self) -> bool:
        if self._secure is not None:
            return bool(self._secure)
        return bool(self._p.get("isSecureContext", False))


class RequestHeaderProbe:
    """Server-side probe for clients that run no collector script (kiosks, API clients).

    Only what an HTTP request exposes is available; everything else is absent.
    """

    def __init__(self, request):
        self._request = request

    def user_agent(self) -> Optional[str]:
        return self._request.headers.get("User-Agent") or None

    def language(self) -> Optional[str]:
        values = self._request.accept_languages.values()
        return next(iter(values), None)

    def platform(self) -> Optional[str]:
        return self._request.headers.get("Sec-CH-UA-Platform", "").strip('"') or None

    def screen_geometry(self) -> Optional[tuple[int, int]]:
        return None

    def color_depth(self) -> Optional[int]:
        return None

    def timezone_offset(self) -> Optional[int]:
        return None

    def timezone_name(self) -> Optional[str]:
        return None

    def hardware_concurrency(self) -> Optional[int]:
        return None

    def max_touch_points(self) -> Optional[int]:
        return None

    def render_surface(self) -> Optional[str]:
        return None

    def gpu_strings(self) -> Optional[tuple[str, str]]:
        return None

    def is_secure_context(self) -> bool:
        return bool(self._request.is_secure)
