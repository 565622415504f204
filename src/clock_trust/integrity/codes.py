"""Verification codes handed to employees and auditors for a sealed event."""
from __future__ import annotations

import base64
import binascii
import io
import json
from dataclasses import dataclass
from typing import Optional

import qrcode

from ..core.constants import VERIFICATION_URI_PREFIX
from ..events.model import ClockEvent, IntegrityBundle
from .hasher import checksum

COMPARED_FIELDS = (
    "type", "user_id", "employee_id", "company_id", "timestamp",
    "latitude", "longitude", "ip_address", "device_descriptor", "photo_ref", "nfc_tag",
)


@dataclass(frozen=True)
class ParsedVerificationCode:
    is_valid: bool
    data: Optional[dict] = None
    error: Optional[str] = None


def verification_uri(bundle: IntegrityBundle) -> str:
    data = {
        "hash": bundle.hash,
        "signature": bundle.signature,
        "timestamp": bundle.timestamp,
        "version": bundle.version,
        "checksum": bundle.checksum,
    }
    encoded = base64.b64encode(json.dumps(data, separators=(",", ":")).encode("utf-8")).decode("ascii")
    return f"{VERIFICATION_URI_PREFIX}{encoded}"


def parse_verification_uri(uri: str) -> ParsedVerificationCode:
    raw = uri.strip()
    if raw.startswith(VERIFICATION_URI_PREFIX):
        raw = raw[len(VERIFICATION_URI_PREFIX):]
    try:
        data = json.loads(base64.b64decode(raw, validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return ParsedVerificationCode(False, error="Invalid or corrupted verification code")

    if not isinstance(data, dict) or not all(data.get(k) for k in ("hash", "signature", "timestamp", "version")):
        return ParsedVerificationCode(False, error="Incomplete verification code")

    if data.get("checksum") != checksum(data["hash"], data["signature"], data["timestamp"]):
        return ParsedVerificationCode(False, error="Invalid checksum")

    return ParsedVerificationCode(True, data=data)


def readable_code(bundle: IntegrityBundle) -> str:
    """Short code printed on receipts: HASH8-SIG8-HH:MM."""
    hh_mm = bundle.timestamp[11:16] if len(bundle.timestamp) >= 16 else ""
    return f"{bundle.hash[:8]}-{bundle.signature[:8]}-{hh_mm}".upper()


def render_qr_png(bundle: IntegrityBundle, *, box_size: int = 10, border: int = 2) -> bytes:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(verification_uri(bundle))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def compare_events(a: ClockEvent, b: ClockEvent) -> tuple[bool, list[str], float]:
    """(identical, differences, similarity percent) over the attributes that can be hashed."""
    differences = []
    for name in COMPARED_FIELDS:
        va, vb = getattr(a, name), getattr(b, name)
        if va != vb:
            differences.append(f'{name}: "{va}" vs "{vb}"')
    similarity = (len(COMPARED_FIELDS) - len(differences)) / len(COMPARED_FIELDS) * 100
    return not differences, differences, similarity
