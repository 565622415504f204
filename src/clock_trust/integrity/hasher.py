from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_naive_utc
from ..core.constants import CHECKSUM_LENGTH, INTEGRITY_VERSION, MAX_TIMESTAMP_SKEW_SECONDS
from ..core.enums import HashAlgorithm, HashEncoding, TimestampPrecision
from ..core.exceptions import IntegrityError
from ..events.model import ClockEvent, IntegrityBundle
from .model import DEFAULT_HASH_CONFIG, HashConfig, VerificationResult

_logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("type", "user_id", "employee_id", "company_id", "timestamp")
OPTIONAL_FIELDS = ("location", "device_descriptor", "ip_address", "photo_ref", "nfc_tag")

_DIGESTS = {
    HashAlgorithm.SHA256: hashlib.sha256,
    HashAlgorithm.SHA512: hashlib.sha512,
    HashAlgorithm.MD5: hashlib.md5,
}


def format_timestamp(value: datetime, precision: TimestampPrecision) -> str:
    iso = to_naive_utc(value).isoformat(timespec="milliseconds")
    if precision == TimestampPrecision.MINUTES:
        return iso[:16]
    if precision == TimestampPrecision.SECONDS:
        return iso[:19]
    return iso


def encode_digest(digest: bytes, encoding: HashEncoding) -> str:
    if encoding == HashEncoding.BASE64:
        return base64.b64encode(digest).decode("ascii")
    if encoding == HashEncoding.BASE64URL:
        return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
    return digest.hex()


def checksum(hash_value: str, signature: str, timestamp: str) -> str:
    data = f"{hash_value}|{signature}|{timestamp}".encode("utf-8")
    return hashlib.md5(data).hexdigest()[:CHECKSUM_LENGTH]


def sign(hash_value: str, salt: str, timestamp: str, *, signing_key: Optional[str] = None) -> str:
    message = f"{hash_value}|{salt}|{timestamp}".encode("utf-8")
    if signing_key:
        return hmac.new(signing_key.encode("utf-8"), message, hashlib.sha256).hexdigest()
    return hashlib.sha256(message).hexdigest()


def _optional_segments(event: ClockEvent, config: HashConfig) -> list[tuple[str, str]]:
    segments: list[tuple[str, str]] = []
    if config.include_location and event.has_location:
        segments.append(("location", f"{event.latitude:.6f}|{event.longitude:.6f}"))
    if config.include_device_info and event.device_descriptor:
        segments.append(("device_descriptor", event.device_descriptor))
    if config.include_ip and event.ip_address:
        segments.append(("ip_address", event.ip_address))
    if config.include_photo and event.photo_ref:
        segments.append(("photo_ref", event.photo_ref))
    if config.include_nfc and event.nfc_tag:
        segments.append(("nfc_tag", event.nfc_tag))
    return segments


class IntegrityHasher:
    """Seals accepted clock events and re-verifies them at audit time.

    Both operations are pure over their inputs; the only randomness is the
    salt, which callers may pass in for reproducible seals.
    """

    def seal(self, event: ClockEvent, config: HashConfig = DEFAULT_HASH_CONFIG, *,
             salt: Optional[str] = None) -> IntegrityBundle:
        salt = salt if salt is not None else secrets.token_hex(config.salt_length)
        timestamp = format_timestamp(event.timestamp, TimestampPrecision(config.timestamp_precision))

        parts = [event.type.value, event.user_id, event.employee_id, event.company_id, timestamp]
        included = list(REQUIRED_FIELDS)
        for name, value in _optional_segments(event, config):
            parts.append(value)
            included.append(name)
        parts.append(salt)

        digest = _DIGESTS[HashAlgorithm(config.algorithm)]("|".join(parts).encode("utf-8")).digest()
        hash_value = encode_digest(digest, HashEncoding(config.encoding))
        signature = sign(hash_value, salt, timestamp, signing_key=config.signing_key)

        return IntegrityBundle(
            hash=hash_value,
            salt=salt,
            signature=signature,
            timestamp=timestamp,
            version=INTEGRITY_VERSION,
            algorithm=HashAlgorithm(config.algorithm).value,
            included_fields=tuple(included),
            checksum=checksum(hash_value, signature, timestamp),
        )

    def verify(self, event: ClockEvent, bundle: IntegrityBundle,
               config: HashConfig = DEFAULT_HASH_CONFIG) -> VerificationResult:
        result = VerificationResult()
        recomputed = self.seal(event, config, salt=bundle.salt)

        result.hash_match = hmac.compare_digest(recomputed.hash, bundle.hash)
        if not result.hash_match:
            result.errors.append("Hash mismatch - event data may have been altered")
            result.integrity = False

        expected_signature = sign(bundle.hash, bundle.salt, bundle.timestamp, signing_key=config.signing_key)
        result.signature_valid = hmac.compare_digest(expected_signature, bundle.signature)
        if not result.signature_valid:
            result.errors.append("Invalid signature - bundle may have been forged")
            result.authenticity = False

        result.checksum_valid = hmac.compare_digest(
            checksum(bundle.hash, bundle.signature, bundle.timestamp), bundle.checksum
        )
        if not result.checksum_valid:
            result.errors.append("Invalid checksum - stored bundle may be corrupted")
            result.integrity = False

        result.timestamp_ok = self._timestamp_within_skew(event, bundle)
        if not result.timestamp_ok:
            result.warnings.append("Significant difference between event and sealed timestamp")

        if bundle.version != INTEGRITY_VERSION:
            result.warnings.append(f"Bundle version {bundle.version} is not the current version")

        self._check_drift(event, bundle, config, recomputed, result)

        result.is_valid = result.hash_match and result.signature_valid and result.checksum_valid
        if not result.is_valid:
            _logger.warning("Integrity verification failed for event %s: %s", event.id, "; ".join(result.errors))
        return result

    def require_valid(self, event: ClockEvent, bundle: IntegrityBundle,
                      config: HashConfig = DEFAULT_HASH_CONFIG) -> VerificationResult:
        result = self.verify(event, bundle, config)
        if not result.is_valid:
            raise IntegrityError("; ".join(result.errors))
        return result

    @staticmethod
    def _timestamp_within_skew(event: ClockEvent, bundle: IntegrityBundle) -> bool:
        try:
            sealed = datetime.fromisoformat(bundle.timestamp.rstrip("Z"))
        except ValueError:
            return False
        skew = abs((to_naive_utc(event.timestamp) - sealed).total_seconds())
        return skew <= MAX_TIMESTAMP_SKEW_SECONDS

    @staticmethod
    def _check_drift(event: ClockEvent, bundle: IntegrityBundle, config: HashConfig,
                     recomputed: IntegrityBundle, result: VerificationResult) -> None:
        if bundle.algorithm and bundle.algorithm != recomputed.algorithm:
            result.config_drift = True
            result.warnings.append(
                f"Bundle sealed with {bundle.algorithm} but verified with {recomputed.algorithm}"
            )

        sealed = set(bundle.included_fields)
        expected = set(recomputed.included_fields)
        missing = [f for f in OPTIONAL_FIELDS if f in expected and f not in sealed]
        extra = [f for f in OPTIONAL_FIELDS if f in sealed and f not in expected]
        if missing:
            result.config_drift = True
            result.warnings.append(f"Fields not included in the sealed hash: {', '.join(missing)}")
        if extra:
            result.config_drift = True
            result.warnings.append(f"Sealed fields excluded by the current config: {', '.join(extra)}")

        if result.config_drift:
            _logger.warning(
                "Integrity config drift for event %s: sealed=%s expected=%s algorithm=%s/%s",
                event.id, sorted(sealed), sorted(expected), bundle.algorithm, recomputed.algorithm,
            )
