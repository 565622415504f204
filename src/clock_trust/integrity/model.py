from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..core.constants import DEFAULT_SALT_LENGTH
from ..core.enums import HashAlgorithm, HashEncoding, TimestampPrecision


@dataclass(frozen=True)
class HashConfig:
    """What goes into an integrity bundle and how it is digested.

    Verification must run with the same inclusion flags used at seal time.
    """

    algorithm: HashAlgorithm = HashAlgorithm.SHA256
    encoding: HashEncoding = HashEncoding.HEX
    timestamp_precision: TimestampPrecision = TimestampPrecision.MILLISECONDS
    salt_length: int = DEFAULT_SALT_LENGTH
    include_location: bool = True
    include_device_info: bool = True
    include_ip: bool = True
    include_photo: bool = True
    include_nfc: bool = True
    # When set, signatures are HMAC-SHA256 keyed with it instead of a bare SHA-256.
    signing_key: Optional[str] = field(default=None, repr=False)


DEFAULT_HASH_CONFIG = HashConfig()


@dataclass
class VerificationResult:
    is_valid: bool = True
    integrity: bool = True
    authenticity: bool = True
    timestamp_ok: bool = True
    hash_match: bool = True
    signature_valid: bool = True
    checksum_valid: bool = True
    config_drift: bool = False
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def summary_lines(self) -> List[str]:
        lines = [
            f"Status: {'VALID' if self.is_valid else 'INVALID'}",
            f"Integrity: {'OK' if self.integrity else 'COMPROMISED'}",
            f"Authenticity: {'OK' if self.authenticity else 'COMPROMISED'}",
            f"Timestamp: {'OK' if self.timestamp_ok else 'SKEWED'}",
        ]
        lines.extend(f"WARNING: {w}" for w in self.warnings)
        lines.extend(f"ERROR: {e}" for e in self.errors)
        return lines
