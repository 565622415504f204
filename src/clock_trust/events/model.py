from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import EventType


@dataclass(frozen=True)
class IntegrityBundle:
    """Tamper-evidence package persisted verbatim next to a clock event."""

    hash: str
    salt: str
    signature: str
    timestamp: str
    version: str
    algorithm: str
    included_fields: Sequence[str]
    checksum: str

    def to_dict(self) -> dict:
        return {
            "hash": self.hash,
            "salt": self.salt,
            "signature": self.signature,
            "timestamp": self.timestamp,
            "version": self.version,
            "algorithm": self.algorithm,
            "included_fields": list(self.included_fields),
            "checksum": self.checksum,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "IntegrityBundle":
        included = data.get("included_fields") or []
        if isinstance(included, str):
            included = [f for f in included.split(",") if f]
        return cls(
            hash=str(data["hash"]),
            salt=str(data["salt"]),
            signature=str(data["signature"]),
            timestamp=str(data["timestamp"]),
            version=str(data["version"]),
            algorithm=str(data.get("algorithm") or "SHA256"),
            included_fields=tuple(included),
            checksum=str(data["checksum"]),
        )


@dataclass(frozen=True)
class ClockEvent:
    """One attendance action (entry, exit, break start/end).

    Frozen: once an integrity bundle is attached the hashed fields must not change,
    so updates go through `with_bundle` / `dataclasses.replace`, producing a new value.
    """

    employee_id: str
    company_id: str
    user_id: str
    type: EventType
    timestamp: datetime
    id: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    ip_address: Optional[str] = None
    device_descriptor: Optional[str] = None
    photo_ref: Optional[str] = None
    nfc_tag: Optional[str] = None
    integrity_bundle: Optional[IntegrityBundle] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.type, EventType):
            object.__setattr__(self, "type", EventType(self.type))

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def with_bundle(self, bundle: IntegrityBundle) -> "ClockEvent":
        return replace(self, integrity_bundle=bundle)

    def with_id(self, event_id: str) -> "ClockEvent":
        return replace(self, id=event_id)
