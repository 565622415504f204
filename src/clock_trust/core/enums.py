from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    """Kind of attendance action carried by a clock event."""

    ENTRY = "ENTRY"
    EXIT = "EXIT"
    BREAK_START = "BREAK_START"
    BREAK_END = "BREAK_END"


class DeviceClass(str, Enum):
    MOBILE = "MOBILE"
    DESKTOP = "DESKTOP"
    TABLET = "TABLET"
    UNKNOWN = "UNKNOWN"


class DuplicateType(str, Enum):
    """Which check drove a duplicate verdict."""

    NONE = "NONE"
    TIME_WINDOW = "TIME_WINDOW"
    LOCATION = "LOCATION"
    DEVICE = "DEVICE"
    IP = "IP"
    SAME_TYPE = "SAME_TYPE"
    MAX_DAILY = "MAX_DAILY"
    BLOCKED_TYPE = "BLOCKED_TYPE"


class DetectionStrategy(str, Enum):
    TIME_WINDOW = "TIME_WINDOW"
    LOCATION_BASED = "LOCATION_BASED"
    DEVICE_BASED = "DEVICE_BASED"
    HYBRID = "HYBRID"


class ScheduleErrorCode(str, Enum):
    NOT_WORK_DAY = "NOT_WORK_DAY"
    MISSING_SCHEDULE = "MISSING_SCHEDULE"
    EARLY_ENTRY_NOT_ALLOWED = "EARLY_ENTRY_NOT_ALLOWED"
    LATE_EXIT_NOT_ALLOWED = "LATE_EXIT_NOT_ALLOWED"


class HashAlgorithm(str, Enum):
    SHA256 = "SHA256"
    SHA512 = "SHA512"
    MD5 = "MD5"


class HashEncoding(str, Enum):
    HEX = "hex"
    BASE64 = "base64"
    BASE64URL = "base64url"


class TimestampPrecision(str, Enum):
    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"


class SubmissionStatus(str, Enum):
    """Outcome of a pipeline run, mapped to HTTP-like status codes by callers."""

    ACCEPTED = "ACCEPTED"
    REJECTED_DUPLICATE = "REJECTED_DUPLICATE"
    REJECTED_INVALID = "REJECTED_INVALID"
