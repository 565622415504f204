"""Constants and defaults.

Note: Keep policy values here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6371000

# Device trust
VM_CONFIDENCE_PENALTY = 0.3
EMULATOR_CONFIDENCE_PENALTY = 0.3
INSECURE_CONFIDENCE_PENALTY = 0.1
WARNING_CONFIDENCE_PENALTY = 0.1
FINGERPRINT_LENGTH = 32

# Schedule
BREAK_TOLERANCE_MINUTES = 15
DEFAULT_TOLERANCE_MINUTES = 15
DEFAULT_GRACE_MINUTES = 5

# Duplicates
DEFAULT_TIME_WINDOW_MINUTES = 5
DEFAULT_LOCATION_THRESHOLD_METERS = 100
DEFAULT_MAX_RECORDS_PER_DAY = 8
DUPLICATE_THRESHOLD = 0.5
HIGH_PROBABILITY_THRESHOLD = 0.7

# Integrity
INTEGRITY_VERSION = "1.0"
DEFAULT_SALT_LENGTH = 32
CHECKSUM_LENGTH = 8
MAX_TIMESTAMP_SKEW_SECONDS = 60
VERIFICATION_URI_PREFIX = "clocktrust://verify/"

# Pipeline
DEFAULT_HISTORY_LOOKBACK_DAYS = 2
