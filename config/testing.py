from .config import db_config

SECRET_KEY = "test-secret"
DB_CONFIG = db_config()

HASH_ALGORITHM = "SHA256"
HASH_ENCODING = "hex"
TIMESTAMP_PRECISION = "milliseconds"
SIGNING_KEY = None
DUPLICATE_STRATEGY = "HYBRID"
REQUIRE_SECURE_CONTEXT = False
HISTORY_LOOKBACK_DAYS = 2

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
