import os

from .config import Config, db_config

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
DB_CONFIG = db_config()

HASH_ALGORITHM = Config.HASH_ALGORITHM
HASH_ENCODING = Config.HASH_ENCODING
TIMESTAMP_PRECISION = Config.TIMESTAMP_PRECISION
SIGNING_KEY = Config.SIGNING_KEY
DUPLICATE_STRATEGY = Config.DUPLICATE_STRATEGY
# Local development usually runs over plain HTTP.
REQUIRE_SECURE_CONTEXT = False
HISTORY_LOOKBACK_DAYS = Config.HISTORY_LOOKBACK_DAYS

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, the app applies schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
