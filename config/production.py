import os

from .config import Config, db_config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = db_config()

HASH_ALGORITHM = Config.HASH_ALGORITHM
HASH_ENCODING = Config.HASH_ENCODING
TIMESTAMP_PRECISION = Config.TIMESTAMP_PRECISION
SIGNING_KEY = Config.SIGNING_KEY
DUPLICATE_STRATEGY = Config.DUPLICATE_STRATEGY
REQUIRE_SECURE_CONTEXT = bool(int(os.getenv("REQUIRE_SECURE_CONTEXT", "1")))
HISTORY_LOOKBACK_DAYS = Config.HISTORY_LOOKBACK_DAYS

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

AUTO_INIT_DB = Config.AUTO_INIT_DB
