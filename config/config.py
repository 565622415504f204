import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "change-me"

    # Database
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "clock_trust")

    # Integrity bundle
    HASH_ALGORITHM = os.environ.get("HASH_ALGORITHM", "SHA256")
    HASH_ENCODING = os.environ.get("HASH_ENCODING", "hex")
    TIMESTAMP_PRECISION = os.environ.get("TIMESTAMP_PRECISION", "milliseconds")
    SIGNING_KEY = os.environ.get("SIGNING_KEY") or None

    # Validation policy
    DUPLICATE_STRATEGY = os.environ.get("DUPLICATE_STRATEGY", "HYBRID")
    REQUIRE_SECURE_CONTEXT = bool(int(os.environ.get("REQUIRE_SECURE_CONTEXT", "0")))
    HISTORY_LOOKBACK_DAYS = int(os.environ.get("HISTORY_LOOKBACK_DAYS", "2"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))


def db_config() -> dict:
    return {
        "host": Config.DB_HOST,
        "port": Config.DB_PORT,
        "user": Config.DB_USER,
        "password": Config.DB_PASSWORD,
        "database": Config.DB_NAME,
    }
