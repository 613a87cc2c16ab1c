import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hours_ledger"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEFAULT_TARGET_HOURS = os.getenv("DEFAULT_TARGET_HOURS", "200")
# Ledger whose approved hours count toward completion, bonus and progress.
COMPLETION_SOURCE = os.getenv("COMPLETION_SOURCE", "self")
