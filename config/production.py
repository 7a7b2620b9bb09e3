import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "site_ledger"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

SALARY_LOOKBACK_MONTHS = int(os.getenv("SALARY_LOOKBACK_MONTHS", "12"))
RECOVERY_WINDOW_MONTHS = int(os.getenv("RECOVERY_WINDOW_MONTHS", "12"))
FETCH_LIMIT = int(os.getenv("FETCH_LIMIT", "1000"))
WEEK_START = int(os.getenv("WEEK_START", "6"))
