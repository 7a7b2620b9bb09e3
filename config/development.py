import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "site_ledger"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Apply database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS).
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Ledger knobs
SALARY_LOOKBACK_MONTHS = int(os.getenv("SALARY_LOOKBACK_MONTHS", "12"))
RECOVERY_WINDOW_MONTHS = int(os.getenv("RECOVERY_WINDOW_MONTHS", "12"))
FETCH_LIMIT = int(os.getenv("FETCH_LIMIT", "1000"))
# calendar weekday number; 6 = Sunday
WEEK_START = int(os.getenv("WEEK_START", "6"))
