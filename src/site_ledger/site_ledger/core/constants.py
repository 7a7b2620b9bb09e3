"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

HOURS_PER_MAN_DAY = 8

# Legacy rows store either man-days or raw hours in labor_hours with no type tag.
# Values up to this bound are read as man-days. Kept for compatibility only.
LEGACY_MAN_DAY_THRESHOLD = 3

DEFAULT_SALARY_LOOKBACK_MONTHS = 12
DEFAULT_RECOVERY_WINDOW_MONTHS = 12
DEFAULT_FETCH_LIMIT = 1000
DEFAULT_RECOVERED_HOURS = 8

SALARY_HISTORY_SHORT_MONTHS = 3
YEAR_MONTH_OPTION_COUNT = 12
YEAR_MONTH_OPTIONS_BEFORE = 5

LABOR_STEP = 0.5
LABOR_MIN = 0.5
LABOR_MAX = 3.0

ALL_SITES = "all"
ALL_SITES_LABEL = "전체 현장"
UNASSIGNED_SITE_NAME = "현장 미지정"
UNASSIGNED_SITE_SHORT = "미지"
