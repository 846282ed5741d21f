"""
Shared constants used across the application.

This module contains values that must stay consistent between the scoring,
tip and scheduling services. Anything an operator may want to tune lives in
config.py instead.
"""

# Seasons (northern hemisphere month buckets, inverted for the south)
SEASON_SPRING = "spring"
SEASON_SUMMER = "summer"
SEASON_FALL = "fall"
SEASON_WINTER = "winter"
SEASONS = (SEASON_SPRING, SEASON_SUMMER, SEASON_FALL, SEASON_WINTER)

# Used when the user has not shared a location (Buenos Aires)
DEFAULT_LATITUDE = -34.6

# Care tip categories
TIP_CATEGORIES = (
    "seasonal",
    "weather",
    "care",
    "general",
    "plant_type",
    "pest",
    "fertilizer",
)

# Humidity preference categories
HUMIDITY_LOW = "low"
HUMIDITY_MEDIUM = "medium"
HUMIDITY_HIGH = "high"
HUMIDITY_LEVELS = (HUMIDITY_LOW, HUMIDITY_MEDIUM, HUMIDITY_HIGH)

# Tolerance defaults when neither an override nor a database entry exists
DEFAULT_TEMP_MIN = 10
DEFAULT_TEMP_MAX = 30
DEFAULT_HUMIDITY = HUMIDITY_MEDIUM

# Sensitivity thresholds
SUN_SENSITIVE_MAX_HOURS = 3
HEAT_SENSITIVE_MAX_TEMP = 28
COLD_SENSITIVE_MIN_TEMP = 10

# Health levels, best first
HEALTH_EXCELLENT = "excellent"
HEALTH_GOOD = "good"
HEALTH_WARNING = "warning"
HEALTH_DANGER = "danger"

HEALTH_THRESHOLDS = (
    (80, HEALTH_EXCELLENT),
    (60, HEALTH_GOOD),
    (35, HEALTH_WARNING),
)

# Health issue types and severities
ISSUE_OVERDUE_WATER = "overdue_water"
ISSUE_OVERDUE_SUN = "overdue_sun"
ISSUE_NO_CARE = "no_care"
ISSUE_EXTREME_WEATHER = "extreme_weather"

SEVERITY_HIGH = "high"
SEVERITY_MEDIUM = "medium"
SEVERITY_LOW = "low"

# Days a brand-new plant may go without any recorded care
NO_CARE_GRACE_DAYS = 3

# Sun window offsets (minutes)
SUNRISE_OFFSET_MINUTES = 30
SUNSET_OFFSET_MINUTES = 30
END_TIME_BUCKET_MINUTES = 15

# UV index thresholds for warnings
HIGH_UV_THRESHOLD = 8
MODERATE_UV_THRESHOLD = 5

# Wind speed (km/h) above which outdoor plants are at risk
STRONG_WIND_KMH = 40

# Persistence key for the seen-tips record
SEEN_TIPS_KEY = "daily-tips-seen"

# Weekday labels, index 0 = Sunday
WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
