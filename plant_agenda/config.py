"""
Centralized configuration for all environments.

Select a config by setting:
  APP_CONFIG=plant_agenda.config.DevConfig      # local dev
  APP_CONFIG=plant_agenda.config.ProdConfig     # production (default if unset)
  APP_CONFIG=plant_agenda.config.TestConfig     # pytest

Notes:
- SECRET_KEY is read from FLASK_SECRET_KEY
- Rate limiting uses Flask-Limiter v3 keys (RATELIMIT_*).
- Scoring and scheduling thresholds are fixed and live in constants.py.
"""

from __future__ import annotations
import os
import secrets

from .constants import DEFAULT_LATITUDE, SEEN_TIPS_KEY


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


class BaseConfig:
    # Secrets & basics; a random key keeps dev/test from running with an empty string
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY") or secrets.token_hex(32)
    DEBUG = False
    TESTING = False

    # Supabase (key/value state table)
    SUPABASE_URL = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
    STATE_TABLE = os.getenv("STATE_TABLE", "app_state")
    SEEN_TIPS_KEY = os.getenv("SEEN_TIPS_KEY", SEEN_TIPS_KEY)

    # Location fallback when the client sends no coordinates
    DEFAULT_LATITUDE = float(os.getenv("DEFAULT_LATITUDE", str(DEFAULT_LATITUDE)))

    # Entitlements
    FREE_DAILY_TIPS = int(os.getenv("FREE_DAILY_TIPS", "1"))  # Tips per day outside premium/trial
    FREE_PLANT_LIMIT = int(os.getenv("FREE_PLANT_LIMIT", "5"))  # Maximum plants for free users
    TRIAL_DAYS = int(os.getenv("TRIAL_DAYS", "7"))

    # Seen-tip trackers kept in memory, one per device id
    TIP_TRACKER_CACHE_SIZE = int(os.getenv("TIP_TRACKER_CACHE_SIZE", "1024"))

    # Notifications
    NOTIFICATIONS_ENABLED = _env_flag("NOTIFICATIONS_ENABLED", "true")
    MORNING_REMINDER_TIME = os.getenv("MORNING_REMINDER_TIME", "08:00")  # HH:MM local time

    # Weather received from clients is reused for this long per location
    WEATHER_CACHE_TTL_SECONDS = int(os.getenv("WEATHER_CACHE_TTL_SECONDS", "1800"))

    # Flask-Limiter v3
    RATELIMIT_ENABLED = _env_flag("RATELIMIT_ENABLED", "true")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "60 per minute; 2000 per day")
    RATELIMIT_TIPS = os.getenv("RATELIMIT_TIPS", "20 per minute")

    # Misc
    JSON_SORT_KEYS = False


class ProdConfig(BaseConfig):
    """Production settings (selected by default if APP_CONFIG is unset)."""
    pass


class DevConfig(BaseConfig):
    """Developer-friendly settings."""
    ENV = "development"
    DEBUG = True
    # Relaxed rate limits for local testing against the mobile client
    RATELIMIT_DEFAULT = "600 per minute"


class TestConfig(BaseConfig):
    """CI/pytest settings."""
    TESTING = True
    DEBUG = True
    # Usually disable the limiter in tests to avoid flakiness
    RATELIMIT_ENABLED = False
    # Never touch a real database or start background threads from tests
    SUPABASE_URL = ""
    SUPABASE_ANON_KEY = ""
    NOTIFICATIONS_ENABLED = False
