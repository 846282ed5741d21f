"""
Input validation and normalization.

Trims and bounds free-text fields, filters suspicious characters while allowing
natural punctuation, and normalizes select values coming from the client.
"""

from __future__ import annotations
import re
from typing import Any

from ..constants import HUMIDITY_LEVELS

# Allowlist regex: we REMOVE anything NOT in this set.
# Unicode letters are kept so plant names like "Jazmín" survive.
_SAFE_CHARS_PATTERN = re.compile(r"[^\w\s\-\.,'()/&]+", re.UNICODE)

MAX_PLANT_NAME_LEN = 80

# Older app builds stored humidity preference in Spanish
_HUMIDITY_ALIASES = {
    "baja": "low",
    "media": "medium",
    "alta": "high",
}


def sanitize_name(text: Any, max_len: int = MAX_PLANT_NAME_LEN) -> str:
    """
    Normalizes plant names:
    - strip whitespace
    - bound length
    - remove disallowed characters via allowlist
    - collapse double spaces
    """
    t = str(text or "").strip()
    if not t:
        return ""
    t = t[:max_len]
    t = _SAFE_CHARS_PATTERN.sub("", t)
    t = re.sub(r"\s{2,}", " ", t)
    return t.strip()


def normalize_humidity(value: Any) -> str | None:
    """Coerce a humidity preference to low/medium/high; None when unset.

    Raises:
        ValueError: for values that are neither a known level nor an alias
    """
    if value is None or value == "":
        return None
    v = str(value).strip().lower()
    v = _HUMIDITY_ALIASES.get(v, v)
    if v not in HUMIDITY_LEVELS:
        raise ValueError(f"Unknown humidity preference: {value!r}")
    return v


def parse_time_of_day(value: str | None, default: tuple[int, int] = (8, 0)) -> tuple[int, int]:
    """Parse "HH:MM" into (hours, minutes), falling back to default on bad input."""
    if not value:
        return default
    try:
        hours_str, minutes_str = value.strip().split(":", 1)
        hours, minutes = int(hours_str), int(minutes_str)
    except ValueError:
        return default
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return default
    return hours, minutes


_DEVICE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def normalize_device_id(value: Any) -> str:
    """Validate the opaque per-install id the client sends.

    Raises:
        ValueError: when the id is missing or not 1-64 of [A-Za-z0-9_-]
    """
    v = str(value or "").strip()
    if not _DEVICE_ID_PATTERN.match(v):
        raise ValueError("deviceId must be 1-64 letters, digits, '-' or '_'")
    return v
