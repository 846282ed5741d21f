"""
Weather normalization helpers.

The app never fetches weather itself: clients send what they received from
Open-Meteo, either already shaped as {"current": {...}, "daily": [...]} with
camelCase keys or as the raw Open-Meteo forecast payload. parse_weather()
accepts both and returns WeatherData, or None when nothing usable is there.

Functions:
- parse_weather(payload): WeatherData or None; missing fields degrade to
  partial data instead of failing
- weather_info(code) / is_rainy_weather(code): WMO code helpers
- remember_weather(location, weather) / cached_weather(location): last
  weather seen per location, kept for WEATHER_CACHE_TTL_SECONDS
"""

from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from cachetools import TTLCache

from ..models import CurrentWeather, DailyForecast, Location, WeatherData
from ..utils.dates import parse_date, parse_datetime
from ..utils.errors import log_debug


@dataclass(frozen=True)
class WeatherCodeInfo:
    icon: str
    description: str


# Open-Meteo WMO weather interpretation codes
# https://open-meteo.com/en/docs
WEATHER_CODES: Dict[int, WeatherCodeInfo] = {
    0: WeatherCodeInfo("☀️", "Clear sky"),
    1: WeatherCodeInfo("🌤️", "Mainly clear"),
    2: WeatherCodeInfo("⛅", "Partly cloudy"),
    3: WeatherCodeInfo("☁️", "Overcast"),
    45: WeatherCodeInfo("🌫️", "Fog"),
    48: WeatherCodeInfo("🌫️", "Depositing rime fog"),
    51: WeatherCodeInfo("🌦️", "Light drizzle"),
    53: WeatherCodeInfo("🌦️", "Moderate drizzle"),
    55: WeatherCodeInfo("🌧️", "Dense drizzle"),
    56: WeatherCodeInfo("🌧️", "Light freezing drizzle"),
    57: WeatherCodeInfo("🌧️", "Dense freezing drizzle"),
    61: WeatherCodeInfo("🌧️", "Slight rain"),
    63: WeatherCodeInfo("🌧️", "Moderate rain"),
    65: WeatherCodeInfo("🌧️", "Heavy rain"),
    66: WeatherCodeInfo("🌧️", "Light freezing rain"),
    67: WeatherCodeInfo("🌧️", "Heavy freezing rain"),
    71: WeatherCodeInfo("🌨️", "Slight snow fall"),
    73: WeatherCodeInfo("🌨️", "Moderate snow fall"),
    75: WeatherCodeInfo("❄️", "Heavy snow fall"),
    77: WeatherCodeInfo("🌨️", "Snow grains"),
    80: WeatherCodeInfo("🌦️", "Slight rain showers"),
    81: WeatherCodeInfo("🌧️", "Moderate rain showers"),
    82: WeatherCodeInfo("⛈️", "Violent rain showers"),
    85: WeatherCodeInfo("🌨️", "Slight snow showers"),
    86: WeatherCodeInfo("❄️", "Heavy snow showers"),
    95: WeatherCodeInfo("⛈️", "Thunderstorm"),
    96: WeatherCodeInfo("⛈️", "Thunderstorm with slight hail"),
    99: WeatherCodeInfo("⛈️", "Thunderstorm with heavy hail"),
}

UNKNOWN_WEATHER = WeatherCodeInfo("❓", "Unknown")


def weather_info(code: int) -> WeatherCodeInfo:
    return WEATHER_CODES.get(code, UNKNOWN_WEATHER)


def is_rainy_weather(code: int) -> bool:
    """Drizzle, rain, rain showers and thunderstorms."""
    return 51 <= code <= 67 or 80 <= code <= 82 or 95 <= code <= 99


# ============================================================================
# PARSING
# ============================================================================

def _num(value: Any, default: Optional[float] = None) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _first(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _parse_current(data: Any) -> Optional[CurrentWeather]:
    if not isinstance(data, dict):
        return None
    temperature = _num(_first(data, "temperature", "temperature_2m"))
    if temperature is None:
        return None
    return CurrentWeather(
        temperature=temperature,
        humidity=_num(_first(data, "humidity", "relative_humidity_2m"), 0.0),
        wind_speed=_num(_first(data, "windSpeed", "wind_speed", "wind_speed_10m"), 0.0),
        weather_code=int(_num(_first(data, "weatherCode", "weather_code"), 0)),
        uv_index=_num(_first(data, "uvIndex", "uv_index")),
    )


def _parse_day(data: Dict[str, Any]) -> Optional[DailyForecast]:
    try:
        day = parse_date(_first(data, "date", "time"))
    except ValueError:
        return None
    temp_min = _num(_first(data, "tempMin", "temp_min", "temperature_2m_min"))
    temp_max = _num(_first(data, "tempMax", "temp_max", "temperature_2m_max"))
    if day is None or temp_min is None or temp_max is None:
        return None

    def moment(*keys):
        try:
            return parse_datetime(_first(data, *keys))
        except ValueError:
            return None

    return DailyForecast(
        date=day,
        temp_min=temp_min,
        temp_max=temp_max,
        precipitation=_num(_first(data, "precipitation", "precipitation_sum"), 0.0),
        weather_code=int(_num(_first(data, "weatherCode", "weather_code"), 0)),
        uv_index_max=_num(_first(data, "uvIndexMax", "uv_index_max")),
        sunrise=moment("sunrise"),
        sunset=moment("sunset"),
    )


def _daily_rows(daily: Any) -> List[Dict[str, Any]]:
    """Normalize either a list of day dicts or Open-Meteo's column arrays."""
    if isinstance(daily, list):
        return [row for row in daily if isinstance(row, dict)]
    if isinstance(daily, dict) and isinstance(daily.get("time"), list):
        columns = {k: v for k, v in daily.items() if isinstance(v, list)}
        return [
            {key: values[i] if i < len(values) else None for key, values in columns.items()}
            for i in range(len(daily["time"]))
        ]
    return []


def parse_weather(payload: Any) -> Optional[WeatherData]:
    """
    Normalize a weather payload.

    Args:
        payload: App-shaped or raw Open-Meteo dict

    Returns:
        WeatherData, or None when there is no usable current snapshot

    Example:
        >>> parse_weather({"current": {"temperature": 21, "humidity": 60,
        ...                            "windSpeed": 10, "weatherCode": 1}})
        WeatherData(current=CurrentWeather(temperature=21.0, ...), daily=())
    """
    if not isinstance(payload, dict):
        return None
    current = _parse_current(payload.get("current"))
    if current is None:
        log_debug("Weather payload has no usable current snapshot")
        return None

    days = []
    for row in _daily_rows(payload.get("daily")):
        day = _parse_day(row)
        if day is None:
            # Keep the sequence contiguous: stop at the first unusable day
            break
        days.append(day)

    return WeatherData(current=current, daily=tuple(days))


# ============================================================================
# RECENT WEATHER CACHE
# ============================================================================

WEATHER_CACHE_TTL_SECONDS = 1800   # 30 minutes
WEATHER_CACHE_MAX_LOCATIONS = 256

_weather_cache: TTLCache = TTLCache(maxsize=WEATHER_CACHE_MAX_LOCATIONS, ttl=WEATHER_CACHE_TTL_SECONDS)
_weather_lock = threading.Lock()


def configure_weather_cache(ttl_seconds: int) -> None:
    """Recreate the cache with a new TTL (called from the app factory)."""
    global _weather_cache
    with _weather_lock:
        _weather_cache = TTLCache(maxsize=WEATHER_CACHE_MAX_LOCATIONS, ttl=ttl_seconds)


def _location_key(location: Location) -> Tuple[float, float]:
    # ~1 km resolution is plenty for weather
    return (round(location.lat, 2), round(location.lon, 2))


def remember_weather(location: Optional[Location], weather: Optional[WeatherData]) -> None:
    if location is None or weather is None:
        return
    with _weather_lock:
        _weather_cache[_location_key(location)] = weather


def cached_weather(location: Optional[Location]) -> Optional[WeatherData]:
    if location is None:
        return None
    with _weather_lock:
        return _weather_cache.get(_location_key(location))


def clear_weather_cache() -> None:
    """Clear the recent weather cache. Useful for testing."""
    with _weather_lock:
        _weather_cache.clear()
