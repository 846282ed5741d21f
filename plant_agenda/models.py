"""
Domain records shared by the services.

Plants, weather and catalog entries arrive as JSON from the mobile client
(camelCase keys). Each record exposes from_dict() to normalize that payload
and to_dict() for JSON responses. Records are immutable; services build new
values instead of mutating them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple

from .constants import HUMIDITY_LEVELS, TIP_CATEGORIES
from .utils.dates import format_date, parse_date
from .utils.validation import normalize_humidity, sanitize_name


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key (camelCase or snake_case spelling)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _weekday_set(values, field_name: str) -> FrozenSet[int]:
    days = set()
    for value in values or ():
        day = int(value)
        if day < 0 or day > 6:
            raise ValueError(f"{field_name} must only contain weekday indices 0-6, got {value!r}")
        days.add(day)
    return frozenset(days)


def _optional_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


# ============================================================================
# PLANTS AND CATALOGS
# ============================================================================

@dataclass(frozen=True)
class Plant:
    id: str
    name: str
    type_id: str
    watering_interval_days: int
    sun_hours_required: float
    icon: str = "🌱"
    sun_days: FrozenSet[int] = frozenset()
    outdoor_days: FrozenSet[int] = frozenset()
    last_watered_date: Optional[date] = None
    sun_done_date: Optional[date] = None
    outdoor_done_date: Optional[date] = None
    min_tolerable_temp: Optional[float] = None
    max_tolerable_temp: Optional[float] = None
    humidity_preference: Optional[str] = None
    database_id: Optional[str] = None
    created_date: Optional[date] = None

    def __post_init__(self):
        if self.watering_interval_days <= 0:
            raise ValueError("watering_interval_days must be greater than 0")
        if self.humidity_preference is not None and self.humidity_preference not in HUMIDITY_LEVELS:
            raise ValueError(f"Unknown humidity preference: {self.humidity_preference!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Plant":
        """
        Build a Plant from client JSON.

        Accepts both the app's camelCase keys (waterEvery, sunHours, lastWatered,
        tempMin...) and snake_case field names.

        Raises:
            ValueError: missing id/name, non-positive interval or invalid weekday
        """
        plant_id = _pick(data, "id")
        name = sanitize_name(_pick(data, "name", default=""))
        if not plant_id or not name:
            raise ValueError("Plant requires an id and a name")

        return cls(
            id=str(plant_id),
            name=name,
            type_id=str(_pick(data, "typeId", "type_id", default="otra")),
            icon=_pick(data, "icon", default="🌱"),
            watering_interval_days=int(_pick(
                data, "wateringIntervalDays", "waterEvery", "watering_interval_days", default=0
            )),
            sun_hours_required=float(_pick(
                data, "sunHoursRequired", "sunHours", "sun_hours_required", default=0
            )),
            sun_days=_weekday_set(_pick(data, "sunDays", "sun_days"), "sunDays"),
            outdoor_days=_weekday_set(_pick(data, "outdoorDays", "outdoor_days"), "outdoorDays"),
            last_watered_date=parse_date(_pick(data, "lastWateredDate", "lastWatered", "last_watered_date")),
            sun_done_date=parse_date(_pick(data, "sunDoneDate", "sun_done_date")),
            outdoor_done_date=parse_date(_pick(data, "outdoorDoneDate", "outdoor_done_date")),
            min_tolerable_temp=_optional_float(_pick(data, "minTolerableTemp", "tempMin", "min_tolerable_temp")),
            max_tolerable_temp=_optional_float(_pick(data, "maxTolerableTemp", "tempMax", "max_tolerable_temp")),
            humidity_preference=normalize_humidity(_pick(data, "humidityPreference", "humidity", "humidity_preference")),
            database_id=_pick(data, "databaseId", "database_id"),
            created_date=parse_date(_pick(data, "createdDate", "createdAt", "created_date")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "typeId": self.type_id,
            "wateringIntervalDays": self.watering_interval_days,
            "sunHoursRequired": self.sun_hours_required,
            "sunDays": sorted(self.sun_days),
            "outdoorDays": sorted(self.outdoor_days),
            "lastWateredDate": format_date(self.last_watered_date),
            "sunDoneDate": format_date(self.sun_done_date),
            "outdoorDoneDate": format_date(self.outdoor_done_date),
            "minTolerableTemp": self.min_tolerable_temp,
            "maxTolerableTemp": self.max_tolerable_temp,
            "humidityPreference": self.humidity_preference,
            "databaseId": self.database_id,
        }


@dataclass(frozen=True)
class PlantType:
    id: str
    name: str
    icon: str
    watering_interval_days: int
    sun_hours: float
    tip: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlantType":
        return cls(
            id=data["id"],
            name=data["name"],
            icon=data["icon"],
            watering_interval_days=int(data["waterDays"]),
            sun_hours=float(data["sunHours"]),
            tip=data.get("tip", ""),
        )


@dataclass(frozen=True)
class PlantDatabaseEntry:
    id: str
    name: str
    scientific_name: str
    icon: str
    watering_interval_days: int
    sun_hours: float
    temp_min: float
    temp_max: float
    humidity: str
    category: str = ""
    outdoor: bool = False
    tip: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlantDatabaseEntry":
        return cls(
            id=data["id"],
            name=data["name"],
            scientific_name=data["scientificName"],
            icon=data["icon"],
            watering_interval_days=int(data["waterDays"]),
            sun_hours=float(data["sunHours"]),
            temp_min=float(data["tempMin"]),
            temp_max=float(data["tempMax"]),
            humidity=data["humidity"],
            category=data.get("category", ""),
            outdoor=bool(data.get("outdoor", False)),
            tip=data.get("tip", ""),
        )


@dataclass(frozen=True)
class Location:
    lat: float
    lon: float
    name: str = ""
    country: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Location"]:
        if not data:
            return None
        try:
            return cls(
                lat=float(data["lat"]),
                lon=float(data["lon"]),
                name=str(data.get("name", "")),
                country=str(data.get("country", "")),
            )
        except (KeyError, TypeError, ValueError):
            return None


# ============================================================================
# WEATHER
# ============================================================================

@dataclass(frozen=True)
class CurrentWeather:
    temperature: float
    humidity: float
    wind_speed: float
    weather_code: int
    uv_index: Optional[float] = None


@dataclass(frozen=True)
class DailyForecast:
    date: date
    temp_min: float
    temp_max: float
    precipitation: float = 0.0
    weather_code: int = 0
    uv_index_max: Optional[float] = None
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None


@dataclass(frozen=True)
class WeatherData:
    current: CurrentWeather
    daily: Tuple[DailyForecast, ...] = ()

    def day(self, index: int) -> Optional[DailyForecast]:
        """Forecast for today + index, or None when the sequence is shorter."""
        if 0 <= index < len(self.daily):
            return self.daily[index]
        return None

    @property
    def today(self) -> Optional[DailyForecast]:
        return self.day(0)

    @property
    def tomorrow(self) -> Optional[DailyForecast]:
        return self.day(1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": {
                "temperature": self.current.temperature,
                "humidity": self.current.humidity,
                "windSpeed": self.current.wind_speed,
                "weatherCode": self.current.weather_code,
                "uvIndex": self.current.uv_index,
            },
            "daily": [
                {
                    "date": d.date.isoformat(),
                    "tempMin": d.temp_min,
                    "tempMax": d.temp_max,
                    "precipitation": d.precipitation,
                    "weatherCode": d.weather_code,
                    "uvIndexMax": d.uv_index_max,
                    "sunrise": d.sunrise.isoformat() if d.sunrise else None,
                    "sunset": d.sunset.isoformat() if d.sunset else None,
                }
                for d in self.daily
            ],
        }


# ============================================================================
# CARE TIPS
# ============================================================================

@dataclass(frozen=True)
class TipContext:
    season: str
    weather: Optional[WeatherData]
    plants: Tuple[Plant, ...]
    location: Optional[Location]
    today: date


@dataclass(frozen=True)
class CareTip:
    id: str
    category: str
    condition: Callable[[TipContext], bool] = field(compare=False, repr=False)
    icon: str
    title: str
    message: str
    priority: int

    def __post_init__(self):
        if self.category not in TIP_CATEGORIES:
            raise ValueError(f"Unknown tip category: {self.category!r}")
        if not 1 <= self.priority <= 10:
            raise ValueError(f"Tip priority must be 1-10, got {self.priority}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "icon": self.icon,
            "title": self.title,
            "message": self.message,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class SeenTipsState:
    date: date
    tip_ids: Tuple[str, ...] = ()

    def with_tip(self, tip_id: str) -> "SeenTipsState":
        if tip_id in self.tip_ids:
            return self
        return SeenTipsState(date=self.date, tip_ids=self.tip_ids + (tip_id,))

    def to_record(self) -> Dict[str, Any]:
        """Persistence shape: {"date": "YYYY-MM-DD", "tipIds": [...]}"""
        return {"date": self.date.isoformat(), "tipIds": list(self.tip_ids)}


# ============================================================================
# HEALTH
# ============================================================================

@dataclass(frozen=True)
class HealthIssue:
    type: str
    severity: str
    message: str
    penalty: int = 0
    days_since: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"type": self.type, "severity": self.severity, "message": self.message}
        if self.days_since is not None:
            data["daysSince"] = self.days_since
        return data


@dataclass(frozen=True)
class PlantHealthStatus:
    plant_id: str
    score: int
    level: str
    issues: Tuple[HealthIssue, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "plantId": self.plant_id,
            "score": self.score,
            "level": self.level,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass(frozen=True)
class GardenHealth:
    average_score: int
    level: str
    statuses: Tuple[PlantHealthStatus, ...]
    plants_needing_attention: Tuple[PlantHealthStatus, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "averageScore": self.average_score,
            "level": self.level,
            "statuses": [s.to_dict() for s in self.statuses],
            "plantsNeedingAttention": [s.to_dict() for s in self.plants_needing_attention],
        }


def plants_from_payload(items: Optional[List[Dict[str, Any]]]) -> Tuple[Plant, ...]:
    """Parse a list of plant dicts, raising ValueError on the first invalid one."""
    return tuple(Plant.from_dict(item) for item in (items or []))
