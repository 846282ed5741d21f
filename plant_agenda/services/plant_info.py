"""
Plant tolerance resolution.

Combines a user's plant with the built-in plant database to get the
temperature range and humidity preference used by health scoring, alerts
and notification planning. Per field, the first defined value wins:
plant override, then matched database entry, then the global default.
"""

from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from cachetools import LRUCache

from ..constants import (
    COLD_SENSITIVE_MIN_TEMP,
    DEFAULT_HUMIDITY,
    DEFAULT_TEMP_MAX,
    DEFAULT_TEMP_MIN,
    HEAT_SENSITIVE_MAX_TEMP,
    HUMIDITY_HIGH,
    SUN_SENSITIVE_MAX_HOURS,
)
from ..models import Plant, PlantDatabaseEntry
from .catalog import plant_database


@dataclass(frozen=True)
class PlantInfo:
    plant: Plant
    db_entry: Optional[PlantDatabaseEntry]
    temp_min: float
    temp_max: float
    humidity: str
    is_sensitive_to_sun: bool
    is_sensitive_to_heat: bool
    is_sensitive_to_cold: bool
    needs_high_humidity: bool

    def to_dict(self) -> dict:
        return {
            "plantId": self.plant.id,
            "databaseId": self.db_entry.id if self.db_entry else None,
            "tempMin": self.temp_min,
            "tempMax": self.temp_max,
            "humidity": self.humidity,
            "isSensitiveToSun": self.is_sensitive_to_sun,
            "isSensitiveToHeat": self.is_sensitive_to_heat,
            "isSensitiveToCold": self.is_sensitive_to_cold,
            "needsHighHumidity": self.needs_high_humidity,
        }


# The catalog never changes at runtime, so (database_id, name, type_id) -> entry
# is stable for the life of the process.
_MATCH_CACHE: LRUCache = LRUCache(maxsize=512)
_MATCH_LOCK = threading.Lock()


def _match_entry(
    database_id: Optional[str],
    name: str,
    type_id: str,
    database: Sequence[PlantDatabaseEntry],
) -> Optional[PlantDatabaseEntry]:
    if database_id:
        for entry in database:
            if entry.id == database_id:
                return entry

    name_lower = name.lower().strip()
    if name_lower:
        for entry in database:
            common = entry.name.lower()
            if (
                common == name_lower
                or entry.scientific_name.lower() == name_lower
                or common in name_lower
                or name_lower in common
            ):
                return entry

    for entry in database:
        if entry.id == type_id:
            return entry

    return None


def find_database_entry(
    plant: Plant,
    database: Optional[Sequence[PlantDatabaseEntry]] = None,
) -> Optional[PlantDatabaseEntry]:
    """
    Find the database entry that best describes a plant.

    Match order (first hit wins):
    1. Exact id match on plant.database_id
    2. Case-insensitive name match: equal to the common or scientific name,
       or containment either way with the common name
    3. Database entry whose id equals plant.type_id

    Args:
        plant: User plant
        database: Override catalog (defaults to the built-in plant database;
            only the built-in catalog is memoized)

    Returns:
        Matching entry or None
    """
    if database is not None:
        return _match_entry(plant.database_id, plant.name, plant.type_id, database)

    cache_key = (plant.database_id, plant.name, plant.type_id)
    with _MATCH_LOCK:
        if cache_key in _MATCH_CACHE:
            return _MATCH_CACHE[cache_key]

    entry = _match_entry(plant.database_id, plant.name, plant.type_id, plant_database())
    with _MATCH_LOCK:
        _MATCH_CACHE[cache_key] = entry
    return entry


def resolve_plant_info(
    plant: Plant,
    database: Optional[Sequence[PlantDatabaseEntry]] = None,
) -> PlantInfo:
    """Resolve tolerances and sensitivity flags for one plant."""
    entry = find_database_entry(plant, database)

    def first_defined(override, from_db, default):
        if override is not None:
            return override
        if from_db is not None:
            return from_db
        return default

    temp_min = first_defined(plant.min_tolerable_temp, entry.temp_min if entry else None, DEFAULT_TEMP_MIN)
    temp_max = first_defined(plant.max_tolerable_temp, entry.temp_max if entry else None, DEFAULT_TEMP_MAX)
    humidity = first_defined(plant.humidity_preference, entry.humidity if entry else None, DEFAULT_HUMIDITY)

    return PlantInfo(
        plant=plant,
        db_entry=entry,
        temp_min=temp_min,
        temp_max=temp_max,
        humidity=humidity,
        is_sensitive_to_sun=plant.sun_hours_required <= SUN_SENSITIVE_MAX_HOURS,
        is_sensitive_to_heat=temp_max <= HEAT_SENSITIVE_MAX_TEMP,
        is_sensitive_to_cold=temp_min >= COLD_SENSITIVE_MIN_TEMP,
        needs_high_humidity=humidity == HUMIDITY_HIGH,
    )


def resolve_all(plants: Iterable[Plant]) -> List[PlantInfo]:
    return [resolve_plant_info(plant) for plant in plants]


def clear_match_cache() -> None:
    with _MATCH_LOCK:
        _MATCH_CACHE.clear()


def describe_condition(info: PlantInfo, current_temp: float, uv_index: Optional[float]) -> Optional[str]:
    """One-line care hint for a plant under the current conditions, if any."""
    plant = info.plant
    if current_temp < info.temp_min:
        return f"{plant.icon} {plant.name} can't tolerate below {info.temp_min:g}°C - protect it from the cold"
    if current_temp > info.temp_max:
        return f"{plant.icon} {plant.name} suffers above {info.temp_max:g}°C - give it shade and water"
    if uv_index is not None and uv_index >= 8 and info.is_sensitive_to_sun:
        return f"{plant.icon} {plant.name} is sensitive to strong sun - avoid direct exposure"
    return None


def sensitivity_counts(infos: Sequence[PlantInfo]) -> Tuple[int, int, int]:
    """(sun-sensitive, heat-sensitive, cold-sensitive) counts."""
    return (
        sum(1 for i in infos if i.is_sensitive_to_sun),
        sum(1 for i in infos if i.is_sensitive_to_heat),
        sum(1 for i in infos if i.is_sensitive_to_cold),
    )
