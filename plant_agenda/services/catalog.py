"""
Static plant catalogs: the built-in plant types and the plant database.

Both are loaded once from plant_agenda/data/ and never change at runtime,
so lookups elsewhere can safely memoize against them.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Optional, Tuple

from ..models import PlantDatabaseEntry, PlantType
from ..utils.data import load_records


@lru_cache(maxsize=1)
def plant_types() -> Tuple[PlantType, ...]:
    return tuple(PlantType.from_dict(item) for item in load_records("plant_types.json"))


@lru_cache(maxsize=1)
def plant_database() -> Tuple[PlantDatabaseEntry, ...]:
    return tuple(PlantDatabaseEntry.from_dict(item) for item in load_records("plant_database.json"))


def get_plant_type(type_id: str) -> Optional[PlantType]:
    for plant_type in plant_types():
        if plant_type.id == type_id:
            return plant_type
    return None
