"""
Care calendar logic: watering due dates and daily task lists.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from ..models import Plant
from ..utils.dates import add_days, days_between, js_weekday

TASK_WATER = "water"
TASK_SUN = "sun"
TASK_OUTDOOR = "outdoor"


@dataclass(frozen=True)
class Task:
    type: str
    icon: str
    label: str
    plant_id: str
    done: bool = False

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "icon": self.icon,
            "label": self.label,
            "plantId": self.plant_id,
            "done": self.done,
        }


def next_water_date(plant: Plant, today: date) -> date:
    """
    Next calendar date the plant is due for water, on or after `today`.

    The schedule repeats every watering interval from the last watering.
    A plant that was never watered is due today.

    Example:
        >>> next_water_date(plant_every_3_days_watered_jan_1, date(2024, 1, 2))
        datetime.date(2024, 1, 4)
    """
    if plant.last_watered_date is None:
        return today
    interval = plant.watering_interval_days
    due = add_days(plant.last_watered_date, interval)
    if due < today:
        cycles = -(-days_between(due, today) // interval)  # ceil
        due = add_days(due, cycles * interval)
    return due


def days_since_watered(plant: Plant, today: date) -> Optional[int]:
    if plant.last_watered_date is None:
        return None
    return days_between(plant.last_watered_date, today)


def days_overdue(plant: Plant, today: date) -> int:
    """Days past the watering interval (0 when not overdue or never watered)."""
    since = days_since_watered(plant, today)
    if since is None:
        return 0
    return max(0, since - plant.watering_interval_days)


def is_watering_day(plant: Plant, day: date) -> bool:
    return next_water_date(plant, day) == day


def is_sun_day(plant: Plant, day: date) -> bool:
    return js_weekday(day) in plant.sun_days


def is_outdoor_day(plant: Plant, day: date) -> bool:
    return js_weekday(day) in plant.outdoor_days


def tasks_for_day(plants: Iterable[Plant], day: date) -> List[Task]:
    """Water, sun and outdoor tasks for every plant on a given day, plant by plant."""
    tasks: List[Task] = []
    for plant in plants:
        if is_watering_day(plant, day):
            tasks.append(Task(
                type=TASK_WATER,
                icon="💧",
                label=f"Water {plant.name}",
                plant_id=plant.id,
                done=plant.last_watered_date == day,
            ))
        if is_sun_day(plant, day):
            tasks.append(Task(
                type=TASK_SUN,
                icon="☀️",
                label=f"Sun for {plant.name} ({plant.sun_hours_required:g}h)",
                plant_id=plant.id,
                done=plant.sun_done_date == day,
            ))
        if is_outdoor_day(plant, day):
            tasks.append(Task(
                type=TASK_OUTDOOR,
                icon="🌤️",
                label=f"Take {plant.name} outside",
                plant_id=plant.id,
                done=plant.outdoor_done_date == day,
            ))
    return tasks


def plants_needing_sun(plants: Iterable[Plant], today: date) -> List[Plant]:
    """Plants scheduled for sun today whose sun task is not done yet."""
    return [p for p in plants if is_sun_day(p, today) and p.sun_done_date != today]


def plants_needing_outdoor(plants: Iterable[Plant], today: date) -> List[Plant]:
    return [p for p in plants if is_outdoor_day(p, today) and p.outdoor_done_date != today]

