"""
Sun window and exposure-risk calculations used to plan notifications.

A plant goes out SUNRISE_OFFSET_MINUTES after sunrise and comes back in once
it has had its required sun hours, but never later than
SUNSET_OFFSET_MINUTES before sunset.

Two independent groupings exist for notification text:
- by required sun hours (rounded to whole hours) for "how long outside"
- by window end time (rounded to 15-minute buckets) for "when to bring in"
"""

from __future__ import annotations
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from ..constants import END_TIME_BUCKET_MINUTES, SUNRISE_OFFSET_MINUTES, SUNSET_OFFSET_MINUTES
from ..models import Plant, WeatherData
from ..utils.dates import round_half_up
from .plant_info import PlantInfo, resolve_all


@dataclass(frozen=True)
class SunWindow:
    start: datetime
    end: datetime

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class EndTimeGroup:
    end: datetime
    plants: List[Plant] = field(default_factory=list)


@dataclass(frozen=True)
class TemperatureRisk:
    cold: List[PlantInfo] = field(default_factory=list)
    heat: List[PlantInfo] = field(default_factory=list)

    @property
    def any(self) -> bool:
        return bool(self.cold or self.heat)


def compute_sun_window(plant: Plant, sunrise: datetime, sunset: datetime) -> SunWindow:
    """
    Compute when a plant should be outside for sun.

    Example:
        sunrise 06:00, sunset 18:00, 4 sun hours   -> 06:30 - 10:30
        sunrise 06:00, sunset 18:00, 10 sun hours  -> 06:30 - 16:30
        sunrise 06:00, sunset 18:00, 12 sun hours  -> 06:30 - 17:30 (clamped)
    """
    start = sunrise + timedelta(minutes=SUNRISE_OFFSET_MINUTES)
    end = start + timedelta(hours=plant.sun_hours_required)
    latest_end = sunset - timedelta(minutes=SUNSET_OFFSET_MINUTES)
    if end > latest_end:
        end = latest_end
    # Very short days: the window collapses rather than running backwards
    if end < start:
        end = start
    return SunWindow(start=start, end=end)


def group_by_sun_hours(plants: Iterable[Plant]) -> "OrderedDict[int, List[Plant]]":
    """Plants keyed by required sun hours rounded to the nearest hour, in first-seen order."""
    groups: "OrderedDict[int, List[Plant]]" = OrderedDict()
    for plant in plants:
        groups.setdefault(round_half_up(plant.sun_hours_required), []).append(plant)
    return groups


def _round_to_bucket(moment: datetime, minutes: int = END_TIME_BUCKET_MINUTES) -> datetime:
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    elapsed = (moment - midnight).total_seconds() / 60
    return midnight + timedelta(minutes=round_half_up(elapsed / minutes) * minutes)


def group_by_end_time(plants: Iterable[Plant], sunrise: datetime, sunset: datetime) -> List[EndTimeGroup]:
    """Plants grouped by their rounded window end time, earliest group first."""
    buckets: Dict[datetime, List[Plant]] = {}
    for plant in plants:
        window = compute_sun_window(plant, sunrise, sunset)
        buckets.setdefault(_round_to_bucket(window.end), []).append(plant)
    return [EndTimeGroup(end=end, plants=buckets[end]) for end in sorted(buckets)]


def plants_at_temperature_risk(
    plants: Sequence[Plant],
    weather: Optional[WeatherData],
    infos: Optional[Sequence[PlantInfo]] = None,
) -> TemperatureRisk:
    """
    Split plants into cold-risk and heat-risk sets.

    A plant is at cold risk when today's forecast minimum or the current
    temperature is below its tolerance, and at heat risk when the forecast
    maximum or current temperature is above it. Both sets are returned as-is;
    choosing which one to notify about is left to the caller.
    """
    if weather is None:
        return TemperatureRisk()

    infos = list(infos) if infos is not None else resolve_all(plants)
    current = weather.current.temperature
    today = weather.today
    forecast_min = today.temp_min if today else current
    forecast_max = today.temp_max if today else current

    cold = [i for i in infos if forecast_min < i.temp_min or current < i.temp_min]
    heat = [i for i in infos if forecast_max > i.temp_max or current > i.temp_max]
    return TemperatureRisk(cold=cold, heat=heat)


def plants_uv_sensitive(plants: Sequence[Plant]) -> List[PlantInfo]:
    return [info for info in resolve_all(plants) if info.is_sensitive_to_sun]
