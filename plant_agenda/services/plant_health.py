"""
Plant health scoring.

Every plant starts at 100 points and loses points per detected issue:

- overdue_water: -20 once the watering interval has passed, plus -10 per
  extra overdue day (at most -30 extra)
- overdue_sun: -15 when today is a sun day and the sun task is not done
- no_care: -10 for a plant with no recorded care, once it is older than
  NO_CARE_GRACE_DAYS (or when its age is unknown)
- extreme_weather: -10 for temperature outside the plant's tolerance band,
  -5 for a humidity extreme against its preference, -5 for strong wind on a
  plant that goes outdoors; heavy rain on a watering day is reported with
  no penalty

The final score is clamped to 0-100 and mapped to a level:
excellent >= 80, good >= 60, warning >= 35, else danger.
"""

from __future__ import annotations
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ..constants import (
    HEALTH_DANGER,
    HEALTH_THRESHOLDS,
    HUMIDITY_HIGH,
    HUMIDITY_LOW,
    ISSUE_EXTREME_WEATHER,
    ISSUE_NO_CARE,
    ISSUE_OVERDUE_SUN,
    ISSUE_OVERDUE_WATER,
    NO_CARE_GRACE_DAYS,
    SEVERITY_HIGH,
    SEVERITY_LOW,
    SEVERITY_MEDIUM,
    STRONG_WIND_KMH,
)
from ..models import GardenHealth, HealthIssue, Plant, PlantHealthStatus, WeatherData
from ..utils.dates import days_between, round_half_up
from .plant_info import PlantInfo, resolve_plant_info
from .plant_logic import days_overdue, is_sun_day, is_watering_day

MAX_SCORE = 100
MIN_SCORE = 0

OVERDUE_WATER_PENALTY = 20
OVERDUE_WATER_DAILY_PENALTY = 10
OVERDUE_WATER_MAX_EXTRA_DAYS = 3
OVERDUE_SUN_PENALTY = 15
NO_CARE_PENALTY = 10
TEMPERATURE_PENALTY = 10
HUMIDITY_PENALTY = 5
WIND_PENALTY = 5

SEVERE_TEMPERATURE_MARGIN = 5
DRY_AIR_HUMIDITY = 30
DAMP_AIR_HUMIDITY = 85
HEAVY_RAIN_MM = 10


def health_level(score: float) -> str:
    """Map a score to excellent / good / warning / danger."""
    for threshold, level in HEALTH_THRESHOLDS:
        if score >= threshold:
            return level
    return HEALTH_DANGER


def _water_issue(plant: Plant, today: date) -> Optional[HealthIssue]:
    overdue = days_overdue(plant, today)
    if overdue <= 0:
        return None

    penalty = OVERDUE_WATER_PENALTY + min(overdue - 1, OVERDUE_WATER_MAX_EXTRA_DAYS) * OVERDUE_WATER_DAILY_PENALTY
    if overdue > 3 or overdue >= plant.watering_interval_days:
        severity = SEVERITY_HIGH
    elif overdue > 1:
        severity = SEVERITY_MEDIUM
    else:
        severity = SEVERITY_LOW

    message = "Needed water yesterday" if overdue == 1 else f"Needed water {overdue} days ago"
    return HealthIssue(
        type=ISSUE_OVERDUE_WATER,
        severity=severity,
        message=message,
        penalty=penalty,
        days_since=overdue,
    )


def _sun_issue(plant: Plant, today: date) -> Optional[HealthIssue]:
    if is_sun_day(plant, today) and plant.sun_done_date != today:
        return HealthIssue(
            type=ISSUE_OVERDUE_SUN,
            severity=SEVERITY_MEDIUM,
            message="Today is a sun day for this plant",
            penalty=OVERDUE_SUN_PENALTY,
        )
    return None


def _no_care_issue(plant: Plant, today: date) -> Optional[HealthIssue]:
    if plant.last_watered_date or plant.sun_done_date or plant.outdoor_done_date:
        return None
    if plant.created_date is not None and days_between(plant.created_date, today) <= NO_CARE_GRACE_DAYS:
        return None
    return HealthIssue(
        type=ISSUE_NO_CARE,
        severity=SEVERITY_LOW,
        message="This plant has never been cared for",
        penalty=NO_CARE_PENALTY,
    )


def _weather_issues(plant: Plant, info: PlantInfo, today: date, weather: WeatherData) -> List[HealthIssue]:
    issues: List[HealthIssue] = []
    current = weather.current
    forecast = weather.today

    lowest = current.temperature if forecast is None else min(current.temperature, forecast.temp_min)
    highest = current.temperature if forecast is None else max(current.temperature, forecast.temp_max)

    if lowest < info.temp_min:
        margin = info.temp_min - lowest
        issues.append(HealthIssue(
            type=ISSUE_EXTREME_WEATHER,
            severity=SEVERITY_HIGH if margin >= SEVERE_TEMPERATURE_MARGIN else SEVERITY_MEDIUM,
            message=f"Too cold: {lowest:g}°C is below its {info.temp_min:g}°C minimum",
            penalty=TEMPERATURE_PENALTY,
        ))
    elif highest > info.temp_max:
        margin = highest - info.temp_max
        issues.append(HealthIssue(
            type=ISSUE_EXTREME_WEATHER,
            severity=SEVERITY_HIGH if margin >= SEVERE_TEMPERATURE_MARGIN else SEVERITY_MEDIUM,
            message=f"Too hot: {highest:g}°C is above its {info.temp_max:g}°C maximum",
            penalty=TEMPERATURE_PENALTY,
        ))

    if info.humidity == HUMIDITY_HIGH and current.humidity < DRY_AIR_HUMIDITY:
        issues.append(HealthIssue(
            type=ISSUE_EXTREME_WEATHER,
            severity=SEVERITY_LOW,
            message=f"Air is too dry ({current.humidity:g}%) for a humidity-loving plant",
            penalty=HUMIDITY_PENALTY,
        ))
    elif info.humidity == HUMIDITY_LOW and current.humidity > DAMP_AIR_HUMIDITY:
        issues.append(HealthIssue(
            type=ISSUE_EXTREME_WEATHER,
            severity=SEVERITY_LOW,
            message=f"Air is too humid ({current.humidity:g}%) for this plant",
            penalty=HUMIDITY_PENALTY,
        ))

    if current.wind_speed > STRONG_WIND_KMH and plant.outdoor_days:
        issues.append(HealthIssue(
            type=ISSUE_EXTREME_WEATHER,
            severity=SEVERITY_MEDIUM,
            message="Strong wind - keep it indoors today",
            penalty=WIND_PENALTY,
        ))

    if forecast is not None and forecast.precipitation > HEAVY_RAIN_MM and is_watering_day(plant, today):
        issues.append(HealthIssue(
            type=ISSUE_EXTREME_WEATHER,
            severity=SEVERITY_LOW,
            message="Rain expected - you may not need to water",
            penalty=0,
        ))

    return issues


def score_plant(
    plant: Plant,
    today: date,
    weather: Optional[WeatherData] = None,
    info: Optional[PlantInfo] = None,
) -> PlantHealthStatus:
    """
    Score a plant's current condition.

    Args:
        plant: Plant to score
        today: Calendar date to evaluate against
        weather: Current weather, or None to skip weather checks
        info: Pre-resolved tolerances (resolved from the plant database if omitted)

    Returns:
        PlantHealthStatus with score 0-100, level and ordered issues
    """
    issues: List[HealthIssue] = []
    for check in (_water_issue, _sun_issue, _no_care_issue):
        issue = check(plant, today)
        if issue is not None:
            issues.append(issue)

    if weather is not None:
        info = info or resolve_plant_info(plant)
        issues.extend(_weather_issues(plant, info, today, weather))

    score = MAX_SCORE - sum(issue.penalty for issue in issues)
    score = max(MIN_SCORE, min(MAX_SCORE, score))

    return PlantHealthStatus(
        plant_id=plant.id,
        score=score,
        level=health_level(score),
        issues=tuple(issues),
    )


def score_garden(
    plants: Sequence[Plant],
    today: date,
    weather: Optional[WeatherData] = None,
) -> Optional[GardenHealth]:
    """
    Score every plant and aggregate.

    Returns None for an empty garden: there is no average to display.
    Plants needing attention are those below the "good" threshold,
    worst first.
    """
    if not plants:
        return None

    statuses = tuple(score_plant(plant, today, weather) for plant in plants)
    average = round_half_up(sum(s.score for s in statuses) / len(statuses))
    good_threshold = HEALTH_THRESHOLDS[1][0]
    needing_attention = tuple(sorted(
        (s for s in statuses if s.score < good_threshold),
        key=lambda s: s.score,
    ))

    return GardenHealth(
        average_score=average,
        level=health_level(average),
        statuses=statuses,
        plants_needing_attention=needing_attention,
    )


def attention_summary(garden: Optional[GardenHealth], limit: int = 3) -> Tuple[Tuple[PlantHealthStatus, ...], int]:
    """Plants to display (at most `limit`) and how many more are hidden."""
    if garden is None:
        return (), 0
    shown = garden.plants_needing_attention[:limit]
    return shown, len(garden.plants_needing_attention) - len(shown)
