"""
Notification planning.

Pure functions that decide what to notify and when. They never talk to a
scheduler; services/notifications.py dispatches the resulting plans. Every
planner takes `now` explicitly and drops plans whose trigger time has
already passed.

Plans:
- morning reminder: daily at the configured HH:MM with today's tasks
- sunrise: 30 min after sunrise, "take your plants out"
- sunset: when the earliest group of plants has had its sun hours
- UV warning: 11:00 when today's max UV index is >= 5
- temperature warning: 07:00 for cold risk, 12:00 for heat risk (cold wins)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..constants import HIGH_UV_THRESHOLD, MODERATE_UV_THRESHOLD, SUN_SENSITIVE_MAX_HOURS, SUNRISE_OFFSET_MINUTES
from ..models import Plant, WeatherData
from ..utils.dates import round_half_up
from ..utils.validation import parse_time_of_day
from .plant_alerts import SEVERITY_DANGER, PlantAlert
from .plant_logic import TASK_OUTDOOR, TASK_SUN, TASK_WATER, plants_needing_outdoor, plants_needing_sun, tasks_for_day
from .sun_schedule import compute_sun_window, group_by_end_time, group_by_sun_hours, plants_at_temperature_risk

KIND_MORNING = "morning-reminder"
KIND_SUNRISE = "sunrise-reminder"
KIND_SUNSET = "sunset-reminder"
KIND_UV = "uv-warning"
KIND_TEMPERATURE = "temp-warning"
KIND_WEATHER_ALERT = "weather-alert"

SUN_KINDS = (KIND_SUNRISE, KIND_SUNSET, KIND_UV, KIND_TEMPERATURE)

PRIORITY_DEFAULT = "default"
PRIORITY_HIGH = "high"
PRIORITY_MAX = "max"

UV_WARNING_TIME = time(11, 0)
COLD_WARNING_TIME = time(7, 0)
HEAT_WARNING_TIME = time(12, 0)


@dataclass(frozen=True)
class NotificationPlan:
    """
    What to notify and when.

    Exactly one of `daily_at` (repeating, local hour/minute) or `at`
    (one-shot local datetime) is set.
    """
    id: str
    kind: str
    title: str
    body: str
    priority: str = PRIORITY_HIGH
    daily_at: Optional[Tuple[int, int]] = None
    at: Optional[datetime] = None
    data: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict:
        trigger: Dict[str, Any]
        if self.daily_at is not None:
            trigger = {"type": "daily", "hour": self.daily_at[0], "minute": self.daily_at[1]}
        else:
            trigger = {"type": "date", "at": self.at.isoformat() if self.at else None}
        return {
            "id": self.id,
            "kind": self.kind,
            "title": self.title,
            "body": self.body,
            "priority": self.priority,
            "trigger": trigger,
            "data": self.data,
        }


def _names(plants: Sequence[Plant], with_icon: bool = False) -> str:
    if len(plants) > 2:
        return f"{len(plants)} plants"
    if with_icon:
        return " and ".join(f"{p.icon} {p.name}" for p in plants)
    return " and ".join(p.name for p in plants)


def _clock(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def _at_today(now: datetime, at: time) -> datetime:
    return datetime.combine(now.date(), at)


# ============================================================================
# MORNING REMINDER
# ============================================================================

def morning_content(plants: Sequence[Plant], weather: Optional[WeatherData], now: datetime) -> Tuple[str, str]:
    """Title and body summarizing today's tasks (and the temperature, if known)."""
    tasks = tasks_for_day(plants, now.date())
    by_id = {p.id: p for p in plants}

    if not tasks:
        body = "Your plants are fine for today. Enjoy the day!"
    else:
        parts = []
        for task_type, verb in ((TASK_WATER, "water"), (TASK_SUN, "sun for")):
            named = [by_id[t.plant_id] for t in tasks if t.type == task_type and t.plant_id in by_id]
            if named:
                parts.append(f"{verb} {_names(named)}")
        outdoor = sum(1 for t in tasks if t.type == TASK_OUTDOOR)
        if outdoor:
            parts.append("take out 1 plant" if outdoor == 1 else f"take out {outdoor} plants")
        body = f"Today: {', '.join(parts)}."

    if weather is not None:
        body += f" It's {round_half_up(weather.current.temperature)}°C right now."

    return "Good morning!", body


def plan_morning_reminder(
    plants: Sequence[Plant],
    weather: Optional[WeatherData],
    now: datetime,
    reminder_time: str = "08:00",
) -> NotificationPlan:
    hour, minute = parse_time_of_day(reminder_time)
    title, body = morning_content(plants, weather, now)
    return NotificationPlan(
        id=KIND_MORNING,
        kind=KIND_MORNING,
        title=title,
        body=body,
        priority=PRIORITY_HIGH,
        daily_at=(hour, minute),
    )


# ============================================================================
# SUN-BASED PLANS
# ============================================================================

def _sun_times(weather: Optional[WeatherData]) -> Optional[Tuple[datetime, datetime]]:
    today = weather.today if weather else None
    if today is None or today.sunrise is None or today.sunset is None:
        return None
    return today.sunrise, today.sunset


def plan_sunrise_notification(
    plants: Sequence[Plant],
    weather: Optional[WeatherData],
    now: datetime,
) -> Optional[NotificationPlan]:
    """'Take your plants out' shortly after sunrise, grouped by sun hours."""
    times = _sun_times(weather)
    if times is None:
        return None
    sunrise, sunset = times

    outdoor = plants_needing_outdoor(plants, now.date())
    if not outdoor:
        return None

    notify_at = sunrise + timedelta(minutes=SUNRISE_OFFSET_MINUTES)
    if notify_at <= now:
        return None

    parts = []
    for hours, group in group_by_sun_hours(outdoor).items():
        window = compute_sun_window(group[0], sunrise, sunset)
        parts.append(f"{_names(group)} ({hours}h of sun, until ~{_clock(window.end)})")

    return NotificationPlan(
        id=f"{KIND_SUNRISE}-{now.date().isoformat()}",
        kind=KIND_SUNRISE,
        title="🌅 Time to take your plants out!",
        body=f"Sun from {_clock(sunrise)}. Take out: {'; '.join(parts)}",
        priority=PRIORITY_HIGH,
        at=notify_at,
        data={"plantIds": [p.id for p in outdoor]},
    )


def plan_sunset_notification(
    plants: Sequence[Plant],
    weather: Optional[WeatherData],
    now: datetime,
) -> Optional[NotificationPlan]:
    """'Bring them in' for the earliest group of plants whose sun window ends."""
    times = _sun_times(weather)
    if times is None:
        return None
    sunrise, sunset = times

    outdoor = plants_needing_outdoor(plants, now.date())
    groups = group_by_end_time(outdoor, sunrise, sunset)
    if not groups:
        return None

    earliest = groups[0]
    if earliest.end <= now:
        return None

    body = f"{_names(earliest.plants, with_icon=True)} already had their sun hours."
    later = sum(len(g.plants) for g in groups[1:])
    if later:
        body += f" {later} more can stay out longer."

    return NotificationPlan(
        id=f"{KIND_SUNSET}-{now.date().isoformat()}",
        kind=KIND_SUNSET,
        title="🌿 Time to bring plants in",
        body=body,
        priority=PRIORITY_DEFAULT,
        at=earliest.end,
        data={"plantIds": [p.id for p in earliest.plants]},
    )


def plan_uv_warning(
    plants: Sequence[Plant],
    weather: Optional[WeatherData],
    now: datetime,
) -> Optional[NotificationPlan]:
    """Warn at 11:00 when today's UV peak is moderate-high or worse."""
    today = weather.today if weather else None
    if today is None or today.uv_index_max is None or today.uv_index_max < MODERATE_UV_THRESHOLD:
        return None

    sun_plants = plants_needing_sun(plants, now.date())
    if not sun_plants:
        return None

    notify_at = _at_today(now, UV_WARNING_TIME)
    if notify_at <= now:
        return None

    uv = today.uv_index_max
    sensitive = [p for p in sun_plants if p.sun_hours_required <= SUN_SENSITIVE_MAX_HOURS]
    is_high = uv >= HIGH_UV_THRESHOLD

    if is_high and sensitive:
        title = "☀️ Dangerous UV for your plants!"
        body = f"UV index {uv:g}. {_names(sensitive)} are sensitive - avoid direct sun between 12 and 16h."
    elif is_high:
        title = "☀️ Very high UV today"
        body = f"UV index {uv:g}. Intense sun between 12 and 16h."
    else:
        title = "⚠️ Moderate-high UV"
        body = f"UV index {uv:g}. Your plants can take sun but keep an eye on them."

    return NotificationPlan(
        id=f"{KIND_UV}-{now.date().isoformat()}",
        kind=KIND_UV,
        title=title,
        body=body,
        priority=PRIORITY_MAX if is_high else PRIORITY_HIGH,
        at=notify_at,
        data={"uvIndex": uv, "sensitivePlantIds": [p.id for p in sensitive]},
    )


def plan_temperature_warning(
    plants: Sequence[Plant],
    weather: Optional[WeatherData],
    now: datetime,
) -> Optional[NotificationPlan]:
    """
    Warn about plants outside their temperature tolerance today.

    Cold risk is announced at 07:00 and takes precedence; heat risk is
    announced at 12:00 only when no plant is at cold risk.
    """
    if weather is None or not plants or weather.today is None:
        return None
    today = weather.today

    risk = plants_at_temperature_risk(plants, weather)
    if risk.cold:
        names = _names([i.plant for i in risk.cold])
        tolerance = max(i.temp_min for i in risk.cold)
        notify_at = _at_today(now, COLD_WARNING_TIME)
        title = "🥶 Cold alert for your plants"
        body = f"Low of {today.temp_min:g}°C. {names} can't tolerate below {tolerance:g}°C - protect them!"
        priority = PRIORITY_MAX
        at_risk = risk.cold
    elif risk.heat:
        names = _names([i.plant for i in risk.heat])
        tolerance = min(i.temp_max for i in risk.heat)
        notify_at = _at_today(now, HEAT_WARNING_TIME)
        title = "🔥 Heat alert for your plants"
        body = f"High of {today.temp_max:g}°C. {names} suffer above {tolerance:g}°C - give them shade and extra water."
        priority = PRIORITY_HIGH
        at_risk = risk.heat
    else:
        return None

    if notify_at <= now:
        return None

    return NotificationPlan(
        id=f"{KIND_TEMPERATURE}-{now.date().isoformat()}",
        kind=KIND_TEMPERATURE,
        title=title,
        body=body,
        priority=priority,
        at=notify_at,
        data={"plantIds": [i.plant.id for i in at_risk]},
    )


def plan_smart_sun_notifications(
    plants: Sequence[Plant],
    weather: Optional[WeatherData],
    now: datetime,
) -> List[NotificationPlan]:
    """All applicable sun, UV and temperature plans for today, in that order."""
    if weather is None:
        return []
    plans = []
    for planner in (plan_sunrise_notification, plan_sunset_notification, plan_uv_warning, plan_temperature_warning):
        plan = planner(plants, weather, now)
        if plan is not None:
            plans.append(plan)
    return plans


def plan_weather_alert(alert: PlantAlert, trigger_at: datetime, now: datetime) -> Optional[NotificationPlan]:
    """One-shot notification for a plant alert; None when trigger_at has passed."""
    if trigger_at <= now:
        return None
    return NotificationPlan(
        id=f"{KIND_WEATHER_ALERT}-{alert.plant_id}-{alert.type}",
        kind=KIND_WEATHER_ALERT,
        title=f"{alert.plant_icon} {alert.title}",
        body=alert.message,
        priority=PRIORITY_MAX if alert.severity == SEVERITY_DANGER else PRIORITY_HIGH,
        at=trigger_at,
        data={"alertType": alert.type, "plantId": alert.plant_id},
    )
