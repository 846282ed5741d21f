"""
Per-plant weather alerts.

Compares each plant's resolved temperature tolerance with tomorrow's
forecast and the current temperature, and warns outdoor plants about strong
wind. Alerts are sorted danger -> warning -> info and de-duplicated so each
plant gets at most one alert per type (the most severe one).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..constants import STRONG_WIND_KMH
from ..models import Plant, WeatherData
from ..utils.dates import round_half_up
from .plant_info import resolve_plant_info

ALERT_COLD = "cold"
ALERT_HEAT = "heat"
ALERT_RAIN = "rain"
ALERT_WIND = "wind"

SEVERITY_DANGER = "danger"
SEVERITY_WARNING = "warning"
SEVERITY_INFO = "info"

_SEVERITY_ORDER = {SEVERITY_DANGER: 0, SEVERITY_WARNING: 1, SEVERITY_INFO: 2}

# Degrees past the tolerance that turn a forecast warning into danger
DANGER_MARGIN = 5


@dataclass(frozen=True)
class PlantAlert:
    plant_id: str
    plant_name: str
    plant_icon: str
    type: str
    severity: str
    title: str
    message: str

    def to_dict(self) -> dict:
        return {
            "plantId": self.plant_id,
            "plantName": self.plant_name,
            "plantIcon": self.plant_icon,
            "type": self.type,
            "severity": self.severity,
            "title": self.title,
            "message": self.message,
        }


def _alert(plant: Plant, type_: str, severity: str, title: str, message: str) -> PlantAlert:
    return PlantAlert(
        plant_id=plant.id,
        plant_name=plant.name,
        plant_icon=plant.icon,
        type=type_,
        severity=severity,
        title=title,
        message=message,
    )


def _forecast_cold_alert(plant: Plant, temp_min: float, forecast: float) -> PlantAlert:
    severity = SEVERITY_DANGER if temp_min - forecast >= DANGER_MARGIN else SEVERITY_WARNING
    title = "Frost tomorrow" if severity == SEVERITY_DANGER else "Cold tomorrow"
    return _alert(
        plant, ALERT_COLD, severity, title,
        f"Your {plant.name.lower()} can't tolerate below {temp_min:g}°C; "
        f"tomorrow will reach {round_half_up(forecast)}°C.",
    )


def _forecast_heat_alert(plant: Plant, temp_max: float, forecast: float) -> PlantAlert:
    severity = SEVERITY_DANGER if forecast - temp_max >= DANGER_MARGIN else SEVERITY_WARNING
    title = "Extreme heat tomorrow" if severity == SEVERITY_DANGER else "Hot tomorrow"
    return _alert(
        plant, ALERT_HEAT, severity, title,
        f"Your {plant.name.lower()} suffers above {temp_max:g}°C; "
        f"tomorrow will reach {round_half_up(forecast)}°C.",
    )


def generate_plant_alerts(plants: Sequence[Plant], weather: Optional[WeatherData]) -> List[PlantAlert]:
    """
    Build weather alerts for each plant.

    Args:
        plants: User plants
        weather: Current weather and forecast; None yields no alerts

    Returns:
        Alerts ordered by severity, at most one per (plant, type)
    """
    if weather is None or not plants:
        return []

    alerts: List[PlantAlert] = []
    current = weather.current
    tomorrow = weather.tomorrow

    for plant in plants:
        info = resolve_plant_info(plant)

        if tomorrow is not None and tomorrow.temp_min < info.temp_min:
            alerts.append(_forecast_cold_alert(plant, info.temp_min, tomorrow.temp_min))
        if tomorrow is not None and tomorrow.temp_max > info.temp_max:
            alerts.append(_forecast_heat_alert(plant, info.temp_max, tomorrow.temp_max))

        now = round_half_up(current.temperature)
        if current.temperature < info.temp_min:
            alerts.append(_alert(
                plant, ALERT_COLD, SEVERITY_DANGER, f"{plant.name} at risk",
                f"It's {now}°C right now. Your {plant.name.lower()} can't tolerate below {info.temp_min:g}°C.",
            ))
        if current.temperature > info.temp_max:
            alerts.append(_alert(
                plant, ALERT_HEAT, SEVERITY_DANGER, f"{plant.name} at risk",
                f"It's {now}°C right now. Your {plant.name.lower()} suffers above {info.temp_max:g}°C.",
            ))

    if current.wind_speed > STRONG_WIND_KMH:
        gust = round_half_up(current.wind_speed)
        for plant in plants:
            if plant.outdoor_days:
                alerts.append(_alert(
                    plant, ALERT_WIND, SEVERITY_WARNING, "Strong wind",
                    f"Protect your {plant.name.lower()} from {gust} km/h gusts.",
                ))

    # Stable sort keeps plant order within a severity
    alerts.sort(key=lambda a: _SEVERITY_ORDER[a.severity])
    seen = set()
    unique: List[PlantAlert] = []
    for alert in alerts:
        key = (alert.plant_id, alert.type)
        if key in seen:
            continue
        seen.add(key)
        unique.append(alert)
    return unique


def alert_counts(alerts: Sequence[PlantAlert]) -> Dict[str, int]:
    counts = {SEVERITY_DANGER: 0, SEVERITY_WARNING: 0, SEVERITY_INFO: 0}
    for alert in alerts:
        counts[alert.severity] += 1
    return counts
