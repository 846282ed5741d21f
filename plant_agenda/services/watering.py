"""
Weather-aware watering recommendations.

Looks at plants due for water today or tomorrow and suggests skipping,
delaying, advancing or adding extra water based on rain, heat, humidity and
wind. Each plant gets at most one recommendation; the first matching rule
wins, in this order:

1. skip: outdoor plant due today while it rains now or >5 mm is forecast today
2. skip: outdoor plant due tomorrow with >5 mm forecast tomorrow
3. advance: due today in extreme heat (>= 35°C now or forecast)
4. extra: due today on a very hot day (>= 32°C)
5. delay: due today with humidity above 80% (and not very hot)
6. advance: due today on a windy (>30 km/h) dry, clear day
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

from ..models import Plant, WeatherData
from ..utils.dates import add_days
from .plant_logic import next_water_date
from .weather import is_rainy_weather

REC_SKIP = "skip"
REC_DELAY = "delay"
REC_ADVANCE = "advance"
REC_NORMAL = "normal"
REC_EXTRA = "extra"
RECOMMENDATION_TYPES = (REC_SKIP, REC_DELAY, REC_ADVANCE, REC_NORMAL, REC_EXTRA)

RAIN_MM = 5
EXTREME_HEAT_C = 35
VERY_HOT_C = 32
HIGH_HUMIDITY = 80
DRYING_WIND_KMH = 30


@dataclass(frozen=True)
class WateringRecommendation:
    plant_id: str
    plant_name: str
    icon: str
    type: str
    reason: str
    message: str

    def to_dict(self) -> dict:
        return {
            "plantId": self.plant_id,
            "plantName": self.plant_name,
            "icon": self.icon,
            "type": self.type,
            "reason": self.reason,
            "message": self.message,
        }


def _recommend(plant: Plant, type_: str, reason: str, message: str) -> WateringRecommendation:
    return WateringRecommendation(
        plant_id=plant.id,
        plant_name=plant.name,
        icon=plant.icon,
        type=type_,
        reason=reason,
        message=message,
    )


def get_watering_recommendations(
    plants: Sequence[Plant],
    weather: Optional[WeatherData],
    today: date,
) -> List[WateringRecommendation]:
    """
    Build watering recommendations for plants due today or tomorrow.

    Args:
        plants: User plants
        weather: Current weather and forecast; None yields no recommendations
        today: Calendar date to evaluate

    Returns:
        At most one recommendation per plant, in plant order
    """
    if weather is None or not plants:
        return []

    current = weather.current
    today_forecast = weather.today
    tomorrow_forecast = weather.tomorrow
    tomorrow = add_days(today, 1)

    raining_now = is_rainy_weather(current.weather_code)
    rain_today = today_forecast is not None and today_forecast.precipitation > RAIN_MM
    rain_tomorrow = tomorrow_forecast is not None and tomorrow_forecast.precipitation > RAIN_MM
    extreme_heat = current.temperature >= EXTREME_HEAT_C or (
        today_forecast is not None and today_forecast.temp_max >= EXTREME_HEAT_C
    )
    very_hot = current.temperature >= VERY_HOT_C or (
        today_forecast is not None and today_forecast.temp_max >= VERY_HOT_C
    )
    humid = current.humidity > HIGH_HUMIDITY
    windy_and_clear = current.wind_speed > DRYING_WIND_KMH and not raining_now and current.weather_code <= 3

    recommendations: List[WateringRecommendation] = []
    for plant in plants:
        due = next_water_date(plant, today)
        if due not in (today, tomorrow):
            continue
        due_today = due == today
        outdoor = bool(plant.outdoor_days)

        if outdoor and due_today and (raining_now or rain_today):
            message = "It's raining, no need to water" if raining_now else "Rain is expected today, you can skip watering"
            recommendations.append(_recommend(plant, REC_SKIP, "rain", message))
        elif outdoor and not due_today and rain_tomorrow:
            recommendations.append(_recommend(
                plant, REC_SKIP, "rain_tomorrow", "Rain is expected tomorrow, you can wait"
            ))
        elif extreme_heat and due_today:
            recommendations.append(_recommend(
                plant, REC_ADVANCE, "extreme_heat", "It's very hot: water early (before 9am) or at dusk"
            ))
        elif very_hot and due_today:
            recommendations.append(_recommend(
                plant, REC_EXTRA, "heat", "It's hot, consider watering a little more than usual"
            ))
        elif humid and due_today and not very_hot:
            recommendations.append(_recommend(
                plant, REC_DELAY, "humidity", "It's very humid, you can wait a day"
            ))
        elif windy_and_clear and due_today:
            recommendations.append(_recommend(
                plant, REC_ADVANCE, "wind", "Wind dries the soil fast, don't forget to water"
            ))

    return recommendations


def group_recommendations_by_type(
    recommendations: Sequence[WateringRecommendation],
) -> Dict[str, List[WateringRecommendation]]:
    grouped: Dict[str, List[WateringRecommendation]] = {t: [] for t in RECOMMENDATION_TYPES}
    for rec in recommendations:
        grouped[rec.type].append(rec)
    return grouped


def recommendation_summary(type_: str, count: int) -> Dict[str, str]:
    """Title and icon for a group of recommendations of one type."""
    if type_ == REC_SKIP:
        title = "You can skip watering" if count == 1 else f"You can skip {count} waterings"
        return {"title": title, "icon": "💧"}
    if type_ == REC_DELAY:
        title = "You can delay watering" if count == 1 else f"You can delay {count} waterings"
        return {"title": title, "icon": "⏳"}
    if type_ == REC_ADVANCE:
        title = "Water early or at dusk" if count == 1 else f"Water {count} plants early"
        return {"title": title, "icon": "⏰"}
    if type_ == REC_EXTRA:
        title = "Consider extra water" if count == 1 else f"Extra water for {count} plants"
        return {"title": title, "icon": "💦"}
    return {"title": "Normal watering", "icon": "✅"}
