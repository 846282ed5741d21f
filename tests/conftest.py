"""
Shared test fixtures for the plant_agenda test suite.

Provides:
- A Flask app built with TestConfig and its test client
- Factories for plants and weather snapshots
- Deterministic random sources for tip selection

Usage:
    def test_example(make_plant, make_weather):
        plant = make_plant(watering_interval_days=3)
        weather = make_weather(temperature=35)
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

import pytest

from plant_agenda.models import CurrentWeather, DailyForecast, Plant, WeatherData
from plant_agenda.services.plant_info import clear_match_cache
from plant_agenda.services.weather import clear_weather_cache

logging.getLogger("plant_agenda").setLevel(logging.WARNING)

# Wednesday; JS-style weekday index 3
TODAY = date(2024, 1, 10)
WEDNESDAY = 3


class SequenceRandom:
    """random()-compatible source that replays fixed values in order."""

    def __init__(self, *values: float):
        self._values = list(values)
        self._index = 0

    def random(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


# ========================== App Fixtures ===================================


@pytest.fixture()
def app(monkeypatch):
    """Flask app with TestConfig: memory store, limiter and scheduler off."""
    monkeypatch.setenv("APP_CONFIG", "plant_agenda.config.TestConfig")
    from plant_agenda import create_app

    yield create_app()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def ajax_headers():
    return {"X-Requested-With": "XMLHttpRequest"}


@pytest.fixture(autouse=True)
def _reset_module_caches():
    clear_weather_cache()
    clear_match_cache()
    yield
    clear_weather_cache()
    clear_match_cache()


# ========================== Factories ======================================


@pytest.fixture()
def today():
    return TODAY


@pytest.fixture()
def make_plant():
    """Plant factory; defaults to a plant with no database match, watered today."""

    def _make(**overrides) -> Plant:
        fields = {
            "id": "p1",
            "name": "Mystery shrub",
            "type_id": "otra",
            "watering_interval_days": 3,
            "sun_hours_required": 4,
            "last_watered_date": TODAY,
        }
        fields.update(overrides)
        return Plant(**fields)

    return _make


@pytest.fixture()
def make_day():
    """DailyForecast factory; `offset` is days after TODAY."""

    def _make(offset: int = 0, **overrides) -> DailyForecast:
        day = TODAY + timedelta(days=offset)
        fields = {
            "date": day,
            "temp_min": 15,
            "temp_max": 25,
            "precipitation": 0.0,
            "weather_code": 0,
            "uv_index_max": 3,
            "sunrise": datetime(day.year, day.month, day.day, 6, 0),
            "sunset": datetime(day.year, day.month, day.day, 18, 0),
        }
        fields.update(overrides)
        return DailyForecast(**fields)

    return _make


@pytest.fixture()
def make_weather(make_day):
    """WeatherData factory with mild defaults and a 3-day forecast."""

    def _make(daily=None, **current) -> WeatherData:
        fields = {
            "temperature": 20,
            "humidity": 50,
            "wind_speed": 10,
            "weather_code": 0,
            "uv_index": 3,
        }
        fields.update(current)
        if daily is None:
            daily = [make_day(i) for i in range(3)]
        return WeatherData(current=CurrentWeather(**fields), daily=tuple(daily))

    return _make
