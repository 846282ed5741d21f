from datetime import date, datetime

from plant_agenda.models import Location
from plant_agenda.services.weather import (
    cached_weather,
    configure_weather_cache,
    is_rainy_weather,
    parse_weather,
    remember_weather,
    weather_info,
)

APP_PAYLOAD = {
    "current": {"temperature": 21.5, "humidity": 60, "windSpeed": 12, "weatherCode": 2, "uvIndex": 4},
    "daily": [
        {
            "date": "2024-01-10",
            "tempMin": 14,
            "tempMax": 27,
            "precipitation": 0.4,
            "weatherCode": 1,
            "uvIndexMax": 7,
            "sunrise": "2024-01-10T05:52",
            "sunset": "2024-01-10T20:05",
        },
    ],
}

OPEN_METEO_PAYLOAD = {
    "current": {
        "temperature_2m": 18.2,
        "relative_humidity_2m": 71,
        "wind_speed_10m": 9.4,
        "weather_code": 61,
    },
    "daily": {
        "time": ["2024-01-10", "2024-01-11", "2024-01-12"],
        "temperature_2m_min": [12.0, 11.5, None],
        "temperature_2m_max": [22.0, 20.1, 19.0],
        "precipitation_sum": [3.2, 0.0, 1.0],
        "weather_code": [61, 3, 2],
        "uv_index_max": [5.1, 6.0, 4.0],
        "sunrise": ["2024-01-10T06:01", "2024-01-11T06:02", "2024-01-12T06:02"],
        "sunset": ["2024-01-10T20:01", "2024-01-11T20:01", "2024-01-12T20:00"],
    },
}


class TestParseWeather:
    def test_app_shape(self):
        weather = parse_weather(APP_PAYLOAD)

        assert weather.current.temperature == 21.5
        assert weather.current.wind_speed == 12
        assert weather.today.date == date(2024, 1, 10)
        assert weather.today.sunrise == datetime(2024, 1, 10, 5, 52)
        assert weather.tomorrow is None

    def test_open_meteo_columns_stop_at_first_bad_day(self):
        weather = parse_weather(OPEN_METEO_PAYLOAD)

        assert weather.current.humidity == 71
        assert weather.current.uv_index is None
        assert len(weather.daily) == 2
        assert weather.tomorrow.temp_max == 20.1

    def test_missing_current_temperature(self):
        assert parse_weather({"current": {"humidity": 50}}) is None
        assert parse_weather(None) is None
        assert parse_weather("sunny") is None

    def test_partial_current_fields_default(self):
        weather = parse_weather({"current": {"temperature": "19"}})
        assert weather.current.humidity == 0.0
        assert weather.current.weather_code == 0
        assert weather.daily == ()


class TestWeatherCodes:
    def test_lookup(self):
        assert weather_info(0).description == "Clear sky"
        assert weather_info(1234).description == "Unknown"

    def test_rainy_codes(self):
        assert is_rainy_weather(61)
        assert is_rainy_weather(95)
        assert not is_rainy_weather(3)
        assert not is_rainy_weather(71)


class TestWeatherCache:
    def test_remember_and_lookup_by_rounded_location(self):
        weather = parse_weather(APP_PAYLOAD)
        remember_weather(Location(lat=-34.6037, lon=-58.3816), weather)

        assert cached_weather(Location(lat=-34.6041, lon=-58.3812)) is weather
        assert cached_weather(Location(lat=40.0, lon=-3.7)) is None
        assert cached_weather(None) is None

    def test_reconfigure_clears_entries(self):
        location = Location(lat=1.0, lon=2.0)
        remember_weather(location, parse_weather(APP_PAYLOAD))
        configure_weather_cache(60)
        assert cached_weather(location) is None
        configure_weather_cache(1800)
