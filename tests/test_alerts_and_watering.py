from datetime import timedelta

from conftest import TODAY
from plant_agenda.services.plant_alerts import alert_counts, generate_plant_alerts
from plant_agenda.services.watering import (
    get_watering_recommendations,
    group_recommendations_by_type,
    recommendation_summary,
)

DUE_TODAY = TODAY - timedelta(days=3)
DUE_TOMORROW = TODAY - timedelta(days=2)
OUTDOOR = frozenset({1, 3, 5})


class TestPlantAlerts:
    def test_frost_tomorrow_is_danger(self, make_plant, make_weather, make_day):
        weather = make_weather(daily=[make_day(0), make_day(1, temp_min=12)])
        [alert] = generate_plant_alerts([make_plant(name="Calathea")], weather)

        assert alert.type == "cold"
        assert alert.severity == "danger"
        assert alert.title == "Frost tomorrow"

    def test_mild_cold_tomorrow_is_warning(self, make_plant, make_weather, make_day):
        weather = make_weather(daily=[make_day(0), make_day(1, temp_min=15)])
        [alert] = generate_plant_alerts([make_plant(name="Calathea")], weather)
        assert (alert.severity, alert.title) == ("warning", "Cold tomorrow")

    def test_one_alert_per_plant_and_type_most_severe_first(self, make_plant, make_weather, make_day):
        plants = [make_plant(id="fern", name="Calathea"), make_plant(id="herb", name="Basil", outdoor_days=OUTDOOR)]
        weather = make_weather(temperature=15, wind_speed=50, daily=[make_day(0), make_day(1, temp_min=16)])
        alerts = generate_plant_alerts(plants, weather)

        keys = [(a.plant_id, a.type) for a in alerts]
        assert len(keys) == len(set(keys))
        assert ("fern", "cold") in keys
        assert ("herb", "wind") in keys
        fern_cold = next(a for a in alerts if a.plant_id == "fern" and a.type == "cold")
        assert fern_cold.severity == "danger"
        assert [a.severity for a in alerts] == sorted(
            (a.severity for a in alerts), key=["danger", "warning", "info"].index
        )
        assert alert_counts(alerts)["warning"] == 1

    def test_no_weather_no_alerts(self, make_plant):
        assert generate_plant_alerts([make_plant()], None) == []


class TestWateringRecommendations:
    def _recommend(self, plant, weather):
        return get_watering_recommendations([plant], weather, TODAY)

    def test_skip_when_raining_now(self, make_plant, make_weather):
        plant = make_plant(last_watered_date=DUE_TODAY, outdoor_days=OUTDOOR)
        [rec] = self._recommend(plant, make_weather(weather_code=61))
        assert (rec.type, rec.reason) == ("skip", "rain")

    def test_indoor_plant_is_not_skipped_for_rain(self, make_plant, make_weather):
        assert self._recommend(make_plant(last_watered_date=DUE_TODAY), make_weather(weather_code=61)) == []

    def test_skip_for_rain_tomorrow(self, make_plant, make_weather, make_day):
        plant = make_plant(last_watered_date=DUE_TOMORROW, outdoor_days=OUTDOOR)
        weather = make_weather(daily=[make_day(0), make_day(1, precipitation=8)])
        [rec] = self._recommend(plant, weather)
        assert rec.reason == "rain_tomorrow"

    def test_heat_rules(self, make_plant, make_weather):
        plant = make_plant(last_watered_date=DUE_TODAY)
        assert self._recommend(plant, make_weather(temperature=36))[0].type == "advance"
        assert self._recommend(plant, make_weather(temperature=33))[0].type == "extra"

    def test_humidity_delays(self, make_plant, make_weather):
        [rec] = self._recommend(make_plant(last_watered_date=DUE_TODAY), make_weather(humidity=85))
        assert rec.type == "delay"

    def test_wind_advances(self, make_plant, make_weather):
        [rec] = self._recommend(make_plant(last_watered_date=DUE_TODAY), make_weather(wind_speed=35))
        assert (rec.type, rec.reason) == ("advance", "wind")

    def test_not_due_plants_are_ignored(self, make_plant, make_weather):
        assert self._recommend(make_plant(), make_weather(temperature=36)) == []

    def test_grouping_and_summary(self, make_plant, make_weather):
        plants = [make_plant(id="a", last_watered_date=DUE_TODAY), make_plant(id="b", last_watered_date=DUE_TODAY)]
        recs = get_watering_recommendations(plants, make_weather(humidity=90), TODAY)
        grouped = group_recommendations_by_type(recs)

        assert len(grouped["delay"]) == 2
        assert grouped["skip"] == []
        assert recommendation_summary("delay", 2)["title"] == "You can delay 2 waterings"
