from datetime import datetime, timedelta

from conftest import TODAY, WEDNESDAY
from plant_agenda.services.notification_plans import (
    KIND_SUNRISE,
    KIND_SUNSET,
    KIND_TEMPERATURE,
    KIND_UV,
    plan_morning_reminder,
    plan_smart_sun_notifications,
    plan_sunrise_notification,
    plan_sunset_notification,
    plan_temperature_warning,
    plan_uv_warning,
    plan_weather_alert,
)
from plant_agenda.services.plant_alerts import generate_plant_alerts

EARLY = datetime(2024, 1, 10, 5, 0)
AFTERNOON = datetime(2024, 1, 10, 15, 0)
TODAY_ONLY = frozenset({WEDNESDAY})


class TestMorningReminder:
    def test_lists_names_for_few_plants(self, make_plant, make_weather):
        plants = [
            make_plant(id="a", name="Basil", last_watered_date=TODAY - timedelta(days=3)),
            make_plant(id="b", name="Mint", last_watered_date=TODAY - timedelta(days=3)),
        ]
        plan = plan_morning_reminder(plants, make_weather(temperature=18.6), EARLY, "07:45")

        assert plan.daily_at == (7, 45)
        assert "water Basil and Mint" in plan.body
        assert "19°C" in plan.body

    def test_counts_when_many_plants(self, make_plant):
        plants = [make_plant(id=str(i), name=f"Herb {i}", last_watered_date=None) for i in range(4)]
        assert "water 4 plants" in plan_morning_reminder(plants, None, EARLY).body

    def test_nothing_to_do(self, make_plant):
        plan = plan_morning_reminder([make_plant()], None, EARLY, "bogus")
        assert plan.daily_at == (8, 0)
        assert "fine for today" in plan.body


class TestSunPlans:
    def test_sunrise_plan(self, make_plant, make_weather):
        plant = make_plant(name="Basil", outdoor_days=TODAY_ONLY, sun_hours_required=4)
        plan = plan_sunrise_notification([plant], make_weather(), EARLY)

        assert plan.kind == KIND_SUNRISE
        assert plan.at == datetime(2024, 1, 10, 6, 30)
        assert "until ~10:30" in plan.body

    def test_sunrise_plan_in_the_past_is_dropped(self, make_plant, make_weather):
        plant = make_plant(outdoor_days=TODAY_ONLY)
        assert plan_sunrise_notification([plant], make_weather(), AFTERNOON) is None

    def test_sunset_plan_uses_earliest_group(self, make_plant, make_weather):
        plants = [
            make_plant(id="short", name="Fern", outdoor_days=TODAY_ONLY, sun_hours_required=2),
            make_plant(id="long", name="Tomato", outdoor_days=TODAY_ONLY, sun_hours_required=8),
        ]
        plan = plan_sunset_notification(plants, make_weather(), EARLY)

        assert plan.kind == KIND_SUNSET
        assert plan.at == datetime(2024, 1, 10, 8, 30)
        assert plan.data["plantIds"] == ["short"]
        assert "1 more can stay out longer" in plan.body

    def test_no_sun_times_no_plan(self, make_plant, make_weather, make_day):
        weather = make_weather(daily=[make_day(0, sunrise=None)])
        assert plan_sunrise_notification([make_plant(outdoor_days=TODAY_ONLY)], weather, EARLY) is None


class TestUvWarning:
    def test_below_threshold(self, make_plant, make_weather):
        assert plan_uv_warning([make_plant(sun_days=TODAY_ONLY)], make_weather(), EARLY) is None

    def test_high_uv_names_sensitive_plants(self, make_plant, make_weather, make_day):
        plants = [
            make_plant(id="shade", name="Fern", sun_days=TODAY_ONLY, sun_hours_required=2),
            make_plant(id="sun", name="Tomato", sun_days=TODAY_ONLY, sun_hours_required=8),
        ]
        weather = make_weather(daily=[make_day(0, uv_index_max=9)])
        plan = plan_uv_warning(plants, weather, EARLY)

        assert plan.kind == KIND_UV
        assert plan.at == datetime(2024, 1, 10, 11, 0)
        assert plan.priority == "max"
        assert plan.data["sensitivePlantIds"] == ["shade"]

    def test_moderate_uv(self, make_plant, make_weather, make_day):
        weather = make_weather(daily=[make_day(0, uv_index_max=6)])
        plan = plan_uv_warning([make_plant(sun_days=TODAY_ONLY)], weather, EARLY)
        assert plan.priority == "high"

    def test_after_eleven_is_skipped(self, make_plant, make_weather, make_day):
        weather = make_weather(daily=[make_day(0, uv_index_max=9)])
        assert plan_uv_warning([make_plant(sun_days=TODAY_ONLY)], weather, AFTERNOON) is None


class TestTemperatureWarning:
    def test_cold_at_seven(self, make_plant, make_weather, make_day):
        weather = make_weather(daily=[make_day(0, temp_min=4)])
        plan = plan_temperature_warning([make_plant()], weather, EARLY)
        assert plan.kind == KIND_TEMPERATURE
        assert plan.at == datetime(2024, 1, 10, 7, 0)
        assert "Cold" in plan.title

    def test_heat_at_noon(self, make_plant, make_weather, make_day):
        weather = make_weather(daily=[make_day(0, temp_max=34)])
        plan = plan_temperature_warning([make_plant()], weather, EARLY)
        assert plan.at == datetime(2024, 1, 10, 12, 0)

    def test_cold_wins_over_heat(self, make_plant, make_weather, make_day):
        plants = [make_plant(id="tender", name="Calathea"), make_plant(id="hardy", name="Rosemary")]
        weather = make_weather(daily=[make_day(0, temp_min=8, temp_max=38)])
        plan = plan_temperature_warning(plants, weather, EARLY)
        assert "Cold" in plan.title
        assert plan.data["plantIds"] == ["tender"]

    def test_past_warning_is_dropped(self, make_plant, make_weather, make_day):
        weather = make_weather(daily=[make_day(0, temp_min=4)])
        assert plan_temperature_warning([make_plant()], weather, AFTERNOON) is None


class TestSmartSunNotifications:
    def test_collects_all_applicable_plans_in_order(self, make_plant, make_weather, make_day):
        plant = make_plant(outdoor_days=TODAY_ONLY, sun_days=TODAY_ONLY, sun_hours_required=2)
        weather = make_weather(daily=[make_day(0, uv_index_max=9, temp_min=3)])
        kinds = [p.kind for p in plan_smart_sun_notifications([plant], weather, EARLY)]
        assert kinds == [KIND_SUNRISE, KIND_SUNSET, KIND_UV, KIND_TEMPERATURE]

    def test_no_weather(self, make_plant):
        assert plan_smart_sun_notifications([make_plant()], None, EARLY) == []


class TestWeatherAlertPlan:
    def test_alert_plan(self, make_plant, make_weather, make_day):
        weather = make_weather(daily=[make_day(0), make_day(1, temp_min=2)])
        [alert] = generate_plant_alerts([make_plant(name="Calathea")], weather)

        plan = plan_weather_alert(alert, datetime(2024, 1, 10, 19, 0), EARLY)
        assert plan.priority == "max"
        assert plan.to_dict()["trigger"] == {"type": "date", "at": "2024-01-10T19:00:00"}
        assert plan_weather_alert(alert, EARLY, AFTERNOON) is None
