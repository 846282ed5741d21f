from datetime import timedelta

import pytest

from conftest import TODAY, WEDNESDAY
from plant_agenda.services.plant_health import attention_summary, health_level, score_garden, score_plant


def _issue(status, issue_type):
    return [i for i in status.issues if i.type == issue_type]


class TestHealthLevel:
    @pytest.mark.parametrize("score,level", [
        (100, "excellent"),
        (80, "excellent"),
        (79, "good"),
        (60, "good"),
        (59, "warning"),
        (35, "warning"),
        (34, "danger"),
        (0, "danger"),
    ])
    def test_thresholds(self, score, level):
        assert health_level(score) == level


class TestScorePlant:
    def test_healthy_plant_scores_full(self, make_plant):
        status = score_plant(make_plant(), TODAY)
        assert status.score == 100
        assert status.level == "excellent"
        assert status.issues == ()

    def test_overdue_watering(self, make_plant):
        plant = make_plant(watering_interval_days=3, last_watered_date=TODAY - timedelta(days=5))
        status = score_plant(plant, TODAY)

        [issue] = _issue(status, "overdue_water")
        assert issue.severity in ("medium", "high")
        assert issue.days_since == 2
        assert status.score == 70

    def test_one_day_overdue_is_low_severity(self, make_plant):
        plant = make_plant(watering_interval_days=3, last_watered_date=TODAY - timedelta(days=4))
        [issue] = _issue(score_plant(plant, TODAY), "overdue_water")
        assert issue.severity == "low"
        assert issue.message == "Needed water yesterday"

    def test_overdue_penalty_is_monotonic_and_capped(self, make_plant):
        scores = [
            score_plant(make_plant(watering_interval_days=2, last_watered_date=TODAY - timedelta(days=d)), TODAY).score
            for d in range(0, 15)
        ]
        assert scores == sorted(scores, reverse=True)
        assert scores[-1] == 50

    def test_sun_day_not_done(self, make_plant):
        plant = make_plant(sun_days=frozenset({WEDNESDAY}))
        assert score_plant(plant, TODAY).score == 85
        assert score_plant(make_plant(sun_days=frozenset({WEDNESDAY}), sun_done_date=TODAY), TODAY).score == 100

    def test_never_cared_for(self, make_plant):
        status = score_plant(make_plant(last_watered_date=None), TODAY)
        assert [i.type for i in status.issues] == ["no_care"]
        assert status.score == 90

    def test_new_plant_gets_grace_period(self, make_plant):
        plant = make_plant(last_watered_date=None, created_date=TODAY - timedelta(days=2))
        assert score_plant(plant, TODAY).score == 100

    def test_cold_weather(self, make_plant, make_weather):
        status = score_plant(make_plant(), TODAY, make_weather(temperature=5))
        [issue] = _issue(status, "extreme_weather")
        assert issue.severity == "high"
        assert status.score == 90

    def test_forecast_heat_counts(self, make_plant, make_weather, make_day):
        weather = make_weather(daily=[make_day(0, temp_max=33)])
        [issue] = _issue(score_plant(make_plant(), TODAY, weather), "extreme_weather")
        assert issue.severity == "medium"
        assert "Too hot" in issue.message

    def test_dry_air_wind_and_rain(self, make_plant, make_weather, make_day):
        plant = make_plant(
            humidity_preference="high",
            outdoor_days=frozenset({1}),
            last_watered_date=TODAY - timedelta(days=3),
        )
        weather = make_weather(humidity=20, wind_speed=45, daily=[make_day(0, precipitation=12)])
        status = score_plant(plant, TODAY, weather)

        assert len(_issue(status, "extreme_weather")) == 3
        # Rain is informational: only humidity and wind cost points
        assert status.score == 90

    def test_score_stays_in_range(self, make_plant, make_weather):
        plant = make_plant(
            watering_interval_days=1,
            last_watered_date=TODAY - timedelta(days=30),
            sun_days=frozenset({WEDNESDAY}),
            outdoor_days=frozenset({WEDNESDAY}),
            humidity_preference="high",
        )
        status = score_plant(plant, TODAY, make_weather(temperature=-10, humidity=10, wind_speed=80))
        assert 0 <= status.score <= 100
        assert status.level == "danger"


class TestScoreGarden:
    def test_empty_garden_has_no_score(self):
        assert score_garden([], TODAY) is None
        assert attention_summary(None) == ((), 0)

    def test_average_and_attention(self, make_plant):
        plants = [
            make_plant(id="ok"),
            make_plant(id="thirsty", watering_interval_days=2, last_watered_date=TODAY - timedelta(days=12)),
            make_plant(
                id="worst",
                watering_interval_days=2,
                last_watered_date=TODAY - timedelta(days=12),
                sun_days=frozenset({WEDNESDAY}),
            ),
        ]
        garden = score_garden(plants, TODAY)

        assert [s.score for s in garden.statuses] == [100, 50, 35]
        assert garden.average_score == 62
        assert garden.level == "good"
        assert [s.plant_id for s in garden.plants_needing_attention] == ["worst", "thirsty"]

        shown, remaining = attention_summary(garden, limit=1)
        assert [s.plant_id for s in shown] == ["worst"]
        assert remaining == 1
