from plant_agenda.models import PlantDatabaseEntry
from plant_agenda.services.plant_info import (
    describe_condition,
    find_database_entry,
    resolve_plant_info,
    sensitivity_counts,
)


class TestFindDatabaseEntry:
    def test_database_id_wins(self, make_plant):
        plant = make_plant(name="Basil", database_id="boston-fern")
        assert find_database_entry(plant).id == "boston-fern"

    def test_name_match_is_case_insensitive(self, make_plant):
        assert find_database_entry(make_plant(name="BOSTON FERN")).id == "boston-fern"

    def test_scientific_name_match(self, make_plant):
        assert find_database_entry(make_plant(name="ocimum basilicum")).id == "basil"

    def test_containment_either_way(self, make_plant):
        assert find_database_entry(make_plant(name="My basil on the balcony")).id == "basil"
        assert find_database_entry(make_plant(name="lemon")).id == "lemon-tree"

    def test_type_id_fallback(self, make_plant):
        plant = make_plant(name="Mystery shrub", type_id="monstera")
        assert find_database_entry(plant).id == "monstera"

    def test_no_match(self, make_plant):
        assert find_database_entry(make_plant()) is None

    def test_custom_database(self, make_plant):
        entry = PlantDatabaseEntry(
            id="shrub", name="Mystery shrub", scientific_name="Frutex ignotus", icon="🌳",
            watering_interval_days=5, sun_hours=4, temp_min=2, temp_max=40, humidity="low",
        )
        assert find_database_entry(make_plant(), database=[entry]) is entry


class TestResolvePlantInfo:
    def test_defaults_without_match(self, make_plant):
        info = resolve_plant_info(make_plant())
        assert (info.temp_min, info.temp_max, info.humidity) == (10, 30, "medium")
        assert info.db_entry is None

    def test_database_values(self, make_plant):
        info = resolve_plant_info(make_plant(name="Boston fern", sun_hours_required=1))
        assert (info.temp_min, info.temp_max, info.humidity) == (13, 27, "high")
        assert info.needs_high_humidity
        assert info.is_sensitive_to_sun
        assert info.is_sensitive_to_heat
        assert info.is_sensitive_to_cold

    def test_overrides_take_precedence_per_field(self, make_plant):
        plant = make_plant(name="Boston fern", min_tolerable_temp=2, humidity_preference="low")
        info = resolve_plant_info(plant)
        assert info.temp_min == 2
        assert info.temp_max == 27
        assert info.humidity == "low"
        assert not info.is_sensitive_to_cold

    def test_zero_override_is_respected(self, make_plant):
        assert resolve_plant_info(make_plant(min_tolerable_temp=0)).temp_min == 0


class TestHelpers:
    def test_describe_condition(self, make_plant):
        info = resolve_plant_info(make_plant(name="Calathea", sun_hours_required=1))
        assert "can't tolerate below 18" in describe_condition(info, 10, None)
        assert "suffers above 27" in describe_condition(info, 30, None)
        assert "strong sun" in describe_condition(info, 22, 9)
        assert describe_condition(info, 22, 2) is None

    def test_sensitivity_counts(self, make_plant):
        infos = [
            resolve_plant_info(make_plant(id="a", name="Calathea", sun_hours_required=1)),
            resolve_plant_info(make_plant(id="b", name="Rosemary", sun_hours_required=6)),
        ]
        assert sensitivity_counts(infos) == (1, 1, 1)
