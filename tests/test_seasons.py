from datetime import date

from plant_agenda.services.seasons import resolve_season, season_month_index


class TestResolveSeason:
    def test_northern_january_is_winter(self):
        assert resolve_season(40.0, date(2024, 1, 15)) == "winter"

    def test_southern_january_is_summer(self):
        assert resolve_season(-34.6, date(2024, 1, 15)) == "summer"

    def test_missing_latitude_uses_southern_default(self):
        assert resolve_season(None, date(2024, 7, 1)) == "winter"

    def test_equator_counts_as_northern(self):
        assert resolve_season(0.0, date(2024, 4, 1)) == "spring"

    def test_month_boundaries(self):
        assert resolve_season(10, date(2024, 3, 1)) == "spring"
        assert resolve_season(10, date(2024, 5, 31)) == "spring"
        assert resolve_season(10, date(2024, 6, 1)) == "summer"
        assert resolve_season(10, date(2024, 11, 30)) == "fall"
        assert resolve_season(10, date(2024, 12, 1)) == "winter"
        assert resolve_season(-10, date(2024, 3, 1)) == "fall"
        assert resolve_season(-10, date(2024, 9, 1)) == "spring"

    def test_every_month_maps_to_opposite_season_across_hemispheres(self):
        opposite = {"spring": "fall", "fall": "spring", "summer": "winter", "winter": "summer"}
        for month in range(1, 13):
            day = date(2024, month, 15)
            assert resolve_season(-20, day) == opposite[resolve_season(20, day)]


class TestSeasonMonthIndex:
    def test_first_month_of_each_season_is_zero(self):
        for month in (3, 6, 9, 12):
            assert season_month_index(date(2024, month, 1)) == 0

    def test_positions_within_season(self):
        assert season_month_index(date(2024, 4, 1)) == 1
        assert season_month_index(date(2024, 5, 1)) == 2
        assert season_month_index(date(2024, 2, 1)) == 2
