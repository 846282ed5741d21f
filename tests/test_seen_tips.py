from datetime import date
from unittest.mock import MagicMock

from plant_agenda.constants import SEEN_TIPS_KEY
from plant_agenda.models import SeenTipsState
from plant_agenda.services.seen_tips import SeenTipTracker, state_from_record
from plant_agenda.services.storage import InMemoryStore, StorageError

DAY_ONE = date(2024, 1, 10)
DAY_TWO = date(2024, 1, 11)


class Clock:
    def __init__(self, today):
        self.today = today

    def __call__(self):
        return self.today


class TestStateFromRecord:
    def test_parses_and_deduplicates(self):
        state = state_from_record({"date": "2024-01-10", "tipIds": ["a", "b", "a", 3]})
        assert state == SeenTipsState(date=DAY_ONE, tip_ids=("a", "b"))

    def test_malformed_records(self):
        assert state_from_record(None) is None
        assert state_from_record({"date": "not-a-date", "tipIds": []}) is None
        assert state_from_record({"date": "2024-01-10", "tipIds": "a"}) is None


class TestSeenTipTracker:
    def test_load_on_empty_store_persists_reset(self):
        store = InMemoryStore()
        tracker = SeenTipTracker(store, today_provider=Clock(DAY_ONE))

        state = tracker.load()

        assert state.tip_ids == ()
        assert store.get(SEEN_TIPS_KEY) == {"date": "2024-01-10", "tipIds": []}

    def test_record_shown_persists_and_ignores_duplicates(self):
        store = InMemoryStore()
        tracker = SeenTipTracker(store, today_provider=Clock(DAY_ONE))

        tracker.record_shown("rotate-pots")
        tracker.record_shown("clean-leaves")
        tracker.record_shown("rotate-pots")

        assert store.get(SEEN_TIPS_KEY) == {"date": "2024-01-10", "tipIds": ["rotate-pots", "clean-leaves"]}

    def test_load_keeps_todays_record(self):
        store = InMemoryStore({SEEN_TIPS_KEY: {"date": "2024-01-10", "tipIds": ["a"]}})
        tracker = SeenTipTracker(store, today_provider=Clock(DAY_ONE))
        assert tracker.load().tip_ids == ("a",)

    def test_stale_record_is_reset_on_load(self):
        store = InMemoryStore({SEEN_TIPS_KEY: {"date": "2024-01-09", "tipIds": ["a"]}})
        tracker = SeenTipTracker(store, today_provider=Clock(DAY_ONE))

        assert tracker.load().tip_ids == ()
        assert store.get(SEEN_TIPS_KEY)["date"] == "2024-01-10"

    def test_day_rollover_clears_seen_ids(self):
        clock = Clock(DAY_ONE)
        store = InMemoryStore()
        tracker = SeenTipTracker(store, today_provider=clock)
        tracker.record_shown("a")
        assert tracker.seen_ids() == {"a"}

        clock.today = DAY_TWO
        assert tracker.is_new_day()
        assert tracker.seen_ids() == frozenset()
        assert store.get(SEEN_TIPS_KEY) == {"date": "2024-01-11", "tipIds": []}

    def test_record_after_rollover_starts_fresh_set(self):
        clock = Clock(DAY_ONE)
        tracker = SeenTipTracker(InMemoryStore(), today_provider=clock)
        tracker.record_shown("a")

        clock.today = DAY_TWO
        assert tracker.record_shown("b").tip_ids == ("b",)

    def test_store_failures_fall_back_to_memory(self):
        store = MagicMock()
        store.get.side_effect = StorageError("offline")
        store.set.side_effect = StorageError("offline")
        tracker = SeenTipTracker(store, today_provider=Clock(DAY_ONE))

        assert tracker.load().tip_ids == ()
        tracker.record_shown("a")

        assert tracker.seen_ids() == {"a"}
        assert store.set.called

    def test_failed_reload_keeps_in_memory_state(self):
        store = MagicMock()
        store.get.return_value = None
        tracker = SeenTipTracker(store, today_provider=Clock(DAY_ONE))
        tracker.record_shown("a")

        store.get.side_effect = StorageError("offline")
        assert tracker.load().tip_ids == ("a",)

    def test_failed_save_survives_reload_of_stale_record(self):
        store = MagicMock()
        store.get.return_value = {"date": "2024-01-09", "tipIds": ["old"]}
        store.set.side_effect = StorageError("read-only")
        tracker = SeenTipTracker(store, today_provider=Clock(DAY_ONE))

        tracker.load()
        tracker.record_shown("a")

        assert tracker.load().tip_ids == ("a",)

    def test_reload_merges_todays_stored_ids_after_memory(self):
        store = MagicMock()
        store.get.return_value = {"date": "2024-01-10", "tipIds": ["x"]}
        store.set.side_effect = StorageError("read-only")
        tracker = SeenTipTracker(store, today_provider=Clock(DAY_ONE))

        tracker.load()
        tracker.record_shown("a")
        store.get.return_value = {"date": "2024-01-10", "tipIds": ["y", "x"]}

        assert tracker.load().tip_ids == ("x", "a", "y")

    def test_explicit_day_overrides_clock(self):
        store = InMemoryStore()
        tracker = SeenTipTracker(store, today_provider=Clock(DAY_ONE))

        tracker.record_shown("a", today=DAY_TWO)

        assert store.get(SEEN_TIPS_KEY) == {"date": "2024-01-11", "tipIds": ["a"]}
        assert tracker.load(DAY_TWO).tip_ids == ("a",)
        assert not tracker.is_new_day(DAY_TWO)
