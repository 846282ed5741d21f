import random
from collections import Counter
from datetime import date

import pytest

from conftest import SequenceRandom
from plant_agenda.models import CareTip, TipContext
from plant_agenda.services.seen_tips import SeenTipTracker
from plant_agenda.services.storage import InMemoryStore
from plant_agenda.services.tip_catalog import CARE_TIPS, get_tip
from plant_agenda.services.tip_selector import (
    applicable_tips,
    is_applicable,
    select_tip,
    select_top_tips,
    weighted_pick,
)


def _tip(tip_id, priority, condition=lambda ctx: True, category="general"):
    return CareTip(
        id=tip_id,
        category=category,
        condition=condition,
        icon="🌱",
        title=tip_id,
        message=f"Message for {tip_id}",
        priority=priority,
    )


def _context(season="summer", plants=(), weather=None, today=date(2024, 1, 10)):
    return TipContext(season=season, weather=weather, plants=tuple(plants), location=None, today=today)


class TestApplicability:
    def test_raising_predicate_is_not_applicable(self):
        def boom(ctx):
            raise KeyError("missing")

        assert is_applicable(_tip("broken", 5, boom), _context()) is False

    def test_exclusion_keeps_catalog_order(self):
        catalog = [_tip("a", 1), _tip("b", 2), _tip("c", 3)]
        tips = applicable_tips(_context(), exclude={"b"}, catalog=catalog)
        assert [t.id for t in tips] == ["a", "c"]


class TestWeightedPick:
    def test_partition_boundaries(self):
        tips = [_tip("heavy", 9), _tip("light", 1)]
        assert weighted_pick(tips, SequenceRandom(0.0)).id == "heavy"
        assert weighted_pick(tips, SequenceRandom(0.89)).id == "heavy"
        # Remainder lands exactly on zero inside the first weight
        assert weighted_pick(tips, SequenceRandom(0.9)).id == "heavy"
        assert weighted_pick(tips, SequenceRandom(0.91)).id == "light"
        assert weighted_pick(tips, SequenceRandom(0.9999)).id == "light"

    def test_frequencies_follow_priority_ratio(self):
        catalog = [_tip("heavy", 9), _tip("light", 1)]
        rng = random.Random(1234)
        counts = Counter(select_tip(_context(), rng=rng, catalog=catalog).id for _ in range(100_000))
        ratio = counts["heavy"] / 100_000
        assert ratio == pytest.approx(0.9, abs=0.01)


class TestSelectTip:
    def test_seen_tips_are_excluded(self):
        catalog = [_tip("a", 9), _tip("b", 1)]
        for value in (0.0, 0.5, 0.99):
            tip = select_tip(_context(), seen_ids={"a"}, rng=SequenceRandom(value), catalog=catalog)
            assert tip.id == "b"

    def test_exhausted_cycles_back_uniformly(self):
        catalog = [_tip("a", 9), _tip("b", 1)]
        seen = {"a", "b"}
        assert select_tip(_context(), seen, SequenceRandom(0.0), catalog).id == "a"
        # Uniform, not weighted: 0.5 already reaches the second tip
        assert select_tip(_context(), seen, SequenceRandom(0.5), catalog).id == "b"

    def test_nothing_applicable_returns_none(self):
        catalog = [_tip("never", 5, lambda ctx: False)]
        assert select_tip(_context(), rng=SequenceRandom(0.3), catalog=catalog) is None

    def test_visits_every_applicable_tip_before_repeating(self):
        catalog = [_tip(f"t{i}", i + 1) for i in range(6)]
        tracker = SeenTipTracker(InMemoryStore(), today_provider=lambda: date(2024, 1, 10))
        rng = random.Random(99)

        shown = []
        for _ in range(len(catalog)):
            tip = select_tip(_context(), tracker.seen_ids(), rng, catalog)
            tracker.record_shown(tip.id)
            shown.append(tip.id)

        assert sorted(shown) == sorted(t.id for t in catalog)
        # Seventh draw cycles back to something already seen
        assert select_tip(_context(), tracker.seen_ids(), rng, catalog).id in shown

    def test_general_tips_apply_to_an_empty_garden(self):
        tip = select_tip(_context(plants=(), weather=None), rng=random.Random(5))
        assert tip is not None


class TestSelectTopTips:
    def test_orders_by_priority_and_keeps_catalog_order_on_ties(self):
        catalog = [_tip("mid", 5), _tip("first-nine", 9), _tip("second-nine", 9), _tip("low", 1)]
        top = select_top_tips(_context(), max_count=3, catalog=catalog)
        assert [t.id for t in top] == ["first-nine", "second-nine", "mid"]

    def test_ignores_seen_state_and_truncates(self):
        catalog = [_tip("a", 2), _tip("b", 3)]
        assert [t.id for t in select_top_tips(_context(), 1, catalog)] == ["b"]
        assert select_top_tips(_context(), 0, catalog) == []


class TestCareTipCatalog:
    def test_ids_are_unique(self):
        ids = [tip.id for tip in CARE_TIPS]
        assert len(ids) == len(set(ids)) == 100

    def test_every_predicate_handles_missing_weather(self):
        context = _context(plants=(), weather=None)
        for tip in CARE_TIPS:
            # Must not raise; the result itself depends on the rule
            tip.condition(context)

    def test_seasonal_rules_follow_the_season(self):
        winter = _context(season="winter")
        ids = {t.id for t in applicable_tips(winter)}
        assert "winter-less-water" in ids
        assert "spring-fertilize" not in ids

    def test_get_tip(self):
        assert get_tip("rotate-pots").category == "general"
        assert get_tip("no-such-tip") is None
