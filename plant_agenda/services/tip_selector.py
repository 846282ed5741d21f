"""
Tip selection: predicate filtering, seen-id exclusion and priority-weighted
random sampling over the care tip catalog.

Weights are linear in priority, so among eligible rules a priority-9 tip is
nine times as likely as a priority-1 tip. Once every applicable tip has been
shown today, selection cycles back to a uniform pick over all of them.
"""

from __future__ import annotations
import random
from typing import AbstractSet, Iterable, List, Optional, Protocol, Sequence

from ..models import CareTip, TipContext
from ..utils.errors import log_debug
from .tip_catalog import CARE_TIPS


class RandomSource(Protocol):
    def random(self) -> float:
        ...


_default_rng = random.Random()


def is_applicable(tip: CareTip, context: TipContext) -> bool:
    """Evaluate a tip predicate; a raising predicate counts as not applicable."""
    try:
        return bool(tip.condition(context))
    except Exception as e:
        log_debug("Tip predicate failed", tip_id=tip.id, error=repr(e))
        return False


def applicable_tips(
    context: TipContext,
    exclude: AbstractSet[str] = frozenset(),
    catalog: Sequence[CareTip] = CARE_TIPS,
) -> List[CareTip]:
    """Tips whose predicate holds and whose id is not excluded, in catalog order."""
    return [tip for tip in catalog if tip.id not in exclude and is_applicable(tip, context)]


def weighted_pick(tips: Sequence[CareTip], rng: RandomSource) -> CareTip:
    """
    Pick one tip with probability proportional to its priority.

    Draws r in [0, total) and walks the tips in order, subtracting each weight;
    the tip at which the remainder first drops to zero or below wins.
    """
    total = sum(tip.priority for tip in tips)
    remainder = rng.random() * total
    for tip in tips:
        remainder -= tip.priority
        if remainder <= 0:
            return tip
    # Only reachable through float rounding at the top of the range
    return tips[-1]


def uniform_pick(tips: Sequence[CareTip], rng: RandomSource) -> CareTip:
    index = min(int(rng.random() * len(tips)), len(tips) - 1)
    return tips[index]


def select_tip(
    context: TipContext,
    seen_ids: Iterable[str] = (),
    rng: Optional[RandomSource] = None,
    catalog: Sequence[CareTip] = CARE_TIPS,
) -> Optional[CareTip]:
    """
    Select the next tip to show.

    Args:
        context: Season, weather, plants and location to evaluate rules against
        seen_ids: Tip ids already shown today
        rng: Object with random() -> float in [0, 1); defaults to a module RNG
        catalog: Rule catalog (tests may pass a smaller one)

    Returns:
        A CareTip, or None when no rule applies to the context at all

    Example:
        >>> tip = select_tip(context, seen_ids={"rotate-pots"})
        >>> tip.id != "rotate-pots"
        True
    """
    rng = rng or _default_rng
    seen = frozenset(seen_ids)

    candidates = applicable_tips(context, seen, catalog)
    if candidates:
        return weighted_pick(candidates, rng)

    # Everything applicable has been seen today: cycle back
    everything = applicable_tips(context, frozenset(), catalog)
    if not everything:
        return None
    return uniform_pick(everything, rng)


def select_top_tips(
    context: TipContext,
    max_count: int = 3,
    catalog: Sequence[CareTip] = CARE_TIPS,
) -> List[CareTip]:
    """Highest-priority applicable tips; equal priorities keep catalog order."""
    if max_count <= 0:
        return []
    tips = applicable_tips(context, frozenset(), catalog)
    # sorted() is stable, and reverse=True keeps equal keys in original order
    return sorted(tips, key=lambda tip: tip.priority, reverse=True)[:max_count]
