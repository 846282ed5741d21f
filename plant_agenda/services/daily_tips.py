"""
Tip of the day.

Glues the season resolver, the selector, the seen-tips tracker and the
entitlement gate together: one call returns the next tip to show, or tells
the caller the free allowance for today is used up.
"""

from __future__ import annotations
import threading
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Optional

from cachetools import LRUCache
from flask import current_app, has_app_context

from ..constants import DEFAULT_LATITUDE, SEEN_TIPS_KEY
from ..models import CareTip, Location, Plant, TipContext, WeatherData
from .premium import can_show_more
from .seasons import resolve_season
from .seen_tips import SeenTipTracker
from .storage import KeyValueStore, init_storage
from .tip_selector import RandomSource, select_tip

EXTENSION_KEY = "plant_agenda.tip_trackers"


def _get_config(key: str, default: Any) -> Any:
    if has_app_context():
        return current_app.config.get(key, default)
    return default


@dataclass(frozen=True)
class DailyTipResult:
    tip: Optional[CareTip]
    shown_today: int
    locked: bool = False

    def to_dict(self) -> dict:
        return {
            "tip": self.tip.to_dict() if self.tip else None,
            "shownToday": self.shown_today,
            "locked": self.locked,
        }


def build_tip_context(
    plants: Iterable[Plant],
    location: Optional[Location],
    weather: Optional[WeatherData],
    today: Optional[date] = None,
) -> TipContext:
    """Snapshot of everything the tip rules look at, with the season resolved."""
    today = today or date.today()
    latitude = location.lat if location else _get_config("DEFAULT_LATITUDE", DEFAULT_LATITUDE)
    return TipContext(
        season=resolve_season(latitude, today),
        weather=weather,
        plants=tuple(plants),
        location=location,
        today=today,
    )


def next_daily_tip(
    context: TipContext,
    tracker: SeenTipTracker,
    rng: Optional[RandomSource] = None,
    is_premium: bool = False,
    install_date=None,
) -> DailyTipResult:
    """
    Pick and record the next tip for today.

    Returns a locked result (no tip) once a free user has used today's
    allowance outside the trial window. A context where no rule applies
    yields tip=None without being locked.
    """
    state = tracker.load(context.today)
    shown = len(state.tip_ids)

    if not can_show_more(shown, install_date, is_premium, today=context.today):
        return DailyTipResult(tip=None, shown_today=shown, locked=True)

    tip = select_tip(context, state.tip_ids, rng)
    if tip is None:
        return DailyTipResult(tip=None, shown_today=shown)

    state = tracker.record_shown(tip.id, context.today)
    return DailyTipResult(tip=tip, shown_today=len(state.tip_ids))


class TipTrackerRegistry:
    """
    One seen-tip tracker per device, each under its own storage key.

    Trackers are kept in a bounded LRU. An evicted tracker is rebuilt from
    the store on its next use.
    """

    def __init__(self, store: KeyValueStore, base_key: str = SEEN_TIPS_KEY, maxsize: int = 1024):
        self._store = store
        self._base_key = base_key
        self._trackers: LRUCache = LRUCache(maxsize=maxsize)
        self._lock = threading.Lock()

    def key_for(self, device_id: str) -> str:
        return f"{self._base_key}:{device_id}"

    def for_device(self, device_id: str) -> SeenTipTracker:
        with self._lock:
            tracker = self._trackers.get(device_id)
            if tracker is None:
                tracker = SeenTipTracker(self._store, key=self.key_for(device_id))
                self._trackers[device_id] = tracker
            return tracker


def init_tip_trackers(app) -> TipTrackerRegistry:
    """Create the per-device tracker registry over the configured store."""
    store = app.extensions.get("plant_agenda.store") or init_storage(app)
    registry = TipTrackerRegistry(
        store,
        base_key=app.config.get("SEEN_TIPS_KEY", SEEN_TIPS_KEY),
        maxsize=app.config.get("TIP_TRACKER_CACHE_SIZE", 1024),
    )
    app.extensions[EXTENSION_KEY] = registry
    return registry
