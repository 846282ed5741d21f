"""
Day-scoped record of which care tips were shown today.

One record exists at a time: {"date": "YYYY-MM-DD", "tipIds": [...]}. A
record from an earlier day is discarded and replaced with an empty one for
today as soon as it is noticed (on load, before recording, or when read).
Every mutation is persisted before it returns. If the store fails, the
failure is logged and the tracker keeps working from memory.
"""

from __future__ import annotations
import threading
from datetime import date
from typing import Any, Callable, FrozenSet, Optional

from ..constants import SEEN_TIPS_KEY
from ..models import SeenTipsState
from ..utils.dates import parse_date
from ..utils.errors import log_info, log_warning
from .storage import KeyValueStore


def state_from_record(record: Any) -> Optional[SeenTipsState]:
    """Parse a persisted record; None when it is missing or malformed."""
    if not isinstance(record, dict):
        return None
    try:
        record_date = parse_date(record.get("date"))
    except (TypeError, ValueError):
        return None
    tip_ids = record.get("tipIds")
    if record_date is None or not isinstance(tip_ids, list):
        return None

    # Keep first-seen order, drop duplicates and non-string junk
    ordered = tuple(dict.fromkeys(tid for tid in tip_ids if isinstance(tid, str)))
    return SeenTipsState(date=record_date, tip_ids=ordered)


class SeenTipTracker:
    """
    Tracks the tip ids shown on the current calendar day.

    Example:
        >>> tracker = SeenTipTracker(InMemoryStore())
        >>> tracker.load().tip_ids
        ()
        >>> tracker.record_shown("rotate-pots").tip_ids
        ('rotate-pots',)
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = SEEN_TIPS_KEY,
        today_provider: Callable[[], date] = date.today,
    ):
        self._store = store
        self._key = key
        self._today = today_provider
        self._lock = threading.Lock()
        self._state: Optional[SeenTipsState] = None

    # -- persistence -------------------------------------------------------

    def _read(self) -> Optional[SeenTipsState]:
        try:
            return state_from_record(self._store.get(self._key))
        except Exception as e:
            log_warning(f"Failed to read seen tips, continuing with local state: {e}", key=self._key)
            return None

    def _persist(self, state: SeenTipsState) -> None:
        try:
            self._store.set(self._key, state.to_record())
        except Exception as e:
            log_warning(f"Failed to persist seen tips, keeping them in memory: {e}", key=self._key)

    def _reset_for(self, today: date) -> SeenTipsState:
        state = SeenTipsState(date=today)
        self._state = state
        self._persist(state)
        log_info("Seen tips reset for new day", date=today.isoformat())
        return state

    def _current_locked(self, today: Optional[date] = None, reload: bool = False) -> SeenTipsState:
        """Latest state for `today`; caller must hold the lock."""
        today = today or self._today()
        if self._state is not None and self._state.date == today:
            if reload:
                self._merge_stored(today)
            return self._state

        if self._state is None or reload:
            stored = self._read()
            if stored is not None and stored.date == today:
                self._state = stored
                return stored
        return self._reset_for(today)

    def _merge_stored(self, today: date) -> None:
        """Fold today's stored ids into memory, memory first."""
        stored = self._read()
        if stored is None or stored.date != today:
            return
        merged = tuple(dict.fromkeys(self._state.tip_ids + stored.tip_ids))
        if merged != self._state.tip_ids:
            self._state = SeenTipsState(date=today, tip_ids=merged)

    # -- public API --------------------------------------------------------

    def load(self, today: Optional[date] = None) -> SeenTipsState:
        """
        Bring the state up to date for `today` (defaults to the tracker clock).

        Ids already held in memory for today are kept and today's stored ids
        are merged in after them, so a save that failed earlier loses nothing.
        A missing, malformed or stale record resets the day to an empty set,
        and the reset is persisted before this returns.
        """
        with self._lock:
            return self._current_locked(today, reload=True)

    def record_shown(self, tip_id: str, today: Optional[date] = None) -> SeenTipsState:
        """Append a tip id to the day's set and persist the new state."""
        with self._lock:
            current = self._current_locked(today)
            updated = current.with_tip(tip_id)
            if updated is not current:
                self._state = updated
                self._persist(updated)
            return updated

    def is_new_day(self, today: Optional[date] = None) -> bool:
        """True when the loaded state belongs to a different day than `today`."""
        today = today or self._today()
        with self._lock:
            return self._state is None or self._state.date != today

    def seen_ids(self, today: Optional[date] = None) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._current_locked(today).tip_ids)

    @property
    def state(self) -> SeenTipsState:
        with self._lock:
            return self._current_locked()
