"""
Entitlement checks for free vs premium users.

Free users get FREE_DAILY_TIPS tips per day and up to FREE_PLANT_LIMIT
plants. During the first TRIAL_DAYS days after install every gated feature
is unlimited. An unknown install date means no trial.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from flask import current_app, has_app_context

from ..utils.dates import days_between, parse_date

DEFAULT_TRIAL_DAYS = 7
DEFAULT_FREE_DAILY_TIPS = 1
DEFAULT_FREE_PLANT_LIMIT = 5


def _get_config(key: str, default: Any) -> Any:
    """
    Get configuration value with fallback.

    Args:
        key: Config key name
        default: Default value if not configured

    Returns:
        Configuration value
    """
    if has_app_context():
        return current_app.config.get(key, default)
    return default


def is_in_trial(install_date, today: Optional[date] = None, trial_days: Optional[int] = None) -> bool:
    """True during the first `trial_days` calendar days after install (install day included)."""
    install = parse_date(install_date)
    if install is None:
        return False
    today = today or date.today()
    trial_days = trial_days if trial_days is not None else _get_config("TRIAL_DAYS", DEFAULT_TRIAL_DAYS)
    elapsed = days_between(install, today)
    return 0 <= elapsed < trial_days


def trial_days_remaining(install_date, today: Optional[date] = None, trial_days: Optional[int] = None) -> int:
    install = parse_date(install_date)
    if install is None:
        return 0
    today = today or date.today()
    trial_days = trial_days if trial_days is not None else _get_config("TRIAL_DAYS", DEFAULT_TRIAL_DAYS)
    return max(0, trial_days - days_between(install, today))


def can_show_more(
    count_shown_so_far: int,
    install_date,
    is_premium: bool = False,
    today: Optional[date] = None,
    free_limit: Optional[int] = None,
) -> bool:
    """
    Whether one more gated item (e.g. a daily tip) may be shown.

    Args:
        count_shown_so_far: Items already shown in the current period
        install_date: date, ISO string or None
        is_premium: Premium users are never limited
        today: Evaluation date (defaults to today)
        free_limit: Free allowance (defaults to FREE_DAILY_TIPS)

    Example:
        >>> can_show_more(1, None)
        False
        >>> can_show_more(5, date(2024, 1, 1), today=date(2024, 1, 3))
        True
    """
    if is_premium or is_in_trial(install_date, today):
        return True
    if free_limit is None:
        free_limit = _get_config("FREE_DAILY_TIPS", DEFAULT_FREE_DAILY_TIPS)
    return count_shown_so_far < free_limit


@dataclass(frozen=True)
class PremiumGate:
    is_premium: bool = False
    install_date: Optional[date] = None
    today: Optional[date] = None

    @property
    def unlocked(self) -> bool:
        return self.is_premium or is_in_trial(self.install_date, self.today)

    def can_add_plant(self, current_count: int) -> bool:
        return self.is_premium or current_count < _get_config("FREE_PLANT_LIMIT", DEFAULT_FREE_PLANT_LIMIT)

    def can_see_alerts(self) -> bool:
        return self.unlocked

    def can_see_forecast(self) -> bool:
        return self.unlocked

    def can_see_tips(self, shown_today: int) -> bool:
        return can_show_more(shown_today, self.install_date, self.is_premium, self.today)

    def is_in_trial(self) -> bool:
        return is_in_trial(self.install_date, self.today)

    def trial_days_remaining(self) -> int:
        return trial_days_remaining(self.install_date, self.today)
