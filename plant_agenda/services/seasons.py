"""
Season resolution for both hemispheres.

Months are bucketed the northern way (spring = Mar-May, summer = Jun-Aug,
fall = Sep-Nov, winter = Dec-Feb) and inverted for negative latitudes.
"""

from __future__ import annotations
from datetime import date
from typing import Optional

from ..constants import (
    DEFAULT_LATITUDE,
    SEASON_FALL,
    SEASON_SPRING,
    SEASON_SUMMER,
    SEASON_WINTER,
)

_OPPOSITE = {
    SEASON_SPRING: SEASON_FALL,
    SEASON_FALL: SEASON_SPRING,
    SEASON_SUMMER: SEASON_WINTER,
    SEASON_WINTER: SEASON_SUMMER,
}


def _northern_season(month: int) -> str:
    if 3 <= month <= 5:
        return SEASON_SPRING
    if 6 <= month <= 8:
        return SEASON_SUMMER
    if 9 <= month <= 11:
        return SEASON_FALL
    return SEASON_WINTER


def resolve_season(latitude: Optional[float] = None, as_of: Optional[date] = None) -> str:
    """
    Return the season at a latitude on a date.

    Args:
        latitude: Degrees; None falls back to DEFAULT_LATITUDE (southern)
        as_of: Calendar date, defaults to today

    Returns:
        One of "spring", "summer", "fall", "winter"

    Example:
        >>> resolve_season(40.0, date(2024, 1, 15))
        'winter'
        >>> resolve_season(-34.6, date(2024, 1, 15))
        'summer'
    """
    if latitude is None:
        latitude = DEFAULT_LATITUDE
    as_of = as_of or date.today()

    season = _northern_season(as_of.month)
    if latitude < 0:
        return _OPPOSITE[season]
    return season


def season_month_index(as_of: date) -> int:
    """0-based position of the month inside its three-month season.

    Seasons start in Mar/Jun/Sep/Dec in both hemispheres, so the position is
    the same north and south: March and September are both index 0.
    """
    return as_of.month % 3
