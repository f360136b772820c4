"""Hour/minute conversion at the persistence boundary.

Durations travel as float hours but are stored as whole minutes. Only the
service layer converts; in-memory aggregation never re-rounds.
"""

import math


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (round() would go to even)."""
    return math.floor(value + 0.5)


def hours_to_minutes(hours: float) -> int:
    """1.25 -> 75"""
    return round_half_up(hours * 60)


def minutes_to_hours(minutes: float) -> float:
    """75 -> 1.25"""
    return round_half_up(minutes) / 60
