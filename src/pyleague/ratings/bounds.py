"""Numeric clamps shared by every rating formula."""

from __future__ import annotations

import math


def limit_rating(rating: float) -> int:
    """Clamp ``rating`` to an integer in [0, 100]."""

    if rating > 100:
        return 100
    if rating < 0:
        return 0
    return math.floor(rating)


def bound(value: float, low: float, high: float) -> float:
    if value < low:
        return low
    if value > high:
        return high
    return value


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up.

    The calibrated formulas were fitted with this rounding, not banker's rounding.
    """

    return math.floor(value + 0.5)


def fuzz_rating(rating: float, fuzz: float) -> int:
    """Apply display noise to one rating."""

    return round_half_up(bound(rating + fuzz, 0, 100))
