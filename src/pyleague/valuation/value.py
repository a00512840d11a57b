"""Collapse ratings, recent production and age into a single worth estimate."""

from __future__ import annotations

from typing import Tuple

from pyleague.config import LeagueContext
from pyleague.models import Player
from pyleague.ratings.bounds import fuzz_rating


MINUTES_THRESHOLD = 2000
PER_MULTIPLIER = 3.75
RATINGS_SHARE = 0.1

# (potential weight, current weight) for the developing years.
POTENTIAL_BLEND = {
    20: (0.7, 0.3),
    21: (0.5, 0.5),
    22: (0.3, 0.7),
    23: (0.15, 0.85),
    24: (0.1, 0.9),
    25: (0.05, 0.95),
}
YOUNGEST_BLEND: Tuple[float, float] = (0.8, 0.2)

# Discount on current worth once decline sets in.
DECLINE_FACTOR = {29: 0.975, 30: 0.95, 31: 0.9, 32: 0.85, 33: 0.8}
OLDEST_FACTOR = 0.7
DECLINE_AGE = 29


def _blend_minutes(current: float, minutes: float, rating: int) -> float:
    if minutes < MINUTES_THRESHOLD:
        share = minutes / MINUTES_THRESHOLD
        return current * share + rating * (1 - share)
    return current


def current_worth(player: Player, rating: int) -> float:
    """Performance estimate from the two most recent regular seasons."""

    recent = list(reversed(player.regular_season_stats()))
    if not recent:
        return float(rating)

    if len(recent) == 1:
        latest = recent[0]
        current = PER_MULTIPLIER * latest.per
        current = _blend_minutes(current, latest.min, rating)
    else:
        first, second = recent[0], recent[1]
        minutes = first.min + second.min
        current = float(rating)
        if minutes > 0:
            current = PER_MULTIPLIER * (first.per * first.min + second.per * second.min) / minutes
        current = _blend_minutes(current, minutes, rating)

    return RATINGS_SHARE * rating + (1 - RATINGS_SHARE) * current


def value(
    player: Player,
    *,
    context: LeagueContext,
    no_pot: bool = False,
    fuzz: bool = False,
    age: int | None = None,
) -> float:
    """Return the player's worth on the same rough scale as overall and potential.

    ``no_pot`` stops after the performance estimate, ``fuzz`` reads displayed
    rather than true ratings and ``age`` overrides the age derived from the
    birth year (draft prospects are valued at their draft-day age).
    """

    latest = player.latest_ratings
    if fuzz:
        rating_ovr = fuzz_rating(latest.ovr, latest.fuzz)
        potential = fuzz_rating(latest.pot, latest.fuzz)
    else:
        rating_ovr = latest.ovr
        potential = latest.pot

    current = current_worth(player, rating_ovr)
    if no_pot:
        return current

    if age is None:
        age = player.age(context.season)

    if current >= potential and age < DECLINE_AGE:
        return current

    if age <= 19:
        pot_weight, current_weight = YOUNGEST_BLEND
        return pot_weight * potential + current_weight * current
    if age in POTENTIAL_BLEND:
        pot_weight, current_weight = POTENTIAL_BLEND[age]
        return pot_weight * potential + current_weight * current
    if age < DECLINE_AGE:
        return current
    return DECLINE_FACTOR.get(age, OLDEST_FACTOR) * current
