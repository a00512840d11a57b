"""Year-over-year rating development."""

from __future__ import annotations

import random

from pyleague.config import LeagueContext, PlayerStatus, rank_fraction
from pyleague.models import Player

from .bounds import bound, limit_rating, round_half_up
from .generator import derive_row, gen_fuzz, ovr


EASY_KEYS = ("stre", "endu", "ins", "ft", "fg", "tp", "blk", "stl")
MIDDLE_KEYS = ("spd", "jmp", "dnk")
HARD_KEYS = ("drb", "pss", "reb")

# Past this age potential collapses onto overall.
PEAK_AGE = 28
POTENTIAL_CEILING = 95
JUMP_PROBABILITY = 0.015
JUMP_MAX_AGE = 22
DECLINE_AGES = (29, 31, 35)


def _base_change(pot: int, current: int, age: int, coaching: float, rng) -> float:
    sigma = (pot - current) / 10
    change = bound(rng.gauss(rng.randint(-1, 3), sigma), -5, 30)
    if change + pot > POTENTIAL_CEILING:
        change = POTENTIAL_CEILING - pot

    if change > 0:
        change *= 1 + (pot - current) / 8

    if age > 23:
        change /= 3
    for threshold in DECLINE_AGES:
        if age > threshold:
            change -= 1

    if change >= 0:
        change *= 1.25 - 0.5 * coaching
    else:
        change *= 0.75 + 0.5 * coaching
    return change


def develop(
    player: Player,
    *,
    context: LeagueContext,
    years: int = 1,
    generate: bool = False,
    coaching_rank: float | None = None,
    rng: random.Random | None = None,
) -> Player:
    """Advance the latest rating row by ``years`` seasons.

    The latest row is replaced by a developed copy; earlier rows are untouched.
    With ``generate`` the birth year moves back instead, so a freshly generated
    player ends up ``years`` older than the age they were drawn at.
    Retired players are returned unchanged.
    """

    if player.tid == PlayerStatus.RETIRED:
        return player

    rng = rng if rng is not None else random
    if coaching_rank is None:
        coaching_rank = (context.num_teams + 1) / 2
    coaching = rank_fraction(coaching_rank, context.num_teams)

    row = player.latest_ratings
    attrs = row.attributes()
    current = row.ovr
    pot = row.pot
    age = player.age(context.season)

    for _ in range(years):
        age += 1

        if rng.random() < JUMP_PROBABILITY and age < JUMP_MAX_AGE:
            pot += 10

        change = _base_change(pot, current, age, coaching, rng)

        for key in EASY_KEYS:
            attrs[key] = limit_rating(attrs[key] + rng.gauss(2, 2) * change)
        for key in MIDDLE_KEYS:
            attrs[key] = limit_rating(attrs[key] + bound(rng.gauss(1, 2) * change, -100, 35))
        for key in HARD_KEYS:
            attrs[key] = limit_rating(attrs[key] + bound(rng.gauss(1, 2) * change, -10, 20))

        current = ovr(attrs)
        pot += -2 + round_half_up(rng.gauss(0, 2))
        if current > pot or age > PEAK_AGE:
            pot = current

    # A zero-year call still has to restore the invariant
    if current > pot or age > PEAK_AGE:
        pot = current

    changes = {"ratings": [*player.ratings[:-1], derive_row(row, attrs, pot=pot)]}
    if generate:
        changes["born"] = player.born.evolve(year=player.born.year - years)
    return player.evolve(**changes)


def add_ratings_row(
    player: Player,
    scouting_rank: float,
    *,
    context: LeagueContext,
    rng: random.Random | None = None,
) -> Player:
    """Open the new season with a copy of the latest row and refreshed fuzz."""

    if player.tid == PlayerStatus.RETIRED:
        raise ValueError(f"Player {player.pid} is retired and gets no new rating rows")
    latest = player.latest_ratings
    fuzz = (latest.fuzz + gen_fuzz(scouting_rank, context=context, rng=rng)) / 2
    row = latest.evolve(season=context.season, fuzz=fuzz)
    return player.evolve(ratings=[*player.ratings, row])
