import random

import pytest

from pyleague.config import LeagueContext
from pyleague.models import RATING_KEYS
from pyleague.ratings import (
    PROFILES,
    bound,
    derive_row,
    fuzz_rating,
    gen_fuzz,
    gen_ratings,
    limit_rating,
    ovr,
    position,
    round_half_up,
    skills,
)


CONTEXT = LeagueContext(season=2013)


def _attrs(level: int = 50, **overrides) -> dict[str, int]:
    attrs = {key: level for key in RATING_KEYS}
    attrs.update(overrides)
    return attrs


@pytest.mark.parametrize(
    "raw, expected",
    [(-5, 0), (0, 0), (55.9, 55), (100, 100), (100.7, 100), (250, 100)],
)
def test_limit_rating(raw, expected):
    assert limit_rating(raw) == expected
    assert limit_rating(limit_rating(raw)) == expected


def test_bound_and_half_up_rounding():
    assert bound(-1, 0, 1) == 0
    assert bound(2, 0, 1) == 1
    assert bound(0.4, 0, 1) == 0.4
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-0.5) == 0


def test_fuzz_rating_clamps_before_rounding():
    assert fuzz_rating(98, 5) == 100
    assert fuzz_rating(1, -4) == 0
    assert fuzz_rating(50, 2.5) == 53


def test_ovr_uses_weighted_mean_with_half_up():
    assert ovr(_attrs(50)) == 50
    # 4 * 100 / 32 = 12.5
    assert ovr(_attrs(0, hgt=100)) == 13


def test_skills_thresholds():
    assert skills(_attrs(100)) == ["3", "A", "B", "Di", "Dp", "Po", "Ps", "R"]
    assert skills(_attrs(50)) == []
    assert skills(_attrs(0, tp=100)) == ["3"]


@pytest.mark.parametrize(
    "overrides, expected",
    [
        (dict(hgt=20, stre=50, spd=50, pss=60, drb=60), "PG"),
        (dict(hgt=30, stre=50, spd=50, pss=60, drb=60), "G"),
        (dict(hgt=55, stre=40, spd=50, pss=40, drb=40), "SF"),
        (dict(hgt=75, stre=40, spd=30, pss=40, drb=10), "PF"),
        (dict(hgt=66, stre=70, spd=30, pss=40, drb=40), "C"),
        (dict(hgt=80, stre=60, spd=30, pss=40, drb=30), "FC"),
        (dict(hgt=45, stre=40, spd=50, pss=40, drb=60), "GF"),
        (dict(hgt=45, stre=40, spd=50, pss=40, drb=15), "PF"),
        (dict(hgt=45, stre=40, spd=50, pss=40, drb=30), "F"),
    ],
)
def test_position_labels(overrides, expected):
    assert position(_attrs(**overrides)) == expected


def test_gen_fuzz_respects_cutoff():
    rng = random.Random(3)
    best = [gen_fuzz(1, context=CONTEXT, rng=rng) for _ in range(500)]
    worst = [gen_fuzz(30, context=CONTEXT, rng=rng) for _ in range(500)]

    assert all(-2 <= fuzz <= 2 for fuzz in best)
    assert all(-10 <= fuzz <= 10 for fuzz in worst)
    assert max(abs(fuzz) for fuzz in worst) > 2


def test_gen_ratings_big_profile_row_is_consistent():
    row = gen_ratings("Big", 60, 70, 2013, 1, context=CONTEXT, rng=random.Random(42))
    attrs = row.attributes()

    assert row.season == 2013
    assert row.pot == 70
    assert all(isinstance(value, int) and 0 <= value <= 100 for value in attrs.values())
    assert row.ovr == ovr(attrs)
    assert row.skills == skills(attrs)
    assert -2 <= row.fuzz <= 2


def test_gen_ratings_tall_players_lose_handling():
    rng = random.Random(11)
    bigs = [gen_ratings("Big", 60, 70, 2013, 15, context=CONTEXT, rng=rng) for _ in range(200)]
    points = [gen_ratings("Point", 60, 70, 2013, 15, context=CONTEXT, rng=rng) for _ in range(200)]

    def mean(rows, key):
        return sum(getattr(row, key) for row in rows) / len(rows)

    assert mean(bigs, "hgt") > mean(points, "hgt")
    assert mean(bigs, "drb") < mean(points, "drb")
    assert mean(bigs, "pss") < mean(points, "pss")


def test_unknown_profile_falls_back_to_base():
    first = gen_ratings("Mascot", 50, 60, 2013, 15, context=CONTEXT, rng=random.Random(5))
    second = gen_ratings("", 50, 60, 2013, 15, context=CONTEXT, rng=random.Random(5))

    assert first == second
    assert set(PROFILES) == {"", "Point", "Wing", "Big"}


def test_derive_row_recomputes_metrics_together():
    template = gen_ratings("Wing", 50, 60, 2013, 15, context=CONTEXT, rng=random.Random(1))
    row = derive_row(template, _attrs(100, hgt=120), pot=99)

    assert row.hgt == 100
    assert row.ovr == 100
    assert row.pot == 99
    assert "R" in row.skills
    assert row.season == template.season
    assert row.fuzz == template.fuzz
