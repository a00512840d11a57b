"""Rating generation and the metrics derived from a rating row."""

from __future__ import annotations

import random
from typing import Dict, List, Mapping, Sequence, Tuple

from pyleague.config import LeagueContext, rank_fraction
from pyleague.models import RATING_KEYS, RatingRow

from .bounds import limit_rating, round_half_up


# Offsets per attribute in RATING_KEYS order.
PROFILES: Dict[str, Tuple[int, ...]] = {
    "": (10, 10, 10, 10, 10, 10, 10, 10, 10, 25, 10, 10, 10, 10, 10),
    "Point": (-30, -10, 40, 15, 0, 0, 0, 10, 15, 15, 0, 20, 40, 40, 0),
    "Wing": (10, 10, 15, 15, 0, 0, 25, 15, 15, 20, 0, 10, 15, 0, 15),
    "Big": (45, 30, -15, -15, -5, 30, 30, -5, -15, -20, 25, -5, -20, -20, 30),
}

SIGMAS: Tuple[int, ...] = (10,) * len(RATING_KEYS)

# Regression-fitted weights; the sum is the divisor.
OVR_WEIGHTS: Dict[str, int] = {
    "hgt": 4,
    "stre": 1,
    "spd": 4,
    "jmp": 2,
    "endu": 3,
    "ins": 3,
    "dnk": 4,
    "ft": 1,
    "fg": 1,
    "tp": 2,
    "blk": 1,
    "stl": 1,
    "drb": 1,
    "pss": 3,
    "reb": 1,
}

SKILL_THRESHOLD = 0.75

SKILLS: Tuple[Tuple[str, Tuple[str, ...], Tuple[float, ...]], ...] = (
    ("3", ("hgt", "tp"), (0.2, 1)),
    ("A", ("stre", "spd", "jmp", "hgt"), (1, 1, 1, 0.5)),
    ("B", ("drb", "spd"), (1, 1)),
    ("Di", ("hgt", "stre", "spd", "jmp", "blk"), (2, 1, 0.5, 0.5, 1)),
    ("Dp", ("hgt", "stre", "spd", "jmp", "stl"), (1, 1, 2, 0.5, 1)),
    ("Po", ("hgt", "stre", "spd", "ins"), (1, 0.6, 0.2, 1)),
    ("Ps", ("drb", "pss"), (0.4, 1)),
    ("R", ("hgt", "stre", "jmp", "reb"), (1, 0.1, 0.1, 0.7)),
)


def ovr(ratings: Mapping[str, float]) -> int:
    total = sum(weight * ratings[key] for key, weight in OVR_WEIGHTS.items())
    return round_half_up(total / sum(OVR_WEIGHTS.values()))


def _has_skill(ratings: Mapping[str, float], components: Sequence[str], weights: Sequence[float]) -> bool:
    numerator = sum(ratings[key] * weight for key, weight in zip(components, weights))
    denominator = sum(100 * weight for weight in weights)
    return numerator / denominator > SKILL_THRESHOLD


def skills(ratings: Mapping[str, float]) -> List[str]:
    """Return the skill labels (``3``, ``A``, ``B``, ``Di``, ``Dp``, ``Po``, ``Ps``, ``R``) earned."""

    return [label for label, components, weights in SKILLS if _has_skill(ratings, components, weights)]


def derive_row(
    template: RatingRow,
    attributes: Mapping[str, int],
    *,
    pot: int | None = None,
    fuzz: float | None = None,
    season: int | None = None,
) -> RatingRow:
    """Build a new row from ``attributes``, recomputing ovr and skills together."""

    attrs = {key: limit_rating(attributes[key]) for key in RATING_KEYS}
    return RatingRow(
        season=template.season if season is None else season,
        **attrs,
        ovr=ovr(attrs),
        pot=template.pot if pot is None else pot,
        skills=skills(attrs),
        fuzz=template.fuzz if fuzz is None else fuzz,
    )


def gen_fuzz(scouting_rank: float, *, context: LeagueContext, rng: random.Random | None = None) -> float:
    """Display noise for one player, wider for teams that spend less on scouting."""

    rng = rng if rng is not None else random
    fraction = rank_fraction(scouting_rank, context.num_teams)
    cutoff = 2 + 8 * fraction
    sigma = 1 + 2 * fraction

    fuzz = rng.gauss(0, sigma)
    if fuzz > cutoff:
        return cutoff
    if fuzz < -cutoff:
        return -cutoff
    return fuzz


def gen_ratings(
    profile: str,
    base_rating: float,
    pot: int,
    season: int,
    scouting_rank: float,
    *,
    context: LeagueContext,
    rng: random.Random | None = None,
) -> RatingRow:
    rng = rng if rng is not None else random
    offsets = PROFILES.get(profile, PROFILES[""])
    base = rng.gauss(base_rating, 5)

    raw = {
        key: limit_rating(rng.gauss(offset + base, sigma))
        for key, offset, sigma in zip(RATING_KEYS, offsets, SIGMAS)
    }

    # Tall players can't dribble or pass very well
    if raw["hgt"] > 40:
        raw["drb"] = limit_rating(raw["drb"] - (raw["hgt"] - 50))
        raw["pss"] = limit_rating(raw["pss"] - (raw["hgt"] - 50))
    else:
        raw["drb"] = limit_rating(raw["drb"] + 10)
        raw["pss"] = limit_rating(raw["pss"] + 10)

    return RatingRow(
        season=season,
        **raw,
        ovr=ovr(raw),
        pot=pot,
        skills=skills(raw),
        fuzz=gen_fuzz(scouting_rank, context=context, rng=rng),
    )


def position(ratings: Mapping[str, float]) -> str:
    """Assign one of PG, SG, SF, PF, C, G, GF, FC or F."""

    g = pg = sg = sf = pf = c = False

    label = "GF" if ratings["drb"] >= 50 else "F"

    if ratings["hgt"] <= 30 or ratings["spd"] >= 85:
        g = True
        if ratings["pss"] + ratings["drb"] >= 100:
            pg = True
        if ratings["hgt"] >= 30:
            sg = True
    if 50 <= ratings["hgt"] <= 65 and ratings["spd"] >= 40:
        sf = True
    if ratings["hgt"] >= 70:
        pf = True
    if ratings["hgt"] + ratings["stre"] >= 130:
        c = True

    if pg and not sg and not sf and not pf and not c:
        label = "PG"
    elif not pg and (g or sg) and not sf and not pf and not c:
        label = "SG"
    elif not pg and not sg and sf and not pf and not c:
        label = "SF"
    elif not pg and not sg and not sf and pf and not c:
        label = "PF"
    elif not pg and not sg and not sf and not pf and c:
        label = "C"

    # Hybrids win over single positions
    if (pf or sf) and g:
        label = "GF"
    elif c and (pf or sf):
        label = "FC"
    elif pg and sg:
        label = "G"
    if label == "F" and ratings["drb"] <= 20:
        label = "PF"

    return label
