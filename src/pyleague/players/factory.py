"""Create new players and complete partial ones."""

from __future__ import annotations

import random
from typing import Any, Dict, Mapping

from pydantic.alias_generators import to_camel

from pyleague.config import DEFAULT_POLICY, LeagueContext, PlayerStatus
from pyleague.contracts import gen_contract, set_contract
from pyleague.models import Born, Contract, DraftInfo, Injury, Player
from pyleague.ratings import derive_row, gen_ratings, limit_rating, ovr, position, round_half_up, skills
from pyleague.ratings.development import PEAK_AGE

from .career import add_stats_row


MIN_HEIGHT = 71  # 5'11"
MAX_HEIGHT = 85  # 7'1"
MIN_WEIGHT = 150
MAX_WEIGHT = 290

# Scouting is worse the further a class is from its draft.
FUZZ_SCALE = {PlayerStatus.UNDRAFTED_2: 2, PlayerStatus.UNDRAFTED_3: 4}
SEASON_OFFSET = {PlayerStatus.UNDRAFTED_2: 1, PlayerStatus.UNDRAFTED_3: 2}

# Copied from a generated template when an uploaded player leaves them out.
SIMPLE_DEFAULTS = (
    "awards",
    "born",
    "college",
    "contract",
    "draft",
    "free_agent_mood",
    "hgt",
    "injury",
    "name",
    "pos",
    "pt_modifier",
    "retired_year",
    "weight",
    "years_free_agent",
)


def generate(
    tid: int,
    age: int,
    profile: str,
    base_rating: float,
    pot: int,
    draft_year: int,
    new_league: bool,
    scouting_rank: float,
    *,
    context: LeagueContext,
    rng: random.Random | None = None,
    name: str = "",
) -> Player:
    """Generate a player with one rating row and, when rostered, one stats row.

    Players for a new league are rated for its starting season; draft
    prospects are rated for their draft year.
    """

    rng = rng if rng is not None else random
    season = context.starting_season if new_league else draft_year
    row = gen_ratings(profile, base_rating, pot, season, scouting_rank, context=context, rng=rng)
    if tid in FUZZ_SCALE:
        row = row.evolve(fuzz=row.fuzz * FUZZ_SCALE[PlayerStatus(tid)])

    hgt = round_half_up(rng.randint(-2, 2) + row.hgt * (MAX_HEIGHT - MIN_HEIGHT) / 100 + MIN_HEIGHT)
    weight = round_half_up(
        rng.randint(-20, 20) + (row.hgt + 0.5 * row.stre) * (MAX_WEIGHT - MIN_WEIGHT) / 150 + MIN_WEIGHT
    )

    player = Player(
        name=name,
        tid=tid,
        pos=position(row.attributes()),
        hgt=hgt,
        weight=weight,
        born=Born(year=context.season - age, loc="USA"),
        ratings=[row],
        contract=Contract(amount=DEFAULT_POLICY.min_amount, exp=context.season),
        free_agent_mood=[0.0] * context.num_teams,
        draft=DraftInfo(year=draft_year, pot=pot, ovr=row.ovr, skills=row.skills),
        injury=Injury(),
    )
    player = set_contract(player, gen_contract(player, context=context, rng=rng), signed=False, context=context)

    if tid >= 0:
        player = add_stats_row(player, context=context)
    return player


def bonus(
    player: Player,
    amount: int,
    *,
    context: LeagueContext,
    randomize_exp: bool = False,
    rng: random.Random | None = None,
) -> Player:
    """Shift every rating but height by ``amount`` while bootstrapping a league.

    The contract is regenerated and only signed for rostered players.
    """

    row = player.latest_ratings
    attrs = row.attributes()
    for key in attrs:
        if key != "hgt":
            attrs[key] = limit_rating(attrs[key] + amount)

    developed = derive_row(row, attrs, pot=limit_rating(row.pot + amount))
    if developed.ovr > developed.pot or player.age(context.season) > PEAK_AGE:
        developed = developed.evolve(pot=developed.ovr)

    player = player.evolve(ratings=[*player.ratings[:-1], developed])
    contract = gen_contract(player, context=context, randomize_exp=randomize_exp, rng=rng)
    return set_contract(player, contract, signed=player.tid >= 0, context=context)


def _present(data: Mapping[str, Any], field: str) -> bool:
    return field in data or to_camel(field) in data


def _value(data: Mapping[str, Any], field: str) -> Any:
    return data[field] if field in data else data[to_camel(field)]


def augment_partial_player(
    data: Mapping[str, Any],
    *,
    context: LeagueContext,
    scouting_rank: float,
    rng: random.Random | None = None,
) -> Player:
    """Complete a partial player, e.g. from an uploaded roster file.

    Keys may be snake_case or camelCase. ``tid`` and the rating attributes of
    the first rating row are required; everything else is filled in from a
    generated template.
    """

    rng = rng if rng is not None else random
    record: Dict[str, Any] = dict(data)
    starting = context.starting_season

    if _present(record, "born"):
        born = _value(record, "born")
        born_year = born.year if isinstance(born, Born) else born["year"]
        age = starting - born_year
    else:
        age = rng.randint(19, 35)

    tid = int(record["tid"])
    template = generate(tid, age, "", 0, 0, starting - age, True, scouting_rank, context=context, rng=rng)

    for field in SIMPLE_DEFAULTS:
        if not _present(record, field):
            record[field] = getattr(template, field)
    if not _present(record, "stats_tids"):
        record["stats_tids"] = []

    ratings = list(record["ratings"])
    first = dict(ratings[0])
    attrs = {key: first[key] for key in template.latest_ratings.attributes()}
    if "fuzz" not in first:
        first["fuzz"] = template.latest_ratings.fuzz
    if "skills" not in first:
        first["skills"] = skills(attrs)
    if "ovr" not in first:
        first["ovr"] = ovr(attrs)
    if first.get("pot", 0) < first["ovr"]:
        first["pot"] = first["ovr"]
    if tid in SEASON_OFFSET:
        first["season"] = starting + SEASON_OFFSET[PlayerStatus(tid)]
    elif "season" not in first:
        first["season"] = starting
    record["ratings"] = [first, *ratings[1:]]

    has_salaries = _present(record, "salaries")
    has_stats = _present(record, "stats")
    player = Player.model_validate(record)

    if not has_salaries:
        contract = player.contract
        if contract.exp < starting:
            contract = contract.evolve(exp=starting)
        player = set_contract(player, contract, signed=player.tid >= 0, context=context)
    if not has_stats and player.tid >= 0:
        player = add_stats_row(player, context=context)
    return player
