"""Free-agent moods, the free-agent pool and releases."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from pyleague.config import LeagueContext, Phase, PlayerStatus, rank_fraction
from pyleague.contracts import gen_contract, set_contract
from pyleague.models import Player, ReleasedPlayer, Team
from pyleague.persistence import Transaction
from pyleague.ratings.bounds import bound

logger = logging.getLogger(__name__)

CHAMPION_MOOD = -0.25
CHAMPION_PROBABILITY = 0.99
# Players below this ovr + pot take any offer.
CHOOSY_THRESHOLD = 80
MAX_MOOD = 1000
# Slot filled for a team id with no stored team record.
UNKNOWN_TEAM_MOOD = 0.5


@dataclass(frozen=True)
class MoodDescriptor:
    color: str
    text: str


MOOD_BUCKETS = (
    (0.25, MoodDescriptor("#5cb85c", "Eager to reach an agreement.")),
    (0.5, MoodDescriptor("#ccc", "Willing to sign for the right price.")),
    (0.75, MoodDescriptor("#f0ad4e", "Annoyed at you.")),
)
INSULTED = MoodDescriptor("#d9534f", "Insulted by your presence.")


def compute_base_moods(
    teams: Iterable[Team],
    *,
    context: LeagueContext,
    rng: random.Random | None = None,
) -> List[float]:
    """Base mood of free agents toward each team, indexed by team id.

    The list always has ``context.num_teams`` entries; ids without a stored
    team get ``UNKNOWN_TEAM_MOOD``. Lower is friendlier. A fresh champion is
    almost never refused.
    """

    rng = rng if rng is not None else random
    moods: List[float] = [UNKNOWN_TEAM_MOOD] * context.num_teams
    for team in sorted(teams, key=lambda item: item.tid):
        if not 0 <= team.tid < context.num_teams:
            raise ValueError(f"Team {team.tid} is outside a league of {context.num_teams} teams")
        season = team.latest_season
        if season.playoff_rounds_won == context.num_playoff_rounds and rng.random() < CHAMPION_PROBABILITY:
            moods[team.tid] = CHAMPION_MOOD
            continue

        facilities_rank = season.facilities_rank
        if facilities_rank is None:
            facilities_rank = (context.num_teams + 1) / 2

        mood = 0.5 * (1 - season.hype)
        mood += 0.1 * rank_fraction(facilities_rank, context.num_teams)
        mood += 0.2 * (1 - season.pop / 10)
        mood += rng.uniform(-0.2, 0.2)
        moods[team.tid] = bound(mood, 0, 1)
    return moods


def gen_base_moods(tx: Transaction, *, context: LeagueContext, rng: random.Random | None = None) -> List[float]:
    """Read every team once through ``tx`` so all moods share one snapshot."""

    return compute_base_moods(tx.get_all("teams"), context=context, rng=rng)


def add_to_free_agents(
    tx: Transaction,
    player: Player,
    *,
    base_moods: Sequence[float],
    context: LeagueContext,
    phase: Phase | None = None,
    rng: random.Random | None = None,
) -> Player:
    """Move ``player`` into the free-agent pool and store the result.

    The contract is regenerated as an unsigned asking price.
    """

    rng = rng if rng is not None else random
    phase = context.phase if phase is None else phase
    latest = player.latest_ratings

    contract = gen_contract(player, context=context, rng=rng)
    player = set_contract(player, contract, signed=False, context=context)

    if latest.ovr + latest.pot < CHOOSY_THRESHOLD:
        moods = [0.0 for _ in base_moods]
    elif phase == Phase.RESIGN_PLAYERS:
        moods = [bound(mood + rng.uniform(-1, 0.5), 0, MAX_MOOD) for mood in base_moods]
    else:
        moods = [bound(mood + rng.uniform(-1, 1.5), 0, MAX_MOOD) for mood in base_moods]

    # Late in the season the deal has to cover next year too
    if phase > Phase.AFTER_TRADE_DEADLINE:
        contract = contract.evolve(exp=contract.exp + 1)

    player = player.evolve(
        contract=contract,
        free_agent_mood=moods,
        tid=int(PlayerStatus.FREE_AGENT),
        pt_modifier=1.0,
    )
    return tx.put("players", player)


def release(
    tx: Transaction,
    player: Player,
    *,
    just_drafted: bool,
    context: LeagueContext,
    rng: random.Random | None = None,
) -> Player:
    """Cut ``player``; the team keeps owing the salary unless the pick was just made."""

    if not just_drafted:
        tx.add("releasedPlayers", ReleasedPlayer(pid=player.pid, tid=player.tid, contract=player.contract))
        logger.info(
            "Released player %s from team %s with %s owed through %s",
            player.pid,
            player.tid,
            player.contract.amount,
            player.contract.exp,
        )
    else:
        logger.info("Released just-drafted player %s from team %s", player.pid, player.tid)

    base_moods = gen_base_moods(tx, context=context, rng=rng)
    return add_to_free_agents(tx, player, base_moods=base_moods, context=context, phase=context.phase, rng=rng)


def mood_bucket(mood: float) -> MoodDescriptor:
    for ceiling, descriptor in MOOD_BUCKETS:
        if mood < ceiling:
            return descriptor
    return INSULTED


def mood_color_text(player: Player, *, tid: int) -> MoodDescriptor:
    """Describe how ``player`` feels about negotiating with team ``tid``."""

    if not 0 <= tid < len(player.free_agent_mood):
        raise KeyError(f"No mood recorded for team {tid}")
    return mood_bucket(player.free_agent_mood[tid])
