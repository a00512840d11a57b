"""Season bookkeeping, retirement and Hall of Fame voting."""

from __future__ import annotations

import logging
from typing import Dict, List

from pyleague.config import LeagueContext, PlayerStatus
from pyleague.models import Award, Player, StatRow

logger = logging.getLogger(__name__)

# Position replacement levels for the wins-added estimate.
REPLACEMENT_LEVELS: Dict[str, float] = {
    "PG": 11,
    "G": 10.75,
    "SG": 10.5,
    "GF": 10.5,
    "SF": 10.5,
    "F": 11,
    "PF": 11.5,
    "FC": 11.05,
    "C": 10.6,
}

HOF_THRESHOLD = 100
DOMINANCE_SEASONS = 5
DOMINANCE_OFFSET = 50
HOF_AWARD = "Inducted into the Hall of Fame"


def add_stats_row(player: Player, *, context: LeagueContext, playoffs: bool = False) -> Player:
    """Open a zeroed stats row for the player's current team this season."""

    if player.tid == PlayerStatus.RETIRED:
        raise ValueError(f"Player {player.pid} is retired and gets no new stats rows")
    row = StatRow(season=context.season, tid=player.tid, playoffs=playoffs)
    stats_tids = list(player.stats_tids)
    if player.tid not in stats_tids:
        stats_tids.append(player.tid)
    return player.evolve(stats=[*player.stats, row], stats_tids=stats_tids)


def wins_added(player: Player) -> List[float]:
    """Estimated wins added for every stats row, best first."""

    level = REPLACEMENT_LEVELS[player.pos]
    # 0.8 scales in-game wins added toward real win shares
    values = [row.min * (row.per - level) / 67 / 30 * 0.8 for row in player.stats]
    return sorted(values, reverse=True)


def made_hof(player: Player, *, context: LeagueContext) -> bool:
    """Decide Hall of Fame induction from career wins added and peak dominance.

    Playoff runs count as separate seasons. Players who were already veterans
    when the league started get credit for the seasons they missed.
    """

    ewas = wins_added(player)
    if not ewas:
        return False

    ewa = sum(ewas)
    dominance = sum(ewas[:DOMINANCE_SEASONS]) - DOMINANCE_OFFSET

    fudge_seasons = context.starting_season - player.draft.year - 5
    if fudge_seasons > 0:
        ewa += ewas[0] * fudge_seasons

    return ewa + dominance > HOF_THRESHOLD


def retire(player: Player, *, context: LeagueContext) -> Player:
    """Move ``player`` to the retired list and vote on the Hall of Fame once.

    Retiring an already retired player returns it unchanged.
    """

    if player.tid == PlayerStatus.RETIRED:
        return player

    if player.tid == context.user_tid:
        logger.info("Player %s (%s) retired from the user's team", player.pid, player.name)
    else:
        logger.debug("Player %s (%s) retired", player.pid, player.name)

    changes = {"tid": int(PlayerStatus.RETIRED), "retired_year": context.season}
    if made_hof(player, context=context):
        changes["hof"] = True
        changes["awards"] = [*player.awards, Award(season=context.season, type=HOF_AWARD)]
        logger.info("Player %s (%s) inducted into the Hall of Fame", player.pid, player.name)

    return player.evolve(**changes)
