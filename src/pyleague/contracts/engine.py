"""Contract pricing and the salary ledger."""

from __future__ import annotations

import random

from pyleague.config import DEFAULT_POLICY, ContractPolicy, LeagueContext
from pyleague.models import Contract, Player, SalaryEntry
from pyleague.ratings.bounds import bound, round_half_up
from pyleague.valuation import value


MAX_YEARS = 5
MIN_YEARS = 2
# Potential bands that can only ask for short deals, checked in order.
SHORT_DEAL_BANDS = ((40, 1), (50, 2), (60, 3))
ROOKIE_MAX_AGE = 22


def contract_years(pot: int, current: int) -> int:
    years = max(MAX_YEARS - round_half_up((pot - current) / 4), MIN_YEARS)
    for ceiling, band_years in SHORT_DEAL_BANDS:
        if pot < ceiling:
            return band_years
    return years


def gen_contract(
    player: Player,
    *,
    context: LeagueContext,
    randomize_exp: bool = False,
    randomize_amount: bool = True,
    no_limit: bool = False,
    policy: ContractPolicy = DEFAULT_POLICY,
    rng: random.Random | None = None,
) -> Contract:
    """Price a contract for ``player`` without touching the salary ledger.

    ``randomize_exp`` assumes part of the deal has already elapsed, which is
    how rosters look when a new league is created. ``no_limit`` drops the
    policy bounds except for non-negativity (buyouts).
    """

    rng = rng if rng is not None else random
    ratings = player.latest_ratings
    span = policy.max_amount - policy.min_amount

    amount = ((value(player, context=context) - 1) / 100 - 0.45) * 3.5 * span + policy.min_amount
    if randomize_amount:
        amount *= bound(rng.gauss(1, 0.1), 0, 2)

    years = contract_years(ratings.pot, ratings.ovr)
    if randomize_exp:
        years = rng.randint(1, years)
        # Entry-level deals
        if player.age(context.season) <= ROOKIE_MAX_AGE:
            amount /= 4

    if not no_limit:
        if amount < policy.min_amount * 1.1:
            amount = policy.min_amount
        elif amount > policy.max_amount:
            amount = policy.max_amount
    elif amount < 0:
        amount = 0

    amount = policy.granularity * round_half_up(amount / policy.granularity)
    return Contract(amount=amount, exp=context.season + years - 1)


def set_contract(player: Player, contract: Contract, *, signed: bool, context: LeagueContext) -> Player:
    """Attach ``contract``; only a signed contract writes salary ledger entries."""

    if not signed:
        return player.evolve(contract=contract)

    start = context.season + 1 if context.after_trade_deadline else context.season
    entries = [SalaryEntry(season=season, amount=contract.amount) for season in range(start, contract.exp + 1)]
    return player.evolve(contract=contract, salaries=[*player.salaries, *entries])


def contract_seasons_remaining(exp: int, games_remaining: int, *, context: LeagueContext) -> float:
    """Seasons left on a deal, fractional while the current season is in progress."""

    if context.num_games <= 0:
        return float(exp - context.season)
    return (exp - context.season) + games_remaining / context.num_games
