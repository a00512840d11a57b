"""Possession-by-possession game model used to tune scoring rules."""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Sequence, Tuple


POSSESSIONS = 560
LONG_MAKE_POINTS = 150
TWO_AND_BONUS_POINTS = 15
TWO_POINTS = 10
BONUS_POINTS = 5
DRAWS_PER_POSSESSION = 4


@dataclass(frozen=True)
class Tendencies:
    """Statistical description of one side, every rate in [0, 1]."""

    prop3: float
    three_pct: float
    two_pct: float
    ft_pct: float
    ft_per_two: float
    block_pct: float
    steal_pct: float
    orb_rate: float
    drb_rate: float

    def as_row(self) -> Tuple[float, ...]:
        return (
            self.prop3,
            self.three_pct,
            self.two_pct,
            self.ft_pct,
            self.ft_per_two,
            self.block_pct,
            self.steal_pct,
            self.orb_rate,
            self.drb_rate,
        )


def _share(numerator: float, other: float) -> float:
    total = numerator + other
    return numerator / total if total > 0 else 0.0


def adjust_rebounding(side: Tendencies, opponent: Tendencies) -> Tendencies:
    """Turn raw rebound rates into shares of the rebounds contested with ``opponent``."""

    return replace(
        side,
        orb_rate=_share(side.orb_rate, opponent.drb_rate),
        drb_rate=_share(side.drb_rate, opponent.orb_rate),
    )


@dataclass(frozen=True)
class PossessionOutcome:
    points: int
    turnover: bool
    ends_game: bool = False


def _split(draw: float, probability: float) -> Tuple[bool, float]:
    """Decide ``draw < probability`` and rescale the draw within the chosen branch.

    The rescaled value is uniform on [0, 1) and independent of the decision,
    so one draw can serve several nested decisions.
    """

    if draw < probability:
        return True, draw / probability
    return False, (draw - probability) / (1 - probability)


def _rebound(offense: Tendencies, draw: float, points: int) -> PossessionOutcome:
    if draw < offense.orb_rate:
        return PossessionOutcome(points=points, turnover=False)
    return PossessionOutcome(points=points, turnover=True)


def resolve_possession(offense: Tendencies, defense: Tendencies, draws: Sequence[float]) -> PossessionOutcome:
    """Resolve one possession from exactly four uniform draws.

    Draws are consumed as (stop, shot, make, rebound). A block can still be
    recovered by the offense; a steal is always a turnover.
    """

    stop, shot, make, rebound = draws

    if stop < defense.block_pct:
        return _rebound(offense, rebound, 0)
    if stop < defense.block_pct + defense.steal_pct:
        return PossessionOutcome(points=0, turnover=True)

    long_range, shot = _split(shot, offense.prop3)
    if long_range:
        if make < offense.three_pct:
            return PossessionOutcome(points=LONG_MAKE_POINTS, turnover=True, ends_game=True)
        return _rebound(offense, rebound, 0)

    bonus_trip, _ = _split(shot, offense.ft_per_two)
    made_two, bonus = _split(make, offense.two_pct)
    if not bonus_trip:
        if made_two:
            return PossessionOutcome(points=TWO_POINTS, turnover=True)
        return _rebound(offense, rebound, 0)

    made_bonus = bonus < offense.ft_pct
    if made_two and made_bonus:
        return PossessionOutcome(points=TWO_AND_BONUS_POINTS, turnover=True)
    if made_two:
        return _rebound(offense, rebound, TWO_POINTS)
    if made_bonus:
        return PossessionOutcome(points=BONUS_POINTS, turnover=True)
    return _rebound(offense, rebound, 0)


@dataclass(frozen=True)
class GameState:
    """Possession budget and score, seen from the side currently on offense.

    ``offense`` is 0 while the side that started with the ball has it.
    """

    possessions_left: int
    differential: int = 0
    offense: int = 0

    @property
    def terminal(self) -> bool:
        return self.possessions_left <= 0

    def result(self) -> float:
        """1.0, 0.5 or 0.0 for the side that started on offense."""

        margin = self.differential if self.offense == 0 else -self.differential
        if margin > 0:
            return 1.0
        if margin == 0:
            return 0.5
        return 0.0


def advance(state: GameState, outcome: PossessionOutcome) -> GameState:
    left = 0 if outcome.ends_game else state.possessions_left - 1
    if outcome.turnover:
        return GameState(left, -(state.differential + outcome.points), 1 - state.offense)
    return GameState(left, state.differential + outcome.points, state.offense)


def simulate_game(
    first: Tendencies,
    second: Tendencies,
    *,
    possessions: int = POSSESSIONS,
    rng: random.Random | None = None,
) -> float:
    """Play one game and score it for ``first``, which starts with the ball."""

    rng = rng if rng is not None else random
    sides = (adjust_rebounding(first, second), adjust_rebounding(second, first))
    state = GameState(possessions_left=possessions)
    while not state.terminal:
        draws = [rng.random() for _ in range(DRAWS_PER_POSSESSION)]
        offense = sides[state.offense]
        defense = sides[1 - state.offense]
        state = advance(state, resolve_possession(offense, defense, draws))
    return state.result()
