"""League-wide context and policy shared by every engine formula."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Tuple


class Phase(IntEnum):
    """Calendar phases of a league season, in chronological order."""

    FANTASY_DRAFT = -1
    PRESEASON = 0
    REGULAR_SEASON = 1
    AFTER_TRADE_DEADLINE = 2
    PLAYOFFS = 3
    BEFORE_DRAFT = 4
    DRAFT = 5
    AFTER_DRAFT = 6
    RESIGN_PLAYERS = 7
    FREE_AGENCY = 8


class PlayerStatus(IntEnum):
    """Reserved negative team ids for players not on a roster."""

    FREE_AGENT = -1
    UNDRAFTED = -2
    RETIRED = -3
    UNDRAFTED_2 = -4
    UNDRAFTED_3 = -5
    UNDRAFTED_FANTASY_TEMP = -6


UNDRAFTED_STATUSES = frozenset(
    {
        PlayerStatus.UNDRAFTED,
        PlayerStatus.UNDRAFTED_2,
        PlayerStatus.UNDRAFTED_3,
        PlayerStatus.UNDRAFTED_FANTASY_TEMP,
    }
)


@dataclass(frozen=True)
class TeamInfo:
    region: str
    name: str
    abbrev: str


@dataclass(frozen=True)
class ContractPolicy:
    """Contract bounds in thousands of currency units."""

    min_amount: int = 500
    max_amount: int = 20_000
    granularity: int = 50


DEFAULT_POLICY = ContractPolicy()


@dataclass(frozen=True)
class LeagueContext:
    """Explicit replacement for the league's ambient globals.

    Every formula that depends on the current season, phase or team count takes
    one of these instead of looking the values up itself.
    """

    season: int
    phase: Phase = Phase.REGULAR_SEASON
    num_teams: int = 30
    starting_season: int | None = None
    user_tid: int = 0
    num_games: int = 82
    num_playoff_rounds: int = 4
    teams: Tuple[TeamInfo, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.starting_season is None:
            object.__setattr__(self, "starting_season", self.season)
        if not isinstance(self.phase, Phase):
            object.__setattr__(self, "phase", Phase(self.phase))

    @property
    def after_trade_deadline(self) -> bool:
        return self.phase > Phase.AFTER_TRADE_DEADLINE

    def advance(self, *, season: int | None = None, phase: Phase | None = None) -> "LeagueContext":
        """Return a copy moved to another season and/or phase."""

        return replace(
            self,
            season=self.season if season is None else season,
            phase=self.phase if phase is None else phase,
        )

    def team(self, tid: int) -> TeamInfo | None:
        if 0 <= tid < len(self.teams):
            return self.teams[tid]
        return None


def rank_fraction(rank: float, num_teams: int) -> float:
    """Normalise a 1-based rank to [0, 1]; 0 is best.

    Leagues with a single team have no spread, so every rank maps to 0.
    """

    if num_teams <= 1:
        return 0.0
    return (rank - 1) / (num_teams - 1)


def team_abbrev(tid: int, context: LeagueContext) -> str:
    if tid == PlayerStatus.FREE_AGENT:
        return "FA"
    if tid in UNDRAFTED_STATUSES:
        return "DP"
    if tid == PlayerStatus.RETIRED:
        return "RET"
    info = context.team(tid)
    return info.abbrev if info is not None else "???"


def team_name(tid: int, context: LeagueContext) -> str:
    if tid == PlayerStatus.FREE_AGENT:
        return "Free Agent"
    if tid in UNDRAFTED_STATUSES:
        return "Draft Prospect"
    if tid == PlayerStatus.RETIRED:
        return "Retired"
    info = context.team(tid)
    return info.name if info is not None else ""


def team_region(tid: int, context: LeagueContext) -> str:
    info = context.team(tid) if tid >= 0 else None
    return info.region if info is not None else ""
